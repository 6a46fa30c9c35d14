from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Optional, Iterator

from .frequency import FrequencyTable


@dataclass
class Document:
    source: str
    index: int
    text: str
    title: str = ""

    @property
    def label(self) -> str:
        return self.title or f"{self.source}#{self.index + 1}"


@dataclass
class Corpus:
    """Ordered collection of documents; list position is the chapter number."""

    source: str
    documents: List[Document] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __getitem__(self, i: int) -> Document:
        return self.documents[i]

    def texts(self) -> List[str]:
        return [d.text for d in self.documents]

    def labels(self) -> List[str]:
        return [d.label for d in self.documents]

    @classmethod
    def from_texts(cls, source: str, texts: List[str], titles: Optional[List[str]] = None) -> "Corpus":
        titles = titles or [""] * len(texts)
        return cls(
            source=source,
            documents=[
                Document(source=source, index=i, text=t, title=titles[i])
                for i, t in enumerate(texts)
            ],
        )


@dataclass
class TokenizedDocument:
    source_path: str
    raw_text: str
    tokens: List[str]
    offsets: List[Tuple[int, int]]
    filtered_tokens: List[str]
    title: str = ""
    index: int = 0


@dataclass
class AnalyzedDocument:
    tokenized: TokenizedDocument
    frequencies: Optional[FrequencyTable] = None
    lexical: Dict[str, float] = field(default_factory=dict)
    polarity: Optional[str] = None
    polarity_score: Optional[float] = None
    emotion: Optional[str] = None
    emotion_scores: Dict[str, float] = field(default_factory=dict)
