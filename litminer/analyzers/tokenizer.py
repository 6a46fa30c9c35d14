import re
import logging
from typing import List, Optional, Tuple, Set

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from ..config import AnalysisConfig
from .base import TokenizedDocument

logger = logging.getLogger(__name__)

# Runs of letters/digits; an apostrophe between two such runs stays inside
# the token ("whale's", "don't"), one at either edge is a boundary.
_TOKEN_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*", re.UNICODE)

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


def _regex_tokenize(text: str) -> Tuple[List[str], List[Tuple[int, int]]]:
    """Returns (tokens, offsets) in document order."""
    tokens = []
    offsets = []
    for match in _TOKEN_RE.finditer(text):
        tokens.append(match.group())
        offsets.append((match.start(), match.end()))
    return tokens, offsets


class WordTokenizer:
    """
    Splits text into word tokens.

    Typographic apostrophes are folded to ASCII before matching; folding is
    one character for one character so offsets still index the raw text.
    Stopwords (scikit-learn's English list plus config.extra_stopwords) are
    removed only from filtered_tokens; tokens keeps every word in order for
    dispersion and KWIC.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.stopwords: Set[str] = set(ENGLISH_STOP_WORDS)
        self.stopwords.update(w.lower() for w in self.config.extra_stopwords)

    def tokenize(
        self, source_path: str, text: str, title: str = "", index: int = 0
    ) -> TokenizedDocument:
        """
        Tokenize text and return a TokenizedDocument.

        Args:
            source_path: Where the text came from (stored, not read).
            text: Raw or cleaned text.
            title: Optional chapter/document title.
            index: Position of the document in its corpus.
        """
        if not text or not text.strip():
            return TokenizedDocument(
                source_path=source_path,
                raw_text=text or "",
                tokens=[],
                offsets=[],
                filtered_tokens=[],
                title=title,
                index=index,
            )

        tokens, offsets = _regex_tokenize(text.translate(_APOSTROPHES))
        if self.config.lowercase:
            tokens = [t.lower() for t in tokens]

        filtered = [t for t in tokens if t.lower() not in self.stopwords]

        return TokenizedDocument(
            source_path=source_path,
            raw_text=text,
            tokens=tokens,
            offsets=offsets,
            filtered_tokens=filtered,
            title=title,
            index=index,
        )

    def tokenize_corpus(self, corpus) -> List[TokenizedDocument]:
        """Tokenize every document of a Corpus, keeping corpus order."""
        docs = [
            self.tokenize(d.source, d.text, title=d.title, index=d.index)
            for d in corpus
        ]
        logger.debug(f"Tokenized {len(docs)} documents from {corpus.source}")
        return docs
