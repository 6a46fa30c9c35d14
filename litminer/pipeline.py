import json
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import AnalysisConfig
from .exceptions import LitminerError
from .loaders import load_corpus
from .preprocessing.cleaner import Cleaner
from .analyzers.base import AnalyzedDocument, Corpus, TokenizedDocument
from .analyzers.frequency import DocumentFrequencyMatrix, FrequencyTable, tabulate
from .analyzers.tokenizer import WordTokenizer
from .analyzers.lexical import LexicalAnalyzer
from .classifiers import get_classifier, BaseClassifier

logger = logging.getLogger(__name__)

_ALL_ANALYZERS = ["frequency", "lexical", "polarity", "emotion"]

CORPUS_FILENAME = "corpus.json"


class Pipeline:
    """
    litminer end-to-end pipeline.

    Stages:
      1. Load     -- path or URL to a Corpus (whole text, chapters or lines)
      2. Clean    -- optional Cleaner pass; documents that fail are dropped
      3. Tokenize -- Corpus to TokenizedDocuments via WordTokenizer
      4. Analyze  -- frequency tables, lexical stats, polarity/emotion labels
      5. Output   -- one JSON per document plus corpus.json with the matrix

    Usage:
        p = Pipeline(output_dir=Path("output"), config=AnalysisConfig())
        results = p.run(["moby.txt"], split="chapters")

    The analyzers parameter controls which analyzers run; an empty list
    tokenizes only. Defaults to all analyzers.
    """

    def __init__(
        self,
        output_dir: Union[str, Path] = "output",
        analyzers: Optional[List[str]] = None,
        config: Optional[AnalysisConfig] = None,
        clean: bool = False,
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.config = config or AnalysisConfig()
        self.analyzers = _ALL_ANALYZERS if analyzers is None else analyzers
        unknown = sorted(set(self.analyzers) - set(_ALL_ANALYZERS))
        if unknown:
            raise ValueError(f"Unknown analyzers: {unknown}. Available: {_ALL_ANALYZERS}")

        self._cleaner = Cleaner(self.config) if clean else None
        self._tokenizer = WordTokenizer(self.config)
        self._lexical = LexicalAnalyzer() if "lexical" in self.analyzers else None
        self._polarity = self._load_classifier("polarity", self.config.polarity_backend)
        self._emotion = self._load_classifier("emotion", self.config.emotion_backend)

        self.matrix: Optional[DocumentFrequencyMatrix] = None

    def _load_classifier(self, kind: str, backend: str) -> Optional[BaseClassifier]:
        if kind not in self.analyzers:
            return None
        try:
            return get_classifier(backend, self.config)
        except LitminerError as e:
            logger.error(f"Skipping {kind} labels: {e}")
            return None

    def run(
        self, sources: List[Union[str, Path]], split: str = "whole"
    ) -> List[Optional[AnalyzedDocument]]:
        """
        Run the full pipeline over a list of paths/URLs.

        Returns the analyzed documents of all sources in order. A source that
        fails to load contributes a single None and is logged.
        """
        analyzed: List[Optional[AnalyzedDocument]] = []

        for source in sources:
            try:
                corpus = load_corpus(str(source), split=split, config=self.config)
            except (LitminerError, ValueError) as e:
                logger.error(f"Loading failed for {source}: {e}")
                analyzed.append(None)
                continue
            analyzed.extend(self.process_corpus(corpus))

        valid = [d for d in analyzed if d is not None]
        if valid:
            self.matrix = tabulate([d.tokenized for d in valid], self.config)
            self._save_corpus_json(self.matrix)
        for doc in valid:
            self._save_json(doc)

        return analyzed

    def process_corpus(self, corpus: Corpus) -> List[AnalyzedDocument]:
        """Clean, tokenize and analyze an already-loaded corpus, keeping its order."""
        documents = list(corpus)
        texts = corpus.texts()

        if self._cleaner is not None:
            batch = self._cleaner.clean_batch(texts)
            keep = batch.valid_indexes()
            documents = [documents[i] for i in keep]
            texts = [batch.texts[i] for i in keep]

        tokenized = [
            self._tokenizer.tokenize(d.source, text, title=d.title, index=d.index)
            for d, text in zip(documents, texts)
        ]
        docs = [AnalyzedDocument(tokenized=t) for t in tokenized]
        return self.analyze(docs)

    def analyze(self, docs: List[AnalyzedDocument]) -> List[AnalyzedDocument]:
        """Run the selected analyzers over documents in place."""
        for doc in docs:
            if "frequency" in self.analyzers or self._lexical:
                doc.frequencies = FrequencyTable.from_tokens(self._counted_tokens(doc.tokenized))
            if self._lexical:
                self._lexical.analyze(doc)

        texts = [d.tokenized.raw_text for d in docs]
        for doc, result in zip(docs, self._classify("polarity", self._polarity, texts)):
            doc.polarity = result.label
            doc.polarity_score = result.score
        for doc, result in zip(docs, self._classify("emotion", self._emotion, texts)):
            doc.emotion = result.label
            doc.emotion_scores = result.scores
        return docs

    def _classify(self, kind: str, classifier: Optional[BaseClassifier], texts: List[str]) -> List:
        """Labels for texts, or an empty list when the backend fails at run time."""
        if classifier is None:
            return []
        try:
            return classifier.classify(texts)
        except (LookupError, LitminerError, OSError) as e:
            logger.error(f"Skipping {kind} labels: {classifier.name} failed: {e}")
            return []

    def _counted_tokens(self, tokenized: TokenizedDocument) -> List[str]:
        if self.config.remove_stopwords:
            return tokenized.filtered_tokens
        return tokenized.tokens

    def _save_json(self, doc: AnalyzedDocument) -> Path:
        """Serialize an AnalyzedDocument to a JSON file in output_dir."""
        out_path = self.output_dir / f"{document_stem(doc.tokenized)}.json"

        try:
            out_path.write_text(
                json.dumps(document_payload(doc), ensure_ascii=False, indent=2, allow_nan=False),
                encoding="utf-8",
            )
            logger.info(f"Saved analysis to {out_path}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save JSON for {doc.tokenized.source_path}: {e}")

        return out_path

    def _save_corpus_json(self, matrix: DocumentFrequencyMatrix) -> Path:
        out_path = self.output_dir / CORPUS_FILENAME
        payload = dict(matrix.to_dict(), config=self.config.to_dict())
        out_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        logger.info(f"Saved corpus matrix to {out_path}")
        return out_path


def document_stem(tokenized: TokenizedDocument) -> str:
    stem = Path(tokenized.source_path.rstrip("/")).stem or "document"
    return f"{stem}_{tokenized.index + 1:04d}"


def _undefined_as_none(values: Dict[str, float]) -> Dict:
    """NaN is not valid JSON; undefined ratios are written as null."""
    return {k: None if isinstance(v, float) and math.isnan(v) else v for k, v in values.items()}


def document_payload(doc: AnalyzedDocument) -> Dict:
    tokenized = doc.tokenized
    return {
        "source_path": tokenized.source_path,
        "index": tokenized.index,
        "title": tokenized.title,
        "raw_text": tokenized.raw_text,
        "tokens": tokenized.tokens,
        "filtered_tokens": tokenized.filtered_tokens,
        "frequencies": doc.frequencies.to_dict() if doc.frequencies else {},
        "lexical": _undefined_as_none(doc.lexical),
        "polarity": doc.polarity,
        "polarity_score": doc.polarity_score,
        "emotion": doc.emotion,
        "emotion_scores": doc.emotion_scores,
    }


def load_payloads(paths: List[Path]) -> List[Dict]:
    """
    Read per-document JSON files written by Pipeline, skipping corpus.json.

    Returned in (source, index) order so chapter order survives the round
    trip through the filesystem.
    """
    docs = []
    for path in paths:
        if path.name == CORPUS_FILENAME:
            continue
        try:
            docs.append(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load {path}: {e}")
    docs.sort(key=lambda d: (d.get("source_path", ""), d.get("index", 0)))
    return docs


def payload_to_document(data: Dict) -> AnalyzedDocument:
    """Rebuild an AnalyzedDocument from its JSON payload."""
    tokenized = TokenizedDocument(
        source_path=data.get("source_path", ""),
        raw_text=data.get("raw_text", ""),
        tokens=data.get("tokens", []),
        offsets=[],
        filtered_tokens=data.get("filtered_tokens", []),
        title=data.get("title", ""),
        index=data.get("index", 0),
    )
    return AnalyzedDocument(
        tokenized=tokenized,
        frequencies=FrequencyTable(data.get("frequencies") or {}),
        lexical=data.get("lexical") or {},
        polarity=data.get("polarity"),
        polarity_score=data.get("polarity_score"),
        emotion=data.get("emotion"),
        emotion_scores=data.get("emotion_scores") or {},
    )
