from .frequency import FrequencyTable, DocumentFrequencyMatrix, tabulate
from .base import Document, Corpus, TokenizedDocument, AnalyzedDocument
from .tokenizer import WordTokenizer
from .correlation import CorrelationResult, correlate
from .lexical import LexicalAnalyzer, lexical_stats
from .dispersion import KwicLine, dispersion, normalized_dispersion, kwic

__all__ = [
    "FrequencyTable",
    "DocumentFrequencyMatrix",
    "tabulate",
    "Document",
    "Corpus",
    "TokenizedDocument",
    "AnalyzedDocument",
    "WordTokenizer",
    "CorrelationResult",
    "correlate",
    "LexicalAnalyzer",
    "lexical_stats",
    "KwicLine",
    "dispersion",
    "normalized_dispersion",
    "kwic",
]
