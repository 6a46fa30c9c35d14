import logging
import math
from typing import Dict, List, Sequence

from .base import AnalyzedDocument
from .frequency import FrequencyTable

logger = logging.getLogger(__name__)


def lexical_stats(table: FrequencyTable) -> Dict[str, float]:
    """
    Lexical variety measures for one frequency table.

    - tokens / types: running words and distinct words
    - type_token_ratio: types / tokens
    - mean_word_frequency: tokens / types
    - hapax_count / hapax_ratio: words used exactly once, absolute and
      as a share of tokens

    Ratios are NaN for an empty table.
    """
    tokens = table.total
    types = len(table)
    hapax = sum(1 for token in table if table[token] == 1)

    if tokens == 0:
        return {
            "tokens": 0,
            "types": 0,
            "type_token_ratio": math.nan,
            "mean_word_frequency": math.nan,
            "hapax_count": 0,
            "hapax_ratio": math.nan,
        }

    return {
        "tokens": tokens,
        "types": types,
        "type_token_ratio": types / tokens,
        "mean_word_frequency": tokens / types,
        "hapax_count": hapax,
        "hapax_ratio": hapax / tokens,
    }


class LexicalAnalyzer:
    """Attaches lexical variety stats to analyzed documents."""

    def analyze(self, doc: AnalyzedDocument) -> AnalyzedDocument:
        table = doc.frequencies
        if table is None:
            table = FrequencyTable.from_tokens(doc.tokenized.tokens)
        doc.lexical = lexical_stats(table)
        return doc

    def compare(self, docs: Sequence[AnalyzedDocument], measure: str = "type_token_ratio") -> List[float]:
        """One value of `measure` per document, in corpus order."""
        values = []
        for doc in docs:
            if not doc.lexical:
                self.analyze(doc)
            values.append(doc.lexical[measure])
        return values
