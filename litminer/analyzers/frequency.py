import logging
import math
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

TokenQuery = Union[str, Iterable[str]]


def _query_tokens(query: TokenQuery) -> List[str]:
    if isinstance(query, str):
        return [query]
    # de-duplicate so ["whale", "whale"] is not counted twice
    return list(dict.fromkeys(query))


class FrequencyTable:
    """
    Token -> occurrence count for one document or a whole corpus.

    Backed by a Counter, so a missing token counts as 0 and insertion order
    is first-occurrence order. Counter.most_common sorts stably, which makes
    that first-occurrence order the tie-break for top-N queries.
    """

    def __init__(self, counts: Optional[Dict[str, int]] = None):
        self._counts: Counter = Counter()
        for token, n in (counts or {}).items():
            self.add(token, n)

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "FrequencyTable":
        table = cls()
        table.update(tokens)
        return table

    def add(self, token: str, n: int = 1) -> None:
        if n < 0:
            raise ValueError(f"Counts must be non-negative, got {n} for {token!r}")
        self._counts[token] += n

    def update(self, tokens: Iterable[str]) -> None:
        self._counts.update(tokens)

    def count(self, query: TokenQuery) -> int:
        """Count of one token, or the summed count of several (e.g. whale + whale's)."""
        return sum(self._counts[t] for t in _query_tokens(query))

    def __getitem__(self, token: str) -> int:
        return self._counts[token]

    def __contains__(self, token: object) -> bool:
        return token in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return dict(self._counts) == dict(other._counts)

    def __repr__(self) -> str:
        return f"FrequencyTable(tokens={self.total}, types={len(self)})"

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def top(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        """Tokens by descending count; ties keep first-occurrence order."""
        return self._counts.most_common(n)

    def relative(self, per: float = 100.0) -> Optional[Dict[str, float]]:
        """
        Relative frequency of every token, per `per` tokens.

        Returns None for an empty table: the value is undefined, not zero.
        """
        total = self.total
        if total == 0:
            logger.warning("Relative frequency is undefined for an empty document")
            return None
        return {token: count / total * per for token, count in self._counts.items()}

    def relative_frequency(self, query: TokenQuery, per: float = 100.0) -> float:
        """Relative frequency of one token (or token group); NaN when the table is empty."""
        total = self.total
        if total == 0:
            return math.nan
        return self.count(query) / total * per

    def merge(self, other: "FrequencyTable") -> "FrequencyTable":
        merged = FrequencyTable()
        merged._counts.update(self._counts)
        merged._counts.update(other._counts)
        return merged

    def to_dict(self) -> Dict[str, int]:
        return dict(self._counts)


class DocumentFrequencyMatrix:
    """
    One FrequencyTable per document plus a vocabulary index.

    Rows are documents in corpus order, columns the union of all tokens in
    first-occurrence order. The dense view fills absent entries with 0.
    """

    def __init__(
        self, tables: Sequence[FrequencyTable], labels: Optional[Sequence[str]] = None
    ):
        self.tables: List[FrequencyTable] = list(tables)
        if labels is None:
            labels = [f"doc_{i + 1}" for i in range(len(self.tables))]
        if len(labels) != len(self.tables):
            raise ValueError(
                f"Got {len(labels)} labels for {len(self.tables)} documents"
            )
        self.labels: List[str] = list(labels)

        self._index: Dict[str, int] = {}
        for table in self.tables:
            for token in table:
                if token not in self._index:
                    self._index[token] = len(self._index)

    @classmethod
    def from_documents(
        cls,
        token_lists: Sequence[Sequence[str]],
        labels: Optional[Sequence[str]] = None,
    ) -> "DocumentFrequencyMatrix":
        return cls([FrequencyTable.from_tokens(t) for t in token_lists], labels)

    @property
    def vocabulary(self) -> List[str]:
        return list(self._index)

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self.tables), len(self._index)

    def index_of(self, token: str) -> Optional[int]:
        return self._index.get(token)

    def totals(self) -> List[int]:
        return [t.total for t in self.tables]

    def column(self, query: TokenQuery) -> List[int]:
        """Raw count of a token (or token group) in each document."""
        return [t.count(query) for t in self.tables]

    def relative_column(self, query: TokenQuery, per: float = 100.0) -> List[float]:
        """Per-document relative frequency; NaN for empty documents."""
        return [t.relative_frequency(query, per) for t in self.tables]

    def dense(self) -> np.ndarray:
        matrix = np.zeros(self.shape, dtype=np.int64)
        for row, table in enumerate(self.tables):
            for token, count in table.to_dict().items():
                matrix[row, self._index[token]] = count
        return matrix

    def relative_dense(self, per: float = 100.0) -> np.ndarray:
        """Dense relative frequencies; rows of empty documents are NaN."""
        counts = self.dense().astype(float)
        totals = np.array(self.totals(), dtype=float)[:, None]

        empty = [self.labels[i] for i, n in enumerate(self.totals()) if n == 0]
        if empty:
            logger.warning(f"Relative frequency undefined for empty documents: {empty}")

        with np.errstate(divide="ignore", invalid="ignore"):
            relative = counts / totals * per
        if empty:
            relative[totals[:, 0] == 0, :] = np.nan
        return relative

    def corpus_table(self) -> FrequencyTable:
        """Sum of all rows; equals the table of the concatenated corpus."""
        combined = FrequencyTable()
        for table in self.tables:
            combined = combined.merge(table)
        return combined

    def to_dict(self) -> Dict:
        return {
            "labels": self.labels,
            "vocabulary": self.vocabulary,
            "totals": self.totals(),
            "rows": [t.to_dict() for t in self.tables],
        }


def tabulate(docs: Sequence, config=None) -> DocumentFrequencyMatrix:
    """
    Build a DocumentFrequencyMatrix from TokenizedDocuments.

    Uses filtered_tokens when config.remove_stopwords is set, tokens
    otherwise. Row labels are the document titles, falling back to
    "<source>#<n>".
    """
    use_filtered = config.remove_stopwords if config is not None else False
    token_lists = [d.filtered_tokens if use_filtered else d.tokens for d in docs]
    labels = [d.title or f"{d.source_path}#{d.index + 1}" for d in docs]
    return DocumentFrequencyMatrix.from_documents(token_lists, labels)
