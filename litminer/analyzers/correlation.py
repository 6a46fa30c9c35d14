import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Optional

import numpy as np
from scipy import stats

from ..config import AnalysisConfig
from .frequency import DocumentFrequencyMatrix, TokenQuery

logger = logging.getLogger(__name__)

_METHODS = {
    "pearson": stats.pearsonr,
    "spearman": stats.spearmanr,
}


@dataclass
class CorrelationResult:
    method: str
    r: float
    p_value: float
    n: int
    permutations: int = 0
    permutation_p: Optional[float] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def _statistic(method: str, x: np.ndarray, y: np.ndarray) -> float:
    r, _ = _METHODS[method](x, y)
    return float(r)


def correlate(
    matrix: DocumentFrequencyMatrix,
    a: TokenQuery,
    b: TokenQuery,
    method: str = "pearson",
    config: Optional[AnalysisConfig] = None,
) -> CorrelationResult:
    """
    Correlate the per-document relative frequencies of two tokens.

    Documents with no tokens have undefined relative frequencies and are
    dropped before testing. With config.permutations > 0 the second series
    is shuffled that many times (seeded by config.seed) and permutation_p is
    the share of shuffles whose |r| reaches the observed |r|.
    """
    if method not in _METHODS:
        raise ValueError(f"Unknown correlation method: {method}. Available: {list(_METHODS)}")

    config = config or AnalysisConfig()
    x = np.array(matrix.relative_column(a, per=config.per), dtype=float)
    y = np.array(matrix.relative_column(b, per=config.per), dtype=float)

    usable = ~(np.isnan(x) | np.isnan(y))
    x, y = x[usable], y[usable]
    n = int(usable.sum())

    if n < 3 or np.all(x == x[0]) or np.all(y == y[0]):
        logger.warning(
            f"Correlation undefined for {a!r}/{b!r}: {n} usable documents or a constant series"
        )
        return CorrelationResult(method=method, r=math.nan, p_value=math.nan, n=n)

    result = _METHODS[method](x, y)
    r, p_value = float(result[0]), float(result[1])

    permutation_p = None
    if config.permutations > 0:
        rng = np.random.default_rng(config.seed)
        observed = abs(r)
        hits = 0
        for _ in range(config.permutations):
            if abs(_statistic(method, x, rng.permutation(y))) >= observed:
                hits += 1
        permutation_p = hits / config.permutations

    logger.debug(f"{method} r={r:.4f} p={p_value:.4g} n={n} for {a!r}/{b!r}")
    return CorrelationResult(
        method=method,
        r=r,
        p_value=p_value,
        n=n,
        permutations=config.permutations,
        permutation_p=permutation_p,
    )
