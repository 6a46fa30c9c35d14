import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .base import TokenizedDocument

logger = logging.getLogger(__name__)


@dataclass
class KwicLine:
    position: int
    left: str
    keyword: str
    right: str

    def __str__(self) -> str:
        return f"[{self.position}] {self.left} <{self.keyword}> {self.right}"


def dispersion(tokens: Sequence[str], targets: Sequence[str]) -> Dict[str, List[int]]:
    """0-based positions of each target in the token sequence."""
    wanted = {t: [] for t in targets}
    for position, token in enumerate(tokens):
        if token in wanted:
            wanted[token].append(position)
    return wanted


def normalized_dispersion(tokens: Sequence[str], targets: Sequence[str]) -> Dict[str, List[float]]:
    """Positions scaled to narrative time in [0, 1]."""
    if not tokens:
        return {t: [] for t in targets}
    span = max(len(tokens) - 1, 1)
    return {t: [p / span for p in ps] for t, ps in dispersion(tokens, targets).items()}


def kwic(doc: TokenizedDocument, keyword: str, window: int = 5) -> List[KwicLine]:
    """Keyword in context: `window` tokens either side of each hit."""
    tokens = doc.tokens
    lines = []
    for position in dispersion(tokens, [keyword])[keyword]:
        lines.append(
            KwicLine(
                position=position,
                left=" ".join(tokens[max(0, position - window):position]),
                keyword=tokens[position],
                right=" ".join(tokens[position + 1:position + 1 + window]),
            )
        )
    logger.debug(f"{len(lines)} KWIC hits for {keyword!r} in {doc.source_path}")
    return lines
