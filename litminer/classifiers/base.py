from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import AnalysisConfig

UNKNOWN = "unknown"


@dataclass
class Classification:
    """One label from an external classifier, taken as given."""

    label: str
    score: Optional[float] = None
    scores: Dict[str, float] = field(default_factory=dict)


class BaseClassifier(ABC):
    """Abstract base class for polarity and emotion classifiers."""

    name: str = "base"
    kind: str = "polarity"

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Check if the backing library is installed."""

    @abstractmethod
    def classify_one(self, text: str) -> Classification:
        """Label a single non-empty text."""

    def classify(self, texts: Sequence[str]) -> List[Classification]:
        """Label each text in order; blank texts get the `unknown` label."""
        return [
            self.classify_one(t) if t and t.strip() else Classification(label=UNKNOWN)
            for t in texts
        ]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(available={self.is_available()})"
