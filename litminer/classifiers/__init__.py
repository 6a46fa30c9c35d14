from typing import Optional

from ..config import AnalysisConfig
from ..exceptions import ClassifierUnavailableError
from .base import BaseClassifier, Classification, UNKNOWN
from .vader import VaderClassifier
from .naive_bayes import NaiveBayesClassifier
from .emotion import EmotionClassifier

__all__ = [
    "BaseClassifier",
    "Classification",
    "UNKNOWN",
    "VaderClassifier",
    "NaiveBayesClassifier",
    "EmotionClassifier",
    "get_classifier",
    "CLASSIFIERS",
]

CLASSIFIERS = {
    "vader": VaderClassifier,
    "naive_bayes": NaiveBayesClassifier,
    "emotion": EmotionClassifier,
}


def get_classifier(name: str, config: Optional[AnalysisConfig] = None) -> BaseClassifier:
    """Factory function to get a classifier backend by name."""
    classifier_class = CLASSIFIERS.get(name.lower())
    if not classifier_class:
        raise ValueError(
            f"Unknown classifier: {name}. Available: {list(CLASSIFIERS.keys())}"
        )
    if not classifier_class.is_available():
        raise ClassifierUnavailableError(
            f"Classifier {name} needs a library that is not installed"
        )
    return classifier_class(config)
