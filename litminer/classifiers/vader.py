import logging

from .base import BaseClassifier, Classification

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


class VaderClassifier(BaseClassifier):
    """Polarity from NLTK's VADER compound score."""

    name = "vader"
    kind = "polarity"

    def __init__(self, config=None):
        super().__init__(config)
        self._analyzer = None

    @classmethod
    def is_available(cls) -> bool:
        try:
            from nltk.sentiment.vader import SentimentIntensityAnalyzer  # noqa: F401

            return True
        except ImportError:
            return False

    @property
    def analyzer(self):
        if self._analyzer is None:
            import nltk
            from nltk.sentiment.vader import SentimentIntensityAnalyzer

            try:
                nltk.data.find("sentiment/vader_lexicon.zip")
            except LookupError:
                logger.info("Downloading VADER lexicon")
                nltk.download("vader_lexicon", quiet=True)
            self._analyzer = SentimentIntensityAnalyzer()
        return self._analyzer

    def classify_one(self, text: str) -> Classification:
        scores = self.analyzer.polarity_scores(text)
        compound = scores["compound"]

        label = "neutral"
        if compound >= POSITIVE_THRESHOLD:
            label = "positive"
        elif compound <= NEGATIVE_THRESHOLD:
            label = "negative"

        return Classification(label=label, score=compound, scores=dict(scores))
