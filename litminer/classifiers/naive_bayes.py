import logging

from .base import BaseClassifier, Classification

logger = logging.getLogger(__name__)

_LABELS = {"pos": "positive", "neg": "negative"}
_NLTK_RESOURCES = {
    "corpora/movie_reviews": "movie_reviews",
    "tokenizers/punkt": "punkt",
}


class NaiveBayesClassifier(BaseClassifier):
    """
    Polarity from TextBlob's NaiveBayesAnalyzer.

    The analyzer trains itself on NLTK's movie_reviews corpus the first time
    it is used, so the first call is slow.
    """

    name = "naive_bayes"
    kind = "polarity"

    def __init__(self, config=None):
        super().__init__(config)
        self._analyzer = None

    @classmethod
    def is_available(cls) -> bool:
        try:
            from textblob.sentiments import NaiveBayesAnalyzer  # noqa: F401

            return True
        except ImportError:
            return False

    @property
    def analyzer(self):
        if self._analyzer is None:
            import nltk
            from textblob.sentiments import NaiveBayesAnalyzer

            for path, package in _NLTK_RESOURCES.items():
                try:
                    nltk.data.find(path)
                except LookupError:
                    logger.info(f"Downloading NLTK resource {package}")
                    nltk.download(package, quiet=True)
            self._analyzer = NaiveBayesAnalyzer()
        return self._analyzer

    def classify_one(self, text: str) -> Classification:
        from textblob import TextBlob

        sentiment = TextBlob(text, analyzer=self.analyzer).sentiment
        return Classification(
            label=_LABELS.get(sentiment.classification, sentiment.classification),
            score=sentiment.p_pos,
            scores={"positive": sentiment.p_pos, "negative": sentiment.p_neg},
        )
