import json
import logging
from pathlib import Path
from typing import Dict, List

from .base import BaseClassifier, Classification, UNKNOWN

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = r"(?u)\b\w[\w']*\b"


def _load_emotion_lexicon() -> Dict[str, List[str]]:
    """Load emotion -> [word, ...] from fdata/emotions.json."""
    data_path = Path(__file__).parent.parent / "fdata" / "emotions.json"
    try:
        with open(data_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return {emotion: [w.lower() for w in words] for emotion, words in data.items()}
    except (OSError, ValueError) as e:
        logger.error(f"Could not load emotions.json: {e}")
        return {}


_EMOTION_LEXICON: Dict[str, List[str]] = _load_emotion_lexicon()


class EmotionClassifier(BaseClassifier):
    """
    Emotion labels (anger, disgust, fear, joy, sadness, surprise) from a
    multinomial naive Bayes model fitted on fdata/emotions.json.

    Each lexicon entry is one training example for its emotion; priors are
    uniform. A text with no lexicon word is labelled `unknown` instead of
    getting the prior's argmax.
    """

    name = "emotion"
    kind = "emotion"

    def __init__(self, config=None, lexicon: Dict[str, List[str]] = None):
        super().__init__(config)
        self.lexicon = lexicon if lexicon is not None else _EMOTION_LEXICON
        self._vectorizer = None
        self._model = None

    @classmethod
    def is_available(cls) -> bool:
        try:
            from sklearn.naive_bayes import MultinomialNB  # noqa: F401

            return True
        except ImportError:
            return False

    @property
    def emotions(self) -> List[str]:
        return sorted(self.lexicon)

    def _fit(self) -> None:
        from sklearn.feature_extraction.text import CountVectorizer
        from sklearn.naive_bayes import MultinomialNB

        if not self.lexicon:
            raise ValueError("Emotion lexicon is empty")

        words, labels = [], []
        for emotion, entries in self.lexicon.items():
            for word in entries:
                words.append(word)
                labels.append(emotion)

        self._vectorizer = CountVectorizer(
            vocabulary=sorted(set(words)), token_pattern=_TOKEN_PATTERN
        )
        self._model = MultinomialNB(fit_prior=False)
        self._model.fit(self._vectorizer.transform(words), labels)
        logger.debug(f"Fitted emotion model on {len(words)} lexicon entries")

    def classify_one(self, text: str) -> Classification:
        if self._model is None:
            self._fit()

        features = self._vectorizer.transform([text])
        if features.sum() == 0:
            return Classification(label=UNKNOWN)

        probabilities = self._model.predict_proba(features)[0]
        scores = {
            str(emotion): float(p)
            for emotion, p in zip(self._model.classes_, probabilities)
        }
        label = max(scores, key=scores.get)
        return Classification(label=label, score=scores[label], scores=scores)
