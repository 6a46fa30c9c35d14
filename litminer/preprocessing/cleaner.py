import re
import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from ..config import AnalysisConfig

logger = logging.getLogger(__name__)

RawText = Union[str, bytes]

_RETWEET_RE = re.compile(r"\b(?:RT|via)((?:\b\W*@\w+)+)", re.IGNORECASE)
_MENTION_RE = re.compile(r"@\w+")
_DIGIT_RE = re.compile(r"\d+")
# Runs after punctuation removal, when "https://t.co/x" has become "httpstcox".
_URL_RE = re.compile(r"http\w+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def _is_punctuation(ch: str, keep_apostrophes: bool) -> bool:
    if keep_apostrophes and ch in "'’":
        return False
    # P* (punctuation) and S* (symbols: $, +, emoji, ...)
    return unicodedata.category(ch)[0] in "PS"


def remove_punctuation(text: str, keep_apostrophes: bool = False) -> str:
    """
    Delete punctuation and symbols; dashes become spaces.

    Deleting keeps "https://t.co/x" in one piece for the URL rule, while
    "whale—the" still splits into two words.
    """
    return "".join(
        (" " if unicodedata.category(ch) == "Pd" else "")
        if _is_punctuation(ch, keep_apostrophes)
        else ch
        for ch in text
    )


@dataclass
class CleanedBatch:
    """
    Output of Cleaner.clean_batch.

    texts[i] is None for documents that failed normalization; those indexes
    and their errors are listed in invalid and are skipped by valid().
    """

    texts: List[Optional[str]] = field(default_factory=list)
    invalid: Dict[int, str] = field(default_factory=dict)

    def valid(self) -> List[str]:
        return [t for t in self.texts if t is not None]

    def valid_indexes(self) -> List[int]:
        return [i for i, t in enumerate(self.texts) if t is not None]


class Cleaner:
    """
    Applies, in order: retweet/mention removal (config.strip_mentions),
    punctuation removal, digit removal, URL removal, whitespace collapsing,
    trimming, and a guarded lowercasing step.

    The pipeline is idempotent: cleaning cleaned text returns it unchanged.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def _substitute(self, text: str) -> str:
        if self.config.strip_mentions:
            text = _RETWEET_RE.sub(" ", text)
            text = _MENTION_RE.sub(" ", text)
        text = remove_punctuation(text, keep_apostrophes=self.config.keep_apostrophes)
        text = _DIGIT_RE.sub(" ", text)
        text = _URL_RE.sub(" ", text)
        text = _WHITESPACE_RE.sub(" ", text)
        return text.strip()

    @staticmethod
    def _coerce(raw: RawText) -> str:
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        if not isinstance(raw, str):
            raise TypeError(f"Expected str or bytes, got {type(raw).__name__}")
        return raw

    def _lower(self, text: str) -> str:
        return text.lower() if self.config.lowercase else text

    def clean(self, raw: RawText) -> str:
        """
        Clean one document.

        Raises UnicodeDecodeError or TypeError when the document cannot be
        normalized; clean_batch turns that into a per-document exclusion.
        """
        return self._lower(self._substitute(self._coerce(raw)))

    def clean_batch(self, raws: Sequence[RawText]) -> CleanedBatch:
        """Clean many documents; a failing document is excluded, the batch goes on."""
        batch = CleanedBatch()
        for i, raw in enumerate(raws):
            try:
                batch.texts.append(self.clean(raw))
            except (UnicodeError, TypeError) as e:
                logger.warning(f"Excluding document {i}: normalization failed ({e})")
                batch.texts.append(None)
                batch.invalid[i] = str(e)

        if batch.invalid:
            logger.info(
                f"Cleaned {len(raws) - len(batch.invalid)}/{len(raws)} documents"
            )
        return batch
