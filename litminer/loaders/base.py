import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import chardet

from ..config import AnalysisConfig
from ..exceptions import LoaderError

logger = logging.getLogger(__name__)

MIN_CHARDET_CONFIDENCE = 0.7


def decode_bytes(raw: bytes, source: str = "<bytes>") -> str:
    """
    Decode raw bytes as UTF-8, falling back to chardet's guess.

    Raises LoaderError when neither works.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    detected = chardet.detect(raw)
    encoding = detected.get("encoding")
    if encoding and (detected.get("confidence") or 0) > MIN_CHARDET_CONFIDENCE:
        try:
            text = raw.decode(encoding)
            logger.info(f"Decoded {source} as {encoding}")
            return text
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"chardet guess {encoding} failed for {source}: {e}")

    raise LoaderError(f"Could not decode {source}: not UTF-8 and no confident guess")


class BaseLoader(ABC):
    """Abstract base class for text loaders."""

    name: str = "base"

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    @classmethod
    @abstractmethod
    def can_load(cls, source: str) -> bool:
        """Check whether this loader handles the given source."""

    @abstractmethod
    def load(self, source: str) -> str:
        """Read the source into a single string.

        Raises:
            LoaderError: if the source cannot be read or decoded.
        """

    def batch_load(self, sources: List[str]) -> Dict[str, Optional[str]]:
        """Load several sources; failures are logged and mapped to None."""
        from rich.progress import Progress, SpinnerColumn

        results: Dict[str, Optional[str]] = {}
        with Progress(
            SpinnerColumn(), *Progress.get_default_columns(), transient=True
        ) as progress:
            task = progress.add_task("Loading texts...", total=len(sources))
            for source in sources:
                try:
                    results[source] = self.load(source)
                except LoaderError as e:
                    logger.error(f"Loading failed for {source}: {e}")
                    results[source] = None
                progress.update(task, advance=1)
        return results

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
