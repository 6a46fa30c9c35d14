import logging
from pathlib import Path

from ..exceptions import LoaderError
from .base import BaseLoader, decode_bytes

logger = logging.getLogger(__name__)


class FileLoader(BaseLoader):
    """Reads a local text file."""

    name = "file"

    @classmethod
    def can_load(cls, source: str) -> bool:
        return not str(source).lower().startswith(("http://", "https://"))

    def load(self, source: str) -> str:
        path = Path(source)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise LoaderError(f"Could not read {path}: {e}") from e

        text = decode_bytes(raw, source=str(path))
        logger.debug(f"Loaded {len(text)} characters from {path}")
        return text
