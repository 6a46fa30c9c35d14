import logging
from typing import Optional

from rich.logging import RichHandler

_FORMAT = "%(message)s"


def setup_logger(
    name: Optional[str] = None, level: int = logging.INFO
) -> logging.Logger:
    """
    Return a logger that renders through rich.

    Calling it with name=None configures the root logger, which is what the
    CLI does once at startup. A RichHandler is attached only if the logger
    has none yet, so repeated calls do not duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)

    return logger
