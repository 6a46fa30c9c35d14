from .cache import DownloadCache
from .logger import setup_logger

__all__ = ["DownloadCache", "setup_logger"]
