from .config import AnalysisConfig, load_config
from .exceptions import (
    LitminerError,
    LoaderError,
    ConfigError,
    ClassifierUnavailableError,
)

__all__ = [
    "AnalysisConfig",
    "load_config",
    "LitminerError",
    "LoaderError",
    "ConfigError",
    "ClassifierUnavailableError",
]

__version__ = "0.1.0"
