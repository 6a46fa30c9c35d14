import logging
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_PATTERN = r"^CHAPTER\s+\d+"


@dataclass
class AnalysisConfig:
    """
    Settings shared by the cleaner, tokenizer, tabulator and classifiers.

    Passed explicitly to every call that needs it; nothing in litminer reads
    module-level configuration.
    """

    # Cleaning / tokenization
    lowercase: bool = True
    keep_apostrophes: bool = True
    strip_mentions: bool = True
    remove_stopwords: bool = True
    extra_stopwords: List[str] = field(default_factory=list)

    # Frequency tabulation
    per: float = 100.0
    top_n: int = 20

    # Segmentation
    strip_gutenberg: bool = True
    chapter_pattern: str = DEFAULT_CHAPTER_PATTERN

    # Classifiers
    polarity_backend: str = "vader"
    emotion_backend: str = "emotion"

    # Correlation
    seed: Optional[int] = None
    permutations: int = 0

    # Remote loading
    cache_enabled: bool = True
    cache_dir: Optional[str] = None
    cache_ttl_hours: int = 24 * 7
    request_timeout: int = 30

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> AnalysisConfig:
    """
    Load an AnalysisConfig from a YAML file.

    Returns the defaults when path is None. The file must hold a mapping;
    the optional top-level ``litminer`` key is unwrapped so the settings can
    live in a shared project config.
    """
    if path is None:
        return AnalysisConfig()

    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")

    data = data.get("litminer", data) or {}
    config = AnalysisConfig.from_dict(data)
    logger.debug(f"Loaded config from {path}")
    return config
