import logging
from typing import Optional

from ..analyzers.base import Corpus
from ..config import AnalysisConfig
from .base import BaseLoader, decode_bytes
from .text import FileLoader
from .remote import URLLoader
from .segment import strip_gutenberg_headers, split_chapters, split_lines

logger = logging.getLogger(__name__)

__all__ = [
    "BaseLoader",
    "FileLoader",
    "URLLoader",
    "decode_bytes",
    "strip_gutenberg_headers",
    "split_chapters",
    "split_lines",
    "get_loader",
    "load_text",
    "load_corpus",
    "SPLIT_MODES",
]

SPLIT_MODES = ("whole", "chapters", "lines")


def get_loader(source: str, config: Optional[AnalysisConfig] = None) -> BaseLoader:
    """Pick the loader for a path or URL."""
    for loader_class in (URLLoader, FileLoader):
        if loader_class.can_load(source):
            return loader_class(config)
    raise ValueError(f"No loader for source: {source}")


def load_text(source: str, config: Optional[AnalysisConfig] = None) -> str:
    """Read a source into one string, stripping Gutenberg boilerplate if configured."""
    config = config or AnalysisConfig()
    text = get_loader(source, config).load(str(source))
    if config.strip_gutenberg:
        text = strip_gutenberg_headers(text)
    return text


def load_corpus(
    source: str, split: str = "whole", config: Optional[AnalysisConfig] = None
) -> Corpus:
    """
    Load a source as an ordered Corpus.

    split:
        whole    -- one document
        chapters -- one document per heading matching config.chapter_pattern
        lines    -- one document per non-blank line (tweets)
    """
    if split not in SPLIT_MODES:
        raise ValueError(f"Unknown split mode: {split}. Available: {list(SPLIT_MODES)}")

    config = config or AnalysisConfig()
    text = load_text(source, config)
    source = str(source)

    if split == "chapters":
        pairs = split_chapters(text, config.chapter_pattern)
        return Corpus.from_texts(source, [b for _, b in pairs], [t for t, _ in pairs])
    if split == "lines":
        return Corpus.from_texts(source, split_lines(text))
    return Corpus.from_texts(source, [text])
