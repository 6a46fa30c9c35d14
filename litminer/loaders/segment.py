import re
import logging
from typing import List, Optional, Tuple

from ..config import DEFAULT_CHAPTER_PATTERN

logger = logging.getLogger(__name__)

_START_RE = re.compile(
    r"^\*{3}\s*START\s+OF\s+(?:THE|THIS)?\s*PROJECT\s+GUTENBERG\s+E-?BOOK",
    re.IGNORECASE,
)
_END_RE = re.compile(
    r"^(?:\*{3}\s*END\s+OF\s+(?:THE|THIS)?\s*PROJECT\s+GUTENBERG\s+E-?BOOK"
    r"|End\s+of\s+(?:the\s+)?Project\s+Gutenberg'?s?\s+E-?Book)",
    re.IGNORECASE,
)


def strip_gutenberg_headers(text: str) -> str:
    """
    Keep only the body between Project Gutenberg START/END markers.

    Returns the trimmed input when no marker is found.
    """
    lines = text.splitlines()

    start, end = 0, len(lines)
    for i, line in enumerate(lines):
        if _START_RE.search(line.strip()):
            start = i + 1
            break
    for i in range(len(lines) - 1, start - 1, -1):
        if _END_RE.search(lines[i].strip()):
            end = i
            break

    if start == 0 and end == len(lines):
        return text.strip()

    body = "\n".join(lines[start:end]).strip()
    return body if body else text.strip()


def split_chapters(
    text: str, pattern: Optional[str] = None
) -> List[Tuple[str, str]]:
    """
    Split a novel into (title, body) pairs at lines matching `pattern`.

    Text before the first heading (title page, contents) is dropped. The
    heading line becomes the title and is not part of the body. A heading
    repeated in a leading table of contents is dropped there; headings that
    repeat later in the book (a new part restarting at CHAPTER 1) are all
    kept. Returns a single untitled chapter when no heading matches.
    """
    heading = re.compile(pattern or DEFAULT_CHAPTER_PATTERN, re.MULTILINE)
    matches = list(heading.finditer(text))

    if not matches:
        logger.warning("No chapter headings found; treating text as one chapter")
        return [("", text.strip())]

    chapters = []
    for i, match in enumerate(matches):
        line_end = text.find("\n", match.start())
        if line_end == -1:
            line_end = len(text)
        title = text[match.start():line_end].strip()
        body_end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        chapters.append((title, text[line_end:body_end].strip()))

    chapters = _drop_contents(chapters)

    logger.debug(f"Split text into {len(chapters)} chapters")
    return chapters


def _drop_contents(chapters: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """
    Drop a table of contents: the empty-bodied headings before the first
    chapter with text, when the same heading appears again later.
    """
    first = next((i for i, (_, body) in enumerate(chapters) if body), len(chapters))
    later = {title for title, _ in chapters[first:]}
    contents = [title for title, _ in chapters[:first] if title in later]
    if contents:
        logger.debug(f"Dropped {len(contents)} table of contents headings")
    return [c for c in chapters[:first] if c[0] not in later] + chapters[first:]


def split_lines(text: str) -> List[str]:
    """Newline-delimited documents (e.g. one tweet per line); blank lines dropped."""
    return [line.strip() for line in text.splitlines() if line.strip()]
