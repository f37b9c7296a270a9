from __future__ import annotations

import logging
import re
from typing import Iterator


_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_INT_RE = re.compile(r"[+-]?[0-9]+")


def setup_logging(level: int | str = "INFO") -> None:
    """Configure stdlib logging with a consistent, project-wide format."""
    if isinstance(level, str):
        level = level.upper()

    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Avoid duplicate handlers if called multiple times (e.g., service reload + CLI).
        root_logger.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def iter_nonblank_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, stripped line) for every non-blank line.

    Splits on \\n, \\r\\n and \\r only; other Unicode separators such as
    U+0085 (latin-1 byte 0x85) stay inside the record.
    """
    text = str(text or "")
    if not text:
        return
    lines = _LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if line:
            yield line_no, line


def parse_int(value: str) -> int | None:
    """Parse an ASCII base-10 integer field, returning None when it is not one.

    Underscores and non-ASCII digits are rejected.
    """
    text = str(value).strip()
    if not _INT_RE.fullmatch(text):
        return None
    return int(text, 10)
