"""Split a leading ``---`` metadata block off Markdown source."""

from __future__ import annotations

import re
from typing import Dict, Tuple

DELIMITER = "---"
CLOSING_DELIMITER_RE = re.compile(r"^---", re.MULTILINE)


def parse_metadata(block: str) -> Dict[str, str]:
    """Parse ``key: value`` lines; only the first colon separates the key."""

    metadata: Dict[str, str] = {}
    for line in block.split("\n"):
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        metadata[key] = value.strip()
    return metadata


def split_front_matter(source: str) -> Tuple[Dict[str, str], str]:
    """Return ``(metadata, body)`` for ``source``.

    Text without an opening delimiter line, or without a closing delimiter,
    is returned unchanged as the body with empty metadata.
    """

    first_line, newline, rest = source.partition("\n")
    if first_line.rstrip("\r") != DELIMITER or not newline:
        return {}, source

    closing = CLOSING_DELIMITER_RE.search(rest)
    if closing is None:
        return {}, source

    metadata = parse_metadata(rest[: closing.start()])
    body = rest[closing.end():].strip()
    return metadata, body
