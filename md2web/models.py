"""Shared dataclasses for templates, headings, and watch settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

DEFAULT_TITLE = "Generated Document"
DEFAULT_CONTAINER_CLASS = "container"


def _default_margins() -> Dict[str, str]:
    return {"top": "20mm", "bottom": "20mm", "left": "15mm", "right": "15mm"}


@dataclass(frozen=True, slots=True)
class Template:
    """Reusable document chrome extracted from a reference HTML file."""

    head: str = ""
    title: str = DEFAULT_TITLE
    styles: str = ""
    external_styles: Tuple[str, ...] = ()
    body_class: str = ""
    container_class: str = DEFAULT_CONTAINER_CLASS


@dataclass(frozen=True, slots=True)
class HeadingRecord:
    """A heading collected while building the table of contents."""

    level: int
    text: str
    id: str


@dataclass(frozen=True, slots=True)
class TocResult:
    """Output of TOC generation: dropdown markup plus id-annotated content."""

    toc: str
    content: str
    headings: Tuple[HeadingRecord, ...] = ()


@dataclass(slots=True)
class PdfOptions:
    """Page settings handed to the headless browser print call."""

    format: str = "A4"
    margins: Dict[str, str] = field(default_factory=_default_margins)
    print_background: bool = True


@dataclass(frozen=True, slots=True)
class WatchSettings:
    """Timing knobs for change detection, in milliseconds.

    ``step_ms`` is the quiet period after the last write before a batch is
    emitted; ``debounce_ms`` caps how long changes are grouped.
    """

    step_ms: int = 100
    debounce_ms: int = 1600
