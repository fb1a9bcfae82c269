"""Read-only pairing reports behind the ``list`` and ``info`` commands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .errors import ValidationError
from .watcher import counterpart_path


@dataclass(slots=True)
class PairStatus:
    """One basename in a directory and which formats exist for it."""

    name: str
    has_html: bool
    has_markdown: bool

    @property
    def complete(self) -> bool:
        return self.has_html and self.has_markdown

    @property
    def html_name(self) -> str:
        return f"{self.name}.html"

    @property
    def markdown_name(self) -> str:
        return f"{self.name}.md"


@dataclass(slots=True)
class FileSnapshot:
    path: Path
    size: int
    modified: datetime


@dataclass(slots=True)
class FileReport:
    """Stats for a file plus its counterpart, as shown by ``info``."""

    source: FileSnapshot
    file_type: str
    counterpart_path: Path
    counterpart: Optional[FileSnapshot]

    @property
    def source_is_newer(self) -> bool:
        if self.counterpart is None:
            return False
        return self.source.modified > self.counterpart.modified


def _snapshot(path: Path) -> FileSnapshot:
    stats = path.stat()
    return FileSnapshot(
        path=path,
        size=stats.st_size,
        modified=datetime.fromtimestamp(stats.st_mtime),
    )


def list_pairs(directory: Path | str) -> List[PairStatus]:
    """Group the top-level ``.html``/``.md`` files of ``directory`` by stem."""

    directory = Path(directory)
    if not directory.is_dir():
        raise ValidationError(f"Directory does not exist: {directory}")

    html_names = {
        entry.stem for entry in directory.glob("*.html") if entry.is_file()
    }
    markdown_names = {
        entry.stem for entry in directory.glob("*.md") if entry.is_file()
    }
    return [
        PairStatus(
            name=name,
            has_html=name in html_names,
            has_markdown=name in markdown_names,
        )
        for name in sorted(html_names | markdown_names)
    ]


def format_pair(pair: PairStatus) -> str:
    if pair.complete:
        return f"✅ {pair.html_name} ↔ {pair.markdown_name}"
    if pair.has_html:
        return f"❌ {pair.html_name} → {pair.markdown_name}"
    return f"❌ {pair.html_name} ← {pair.markdown_name}"


def describe_file(file_path: Path | str) -> FileReport:
    """Collect size/mtime details for ``file_path`` and its counterpart."""

    file_path = Path(file_path)
    if not file_path.exists():
        raise ValidationError(f"File does not exist: {file_path}")

    partner = counterpart_path(file_path)
    if partner is None:
        raise ValidationError(
            f"Unsupported file type: {file_path.suffix or '<none>'}"
        )

    file_type = "HTML" if file_path.suffix.lower() == ".html" else "Markdown"
    return FileReport(
        source=_snapshot(file_path),
        file_type=file_type,
        counterpart_path=partner,
        counterpart=_snapshot(partner) if partner.exists() else None,
    )
