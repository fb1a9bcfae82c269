"""Extract reusable document chrome from HTML files and pick a template."""

from __future__ import annotations

import copy
from collections import OrderedDict
from pathlib import Path
from typing import Any, Iterator, Optional

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4 lxml"
    ) from exc

from .models import DEFAULT_CONTAINER_CLASS, DEFAULT_TITLE, Template
from .styles import DEFAULT_HEAD, DEFAULT_STYLES

DEFAULT_CACHE_SIZE = 32

DEFAULT_TEMPLATE = Template(
    head=DEFAULT_HEAD,
    title=DEFAULT_TITLE,
    styles=DEFAULT_STYLES,
    external_styles=(),
    body_class="",
    container_class=DEFAULT_CONTAINER_CLASS,
)


def _class_value(value: Any) -> str:
    """Normalize a BeautifulSoup ``class`` attribute into a plain string."""
    if not value:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def parse_template(html: str) -> Template:
    """Build a :class:`Template` from an HTML document string."""

    soup = BeautifulSoup(html, "lxml")

    head_markup = ""
    if soup.head is not None:
        head = copy.copy(soup.head)
        for title_tag in head.find_all("title"):
            title_tag.decompose()
        head_markup = head.decode_contents().strip()

    title_tag = soup.find("title")
    title = title_tag.get_text() if title_tag is not None else ""

    styles = "\n".join(
        style.get_text() for style in soup.find_all("style")
    )

    external_styles = tuple(
        str(link.get("href"))
        for link in soup.find_all("link")
        if _class_value(link.get("rel")).lower() == "stylesheet"
        and link.get("href")
    )

    body_class = ""
    if soup.body is not None:
        body_class = _class_value(soup.body.get("class"))

    container = soup.select_one(".container")
    container_class = (
        _class_value(container.get("class")) if container is not None else ""
    )

    return Template(
        head=head_markup,
        title=title or DEFAULT_TITLE,
        styles=styles,
        external_styles=external_styles,
        body_class=body_class,
        container_class=container_class or DEFAULT_CONTAINER_CLASS,
    )


class TemplateCache:
    """Bounded least-recently-used cache of templates keyed by path."""

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        self.maxsize = max(1, maxsize)
        self._entries: "OrderedDict[Path, Template]" = OrderedDict()

    @staticmethod
    def _key(path: Path | str) -> Path:
        return Path(path).resolve()

    def get(self, path: Path | str) -> Optional[Template]:
        key = self._key(path)
        template = self._entries.get(key)
        if template is not None:
            self._entries.move_to_end(key)
        return template

    def put(self, path: Path | str, template: Template) -> None:
        key = self._key(path)
        self._entries[key] = template
        self._entries.move_to_end(key)
        while len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)

    def invalidate(self, path: Path | str) -> bool:
        """Drop ``path`` from the cache; return True when it was cached."""
        return self._entries.pop(self._key(path), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._entries))


class TemplateExtractor:
    """Read HTML templates from disk, memoizing successful extractions."""

    def __init__(self, cache: Optional[TemplateCache] = None) -> None:
        self.cache = cache if cache is not None else TemplateCache()

    def extract(self, html_path: Path | str) -> Template:
        """Return the template for ``html_path``, falling back on failure.

        Unreadable files never raise: a warning is printed and the
        built-in default template is returned (and not cached).
        """
        template = self.try_extract(html_path)
        return template if template is not None else DEFAULT_TEMPLATE

    def try_extract(self, html_path: Path | str) -> Optional[Template]:
        """Like :meth:`extract` but return None when the file is unusable."""

        path = Path(html_path)
        cached = self.cache.get(path)
        if cached is not None:
            return cached

        try:
            html = path.read_text(encoding="utf-8")
            template = parse_template(html)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            print(f"⚠️ Could not extract template from {path}: {exc}")
            return None

        self.cache.put(path, template)
        print(f"✅ Template extracted from {path.name}")
        return template

    def invalidate(self, html_path: Path | str) -> bool:
        return self.cache.invalidate(html_path)


class TemplateResolver:
    """Choose the template for a Markdown file in fixed priority order."""

    def __init__(
        self,
        extractor: TemplateExtractor,
        *,
        default_template_path: Path | str | None = None,
    ) -> None:
        self.extractor = extractor
        self.default_template_path = (
            Path(default_template_path)
            if default_template_path is not None
            else None
        )

    def resolve(
        self,
        md_path: Path | str,
        explicit_template: Path | str | None = None,
    ) -> Template:
        md_path = Path(md_path)

        if explicit_template:
            candidate = Path(explicit_template)
            if candidate.exists():
                return self._extract_or_default(candidate)

            named = md_path.parent / f"{explicit_template}.html"
            if named.exists():
                return self._extract_or_default(named)

            print(f"⚠️ Template {explicit_template} not found, using default")
            return self.default()

        if self._has_application_template():
            return self.default()

        found = find_template_file(md_path.parent)
        if found is not None:
            return self._extract_or_default(found)

        return DEFAULT_TEMPLATE

    def default(self) -> Template:
        """Application template when configured and readable, else built-in."""
        if self._has_application_template():
            return self.extractor.extract(self.default_template_path)
        return DEFAULT_TEMPLATE

    def _has_application_template(self) -> bool:
        return (
            self.default_template_path is not None
            and self.default_template_path.is_file()
        )

    def _extract_or_default(self, html_path: Path) -> Template:
        template = self.extractor.try_extract(html_path)
        if template is not None:
            return template
        if self._has_application_template() and (
            html_path.resolve() == self.default_template_path.resolve()
        ):
            return DEFAULT_TEMPLATE
        return self.default()


def find_template_file(directory: Path | str) -> Optional[Path]:
    """Pick an HTML file in ``directory`` to serve as a template.

    Candidates are ordered by filename so the choice is reproducible; a
    name containing "template" wins over plain HTML files.
    """

    directory = Path(directory)
    try:
        html_files = sorted(
            (
                entry
                for entry in directory.iterdir()
                if entry.suffix == ".html" and entry.is_file()
            ),
            key=lambda entry: entry.name,
        )
    except OSError:
        return None

    if not html_files:
        return None

    for entry in html_files:
        if "template" in entry.name.lower():
            return entry
    return html_files[0]
