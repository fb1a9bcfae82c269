"""Render Markdown into a complete HTML document using an extracted template."""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Tuple

try:
    import mistune  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'mistune'. Install with pip install mistune"
    ) from exc

from .models import DEFAULT_TITLE, HeadingRecord, Template, TocResult
from .styles import BACK_TO_TOC, TOC_CLOSE, TOC_OPEN, TOC_SCRIPT, TOC_STYLES

DEFAULT_LANG = "zh-TW"
TOC_LEVELS = (2, 3)

# Checked in order; the first marker found decides the callout class.
CALLOUT_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("Example", "example"),
    ("Note", "note"),
    ("Grammar", "grammar-point"),
)

HEADING_RE = re.compile(r"<h([2-6])[^>]*>(.*?)</h[2-6]>")
H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>")
H1_BLOCK_RE = re.compile(r"(<h1[^>]*>.*?</h1>)")
OPENING_TAG_RE = re.compile(r"^<h(\d)")
TAG_RE = re.compile(r"<[^>]*>")
PARAGRAPH_TAG_RE = re.compile(r"</?p>")


def strip_tags(markup: str) -> str:
    return TAG_RE.sub("", markup)


class StyledHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer with callout blocks and language emphasis classes."""

    def strong(self, text: str) -> str:
        return f'<span class="japanese">{text}</span>'

    def emphasis(self, text: str) -> str:
        return f'<span class="chinese">{text}</span>'

    def table(self, text: str) -> str:
        return f"<table>\n{text}</table>\n"

    def table_head(self, text: str) -> str:
        return f"<thead>\n<tr>\n{text}</tr>\n</thead>\n"

    def table_body(self, text: str) -> str:
        return f"<tbody>\n{text}</tbody>\n"

    def block_quote(self, text: str) -> str:
        for label, css_class in CALLOUT_MARKERS:
            content = self._strip_marker(text, label)
            if content is not None:
                content = PARAGRAPH_TAG_RE.sub("", content).strip()
                return f'<div class="{css_class}">{content}</div>\n'
        return f"<blockquote>\n{text}</blockquote>\n"

    def _strip_marker(self, text: str, label: str) -> Optional[str]:
        """Remove the first ``label`` marker from ``text``, if present."""
        for marker in (f"{self.strong(label)}:", f"**{label}**:"):
            index = text.find(marker)
            if index < 0:
                continue
            rest = text[index + len(marker):]
            if rest.startswith(" "):
                rest = rest[1:]
            return text[:index] + rest
        return None


def create_markdown() -> "mistune.Markdown":
    """Return a Markdown parser wired to :class:`StyledHTMLRenderer`."""
    return mistune.create_markdown(
        escape=False,
        hard_wrap=True,
        renderer=StyledHTMLRenderer(escape=False),
        plugins=["table", "strikethrough", "url"],
    )


def build_toc_list(headings: List[HeadingRecord]) -> str:
    """Turn level-ordered headings into balanced nested ``<ul>`` markup."""

    parts = ["<ul>"]
    current_level = TOC_LEVELS[0]
    for heading in headings:
        if heading.level > current_level:
            parts.append("<ul>" * (heading.level - current_level))
        elif heading.level < current_level:
            parts.append("</ul>" * (current_level - heading.level))
        parts.append(
            f'<li><a href="#{heading.id}" onclick="closeTOC()">'
            f"{heading.text}</a></li>"
        )
        current_level = heading.level
    parts.append("</ul>" * (current_level - TOC_LEVELS[0]))
    parts.append("</ul>")
    return "".join(parts)


def generate_toc(content: str) -> TocResult:
    """Assign heading ids, add back links, and build the dropdown TOC."""

    headings: List[HeadingRecord] = []
    counter = 0

    def annotate(match: "re.Match[str]") -> str:
        nonlocal counter
        level = int(match.group(1))
        heading_id = f"heading-{counter}"
        counter += 1
        if level in TOC_LEVELS:
            headings.append(
                HeadingRecord(
                    level=level,
                    text=strip_tags(match.group(2)),
                    id=heading_id,
                )
            )
        tagged = OPENING_TAG_RE.sub(
            lambda tag: f'<h{tag.group(1)} id="{heading_id}"',
            match.group(0),
        )
        return tagged + (BACK_TO_TOC if level == 2 else "")

    processed = HEADING_RE.sub(annotate, content)

    if not headings:
        return TocResult(toc="", content=processed)

    toc = TOC_OPEN + build_toc_list(headings) + TOC_CLOSE + TOC_SCRIPT
    return TocResult(toc=toc, content=processed, headings=tuple(headings))


def inject_toc(content: str, toc: str) -> str:
    """Place ``toc`` right after the first ``<h1>``; no ``<h1>``, no TOC."""
    if not toc:
        return content
    return H1_BLOCK_RE.sub(
        lambda match: f"{match.group(1)}\n{toc}", content, count=1
    )


def resolve_title(
    content: str, template: Template, metadata: Mapping[str, str]
) -> str:
    title = metadata.get("title")
    if title:
        return title
    h1_match = H1_RE.search(content)
    if h1_match:
        return strip_tags(h1_match.group(1))
    return template.title or DEFAULT_TITLE


class DocumentRenderer:
    """Turn Markdown plus a template into a standalone HTML page."""

    def __init__(self, *, default_lang: str = DEFAULT_LANG) -> None:
        self.default_lang = default_lang
        self._markdown = create_markdown()

    def render_fragment(self, markdown_source: str) -> str:
        return str(self._markdown(markdown_source))

    def render(
        self,
        markdown_source: str,
        template: Template,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> str:
        fragment = self.render_fragment(markdown_source)
        return self.apply_template(fragment, template, metadata or {})

    def apply_template(
        self,
        content: str,
        template: Template,
        metadata: Mapping[str, str],
    ) -> str:
        """Wrap a rendered fragment in the template's document chrome."""

        toc_result = generate_toc(content)
        processed = toc_result.content
        title = resolve_title(processed, template, metadata)

        external_links = "\n    ".join(
            f'<link rel="stylesheet" href="{href}">'
            for href in template.external_styles
        )
        all_styles = template.styles + TOC_STYLES
        styles = f"<style>\n{all_styles}\n    </style>"
        body_attr = (
            f' class="{template.body_class}"' if template.body_class else ""
        )
        lang = metadata.get("lang") or self.default_lang
        content_with_toc = inject_toc(processed, toc_result.toc)

        return f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
    {template.head}
    <title>{title}</title>
    {external_links}
    {styles}
</head>
<body{body_attr}>
    <div class="{template.container_class}">
        {content_with_toc}
    </div>
</body>
</html>"""
