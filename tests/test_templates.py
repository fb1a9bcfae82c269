"""Tests for template extraction, caching, and resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from md2web.models import Template
from md2web.templates import (
    DEFAULT_TEMPLATE,
    TemplateCache,
    TemplateExtractor,
    TemplateResolver,
    find_template_file,
    parse_template,
)


def _template_file(directory: Path, name: str, title: str) -> Path:
    path = directory / name
    path.write_text(
        f"<html><head><title>{title}</title></head><body></body></html>",
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def test_parse_template_extracts_chrome(sample_template_html: str) -> None:
    template = parse_template(sample_template_html)
    assert template.title == "Sample Template"
    assert "<title>" not in template.head
    assert '<meta charset="utf-8"/>' in template.head
    assert "body { color: #333; }" in template.styles
    assert "p { margin: 0; }" in template.styles
    assert template.external_styles == ("base.css", "print.css")
    assert template.body_class == "dark theme"
    assert template.container_class == "container wide"


def test_parse_template_defaults_for_bare_document() -> None:
    template = parse_template("<p>nothing here</p>")
    assert template.title == "Generated Document"
    assert template.styles == ""
    assert template.external_styles == ()
    assert template.body_class == ""
    assert template.container_class == "container"


def test_extract_missing_file_falls_back_with_warning(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    extractor = TemplateExtractor()
    missing = tmp_path / "missing.html"
    assert extractor.extract(missing) is DEFAULT_TEMPLATE
    assert "⚠️" in capsys.readouterr().out
    assert missing not in extractor.cache


def test_extract_undecodable_file_falls_back(tmp_path: Path) -> None:
    broken = tmp_path / "broken.html"
    broken.write_bytes(b"\xff\xfe\x00<html>\x81")
    assert TemplateExtractor().extract(broken) is DEFAULT_TEMPLATE


def test_extract_is_cached_until_invalidated(
    tmp_path: Path, sample_template_html: str
) -> None:
    path = tmp_path / "layout.html"
    path.write_text(sample_template_html, encoding="utf-8")
    extractor = TemplateExtractor()

    first = extractor.extract(path)
    path.write_text(
        sample_template_html.replace("Sample Template", "Changed"),
        encoding="utf-8",
    )
    assert extractor.extract(path) is first

    assert extractor.invalidate(path) is True
    assert extractor.extract(path).title == "Changed"
    assert extractor.invalidate(tmp_path / "never.html") is False


def test_cache_evicts_least_recently_used(tmp_path: Path) -> None:
    cache = TemplateCache(maxsize=2)
    a, b, c = (tmp_path / name for name in ("a.html", "b.html", "c.html"))
    cache.put(a, Template(title="a"))
    cache.put(b, Template(title="b"))
    assert cache.get(a) is not None
    cache.put(c, Template(title="c"))
    assert a in cache
    assert b not in cache
    assert c in cache
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _resolver(default_path: Path | None = None) -> TemplateResolver:
    return TemplateResolver(
        TemplateExtractor(), default_template_path=default_path
    )


def test_explicit_existing_path_wins(docs_dir: Path, tmp_path: Path) -> None:
    explicit = _template_file(tmp_path, "explicit.html", "Explicit")
    _template_file(docs_dir, "template.html", "Local")
    md_path = docs_dir / "doc.md"
    assert _resolver().resolve(md_path, explicit).title == "Explicit"


def test_explicit_name_is_looked_up_beside_markdown(docs_dir: Path) -> None:
    _template_file(docs_dir, "fancy.html", "Fancy")
    md_path = docs_dir / "doc.md"
    assert _resolver().resolve(md_path, "fancy").title == "Fancy"


def test_unknown_explicit_name_uses_default(
    docs_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _template_file(docs_dir, "template.html", "Local")
    template = _resolver().resolve(docs_dir / "doc.md", "nope")
    assert template is DEFAULT_TEMPLATE
    assert "Template nope not found" in capsys.readouterr().out


def test_application_template_precedes_directory_scan(
    docs_dir: Path, tmp_path: Path
) -> None:
    app_template = _template_file(tmp_path, "app.html", "App")
    _template_file(docs_dir, "template.html", "Local")
    resolver = _resolver(app_template)
    assert resolver.resolve(docs_dir / "doc.md").title == "App"


def test_missing_application_template_falls_through(docs_dir: Path) -> None:
    _template_file(docs_dir, "template.html", "Local")
    resolver = _resolver(docs_dir / "absent.html")
    assert resolver.resolve(docs_dir / "doc.md").title == "Local"


def test_directory_scan_prefers_template_name(docs_dir: Path) -> None:
    _template_file(docs_dir, "a.html", "A")
    _template_file(docs_dir, "My-Template.html", "Named")
    assert find_template_file(docs_dir) == docs_dir / "My-Template.html"
    assert _resolver().resolve(docs_dir / "doc.md").title == "Named"


def test_directory_scan_is_lexicographic(docs_dir: Path) -> None:
    _template_file(docs_dir, "zeta.html", "Z")
    _template_file(docs_dir, "beta.html", "B")
    _template_file(docs_dir, "alpha.html", "A")
    (docs_dir / "notes.md").write_text("# x", encoding="utf-8")
    assert find_template_file(docs_dir) == docs_dir / "alpha.html"


def test_nothing_found_returns_default(docs_dir: Path) -> None:
    assert find_template_file(docs_dir / "missing") is None
    assert _resolver().resolve(docs_dir / "doc.md") is DEFAULT_TEMPLATE


def test_unknown_explicit_name_prefers_application_template(
    docs_dir: Path, tmp_path: Path
) -> None:
    app_template = _template_file(tmp_path, "app.html", "App")
    resolver = _resolver(app_template)
    assert resolver.resolve(docs_dir / "doc.md", "nope").title == "App"
    assert resolver.default().title == "App"


def test_unreadable_template_falls_back_to_application_template(
    docs_dir: Path, tmp_path: Path
) -> None:
    app_template = _template_file(tmp_path, "app.html", "App")
    broken = docs_dir / "broken.html"
    broken.write_bytes(b"\xff\xfe\x00<html>\x81")
    resolver = _resolver(app_template)
    assert resolver.resolve(docs_dir / "doc.md", broken).title == "App"


def test_unreadable_application_template_uses_builtin(tmp_path: Path) -> None:
    broken = tmp_path / "app.html"
    broken.write_bytes(b"\xff\xfe\x00<html>\x81")
    resolver = _resolver(broken)
    assert resolver.default() is DEFAULT_TEMPLATE
    assert resolver.resolve(tmp_path / "doc.md", broken) is DEFAULT_TEMPLATE


def test_only_plain_stylesheet_links_are_collected() -> None:
    template = parse_template(
        "<html><head>"
        '<link rel="stylesheet" href="main.css">'
        '<link rel="alternate stylesheet" href="alt.css">'
        '<link rel="icon" href="favicon.ico">'
        "</head><body></body></html>"
    )
    assert template.external_styles == ("main.css",)
