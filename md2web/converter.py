"""One-shot Markdown to HTML/PDF conversion built on the template pipeline."""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .config_loader import DEFAULTS
from .errors import ConversionError, UnsupportedDirectionError
from .front_matter import split_front_matter
from .html_to_pdf import render_pdf_from_html
from .models import PdfOptions
from .renderer import DocumentRenderer
from .templates import TemplateCache, TemplateExtractor, TemplateResolver

PdfRenderer = Callable[
    [Path, Path, PdfOptions], Tuple[bool, Optional[str]]
]

MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"
PDF_SUFFIX = ".pdf"
TEMP_HTML_SUFFIX = "-temp.html"


def default_output_path(source: Path | str, suffix: str) -> Path:
    """Return ``source`` with its extension replaced by ``suffix``."""
    source = Path(source)
    return source.with_name(f"{source.stem}{suffix}")


class Converter:
    """Convert Markdown files into templated HTML documents or PDFs."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        pdf_renderer: Optional[PdfRenderer] = None,
    ) -> None:
        settings: Dict[str, Any] = dict(DEFAULTS)
        if config:
            settings.update(config)
        self.config = settings

        self.templates = TemplateExtractor(
            TemplateCache(int(settings["template_cache_size"]))
        )
        self.resolver = TemplateResolver(
            self.templates,
            default_template_path=settings.get("default_template_path"),
        )
        self.renderer = DocumentRenderer(
            default_lang=str(settings["default_lang"])
        )
        self.pdf_options = PdfOptions(
            format=str(settings["pdf_format"]),
            margins=dict(settings["pdf_margins"]),
        )
        self.pdf_renderer: PdfRenderer = pdf_renderer or render_pdf_from_html

    def render_file(
        self, md_path: Path | str, template_path: Path | str | None = None
    ) -> str:
        """Read ``md_path`` and return the complete HTML document."""

        md_path = Path(md_path)
        source = md_path.read_text(encoding="utf-8")
        metadata, body = split_front_matter(source)
        template = self.resolver.resolve(md_path, template_path)
        return self.renderer.render(body, template, metadata)

    def to_html(
        self,
        md_path: Path | str,
        template_path: Path | str | None = None,
        output_path: Path | str | None = None,
    ) -> Path:
        md_path = Path(md_path)
        target = (
            Path(output_path)
            if output_path
            else default_output_path(md_path, HTML_SUFFIX)
        )
        try:
            document = self.render_file(md_path, template_path)
            target.write_text(document, encoding="utf-8")
        except Exception as exc:
            raise ConversionError(
                f"MD to HTML conversion failed: {exc}"
            ) from exc

        print(f"✅ Converted {md_path.name} → {target.name}")
        return target

    convert_with_template = to_html

    def to_pdf(
        self,
        md_path: Path | str,
        template_path: Path | str | None = None,
        output_path: Path | str | None = None,
    ) -> Path:
        md_path = Path(md_path)
        target = (
            Path(output_path)
            if output_path
            else default_output_path(md_path, PDF_SUFFIX)
        )
        temp_html = md_path.with_name(f"{md_path.stem}{TEMP_HTML_SUFFIX}")

        try:
            self.to_html(md_path, template_path, temp_html)
            ok, error = self.pdf_renderer(temp_html, target, self.pdf_options)
            if not ok:
                raise ConversionError(error or "PDF rendering failed")
        except Exception as exc:
            raise ConversionError(
                f"MD to PDF conversion failed: {exc}"
            ) from exc
        finally:
            with contextlib.suppress(OSError):
                temp_html.unlink(missing_ok=True)

        print(f"✅ PDF generated: {target.name}")
        return target

    def sync(
        self,
        source_path: Path | str,
        target_path: Path | str | None = None,
        template_path: Path | str | None = None,
    ) -> Path:
        """Convert ``source_path`` toward its counterpart format.

        Only Markdown sources are supported; anything else raises
        :class:`UnsupportedDirectionError`.
        """

        source_ext = Path(source_path).suffix.lower()
        if source_ext == MARKDOWN_SUFFIX:
            return self.to_html(source_path, template_path, target_path)
        raise UnsupportedDirectionError(
            "Only Markdown to HTML conversion is supported. "
            f"Input: {source_ext or '<none>'}"
        )
