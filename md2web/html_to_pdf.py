"""Print rendered HTML documents to PDF with headless Chromium."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Tuple

try:
    from playwright.sync_api import (  # type: ignore[import-not-found]
        Error as PlaywrightError,
        sync_playwright,
    )
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit(
        "Missing dependency 'playwright'. Install with pip install"
        " playwright && playwright install chromium"
    ) from exc

from .models import PdfOptions

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


def render_pdf_from_html(
    input_html: str | Path,
    output_pdf: str | Path,
    options: Optional[PdfOptions] = None,
) -> Tuple[bool, str | None]:
    """Render a static HTML document to PDF using Playwright."""

    settings = options or PdfOptions()
    html_path = Path(input_html).resolve()
    pdf_path = Path(output_pdf)
    pdf_path.parent.mkdir(parents=True, exist_ok=True)

    print("🚀 Launching browser for PDF generation...")
    try:
        with sync_playwright() as playwright_context:
            chromium = playwright_context.chromium
            browser: Any = chromium.launch(headless=True, args=BROWSER_ARGS)
            try:
                page: Any = browser.new_page()
                page.goto(html_path.as_uri(), wait_until="networkidle")
                page.pdf(
                    path=str(pdf_path),
                    format=settings.format,
                    print_background=settings.print_background,
                    margin=dict(settings.margins),
                )
            finally:
                browser.close()
        return True, None
    except PlaywrightError as exc:
        return False, str(exc)


__all__ = ["render_pdf_from_html"]
