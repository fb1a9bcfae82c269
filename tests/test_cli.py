"""Tests for the md2web command-line interface."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

import md2web.cli
from md2web.pairs import describe_file, list_pairs


def _write(path: Path, text: str, mtime: float | None = None) -> Path:
    path.write_text(text, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def test_parse_convert_flags() -> None:
    ns = md2web.cli.parse_args(
        ["convert", "a.md", "-o", "out.html", "-t", "t.html", "-f", "--pdf"]
    )
    assert ns.command == "convert"
    assert ns.input == "a.md"
    assert ns.output == "out.html"
    assert ns.template == "t.html"
    assert ns.force is True
    assert ns.pdf is True


def test_parse_watch_dir_defaults() -> None:
    ns = md2web.cli.parse_args(["watch-dir", "docs"])
    assert ns.command == "watch-dir"
    assert ns.convert_existing is False
    assert ns.force is False
    assert ns.config is None


def test_parse_requires_command() -> None:
    with pytest.raises(SystemExit):
        md2web.cli.parse_args([])


def test_convert_writes_html(docs_dir: Path) -> None:
    md_path = _write(docs_dir / "a.md", "# A\n\n## One")
    assert md2web.cli.main(["convert", str(md_path)]) == 0
    html = (docs_dir / "a.html").read_text(encoding="utf-8")
    assert '<div class="toc-dropdown">' in html


def test_convert_refuses_existing_output_without_force(docs_dir: Path) -> None:
    md_path = _write(docs_dir / "a.md", "# A")
    _write(docs_dir / "a.html", "keep me")
    with pytest.raises(SystemExit) as excinfo:
        md2web.cli.main(["convert", str(md_path)])
    assert "--force" in str(excinfo.value.code)
    assert (docs_dir / "a.html").read_text(encoding="utf-8") == "keep me"

    assert md2web.cli.main(["convert", str(md_path), "--force"]) == 0
    assert "<h1>A</h1>" in (docs_dir / "a.html").read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("name", "message"),
    [
        ("missing.md", "does not exist"),
        ("notes.txt", "Input must be a Markdown file"),
    ],
)
def test_convert_validation_errors(
    docs_dir: Path, name: str, message: str
) -> None:
    if name.endswith(".txt"):
        _write(docs_dir / name, "x")
    with pytest.raises(SystemExit) as excinfo:
        md2web.cli.main(["convert", str(docs_dir / name)])
    assert message in str(excinfo.value.code)


def test_convert_missing_template_fails(docs_dir: Path) -> None:
    md_path = _write(docs_dir / "a.md", "# A")
    with pytest.raises(SystemExit) as excinfo:
        md2web.cli.main(
            ["convert", str(md_path), "-t", str(docs_dir / "none.html")]
        )
    assert "Template file does not exist" in str(excinfo.value.code)


def test_convert_pdf_uses_converter(
    docs_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    md_path = _write(docs_dir / "a.md", "# A")
    seen: list[tuple[Path, Path]] = []

    def fake_pdf(html_path: Path, pdf_path: Path, options: object):
        seen.append((Path(html_path), Path(pdf_path)))
        Path(pdf_path).write_bytes(b"%PDF")
        return True, None

    monkeypatch.setattr(
        md2web.converter, "render_pdf_from_html", fake_pdf
    )
    assert md2web.cli.main(["convert", str(md_path), "--pdf"]) == 0
    assert seen[0][1] == docs_dir / "a.pdf"
    assert (docs_dir / "a.pdf").exists()


def test_bad_config_exits(docs_dir: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        md2web.cli.main(
            ["--config", str(docs_dir / "nope.json"), "list", str(docs_dir)]
        )
    assert "Config error" in str(excinfo.value.code)


def test_config_lang_reaches_output(docs_dir: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "md2web.json"
    config_path.write_text(json.dumps({"default_lang": "ja"}), "utf-8")
    md_path = _write(docs_dir / "a.md", "text")
    assert md2web.cli.main(
        ["--config", str(config_path), "convert", str(md_path)]
    ) == 0
    assert '<html lang="ja">' in (docs_dir / "a.html").read_text("utf-8")


def test_list_reports_pairs(
    docs_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(docs_dir / "both.md", "x")
    _write(docs_dir / "both.html", "x")
    _write(docs_dir / "html_only.html", "x")
    _write(docs_dir / "md_only.md", "x")

    pairs = list_pairs(docs_dir)
    assert [(p.name, p.complete) for p in pairs] == [
        ("both", True),
        ("html_only", False),
        ("md_only", False),
    ]

    assert md2web.cli.main(["list", str(docs_dir)]) == 0
    out = capsys.readouterr().out
    assert "✅ both.html ↔ both.md" in out
    assert "❌ html_only.html → html_only.md" in out
    assert "❌ md_only.html ← md_only.md" in out
    assert "Total: 2 HTML, 2 MD files" in out

    assert md2web.cli.main(["list", str(docs_dir), "--missing"]) == 0
    out = capsys.readouterr().out
    assert "both.html" not in out
    assert "html_only.html" in out


def test_list_missing_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        md2web.cli.main(["list", str(tmp_path / "nowhere")])


def test_info_reports_sync_status(
    docs_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    md_path = _write(docs_dir / "a.md", "# A", mtime=2_000)
    _write(docs_dir / "a.html", "<p>old</p>", mtime=1_000)

    report = describe_file(md_path)
    assert report.file_type == "Markdown"
    assert report.counterpart_path == docs_dir / "a.html"
    assert report.source_is_newer

    assert md2web.cli.main(["info", str(md_path)]) == 0
    out = capsys.readouterr().out
    assert "Type: Markdown" in out
    assert "Exists: Yes" in out
    assert "Sync Status: Source is newer" in out


def test_info_without_counterpart(
    docs_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    html_path = _write(docs_dir / "page.html", "<p>x</p>")
    assert md2web.cli.main(["info", str(html_path)]) == 0
    out = capsys.readouterr().out
    assert "Type: HTML" in out
    assert "Exists: No" in out
    assert "Sync Status" not in out


def test_info_rejects_other_types(docs_dir: Path) -> None:
    path = _write(docs_dir / "notes.txt", "x")
    with pytest.raises(SystemExit) as excinfo:
        md2web.cli.main(["info", str(path)])
    assert "Unsupported file type" in str(excinfo.value.code)
