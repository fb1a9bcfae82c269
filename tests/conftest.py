from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test from an empty directory with no config override."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("MD2WEB_CONFIG", raising=False)
    return workdir


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    path = tmp_path / "docs"
    path.mkdir()
    return path


SAMPLE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Sample Template</title>
    <link rel="stylesheet" href="base.css">
    <style>body { color: #333; }</style>
    <link rel="stylesheet" href="print.css">
    <style>p { margin: 0; }</style>
</head>
<body class="dark theme">
    <div class="container wide">placeholder</div>
</body>
</html>
"""


@pytest.fixture
def sample_template_html() -> str:
    return SAMPLE_TEMPLATE
