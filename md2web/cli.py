"""Command-line entry point for md2web."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config_loader import ConfigError, load_config
from .converter import (
    HTML_SUFFIX,
    MARKDOWN_SUFFIX,
    PDF_SUFFIX,
    Converter,
    default_output_path,
)
from .errors import Md2WebError, ValidationError
from .models import WatchSettings
from .pairs import describe_file, format_pair, list_pairs
from .watcher import FileWatcher

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser with every sub-command registered."""

    parser = argparse.ArgumentParser(
        prog="md2web",
        description="Markdown to HTML converter with template support.",
    )
    parser.add_argument("--config", help="Path to config JSON file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser(
        "convert", help="Convert a Markdown file to HTML using a template."
    )
    convert.add_argument("input", help="Input Markdown file.")
    convert.add_argument("-o", "--output", help="Output file path.")
    convert.add_argument("-t", "--template", help="HTML template file.")
    convert.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files.",
    )
    convert.add_argument(
        "--pdf",
        action="store_true",
        help="Output as PDF instead of HTML.",
    )

    watch = subparsers.add_parser(
        "watch", help="Watch a Markdown file and re-convert on change."
    )
    watch.add_argument("input", help="Input Markdown file.")
    watch.add_argument("-o", "--output", help="Output HTML file path.")
    watch.add_argument("-t", "--template", help="HTML template file.")

    watch_dir = subparsers.add_parser(
        "watch-dir", help="Watch a directory for HTML/MD changes."
    )
    watch_dir.add_argument("directory", help="Directory to watch.")
    watch_dir.add_argument(
        "--convert-existing",
        action="store_true",
        help="Convert all existing files on startup.",
    )
    watch_dir.add_argument(
        "--force",
        action="store_true",
        help="Force conversion even if the target is newer.",
    )

    list_cmd = subparsers.add_parser(
        "list", help="List HTML and Markdown file pairs in a directory."
    )
    list_cmd.add_argument("directory", help="Directory to inspect.")
    list_cmd.add_argument(
        "--missing",
        action="store_true",
        help="Only show files missing their counterpart.",
    )

    info = subparsers.add_parser(
        "info", help="Show a file and its conversion counterpart."
    )
    info.add_argument("file", help="Markdown or HTML file.")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _require_markdown(raw: str) -> Path:
    input_path = Path(raw).resolve()
    if not input_path.exists():
        raise ValidationError(f"Input file does not exist: {input_path}")
    ext = input_path.suffix.lower()
    if ext != MARKDOWN_SUFFIX:
        raise ValidationError(
            f"Input must be a Markdown file (.md), got: {ext or '<none>'}"
        )
    return input_path


def _optional_template(raw: Optional[str]) -> Optional[Path]:
    if not raw:
        return None
    template_path = Path(raw).resolve()
    if not template_path.exists():
        raise ValidationError(
            f"Template file does not exist: {template_path}"
        )
    return template_path


def cmd_convert(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    input_path = _require_markdown(args.input)
    suffix = PDF_SUFFIX if args.pdf else HTML_SUFFIX
    output_path = (
        Path(args.output).resolve()
        if args.output
        else default_output_path(input_path, suffix)
    )
    if output_path.exists() and not args.force:
        raise ValidationError(
            f"Output file exists: {output_path}. Use --force to overwrite."
        )
    template_path = _optional_template(args.template)

    output_type = "PDF" if args.pdf else "HTML"
    print(f"🔄 Converting: {input_path.name} to {output_type}")
    if template_path:
        print(f"📄 Using template: {template_path.name}")
    else:
        print("📄 Auto-detecting template...")

    converter = Converter(config)
    started = time.monotonic()
    if args.pdf:
        converter.to_pdf(input_path, template_path, output_path)
    else:
        converter.to_html(input_path, template_path, output_path)
    elapsed_ms = (time.monotonic() - started) * 1000

    print(f"✅ Conversion completed in {elapsed_ms:.0f}ms")
    print(f"   Input:    {input_path}")
    print(f"   Output:   {output_path}")
    if template_path:
        print(f"   Template: {template_path}")
    return 0


def _watch_settings(config: Dict[str, Any]) -> WatchSettings:
    return WatchSettings(
        step_ms=int(config["watch_step_ms"]),
        debounce_ms=int(config["watch_debounce_ms"]),
    )


async def _serve(watcher: FileWatcher) -> None:
    """Run registered watches until interrupted or terminated."""
    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGTERM, watcher.stop_all)
    print("Press Ctrl+C to stop watching")
    try:
        await watcher.wait()
    finally:
        if watcher.watched_paths():
            watcher.stop_all()


def cmd_watch(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    input_path = _require_markdown(args.input)
    output_path = (
        Path(args.output).resolve()
        if args.output
        else default_output_path(input_path, HTML_SUFFIX)
    )
    template_path = _optional_template(args.template)

    watcher = FileWatcher(Converter(config), settings=_watch_settings(config))

    async def run() -> None:
        await watcher.watch_markdown(input_path, output_path, template_path)
        await _serve(watcher)

    _run_until_interrupted(run)
    return 0


def cmd_watch_dir(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    dir_path = Path(args.directory).resolve()
    if not dir_path.exists():
        raise ValidationError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise ValidationError(f"Not a directory: {dir_path}")

    watcher = FileWatcher(Converter(config), settings=_watch_settings(config))

    async def run() -> None:
        await watcher.watch_directory(
            dir_path,
            convert_existing=args.convert_existing,
            force=args.force,
        )
        await _serve(watcher)

    _run_until_interrupted(run)
    return 0


def _run_until_interrupted(run: Any) -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\n🛑 Stopping file watcher...")


def cmd_list(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    dir_path = Path(args.directory).resolve()
    pairs = list_pairs(dir_path)

    print(f"\n📁 Files in {dir_path}:\n")
    for pair in pairs:
        if args.missing and pair.complete:
            continue
        print(format_pair(pair))

    html_total = sum(1 for pair in pairs if pair.has_html)
    md_total = sum(1 for pair in pairs if pair.has_markdown)
    print(f"\nTotal: {html_total} HTML, {md_total} MD files")
    return 0


def cmd_info(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    report = describe_file(Path(args.file).resolve())
    source = report.source

    print("\n📄 File Information:\n")
    print(f"Source: {source.path}")
    print(f"Size: {source.size} bytes")
    print(f"Modified: {source.modified.strftime(DATE_FORMAT)}")
    print(f"Type: {report.file_type}")

    print("\n🔄 Counterpart:\n")
    print(f"Path: {report.counterpart_path}")
    print(f"Exists: {'Yes' if report.counterpart else 'No'}")
    if report.counterpart is not None:
        print(f"Size: {report.counterpart.size} bytes")
        print(
            f"Modified: {report.counterpart.modified.strftime(DATE_FORMAT)}"
        )
        status = (
            "Source is newer" if report.source_is_newer
            else "Files are in sync"
        )
        print(f"Sync Status: {status}")
    return 0


COMMANDS = {
    "convert": cmd_convert,
    "watch": cmd_watch,
    "watch-dir": cmd_watch_dir,
    "list": cmd_list,
    "info": cmd_info,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``md2web`` CLI."""

    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        raise SystemExit(f"❌ Config error: {exc}") from exc

    try:
        return COMMANDS[args.command](args, config)
    except Md2WebError as exc:
        raise SystemExit(f"❌ {exc}") from exc


if __name__ == "__main__":
    sys.exit(main())
