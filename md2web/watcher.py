"""Watch mode: re-convert Markdown when it changes on disk."""

from __future__ import annotations

import asyncio
import time
from collections.abc import (
    AsyncIterator,
    Awaitable,
    Callable,
    Iterator,
    Sequence,
)
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    from watchfiles import Change, awatch  # type: ignore[import-untyped]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'watchfiles'. Install with pip install watchfiles"
    ) from exc

from .converter import (
    HTML_SUFFIX,
    MARKDOWN_SUFFIX,
    Converter,
    default_output_path,
)
from .errors import Md2WebError, UnsupportedDirectionError, ValidationError
from .models import WatchSettings

RawChanges = set[tuple[Any, str]]
ChangesFactory = Callable[..., AsyncIterator[RawChanges]]
BatchHandler = Callable[[RawChanges], Awaitable[None]]

SYNC_SUFFIXES = (HTML_SUFFIX, MARKDOWN_SUFFIX)
RESTART_DELAY_S = 1.0


def make_watchfiles_iter(
    watch_paths: Sequence[Path],
    *,
    recursive: bool,
    stop_event: asyncio.Event,
    settings: WatchSettings,
) -> AsyncIterator[RawChanges]:
    """Create an async iterator using watchfiles.awatch()."""
    return awatch(
        *watch_paths,
        watch_filter=None,
        debounce=settings.debounce_ms,
        step=settings.step_ms,
        stop_event=stop_event,
        recursive=recursive,
    )


def counterpart_path(path: Path | str) -> Optional[Path]:
    """Return the ``.md``/``.html`` partner of ``path``, or None."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == HTML_SUFFIX:
        return path.with_name(f"{path.stem}{MARKDOWN_SUFFIX}")
    if suffix == MARKDOWN_SUFFIX:
        return path.with_name(f"{path.stem}{HTML_SUFFIX}")
    return None


def is_sync_candidate(path: Path, root: Optional[Path] = None) -> bool:
    """True for ``.md``/``.html`` files outside dot-files and dot-dirs."""
    if path.suffix.lower() not in SYNC_SUFFIXES:
        return False
    parts = path.parts
    if root is not None:
        try:
            parts = path.relative_to(root).parts
        except ValueError:
            pass
    return not any(part.startswith(".") for part in parts)


def iter_sync_candidates(directory: Path) -> Iterator[Path]:
    """Yield every existing Markdown/HTML file under ``directory``, sorted."""
    found = {
        entry
        for entry in directory.rglob("*")
        if entry.is_file() and is_sync_candidate(entry, directory)
    }
    yield from sorted(found)


def needs_conversion(
    source: Path, target: Path, *, force: bool = False
) -> bool:
    """True when ``target`` is missing or strictly older than ``source``."""
    if force or not target.exists():
        return True
    return target.stat().st_mtime_ns < source.stat().st_mtime_ns


class ConversionGate:
    """At-most-one-in-flight guard shared by every watch of one watcher.

    Events that arrive while the gate is held are dropped, not queued.
    """

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def try_acquire(self) -> bool:
        if self._busy:
            return False
        self._busy = True
        return True

    def release(self) -> None:
        self._busy = False

    reset = release


@dataclass(slots=True)
class WatchHandle:
    """A registered watch: its stop signal and consuming task."""

    path: Path
    stop_event: asyncio.Event
    task: Optional["asyncio.Task[None]"] = None

    def close(self) -> None:
        self.stop_event.set()
        if self.task is not None and not self.task.done():
            self.task.cancel()


class FileWatcher:
    """Keep HTML output in step with Markdown sources as they change."""

    def __init__(
        self,
        converter: Converter,
        *,
        settings: Optional[WatchSettings] = None,
        changes_factory: Optional[ChangesFactory] = None,
    ) -> None:
        self.converter = converter
        self.settings = settings or WatchSettings()
        self.gate = ConversionGate()
        self._changes_factory = changes_factory or make_watchfiles_iter
        self._watchers: dict[Path, WatchHandle] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def watched_paths(self) -> list[Path]:
        return list(self._watchers)

    def is_watching(self, path: Path | str) -> bool:
        return Path(path).resolve() in self._watchers

    def _register(
        self,
        key: Path,
        watch_paths: Sequence[Path],
        *,
        recursive: bool,
        on_batch: BatchHandler,
    ) -> WatchHandle:
        handle = WatchHandle(path=key, stop_event=asyncio.Event())
        handle.task = asyncio.create_task(
            self._consume(handle, watch_paths, recursive, on_batch),
            name=f"md2web-watch:{key}",
        )
        self._watchers[key] = handle
        return handle

    async def _consume(
        self,
        handle: WatchHandle,
        watch_paths: Sequence[Path],
        recursive: bool,
        on_batch: BatchHandler,
    ) -> None:
        while not handle.stop_event.is_set():
            try:
                changes_iter = self._changes_factory(
                    watch_paths,
                    recursive=recursive,
                    stop_event=handle.stop_event,
                    settings=self.settings,
                )
                async for raw_changes in changes_iter:
                    await on_batch(raw_changes)
                return
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                print(f"❌ Watcher error for {handle.path}: {exc}")
                await asyncio.sleep(RESTART_DELAY_S)

    async def _run_guarded(
        self, func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> Any:
        """Run ``func`` in a worker thread if the gate is free."""
        if not self.gate.try_acquire():
            return None
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except (Md2WebError, OSError) as exc:
            print(f"❌ Conversion failed: {exc}")
            return None
        finally:
            self.gate.release()

    # ------------------------------------------------------------------
    # Single Markdown file
    # ------------------------------------------------------------------

    async def watch_markdown(
        self,
        md_path: Path | str,
        html_path: Path | str | None = None,
        template_path: Path | str | None = None,
    ) -> Path:
        """Convert ``md_path`` once, then re-convert it on every change."""

        md_path = Path(md_path).resolve()
        if not md_path.is_file():
            raise ValidationError(f"Markdown file does not exist: {md_path}")
        target = (
            Path(html_path)
            if html_path
            else default_output_path(md_path, HTML_SUFFIX)
        )

        print("📄 Initial conversion: MD → HTML")
        self.converter.to_html(md_path, template_path, target)

        if md_path in self._watchers:
            return target

        async def on_batch(raw_changes: RawChanges) -> None:
            relevant = any(
                Path(raw_path).resolve() == md_path
                and change in (Change.modified, Change.added)
                for change, raw_path in raw_changes
            )
            if not relevant:
                return
            await self._convert_markdown(md_path, target, template_path)

        self._register(
            md_path, [md_path.parent], recursive=False, on_batch=on_batch
        )

        print("👁️  Watching:")
        print(f"   Markdown: {md_path}")
        print(f"   HTML:     {target}")
        if template_path:
            print(f"   Template: {template_path}")
        return target

    async def _convert_markdown(
        self,
        md_path: Path,
        target: Path,
        template_path: Path | str | None,
    ) -> Optional[Path]:
        if self.gate.busy:
            return None
        print(f"\n🔄 Markdown changed: {md_path.name}")
        print("   Converting → HTML...")
        started = time.monotonic()
        result = await self._run_guarded(
            self.converter.to_html, md_path, template_path, target
        )
        if result is not None:
            elapsed_ms = (time.monotonic() - started) * 1000
            print(f"✅ Conversion completed in {elapsed_ms:.0f}ms")
        return result

    # ------------------------------------------------------------------
    # Directory of pairs
    # ------------------------------------------------------------------

    async def watch_directory(
        self,
        dir_path: Path | str,
        *,
        convert_existing: bool = False,
        force: bool = False,
    ) -> None:
        """Keep every ``.md``/``.html`` pair under ``dir_path`` in sync."""

        dir_path = Path(dir_path).resolve()
        if not dir_path.is_dir():
            raise ValidationError(f"Not a directory: {dir_path}")
        if dir_path in self._watchers:
            return

        # Editors that save by renaming a temp file over the original
        # surface as an add of a path already seen, not a modify.
        known = set(iter_sync_candidates(dir_path))

        async def on_batch(raw_changes: RawChanges) -> None:
            deleted = {
                Path(raw_path).resolve()
                for change, raw_path in raw_changes
                if change == Change.deleted
            }
            for change, raw_path in sorted(
                raw_changes, key=lambda item: item[1]
            ):
                path = Path(raw_path)
                if change == Change.deleted:
                    continue
                if not is_sync_candidate(path, dir_path):
                    continue
                if change == Change.added:
                    key = path.resolve()
                    replaced = key in known or key in deleted
                    known.add(key)
                    if not (replaced or convert_existing):
                        continue
                if path.suffix.lower() == HTML_SUFFIX:
                    self.converter.templates.invalidate(path)
                await self._run_guarded(
                    self.handle_file_change, path, force=force
                )

        print(f"👁️  Watching directory: {dir_path}")
        self._register(
            dir_path, [dir_path], recursive=True, on_batch=on_batch
        )

        if convert_existing:
            for path in iter_sync_candidates(dir_path):
                await self._run_guarded(
                    self.handle_file_change, path, force=force
                )

    def handle_file_change(
        self, file_path: Path | str, *, force: bool = False
    ) -> Optional[Path]:
        """Sync one changed file toward its counterpart when stale.

        Returns the written counterpart, or None when nothing was done.
        """

        file_path = Path(file_path)
        target = counterpart_path(file_path)
        if target is None:
            return None
        if not needs_conversion(file_path, target, force=force):
            return None

        is_html = file_path.suffix.lower() == HTML_SUFFIX
        file_type = "HTML" if is_html else "Markdown"
        direction = "→ MD" if is_html else "→ HTML"
        print(f"🔄 {file_type}: {file_path.name} {direction}")

        started = time.monotonic()
        try:
            written = self.converter.sync(file_path, target)
        except UnsupportedDirectionError as exc:
            print(f"⏭️ Skipped {file_path.name}: {exc}")
            return None
        elapsed_ms = (time.monotonic() - started) * 1000
        print(f"✅ Converted in {elapsed_ms:.0f}ms")
        return written

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def stop(self, path: Path | str) -> bool:
        key = Path(path).resolve()
        handle = self._watchers.pop(key, None)
        if handle is None:
            return False
        handle.close()
        print(f"🛑 Stopped watching: {key}")
        return True

    def stop_all(self) -> None:
        for key, handle in list(self._watchers.items()):
            handle.close()
            print(f"   Stopped: {key.name}")
        self._watchers.clear()
        self.gate.reset()
        print("✅ All watchers stopped")

    async def wait(self) -> None:
        """Block until every registered watch has finished or been stopped."""
        while self._watchers:
            tasks = [
                handle.task
                for handle in self._watchers.values()
                if handle.task is not None
            ]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
            for key, handle in list(self._watchers.items()):
                if handle.task is None or handle.task.done():
                    self._watchers.pop(key, None)
