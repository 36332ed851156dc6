"""Watch mode for refsync - resynchronize reference blocks on save."""

import json
import logging
import signal
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .core.model import NoteId
from .janitor import SyncReport, sync_vault
from .runtime import Runtime

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        vault_path: Path,
        on_batch: Callable[[set[str], set[str]], Any] | None,
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.vault_path = vault_path
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        self.changed: set[str] = set()
        self.deleted: set[str] = set()
        self.last_event_time = 0.0

    def _extract_id(self, path: Path) -> str | None:
        name = path.name
        # hidden, editor swap files and our own temp files
        if name.startswith(".") or name.endswith("~") or name.endswith(".swp"):
            return None
        if not name.endswith(".md"):
            return None
        return path.stem

    def _note_changed(self, src_path: Any) -> None:
        note_id = self._extract_id(Path(str(src_path)))
        if note_id:
            self.deleted.discard(note_id)
            self.changed.add(note_id)
            self.last_event_time = time.time()

    def _note_deleted(self, src_path: Any) -> None:
        note_id = self._extract_id(Path(str(src_path)))
        if note_id:
            self.changed.discard(note_id)
            self.deleted.add(note_id)
            self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._note_changed(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._note_changed(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._note_deleted(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # atomic saves land here: temp file renamed over the note
        if event.is_directory:
            return
        self._note_deleted(event.src_path)
        self._note_changed(event.dest_path)

    def check_and_flush(self) -> None:
        """Flush if the debounce period has elapsed."""
        if not (self.changed or self.deleted):
            return
        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        if not (self.changed or self.deleted):
            return
        changed = set(self.changed)
        deleted = set(self.deleted)
        self.changed.clear()
        self.deleted.clear()
        if self.on_batch:
            self.on_batch(changed, deleted)


def affected_notes(rt: Runtime, changed: set[NoteId], deleted: set[NoteId]) -> set[NoteId]:
    """
    Notes whose block may be stale after a batch: the changed notes, plus
    every note linking to a changed or deleted one (titles and existence of
    link targets feed into the block).
    """
    affected = set(changed)
    for nid in changed | deleted:
        affected.update(link.source for link in rt.index.links_in(nid))
    return {nid for nid in affected if rt.index.exists(nid)}


def sync_batch(rt: Runtime, changed: set[NoteId], deleted: set[NoteId]) -> SyncReport:
    rt.index.update_notes(changed, deleted)
    ids = sorted(affected_notes(rt, changed, deleted))
    return sync_vault(rt, ids, rebuild=False)


def watch_vault(
    rt: Runtime,
    debounce_ms: int | None = None,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch the vault and keep reference blocks in sync as notes are saved.

    Returns:
        Exit code
    """
    vault_path = rt.config.vault.root
    if debounce_ms is None:
        debounce_ms = rt.config.watch.debounce_ms

    if not vault_path.exists():
        print(f"Error: Vault not found: {vault_path}", file=sys.stderr)
        return 1

    initial = sync_vault(rt)
    if not quiet and not json_output:
        print(f"Initial sync: {len(initial.changed)} of {initial.scanned} notes updated", flush=True)

    running = True

    def handle_batch(changed: set[str], deleted: set[str]) -> None:
        start_time = time.time()
        try:
            report = sync_batch(rt, changed, deleted)
        except Exception as e:
            logger.exception("Batch failed")
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)
            return

        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {
                "type": "batch",
                "changed": sorted(changed),
                "deleted": sorted(deleted),
                "updated": [r.note_id for r in report.changed if r.written],
                "failed": [r.note_id for r in report.failed],
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            written = [r.note_id for r in report.changed if r.written]
            if written:
                print(f"Updated: {', '.join(written)} ({duration_ms}ms)", flush=True)
            for r in report.failed:
                print(f"Error: {r.note_id}: {r.error}", file=sys.stderr, flush=True)

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(vault_path, handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=False)

    if not quiet and not json_output:
        print(f"Watching {vault_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()
    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
