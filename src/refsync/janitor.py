"""Applying reference block edits to the notes of a vault."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .core.errors import NoteNotFoundError, RefsyncError
from .core.model import NoteId, TextEdit
from .core.positions import apply_edit, detect_eol
from .references import generate_link_references
from .runtime import Runtime

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome for one note."""

    note_id: NoteId
    edit: TextEdit | None
    written: bool = False
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.edit is not None


@dataclass
class SyncReport:
    """Outcome for a batch of notes."""

    results: list[SyncResult] = field(default_factory=list)

    @property
    def scanned(self) -> int:
        return len(self.results)

    @property
    def changed(self) -> list[SyncResult]:
        return [r for r in self.results if r.changed]

    @property
    def unchanged(self) -> list[SyncResult]:
        return [r for r in self.results if not r.changed and r.error is None]

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if r.error is not None]

    def counts(self) -> dict[str, int]:
        return {
            "scanned": self.scanned,
            "changed": len(self.changed),
            "unchanged": len(self.unchanged),
            "failed": len(self.failed),
        }


def note_eol(rt: Runtime, text: str) -> str:
    return rt.config.references.fixed_eol or detect_eol(text)


def compute_edit(
    rt: Runtime,
    note_id: NoteId,
    text: str | None = None,
    eol: str | None = None,
    force: bool = False,
) -> TextEdit | None:
    """
    Edit for ``note_id``. ``text`` defaults to the stored note, so an editor
    can pass its unsaved buffer instead.
    """
    if text is None:
        text = rt.vault.read_text(note_id)
        if text is None:
            raise NoteNotFoundError(note_id)
    refs = rt.config.references
    return generate_link_references(
        note_id,
        text,
        eol or note_eol(rt, text),
        rt.index,
        force,
        include_extensions=refs.include_extensions,
        placement=refs.placement,
    )


def sync_note(
    rt: Runtime, note_id: NoteId, force: bool = False, dry_run: bool = False
) -> SyncResult:
    """Bring one stored note up to date; nothing is written on dry runs."""
    text = rt.vault.read_text(note_id)
    if text is None:
        raise NoteNotFoundError(note_id)
    eol = note_eol(rt, text)
    edit = compute_edit(rt, note_id, text=text, eol=eol, force=force)
    if edit is None or dry_run:
        return SyncResult(note_id=note_id, edit=edit)

    rt.vault.write_text(note_id, apply_edit(text, edit, eol))
    logger.info("Updated link references in %s", note_id)
    return SyncResult(note_id=note_id, edit=edit, written=True)


def sync_vault(
    rt: Runtime,
    ids: Iterable[NoteId] | None = None,
    force: bool = False,
    dry_run: bool = False,
    rebuild: bool = True,
) -> SyncReport:
    """
    Run sync_note over ``ids`` (every note by default). A failing note is
    recorded in the report and the run goes on.
    """
    if rebuild:
        rt.index.rebuild()

    report = SyncReport()
    for nid in ids if ids is not None else list(rt.vault.list_ids()):
        try:
            result = sync_note(rt, nid, force=force, dry_run=dry_run)
        except (RefsyncError, OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", nid, e)
            result = SyncResult(note_id=nid, edit=None, error=str(e))
        report.results.append(result)
    return report
