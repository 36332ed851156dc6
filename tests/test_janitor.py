"""Tests for syncing reference blocks of stored notes."""

import pytest

from refsync.core.errors import NoteNotFoundError
from refsync.core.model import LINK_REFERENCE_BEGIN as BEGIN
from refsync.core.model import LINK_REFERENCE_END as END
from refsync.janitor import compute_edit, sync_note, sync_vault


def _write(vault_path, name, text, newline="\n"):
    with open(vault_path / f"{name}.md", "w", encoding="utf-8", newline="") as f:
        f.write(text.replace("\n", newline))


def _read(vault_path, name):
    with open(vault_path / f"{name}.md", encoding="utf-8", newline="") as f:
        return f.read()


@pytest.fixture
def small_vault(temp_vault):
    rt, vault_path = temp_vault
    _write(vault_path, "index", "# Index\n\nSee [[first]] and [[second]].\n")
    _write(vault_path, "first", "---\ntitle: First Document\n---\n# First\n\nNo links.\n")
    _write(vault_path, "second", "# Second Document\n\n[[first]]\n")
    return rt, vault_path


def test_sync_vault_writes_blocks(small_vault):
    rt, vault_path = small_vault

    report = sync_vault(rt)

    assert report.counts() == {"scanned": 3, "changed": 2, "unchanged": 1, "failed": 0}
    assert _read(vault_path, "index") == "\n".join([
        "# Index",
        "",
        BEGIN,
        '[first]: first "First Document"',
        '[second]: second "Second Document"',
        END,
        "",
        "See [[first]] and [[second]].",
        "",
    ])
    assert _read(vault_path, "first") == "---\ntitle: First Document\n---\n# First\n\nNo links.\n"


def test_second_run_changes_nothing(small_vault):
    rt, vault_path = small_vault
    sync_vault(rt)
    before = {name: _read(vault_path, name) for name in ("index", "first", "second")}

    report = sync_vault(rt)

    assert report.changed == []
    assert {name: _read(vault_path, name) for name in before} == before


def test_force_reports_every_note_with_links(small_vault):
    rt, _ = small_vault
    sync_vault(rt)
    report = sync_vault(rt, force=True)
    assert sorted(r.note_id for r in report.changed) == ["index", "second"]


def test_dry_run_does_not_write(small_vault):
    rt, vault_path = small_vault
    before = _read(vault_path, "index")

    report = sync_vault(rt, ["index"], dry_run=True)

    assert [r.note_id for r in report.changed] == ["index"]
    assert not report.results[0].written
    assert _read(vault_path, "index") == before


def test_crlf_notes_keep_their_line_endings(temp_vault):
    rt, vault_path = temp_vault
    _write(vault_path, "a", "# A\n\n[[b]]\n", newline="\r\n")
    _write(vault_path, "b", "# B\n")

    sync_vault(rt)

    text = _read(vault_path, "a")
    assert f"\r\n{BEGIN}\r\n" in text
    assert "\n" not in text.replace("\r\n", "")


def test_configured_eol_wins(temp_vault):
    rt, vault_path = temp_vault
    rt.config.references.eol = "crlf"
    _write(vault_path, "a", "[[b]]")
    _write(vault_path, "b", "# B\n")

    sync_vault(rt, ["a"])

    assert _read(vault_path, "a") == f'{BEGIN}\r\n[b]: b "B"\r\n{END}\r\n\r\n[[b]]'


def test_removed_links_remove_the_block(small_vault):
    rt, vault_path = small_vault
    sync_vault(rt)
    _write(vault_path, "second", _read(vault_path, "second").replace("[[first]]", "nothing"))

    sync_vault(rt, ["second"])

    assert BEGIN not in _read(vault_path, "second")


def test_end_placement_and_extensions(temp_vault):
    rt, vault_path = temp_vault
    rt.config.references.placement = "end"
    rt.config.references.include_extensions = True
    _write(vault_path, "a", "# A\n\n[[my note]]\n")
    _write(vault_path, "my note", "# Mine\n")

    sync_vault(rt, ["a"])

    assert _read(vault_path, "a") == (
        f'# A\n\n[[my note]]\n\n{BEGIN}\n[my note]: my%20note.md "Mine"\n{END}'
    )


def test_missing_note_is_reported_not_raised(small_vault):
    rt, _ = small_vault
    report = sync_vault(rt, ["index", "ghost"])
    assert [r.note_id for r in report.failed] == ["ghost"]
    assert report.failed[0].error == "Note ghost not found"


def test_sync_note_missing(small_vault):
    rt, _ = small_vault
    rt.index.rebuild()
    with pytest.raises(NoteNotFoundError):
        sync_note(rt, "ghost")


def test_compute_edit_for_unsaved_buffer(small_vault):
    rt, _ = small_vault
    rt.index.rebuild()

    edit = compute_edit(rt, "first", text="# First\n\nNow [[second]]\n")

    # the stored note has no links, the buffer text is still what gets edited
    assert edit is None

    edit = compute_edit(rt, "index", text="")
    assert edit is not None
    assert edit.new_text.startswith(BEGIN)
