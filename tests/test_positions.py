"""Tests for line/column mapping."""

import pytest

from refsync.core.model import Position, TextEdit, TextRange
from refsync.core.positions import LineMap, apply_edit, detect_eol, normalize_eol


def test_detect_eol():
    assert detect_eol("a\nb") == "\n"
    assert detect_eol("a\r\nb\r\n") == "\r\n"
    assert detect_eol("a\rb") == "\r"
    assert detect_eol("single line") == "\n"
    assert detect_eol("", default="\r\n") == "\r\n"


def test_normalize_eol():
    assert normalize_eol("a\r\nb\rc\n") == "a\nb\nc\n"


def test_line_map_lines_follow_the_given_eol():
    lines = LineMap("one\r\ntwo\r\n", "\r\n")
    assert lines.lines == ["one", "two", ""]
    assert lines.last_line == 2
    assert lines.end == Position(2, 0)


def test_offset_at():
    text = "# Title\n\nbody line\n"
    lines = LineMap(text, "\n")
    assert lines.offset_at(Position(2, 5)) == text.index("line")
    assert lines.offset_at(Position(3, 0)) == len(text)


def test_offset_at_clamps_column_and_rejects_bad_line():
    lines = LineMap("ab\ncd", "\n")
    assert lines.offset_at(Position(0, 99)) == 2
    with pytest.raises(ValueError):
        lines.offset_at(Position(5, 0))


def test_line_range():
    lines = LineMap("a\nbb\nccc\n", "\n")
    assert lines.line_range(1, 2) == TextRange.create(1, 0, 2, 3)
    assert lines.line_range(3, 3) == TextRange.create(3, 0, 3, 0)


def test_apply_edit_insert_replace_delete():
    text = "a\nb\nc"
    insert = TextEdit(TextRange.create(1, 0, 1, 0), "x\n")
    assert apply_edit(text, insert, "\n") == "a\nx\nb\nc"

    replace = TextEdit(TextRange.create(1, 0, 2, 1), "B")
    assert apply_edit(text, replace, "\n") == "a\nB"

    delete = TextEdit(TextRange.create(0, 0, 1, 1), "")
    assert apply_edit(text, delete, "\n") == "\nc"


def test_apply_edit_none_is_identity():
    assert apply_edit("unchanged", None, "\n") == "unchanged"


def test_apply_edit_crlf():
    text = "a\r\nb\r\n"
    edit = TextEdit(TextRange.create(1, 0, 1, 1), "B")
    assert apply_edit(text, edit, "\r\n") == "a\r\nB\r\n"


def test_empty_range():
    rng = TextRange.empty_at(Position(3, 0))
    assert rng.is_empty
    assert not TextRange.create(0, 0, 0, 1).is_empty
    assert rng.to_dict() == {"start": {"line": 3, "column": 0}, "end": {"line": 3, "column": 0}}
