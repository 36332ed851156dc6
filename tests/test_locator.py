"""Tests for finding the autogenerated block."""

from refsync.core.model import LINK_REFERENCE_BEGIN as BEGIN
from refsync.core.model import LINK_REFERENCE_END as END
from refsync.core.model import TextRange
from refsync.references.locator import (
    FoundBySentinel,
    FoundImplicit,
    NotFound,
    is_definition,
    locate_block,
)


def _doc(*lines: str, eol: str = "\n") -> str:
    return eol.join(lines)


def test_plain_note_has_no_block():
    assert isinstance(locate_block("# Title\n\nJust text.\n"), NotFound)


def test_empty_text():
    assert isinstance(locate_block(""), NotFound)


def test_sentinel_block():
    text = _doc("# First", "", "[[a]]", "", BEGIN, '[a]: a "A"', END, "")
    found = locate_block(text)
    assert isinstance(found, FoundBySentinel)
    assert found.range == TextRange.create(4, 0, 6, 42)
    assert found.content == _doc(BEGIN, '[a]: a "A"', END)


def test_sentinel_block_crlf():
    text = _doc("# First", "", BEGIN, '[a]: a "A"', END, "", eol="\r\n")
    found = locate_block(text, "\r\n")
    assert isinstance(found, FoundBySentinel)
    assert found.range == TextRange.create(2, 0, 4, len(END))
    assert found.content == _doc(BEGIN, '[a]: a "A"', END, eol="\r\n")


def test_marker_with_trailing_whitespace():
    text = _doc(BEGIN + "  ", '[a]: a "A"', END + " ")
    found = locate_block(text)
    assert isinstance(found, FoundBySentinel)
    assert found.range == TextRange.create(0, 0, 2, len(END) + 1)


def test_missing_end_marker_runs_through_last_definition():
    text = _doc("# T", "", BEGIN, '[a]: a "A"', '[b]: b "B"', "", "More text", "")
    found = locate_block(text)
    assert isinstance(found, FoundBySentinel)
    assert found.range == TextRange.create(2, 0, 4, len('[b]: b "B"'))


def test_malformed_block_is_absent():
    text = _doc("# T", "", BEGIN, "this is not a definition", END, "")
    assert isinstance(locate_block(text), NotFound)


def test_malformed_block_is_skipped_for_a_later_good_one():
    text = _doc(BEGIN, "oops", END, "", BEGIN, '[a]: a "A"', END)
    found = locate_block(text)
    assert isinstance(found, FoundBySentinel)
    assert found.range.start.line == 4


def test_manual_definitions_outside_markers_are_not_reported():
    text = _doc(
        "# T",
        "",
        "[[a]] and [docs]",
        "",
        BEGIN,
        '[a]: a "A"',
        END,
        "",
        '[docs]: https://example.com "Docs"',
        "",
    )
    found = locate_block(text)
    assert isinstance(found, FoundBySentinel)
    assert found.range.end.line == 6


def test_implicit_legacy_block():
    text = _doc("# T", "", "See [[a]] and [[b c]].", "", '[a]: a "A"', '[b c]: b%20c "B C"', "", "")
    found = locate_block(text)
    assert isinstance(found, FoundImplicit)
    assert found.range == TextRange.create(4, 0, 5, len('[b c]: b%20c "B C"'))


def test_manual_definitions_with_external_targets_are_not_implicit():
    text = _doc("# T", "", "Read [the docs].", "", '[the docs]: https://example.com "Docs"', "")
    assert isinstance(locate_block(text), NotFound)


def test_manual_definitions_without_wiki_links_are_not_implicit():
    text = _doc("# T", "", "Read [guide].", "", '[guide]: guide "Guide"', "")
    assert isinstance(locate_block(text), NotFound)


def test_mixed_trailing_run_is_not_implicit():
    text = _doc("# T", "", "[[a]] [b]", "", '[a]: a "A"', "[b]: <b.md>", "")
    assert isinstance(locate_block(text), NotFound)


def test_begin_marker_disables_implicit_detection():
    text = _doc("[[a]]", "", BEGIN, "garbage", END, "", '[a]: a "A"')
    assert isinstance(locate_block(text), NotFound)


def test_is_definition():
    assert is_definition('[a]: a "A"')
    assert is_definition("[a]: https://example.com")
    assert is_definition("[a]: <x y> 'title'")
    assert is_definition("[a]: a (title)")
    assert is_definition(BEGIN)
    assert not is_definition("[a] not a definition")
    assert not is_definition("")


def test_implicit_block_with_escaped_label():
    text = _doc("# T", "", "See [[a]b]].", "", '[a\\]b]: a%5Db "A"', "")
    found = locate_block(text)
    assert isinstance(found, FoundImplicit)
    assert found.range.start.line == 4


def test_sentinel_block_with_escaped_entries():
    entries = ['[a\\]b]: a%5Db "A"', '[c]: c "C:\\\\"']
    found = locate_block(_doc(BEGIN, *entries, END))
    assert isinstance(found, FoundBySentinel)
    assert found.range == TextRange.create(0, 0, 3, len(END))
