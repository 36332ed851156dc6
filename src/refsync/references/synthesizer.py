"""Edit computation for the autogenerated reference block."""

import logging
import re

from ..core.errors import ConfigError
from ..core.model import NoteId, Position, TextEdit, TextRange
from ..core.ports import LinkGraph
from ..core.positions import LineMap, normalize_eol
from .formatter import format_block
from .graph import resolve_outbound_links
from .locator import NotFound, locate_block

logger = logging.getLogger(__name__)

PLACEMENTS = ("after-title", "end")

ATX_HEADING_RE = re.compile(r"^ {0,3}#{1,6}(?:\s+|$)")
FRONTMATTER_FENCE = "---"


def _same_block(found: str, expected: str) -> bool:
    return normalize_eol(found).rstrip("\n") == normalize_eol(expected).rstrip("\n")


def _title_region_end(lines: LineMap) -> int | None:
    """Last line of the leading frontmatter and title heading, if any."""
    anchor = None
    start = 0
    if lines.lines[0].rstrip() == FRONTMATTER_FENCE:
        for j in range(1, len(lines)):
            if lines.lines[j].rstrip() in (FRONTMATTER_FENCE, "..."):
                anchor = j
                start = j + 1
                break

    first = start
    while first < len(lines) and not lines.lines[first].strip():
        first += 1
    if first < len(lines) and ATX_HEADING_RE.match(lines.lines[first]):
        anchor = first
    return anchor


def _insert_after_title(lines: LineMap, block: str) -> TextEdit:
    eol = lines.eol
    anchor = _title_region_end(lines)

    if anchor is None:
        origin = TextRange.empty_at(Position(0, 0))
        if not lines.text:
            return TextEdit(origin, block)
        gap = eol + eol if lines.lines[0].strip() else eol
        return TextEdit(origin, block + gap)

    following = anchor + 1
    if following < len(lines):
        gap = eol + eol if lines.lines[following].strip() else eol
        return TextEdit(TextRange.empty_at(Position(following, 0)), eol + block + gap)

    # title is the last line and has no eol after it
    return TextEdit(TextRange.empty_at(lines.end_of_line(anchor)), eol + eol + block)


def _insert_at_end(lines: LineMap, block: str) -> TextEdit:
    eol = lines.eol
    at_end = TextRange.empty_at(lines.end)
    if not lines.text:
        return TextEdit(at_end, block)

    last = lines.lines[lines.last_line]
    if last.strip():
        prefix = eol + eol
    elif last == "" and (lines.last_line == 0 or not lines.lines[lines.last_line - 1].strip()):
        prefix = ""
    else:
        prefix = eol
    return TextEdit(at_end, prefix + block)


def generate_link_references(
    note_id: NoteId,
    note_text: str,
    eol: str,
    graph: LinkGraph,
    force: bool = False,
    *,
    include_extensions: bool = False,
    placement: str = "after-title",
) -> TextEdit | None:
    """
    Edit that brings the autogenerated block of a note up to date.

    Args:
        note_id: Note whose outbound links are listed
        note_text: Current text of the note, frontmatter included
        eol: End-of-line sequence of ``note_text``
        graph: Workspace link graph
        force: Rewrite the block even when it is already up to date
        include_extensions: Append ".md" to target references
        placement: Where a missing block goes, "after-title" or "end"

    Returns:
        The edit to apply, or None when the note is already correct.

    Raises:
        NoteNotFoundError: the graph does not know ``note_id``
    """
    if placement not in PLACEMENTS:
        raise ConfigError(f"Unknown placement {placement!r}, expected one of {PLACEMENTS}")

    targets = resolve_outbound_links(note_id, graph, include_extensions=include_extensions)
    expected = format_block(targets, eol)
    located = locate_block(note_text, eol)

    if isinstance(located, NotFound):
        if not expected:
            return None
        lines = LineMap(note_text, eol)
        logger.debug("%s: inserting block with %d entries", note_id, len(targets))
        if placement == "end":
            return _insert_at_end(lines, expected)
        return _insert_after_title(lines, expected)

    if not expected:
        logger.debug("%s: removing block, no resolvable links left", note_id)
        return TextEdit(located.range, "")

    if not force and _same_block(located.content, expected):
        return None

    logger.debug("%s: replacing block with %d entries", note_id, len(targets))
    return TextEdit(located.range, expected)
