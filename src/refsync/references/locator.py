"""Finding the autogenerated reference block in note text.

Two shapes are recognized:

* the sentinel form, delimited by the begin/end marker lines;
* the implicit form of notes written before the markers existed: a trailing
  run of definitions that all look generated and all belong to wiki links
  of the note.

Reference definitions outside those shapes are user content and are never
reported.
"""

import re
from dataclasses import dataclass
from typing import Union

from ..core.model import LINK_REFERENCE_BEGIN, LINK_REFERENCE_END, TextRange
from ..core.positions import LineMap

DEFINITION_RE = re.compile(
    r"^ {0,3}\[(?:[^\]\\]|\\.)+\]:[ \t]*(?:<[^>\n]*>|\S+)"
    r"(?:[ \t]+(?:\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'|\((?:[^)\\]|\\.)*\)))?\s*$"
)
GENERATED_ENTRY_RE = re.compile(r'^\[((?:[^\]\\]|\\.)+)\]: (\S+) "((?:[^"\\]|\\.)*)"\s*$')
SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
BACKSLASH_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class FoundBySentinel:
    range: TextRange
    content: str


@dataclass(frozen=True)
class FoundImplicit:
    range: TextRange
    content: str


LocateResult = Union[NotFound, FoundBySentinel, FoundImplicit]

NOT_FOUND = NotFound()


def is_definition(line: str) -> bool:
    return DEFINITION_RE.match(line) is not None


def _is_marker(line: str, marker: str) -> bool:
    return line.rstrip() == marker


def _is_generated_entry(line: str, preceding_text: str) -> bool:
    m = GENERATED_ENTRY_RE.match(line)
    if m is None:
        return False
    label = BACKSLASH_ESCAPE_RE.sub(r"\1", m.group(1))
    target = m.group(2)
    if target.startswith("#") or SCHEME_RE.match(target):
        return False
    wiki_link = re.compile(r"\[\[\s*" + re.escape(label) + r"\s*\]\]")
    return wiki_link.search(preceding_text) is not None


def _sentinel_block(lines: LineMap, begin: int) -> FoundBySentinel | None:
    end = None
    for j in range(begin + 1, len(lines)):
        if _is_marker(lines.lines[j], LINK_REFERENCE_END):
            end = j
            break
        if _is_marker(lines.lines[j], LINK_REFERENCE_BEGIN):
            break

    if end is not None:
        if not all(is_definition(ln) for ln in lines.lines[begin + 1 : end]):
            return None
    else:
        end = begin
        while (
            end + 1 < len(lines)
            and is_definition(lines.lines[end + 1])
            and not _is_marker(lines.lines[end + 1], LINK_REFERENCE_BEGIN)
        ):
            end += 1

    return FoundBySentinel(
        range=lines.line_range(begin, end),
        content=lines.eol.join(lines.lines[begin : end + 1]),
    )


def _implicit_block(lines: LineMap) -> FoundImplicit | None:
    last = lines.last_line
    while last >= 0 and not lines.lines[last].strip():
        last -= 1
    if last < 0 or not is_definition(lines.lines[last]):
        return None

    first = last
    while first > 0 and is_definition(lines.lines[first - 1]):
        first -= 1

    preceding = lines.eol.join(lines.lines[:first])
    if not all(_is_generated_entry(ln, preceding) for ln in lines.lines[first : last + 1]):
        return None

    return FoundImplicit(
        range=lines.line_range(first, last),
        content=lines.eol.join(lines.lines[first : last + 1]),
    )


def locate_block(note_text: str, eol: str = "\n") -> LocateResult:
    """
    Locate the autogenerated block of ``note_text``.

    The first well-formed sentinel block wins; a sentinel block whose inner
    lines are not all definitions is skipped. The implicit form is only
    considered when the note has no begin marker at all.
    """
    lines = LineMap(note_text, eol)
    begins = [i for i, ln in enumerate(lines.lines) if _is_marker(ln, LINK_REFERENCE_BEGIN)]
    for begin in begins:
        found = _sentinel_block(lines, begin)
        if found is not None:
            return found
    if begins:
        return NOT_FOUND
    return _implicit_block(lines) or NOT_FOUND
