from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta import MetaBag

NoteId = str


@dataclass(frozen=True)
class Range:
    start: int  # character offsets in the raw text
    end: int


@dataclass(frozen=True)
class Link:
    source: NoteId
    target: NoteId  # id part of the label, without "|alias" or "#anchor"
    label: str  # inner text of [[...]] exactly as written, stripped
    range: Range | None = None


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    range: Range


@dataclass
class NoteBody:
    raw: str
    headings: list[Heading] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)


@dataclass
class Note:
    id: NoteId
    meta: "MetaBag"
    body: NoteBody


# Link graph facts and reference definitions


@dataclass(frozen=True)
class OutboundLink:
    label: str
    target: NoteId | None  # None for a dangling link
    title: str | None = None


@dataclass(frozen=True)
class LinkTarget:
    display_slug: str  # label as it appears in "[label]: ..."
    target_reference: str  # percent-encoded
    title: str


LINK_REFERENCE_BEGIN = '[//begin]: # "Autogenerated link references for markdown compatibility"'
LINK_REFERENCE_END = '[//end]: # "Autogenerated link references"'


@dataclass(frozen=True)
class ReferenceBlock:
    entries: tuple[LinkTarget, ...] = ()
    begin_marker: str = LINK_REFERENCE_BEGIN
    end_marker: str = LINK_REFERENCE_END


# Editor positions and edits


@dataclass(frozen=True, order=True)
class Position:
    line: int  # 0-based
    column: int  # characters into the line


@dataclass(frozen=True)
class TextRange:
    start: Position
    end: Position

    @classmethod
    def create(
        cls, start_line: int, start_column: int, end_line: int, end_column: int
    ) -> "TextRange":
        return cls(Position(start_line, start_column), Position(end_line, end_column))

    @classmethod
    def empty_at(cls, position: Position) -> "TextRange":
        return cls(position, position)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def to_dict(self) -> dict:
        return {
            "start": {"line": self.start.line, "column": self.start.column},
            "end": {"line": self.end.line, "column": self.end.column},
        }


@dataclass(frozen=True)
class TextEdit:
    range: TextRange
    new_text: str

    def to_dict(self) -> dict:
        return {"range": self.range.to_dict(), "newText": self.new_text}
