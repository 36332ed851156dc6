"""Line/column mapping over note text.

Every range refsync hands out is computed from one split of the note text on
the note's own end-of-line sequence, so a document using ``"\\r\\n"`` gets
the same line numbers an editor shows for it.
"""

from .model import Position, TextEdit, TextRange

EOL_STYLES = {"lf": "\n", "crlf": "\r\n"}


def detect_eol(text: str, default: str = "\n") -> str:
    """Return the first end-of-line sequence used in ``text``."""
    i = text.find("\n")
    if i == -1:
        return "\r" if "\r" in text else default
    if i > 0 and text[i - 1] == "\r":
        return "\r\n"
    return "\n"


def normalize_eol(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


class LineMap:
    """Lines of a text plus position -> offset conversion."""

    def __init__(self, text: str, eol: str):
        if not eol:
            raise ValueError("eol must be a non-empty string")
        self.text = text
        self.eol = eol
        self.lines = text.split(eol)
        self._starts = []
        offset = 0
        for line in self.lines:
            self._starts.append(offset)
            offset += len(line) + len(eol)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def last_line(self) -> int:
        return len(self.lines) - 1

    def end_of_line(self, line: int) -> Position:
        return Position(line, len(self.lines[line]))

    @property
    def end(self) -> Position:
        return self.end_of_line(self.last_line)

    def offset_at(self, position: Position) -> int:
        if not 0 <= position.line < len(self.lines):
            raise ValueError(f"Line {position.line} outside document of {len(self.lines)} lines")
        column = min(max(position.column, 0), len(self.lines[position.line]))
        return self._starts[position.line] + column

    def line_range(self, first: int, last: int) -> TextRange:
        """Whole lines ``first``..``last`` inclusive, without the final eol."""
        return TextRange(Position(first, 0), self.end_of_line(last))


def apply_edit(text: str, edit: TextEdit | None, eol: str) -> str:
    """Apply a single range replacement the way an editor would."""
    if edit is None:
        return text
    lines = LineMap(text, eol)
    start = lines.offset_at(edit.range.start)
    end = lines.offset_at(edit.range.end)
    if end < start:
        raise ValueError("Edit range ends before it starts")
    return text[:start] + edit.new_text + text[end:]
