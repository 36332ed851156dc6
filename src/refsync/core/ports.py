from typing import Protocol, Iterable, Any, runtime_checkable
from .model import NoteId, NoteBody, OutboundLink


class StorageStrategy(Protocol):
    """
    Flat store: one directory, files named <id>.md
    """

    def read_raw(self, id: NoteId) -> str | None:
        pass

    def write_raw(self, id: NoteId, contents: str) -> None:
        pass

    def list_all_ids(self) -> Iterable[NoteId]:
        pass


class ParserStrategy(Protocol):
    """
    Parse Markdown into headings and wiki links. Never fails on odd input.
    """

    def parse(self, text: str, id: NoteId) -> NoteBody:
        pass


class FrontmatterCodec(Protocol):
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        pass


class NoteCodec(Protocol):
    """
    Split a note file into frontmatter and body. Notes are written back as
    raw text, so there is no encoding side.
    """

    def decode_file(self, text: str, id: NoteId) -> tuple[dict[str, Any], str]:
        pass


@runtime_checkable
class LinkGraph(Protocol):
    """
    Resolved outbound links of a note, in the order they appear in it.

    Dangling links are reported with ``target=None``. Raises
    NoteNotFoundError for an id the graph does not know.
    """

    def outbound_links(self, id: NoteId) -> Iterable[OutboundLink]:
        pass
