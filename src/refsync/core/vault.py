from collections.abc import Iterable

from .meta import MetaBag
from .model import Note, NoteId
from .ports import NoteCodec, ParserStrategy, StorageStrategy


class Vault:
    def __init__(
        self, storage: StorageStrategy, parser: ParserStrategy, codec: NoteCodec
    ):
        self.storage = storage
        self.parser = parser
        self.codec = codec

    def get(self, id: NoteId) -> Note | None:
        raw = self.storage.read_raw(id)
        if raw is None:
            return None
        meta_partial, body_text = self.codec.decode_file(raw, id)
        meta = MetaBag(meta_partial)
        body = self.parser.parse(body_text, id)
        return Note(id=id, meta=meta, body=body)

    def read_text(self, id: NoteId) -> str | None:
        # full file contents, frontmatter included; edits are computed on this
        return self.storage.read_raw(id)

    def write_text(self, id: NoteId, contents: str) -> None:
        self.storage.write_raw(id, contents)

    def list_ids(self) -> Iterable[NoteId]:
        return self.storage.list_all_ids()
