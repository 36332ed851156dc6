import logging
from collections import defaultdict
from collections.abc import Iterable

from ..core.errors import NoteNotFoundError
from ..core.model import Link, Note, NoteId, OutboundLink
from ..core.ports import LinkGraph
from ..core.vault import Vault

logger = logging.getLogger(__name__)


def note_title(note: Note) -> str:
    """Frontmatter title, else first heading, else the id."""
    title = note.meta.title()
    if title:
        return title
    if note.body.headings:
        return note.body.headings[0].text
    return note.id


class InMemoryIndex(LinkGraph):
    """
    Workspace link graph built from a Vault. Derived state only; safe to
    rebuild at any time.
    """

    def __init__(self, vault: Vault):
        self.vault = vault
        self._links_out: dict[NoteId, list[Link]] = {}
        self._links_in: dict[NoteId, list[Link]] = defaultdict(list)
        self._titles: dict[NoteId, str] = {}

    def rebuild(self) -> None:
        self._links_out.clear()
        self._links_in.clear()
        self._titles.clear()
        for nid in self.vault.list_ids():
            self._load(nid)
        logger.debug("Indexed %d notes", len(self._titles))

    def update_notes(self, changed: Iterable[NoteId], deleted: Iterable[NoteId]) -> dict[str, int]:
        counts = {"updated": 0, "removed": 0}
        for nid in deleted:
            if self._forget(nid):
                counts["removed"] += 1
        for nid in changed:
            self._forget(nid)
            if self._load(nid):
                counts["updated"] += 1
        return counts

    def _load(self, nid: NoteId) -> bool:
        note = self.vault.get(nid)
        if note is None:
            return False
        self._titles[nid] = note_title(note)
        self._links_out[nid] = list(note.body.links)
        for link in note.body.links:
            self._links_in[link.target].append(link)
        return True

    def _forget(self, nid: NoteId) -> bool:
        if nid not in self._titles:
            return False
        for link in self._links_out.pop(nid, []):
            incoming = self._links_in.get(link.target, [])
            if link in incoming:
                incoming.remove(link)
        del self._titles[nid]
        return True

    def exists(self, id: NoteId) -> bool:
        return id in self._titles

    def title(self, id: NoteId) -> str | None:
        return self._titles.get(id)

    def links_in(self, id: NoteId) -> list[Link]:
        return list(self._links_in.get(id, []))

    def outbound_links(self, id: NoteId) -> list[OutboundLink]:
        if id not in self._links_out:
            raise NoteNotFoundError(id)
        out = []
        for link in self._links_out[id]:
            target = link.target
            if self.exists(target):
                out.append(OutboundLink(label=link.label, target=target, title=self._titles[target]))
            else:
                out.append(OutboundLink(label=link.label, target=None))
        return out
