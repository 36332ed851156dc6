"""Outbound links of a note as reference definition targets."""

import logging
from urllib.parse import quote

from ..core.model import LinkTarget, NoteId
from ..core.ports import LinkGraph

logger = logging.getLogger(__name__)


def encode_reference(path: str) -> str:
    """Percent-encode a link destination; ``/`` separators are kept."""
    return quote(path, safe="/")


def resolve_outbound_links(
    note_id: NoteId, graph: LinkGraph, include_extensions: bool = False
) -> list[LinkTarget]:
    """
    Distinct resolvable outbound links of ``note_id``, first appearance first.

    Dangling links are dropped. Duplicates are detected by label, so
    ``[[a]]`` and ``[[a|Alias]]`` give two entries while a repeated ``[[a]]``
    gives one. Unknown ``note_id`` raises NoteNotFoundError from the graph.
    """
    targets: list[LinkTarget] = []
    seen: set[str] = set()
    for link in graph.outbound_links(note_id):
        if link.target is None:
            logger.debug("%s: skipping unresolved link [[%s]]", note_id, link.label)
            continue
        if link.label in seen:
            continue
        seen.add(link.label)
        path = f"{link.target}.md" if include_extensions else link.target
        targets.append(
            LinkTarget(
                display_slug=link.label,
                target_reference=encode_reference(path),
                title=link.title or link.target,
            )
        )
    return targets
