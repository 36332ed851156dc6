"""Shared fixtures for refsync tests."""

import tempfile
from pathlib import Path

import pytest

from refsync.core.errors import NoteNotFoundError
from refsync.core.model import OutboundLink
from refsync.runtime import build_runtime


class FakeGraph:
    """LinkGraph backed by a plain dict; no files, no parser."""

    def __init__(self, links: dict[str, list[OutboundLink]]):
        self.links = links

    def outbound_links(self, id: str) -> list[OutboundLink]:
        if id not in self.links:
            raise NoteNotFoundError(id)
        return list(self.links[id])


def link(label: str, target: str | None = "", title: str | None = None) -> OutboundLink:
    """Resolved link to ``label`` by default; pass target=None for a dangling one."""
    if target == "":
        target = label
    return OutboundLink(label=label, target=target, title=title)


@pytest.fixture
def temp_vault():
    """Empty vault directory plus a runtime wired to it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault_path = Path(tmpdir) / "vault"
        vault_path.mkdir()
        rt = build_runtime(vault_path=vault_path, config_path=Path(tmpdir) / "none.toml")
        yield rt, vault_path
