"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.markdown_parser import MarkdownParser
from .adapters.resolver_index import InMemoryIndex
from .adapters.yaml_codec import MarkdownNoteCodec, YamlFrontmatter
from .config import RefsyncConfig, load_config
from .core.vault import Vault


@dataclass
class Runtime:
    """Container for all wired components."""
    vault: Vault
    index: InMemoryIndex
    config: RefsyncConfig


def build_vault(root: Path) -> Vault:
    storage = FsStorage(root)
    codec = MarkdownNoteCodec(YamlFrontmatter())
    parser = MarkdownParser()
    return Vault(storage, parser, codec)


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault. The index starts empty."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    if vault_path is None:
        vault_path = config.vault.root
    config.vault.root = vault_path

    vault = build_vault(vault_path)
    index = InMemoryIndex(vault)

    return Runtime(vault=vault, index=index, config=config)
