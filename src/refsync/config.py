"""Configuration loader for refsync.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.errors import ConfigError
from .core.positions import EOL_STYLES
from .references.synthesizer import PLACEMENTS

CONFIG_NAME = "refsync.toml"


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path


@dataclass
class ReferencesConfig:
    """How the autogenerated block is written."""
    placement: str = "after-title"
    include_extensions: bool = False
    eol: str = "auto"  # auto | lf | crlf

    @property
    def fixed_eol(self) -> str | None:
        """Configured end-of-line sequence; None means detect per note."""
        return EOL_STYLES.get(self.eol)


@dataclass
class WatchConfig:
    """Watch mode configuration."""
    debounce_ms: int = 150


@dataclass
class RefsyncConfig:
    """Complete refsync configuration."""
    vault: VaultConfig
    references: ReferencesConfig = field(default_factory=ReferencesConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> RefsyncConfig:
    """
    Load configuration from refsync.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/refsync.toml
    3. vault_path/refsync.toml

    Raises:
        ConfigError: a value is out of range
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                try:
                    toml_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"{path}: {e}") from e
            break

    vault_data = toml_data.get("vault", {})
    vault_config = VaultConfig(
        root=Path(vault_data.get("root", vault_path or Path("./vault"))),
    )

    refs_data = toml_data.get("references", {})
    refs_config = ReferencesConfig(
        placement=refs_data.get("placement", "after-title"),
        include_extensions=bool(refs_data.get("include_extensions", False)),
        eol=refs_data.get("eol", "auto"),
    )
    if refs_config.placement not in PLACEMENTS:
        raise ConfigError(
            f"references.placement must be one of {', '.join(PLACEMENTS)}, "
            f"got {refs_config.placement!r}"
        )
    if refs_config.eol != "auto" and refs_config.eol not in EOL_STYLES:
        raise ConfigError(f"references.eol must be auto, lf or crlf, got {refs_config.eol!r}")

    watch_data = toml_data.get("watch", {})
    watch_config = WatchConfig(
        debounce_ms=int(watch_data.get("debounce_ms", 150)),
    )

    return RefsyncConfig(
        vault=vault_config,
        references=refs_config,
        watch=watch_config,
    )
