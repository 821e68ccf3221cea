"""Configuration loader for hashnotes.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.persistence import DEFAULT_DEBOUNCE_MS

CONFIG_NAME = "hashnotes.toml"
DEFAULT_ROOT = Path(".hashnotes")


@dataclass
class StorageConfig:
    """Where notes and the theme preference live."""
    root: Path


@dataclass
class PersistenceConfig:
    """Write-through settings."""
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


@dataclass
class IdConfig:
    """ID generation configuration."""
    prefix: str = "note"


@dataclass
class ApiConfig:
    """Local JSON API configuration."""
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class HashnotesConfig:
    """Complete hashnotes configuration."""
    storage: StorageConfig
    persistence: PersistenceConfig
    id: IdConfig
    api: ApiConfig


def load_config(config_path: Path | None = None, root: Path | None = None) -> HashnotesConfig:
    """
    Load configuration from hashnotes.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/hashnotes.toml
    3. root/hashnotes.toml

    Args:
        config_path: Explicit path to config file
        root: Storage root for fallback search

    Returns:
        HashnotesConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if root:
        search_paths.append(root / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    storage_data = toml_data.get("storage", {})
    storage_config = StorageConfig(
        root=Path(storage_data.get("root", root or DEFAULT_ROOT)),
    )

    persistence_data = toml_data.get("persistence", {})
    persistence_config = PersistenceConfig(
        debounce_ms=int(persistence_data.get("debounce_ms", DEFAULT_DEBOUNCE_MS)),
    )

    id_data = toml_data.get("id", {})
    id_config = IdConfig(
        prefix=str(id_data.get("prefix", "note")),
    )

    api_data = toml_data.get("api", {})
    api_config = ApiConfig(
        host=api_data.get("host", "127.0.0.1"),
        port=int(api_data.get("port", 8765)),
    )

    return HashnotesConfig(
        storage=storage_config,
        persistence=persistence_config,
        id=id_config,
        api=api_config,
    )
