"""User configuration management.

Persists user preferences to ~/.config/dep-migrate/config.toml
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# tomli-w for writing (tomllib is read-only)
import tomli_w

# tomllib is stdlib in 3.11+, use tomli as fallback for 3.10
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found,no-redef]

from dep_migrate.storage import atomic_write_text

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "dep-migrate"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_SEARCH_URL = "https://api.npms.io/v2/search"
DEFAULT_CACHE_FILE = Path.home() / ".cache" / "dep-migrate" / "cache.json"

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class Config:
    """User configuration settings."""

    registry_url: str = DEFAULT_REGISTRY_URL
    search_url: str = DEFAULT_SEARCH_URL
    cache_file: Path = DEFAULT_CACHE_FILE
    # Seconds; 0 disables the timeout
    request_timeout: float = 0.0
    log_level: str = "warning"

    # File path for this config (not persisted)
    _path: Path = field(default=DEFAULT_CONFIG_PATH, repr=False, compare=False)

    @property
    def timeout(self) -> float | None:
        """Timeout value for httpx, None when disabled."""
        return self.request_timeout if self.request_timeout > 0 else None

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "registry_url": self.registry_url,
            "search_url": self.search_url,
            "cache_file": str(self.cache_file),
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> Config:
        """Create config from dictionary."""
        log_level = str(data.get("log_level", "warning")).lower()
        if log_level not in LOG_LEVELS:
            log_level = "warning"
        return cls(
            registry_url=str(data.get("registry_url", DEFAULT_REGISTRY_URL)).rstrip("/"),
            search_url=str(data.get("search_url", DEFAULT_SEARCH_URL)),
            cache_file=Path(data.get("cache_file", DEFAULT_CACHE_FILE)).expanduser(),
            request_timeout=float(data.get("request_timeout", 0.0)),
            log_level=log_level,
            _path=path or DEFAULT_CONFIG_PATH,
        )

    @property
    def path(self) -> Path:
        """Config file this instance loads from and saves to."""
        return self._path

    def save(self) -> None:
        """Write the settings to the config file as TOML."""
        atomic_write_text(self._path, tomli_w.dumps(self.to_dict()))

    def apply(self, settings: dict[str, str]) -> None:
        """Set options from ``KEY=VALUE`` strings and save.

        Values are parsed the same way as the config file.

        Raises:
            ValueError: If a key is unknown or a value does not parse.
        """
        unknown = sorted(set(settings) - set(self.to_dict()))
        if unknown:
            raise ValueError(f"unknown setting: {', '.join(unknown)}")
        level = settings.get("log_level")
        if level is not None and level.lower() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        parsed = Config.from_dict({**self.to_dict(), **settings}, path=self._path)
        for key in settings:
            setattr(self, key, getattr(parsed, key))
        self.save()


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        path: Optional custom config path. Defaults to ~/.config/dep-migrate/config.toml

    Returns:
        Config object with loaded or default settings.
    """
    config_path = path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        # Return defaults, don't create file until save()
        return Config(_path=config_path)

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return Config.from_dict(data, path=config_path)
    except (tomllib.TOMLDecodeError, OSError, ValueError) as e:
        # If config is corrupt, return defaults but preserve path
        import sys

        print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)
        return Config(_path=config_path)

