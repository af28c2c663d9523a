"""package.json access.

The manifest is read once per run, mutated in memory by the migrator, and
written back at most once as a whole document.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dep_migrate.errors import ManifestFormatError, ManifestMissingError
from dep_migrate.storage import atomic_write_text

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

# Fixed processing order for migration
SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies")


@dataclass(frozen=True)
class DependencyEntry:
    """A dependency declared in one manifest section."""

    name: str
    section: str


def iter_entries(manifest: dict[str, Any]) -> list[DependencyEntry]:
    """List declared dependencies in section order, then stored order."""
    entries: list[DependencyEntry] = []
    for section in SECTIONS:
        deps = manifest.get(section)
        if isinstance(deps, dict):
            entries.extend(DependencyEntry(name=name, section=section) for name in deps)
    return entries


def dependency_names(manifest: dict[str, Any]) -> list[str]:
    """Merged runtime + development dependency names with duplicates collapsed.

    Order follows first appearance, runtime section first.
    """
    return list(dict.fromkeys(entry.name for entry in iter_entries(manifest)))


class ManifestStore:
    """Reads and writes the package.json of a project directory."""

    def __init__(self, project_dir: Path | None = None):
        self.project_dir = project_dir or Path.cwd()

    @property
    def path(self) -> Path:
        return self.project_dir / MANIFEST_NAME

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> dict[str, Any]:
        """Load the manifest.

        Raises:
            ManifestMissingError: If package.json does not exist.
            ManifestFormatError: If it is not a JSON object.
        """
        if not self.exists():
            raise ManifestMissingError(f"{MANIFEST_NAME} not found in {self.project_dir}")
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestFormatError(f"Could not parse {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestFormatError(f"{self.path} does not contain a JSON object")
        return data

    def write(self, manifest: dict[str, Any]) -> None:
        """Overwrite the manifest with 2-space indented JSON."""
        atomic_write_text(self.path, json.dumps(manifest, indent=2, ensure_ascii=False) + "\n")
        logger.info(f"Wrote {self.path}")
