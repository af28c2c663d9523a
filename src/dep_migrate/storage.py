"""Atomic file writes shared by the manifest, cache and config files."""

from __future__ import annotations

import tempfile
from pathlib import Path


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path atomically.

    Uses a temporary file in the same directory + rename so readers never see
    a partially written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}_",
            suffix=".tmp",
            delete=False,
        ) as tmp_file:
            tmp_file.write(text)
            tmp_path = Path(tmp_file.name)

        # Atomic rename
        tmp_path.replace(path)
    except OSError:
        # Clean up temp file on failure
        if "tmp_path" in locals():
            try:
                tmp_path.unlink()
            except OSError:
                pass
        raise
