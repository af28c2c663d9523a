"""Package-manager detection and reinstall."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from dep_migrate.errors import InstallError

logger = logging.getLogger(__name__)

DEFAULT_MANAGER = "npm"

# Lock file -> manager, in precedence order
LOCK_FILES: list[tuple[str, str]] = [
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
]

INSTALL_COMMANDS: dict[str, list[str]] = {
    "yarn": ["yarn", "install"],
    "pnpm": ["pnpm", "install"],
    "bun": ["bun", "install"],
    "npm": ["npm", "install"],
}


def detect_package_manager(project_dir: Path) -> str:
    """Pick the package manager from the lock file present in project_dir.

    Falls back to npm when no known lock file exists.
    """
    for lock_file, manager in LOCK_FILES:
        if (project_dir / lock_file).exists():
            return manager
    return DEFAULT_MANAGER


def run_install(manager: str, project_dir: Path) -> None:
    """Run ``<manager> install`` in project_dir with the terminal attached.

    Output is not captured so the package manager's own progress is visible.

    Raises:
        InstallError: If the manager is unknown, missing, or exits non-zero.
    """
    cmd = INSTALL_COMMANDS.get(manager)
    if cmd is None:
        raise InstallError(manager, "unknown package manager")

    logger.info(f"Running {' '.join(cmd)} in {project_dir}")
    try:
        result = subprocess.run(cmd, cwd=project_dir, check=False)
    except FileNotFoundError as e:
        raise InstallError(manager, f"{cmd[0]} not found on PATH") from e
    except OSError as e:
        raise InstallError(manager, str(e)) from e

    if result.returncode != 0:
        raise InstallError(manager, f"exit code {result.returncode}", result.returncode)
