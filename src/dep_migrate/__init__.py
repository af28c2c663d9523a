"""dep-migrate: find deprecated npm dependencies and migrate to replacements."""

from dep_migrate.version import VERSION

__version__ = VERSION
__all__ = ["__version__", "VERSION"]
