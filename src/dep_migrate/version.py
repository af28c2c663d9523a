"""Version information for dep-migrate."""

__all__ = ["VERSION"]

VERSION = "0.1.0"
