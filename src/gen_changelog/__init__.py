"""
Top-level package for gen_changelog.

This package exposes the main CLI entry point via the
``gen_changelog.cli`` module and the changelog builder via
``gen_changelog.changelog``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
