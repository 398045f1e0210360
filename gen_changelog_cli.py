#!/usr/bin/env python
"""
Thin wrapper script to invoke the gen_changelog CLI.

Running ``python gen_changelog_cli.py`` is equivalent to running the
``gen-changelog`` console script installed via ``pyproject.toml``.
"""

from gen_changelog.cli import main


if __name__ == "__main__":
    main(prog_name="gen-changelog")
