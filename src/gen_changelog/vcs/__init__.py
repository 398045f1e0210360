"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to read tags and
commit history from a Git repository, and the helper that extracts the
GitHub owner/repository pair from the origin remote URL.
"""

from .git_client import CommitInfo, GitClient, GitError, TagRef  # noqa: F401
from .remote import parse_remote  # noqa: F401
