"""
Classification and grouping of commits.

This package parses commit summaries into :class:`ClassifiedCommit`
records and maps them to changelog groups. See
:mod:`gen_changelog.grouping.commit_classifier` and
:mod:`gen_changelog.grouping.group_model` for details.
"""

from .commit_classifier import classify_commit  # noqa: F401
from .group_model import ClassifiedCommit, resolve_group  # noqa: F401
