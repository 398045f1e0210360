"""
Data model for classified commits and the groups they are listed under.

A :class:`ClassifiedCommit` is the result of parsing a commit summary
with the Conventional Commits grammar. :func:`resolve_group` decides
which changelog group (third-level heading) the commit belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional


UNKNOWN_GROUP = "Unknown"
SECURITY_GROUP = "Security"
CHORE_GROUP = "Chore"


@dataclass(frozen=True)
class ClassifiedCommit:
    """Representation of a commit summary split into its conventional parts.

    Attributes
    ----------
    title : str
        The description with the conventional prefix removed, or the
        verbatim summary when the summary is not a conventional commit.
    emoji : Optional[str]
        Leading emoji (or other token) preceding the commit type.
    kind : Optional[str]
        The Conventional Commit type (feat, fix, docs, etc.).
    scope : Optional[str]
        The scope given in parentheses after the type.
    breaking : bool
        True when the type/scope is followed by ``!``.
    body : str
        The commit body, unparsed.
    """

    title: str = ""
    emoji: Optional[str] = None
    kind: Optional[str] = None
    scope: Optional[str] = None
    breaking: bool = False
    body: str = ""

    @property
    def is_conventional(self) -> bool:
        return self.kind is not None

    def title_as_string(self) -> str:
        """Rebuild the summary line in ``emoji kind(scope)!: title`` form."""
        if self.kind is None:
            return self.title
        emoji = f"{self.emoji} " if self.emoji else ""
        scope = f"({self.scope})" if self.scope else ""
        bang = "!" if self.breaking else ""
        return f"{emoji}{self.kind}{scope}{bang}: {self.title}"


def resolve_group(commit: ClassifiedCommit, groups_mapping: Mapping[str, str]) -> str:
    """Return the name of the group ``commit`` is listed under.

    ``chore(deps)`` commits are always reported under Security and other
    chores under Chore, whatever the mapping says. Commits with no kind,
    or a kind missing from ``groups_mapping``, go to the Unknown group.
    """
    if commit.kind is None:
        return UNKNOWN_GROUP

    kind = commit.kind.lower()
    if kind == "chore":
        if commit.scope == "deps":
            return SECURITY_GROUP
        return CHORE_GROUP

    return groups_mapping.get(kind, UNKNOWN_GROUP)
