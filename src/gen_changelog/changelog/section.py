"""
A changelog section: the commits of one release, or of the unreleased
changes, sorted into groups.

The section is filled by walking the commits of its :class:`Window`.
Each commit summary is classified and appended to the bucket of the
group it resolves to, so buckets keep the walk order (newest first).
Only the configured headings are rendered, in priority order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from gen_changelog.changelog.tag import Tag
from gen_changelog.changelog.window import Window
from gen_changelog.grouping.commit_classifier import classify_commit
from gen_changelog.grouping.group_model import UNKNOWN_GROUP, ClassifiedCommit, resolve_group


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass
class Section:
    """One second-level entry of the changelog.

    Attributes
    ----------
    tag : Optional[Tag]
        The release tag, or None for the Unreleased section.
    headings : List[str]
        Group names to render, in display order.
    groups_mapping : Mapping[str, str]
        Conventional commit type to group name table.
    summary_flag : bool
        Whether to always emit the heading and a one-line count summary.
    commits : Dict[str, List[ClassifiedCommit]]
        Commits by group name, in walk order.
    """

    tag: Optional[Tag] = None
    headings: List[str] = field(default_factory=list)
    groups_mapping: Mapping[str, str] = field(default_factory=dict)
    summary_flag: bool = False
    commits: Dict[str, List[ClassifiedCommit]] = field(default_factory=dict)

    @property
    def version(self) -> Optional[str]:
        if self.tag is None or self.tag.version is None:
            return None
        return str(self.tag.version)

    @property
    def name(self) -> str:
        return self.tag.name if self.tag is not None else "Unreleased"

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def add_commit(self, summary: Optional[str], body: Optional[str] = None) -> str:
        """Classify a commit and file it under its group.

        Returns
        -------
        str
            The name of the group the commit was added to.
        """
        commit = classify_commit(summary, body)
        group = resolve_group(commit, self.groups_mapping)
        self.commits.setdefault(group, []).append(commit)
        return group

    def walk_repository(self, window: Window, client) -> "Section":
        """Add every commit of ``window`` to the section.

        Commits without a summary are skipped.

        Raises
        ------
        GitError
            If the window boundaries cannot be walked.
        """
        logger.debug("Walking %s", window.describe())
        for commit in client.walk(window.start, window.hide):
            if commit.summary is None:
                continue
            logger.debug("Found commit with summary:\t`%s`", commit.summary)
            self.add_commit(commit.summary, commit.body)
        logger.debug("%s", self.report_status(summary=False))
        return self

    def commit_count(self) -> int:
        return sum(len(commits) for commits in self.commits.values())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def report_status(self, summary: bool) -> str:
        """Describe the section contents.

        With ``summary`` the one-line ``Group[count]`` list written to the
        changelog is returned (the Unknown group is left out); otherwise a
        multi-line report used for logging.
        """
        if summary:
            counts = [
                f"{group}[{len(commits)}]"
                for group, commits in sorted(self.commits.items())
                if group != UNKNOWN_GROUP
            ]
            return "Summary: " + ", ".join(counts) + "\n\n"

        lines = [f"Section: {self.name} contains:"]
        for group, commits in sorted(self.commits.items()):
            lines.append(f"  {len(commits)} commits under {group} heading")
        return "\n".join(lines)

    def section_header(self) -> str:
        if self.tag is None:
            return "## [Unreleased]"
        version = self.version or "Unreleased"
        day = self.tag.date.strftime("%Y-%m-%d") if self.tag.date is not None else ""
        return f"## [{version}] - {day}"

    def commits_markdown(self, heading: str) -> Optional[str]:
        commits = self.commits.get(heading)
        if not commits:
            return None
        bullets = "".join(f"- {commit.title_as_string()}\n" for commit in commits)
        return f"### {heading}\n\n{bullets}\n"

    def markdown(self) -> str:
        """Render the section; an empty string when nothing is to be shown."""
        parts: List[str] = []
        if self.summary_flag:
            parts.append(self.section_header() + "\n\n")
            parts.append(self.report_status(summary=True))

        for heading in self.headings:
            md = self.commits_markdown(heading)
            if md is None:
                continue
            if not parts:
                parts.append(self.section_header() + "\n\n")
            parts.append(md)

        text = "".join(parts)
        if not text:
            logger.warning("Section %s is empty", self.name)
        return text

    def __str__(self) -> str:
        return self.markdown()
