"""
Git client implementation for gen_changelog.

This module wraps the read-only Git operations required to build a
changelog: tag enumeration, commit range walks, commit timestamps and
the origin remote URL. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# Separators used in ``git log`` pretty formats. Neither can appear in
# a commit message written through the usual git porcelain.
FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"


@dataclass(frozen=True)
class TagRef:
    """A tag reference as enumerated by Git."""

    id: str  # tag object id for annotated tags, commit id for lightweight ones
    name: str


@dataclass(frozen=True)
class CommitInfo:
    """The parts of a commit needed to classify it."""

    sha: str
    summary: Optional[str]
    body: Optional[str]


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if GitClient.is_repo(current):
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True,
            or if the ``git`` executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            logger.error("Unable to execute git: %s", e)
            raise GitError(f"Unable to execute git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def list_tags(self) -> List[TagRef]:
        """List every tag in the repository.

        The order is the one Git reports (sorted by refname) and callers
        must not rely on it for version ordering.

        Raises
        ------
        GitError
            If the tags cannot be enumerated.
        """
        result = self._run(
            ["for-each-ref", "--format=%(objectname) %(refname:strip=2)", "refs/tags"],
            check=True,
        )
        tags = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            object_id, _, name = line.partition(" ")
            tags.append(TagRef(id=object_id, name=name))
        return tags

    def commit_timestamp(self, rev: str) -> datetime:
        """Return the committer time of the commit ``rev`` points at.

        ``rev`` is peeled to a commit first, so both lightweight and
        annotated tags resolve to the tagged commit.

        Raises
        ------
        GitError
            If ``rev`` cannot be resolved to a commit.
        """
        result = self._run(["show", "-s", "--format=%ct", f"{rev}^{{commit}}"], check=True)
        value = result.stdout.strip()
        try:
            seconds = int(value)
        except ValueError as exc:
            raise GitError(f"Unexpected timestamp `{value}` for {rev}") from exc
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def walk(self, start: str, hide: Optional[str] = None) -> List[CommitInfo]:
        """Return the commits reachable from ``start`` but not from ``hide``.

        Commits are returned newest first. ``start`` is included; ``hide``
        and its ancestors are excluded.

        Raises
        ------
        GitError
            If either reference is invalid.
        """
        args = [
            "log",
            f"--format=%H{FIELD_SEP}%s{FIELD_SEP}%b{RECORD_SEP}",
            start,
        ]
        if hide is not None:
            args.append(f"^{hide}")
        args.append("--")
        result = self._run(args, check=True)

        commits = []
        for record in result.stdout.split(RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, _, rest = record.partition(FIELD_SEP)
            summary, _, body = rest.partition(FIELD_SEP)
            commits.append(
                CommitInfo(
                    sha=sha.strip(),
                    summary=summary or None,
                    body=body.strip("\n") or None,
                )
            )
        return commits

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------
    def get_remote_url(self, remote: str = "origin") -> Optional[str]:
        """Return the configured URL of ``remote`` or None when it is not set."""
        result = self._run(["config", "--get", f"remote.{remote}.url"], check=False)
        url = result.stdout.strip()
        return url or None
