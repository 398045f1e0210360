"""
Release tag identification.

Every tag in the repository is examined with the configured
:class:`ReleasePattern`. Tags whose name carries a valid semantic
version are release tags; they bound the sections of the changelog and
are ordered newest (highest version) first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Tuple

import semver

from gen_changelog.config.model import ReleasePattern
from gen_changelog.vcs.git_client import GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


_SEMVER = r"(?P<semver>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)"

PREFIX_RE = re.compile(r"^(?P<prefix>\D*)" + _SEMVER + r"$")
PACKAGE_PREFIX_RE = re.compile(r"^(?P<package>.+)-(?P<prefix>\D*)" + _SEMVER + r"$")


@dataclass(frozen=True)
class Tag:
    """A repository tag and, for release tags, its version and date.

    Attributes
    ----------
    id : str
        Object id the tag reference points at.
    name : str
        Short tag name, e.g. ``v1.2.0``.
    package : Optional[str]
        Package the tag was matched for with a package-scoped pattern.
    version : Optional[semver.Version]
        Parsed version; None when the tag is not a release tag.
    date : Optional[date]
        Date of the tagged commit (UTC).
    """

    id: str
    name: str
    package: Optional[str] = None
    version: Optional[semver.Version] = None
    date: Optional[date] = None

    @property
    def is_release(self) -> bool:
        return self.version is not None

    @property
    def ref(self) -> str:
        """Fully qualified reference used to walk from or hide this tag."""
        return f"refs/tags/{self.name}"

    def __str__(self) -> str:
        return self.name


def parse_version(text: str) -> Optional[semver.Version]:
    """Parse ``text`` as a semantic version, returning None when invalid."""
    try:
        return semver.Version.parse(text)
    except ValueError as exc:
        logger.warning("Failed to parse `%s` as a semantic version: %s", text, exc)
        return None


def match_release(
    name: str, pattern: ReleasePattern, package: Optional[str] = None
) -> Optional[semver.Version]:
    """Return the version carried by tag ``name`` under ``pattern``.

    With a package-scoped pattern the tag must also name ``package``; if
    no package is given no tag can match.
    """
    if pattern.is_package_scoped:
        if package is None:
            return None
        match = PACKAGE_PREFIX_RE.match(name)
        if match is None or match.group("package") != package:
            return None
    else:
        match = PREFIX_RE.match(name)
        if match is None:
            logger.debug("Tag `%s` does not carry a version", name)
            return None

    if match.group("prefix") != pattern.prefix:
        logger.debug("Tag `%s` does not use the prefix `%s`", name, pattern.prefix)
        return None
    return parse_version(match.group("semver"))


def resolve_tags(
    client, pattern: ReleasePattern, package: Optional[str] = None
) -> Tuple[List[Tag], List[Tag]]:
    """Enumerate the repository tags and pick out the release tags.

    Parameters
    ----------
    client : GitClient
        Client for the repository.
    pattern : ReleasePattern
        Pattern identifying release tags.
    package : Optional[str]
        Package name required by a package-scoped pattern.

    Returns
    -------
    Tuple[List[Tag], List[Tag]]
        All tags in the order Git reported them, and the release tags
        sorted by descending version.

    Raises
    ------
    GitError
        If the tags cannot be enumerated.
    """
    tags: List[Tag] = []
    for ref in client.list_tags():
        logger.debug("Processing `%s` as a tag", ref.name)
        tag = Tag(id=ref.id, name=ref.name)
        version = match_release(ref.name, pattern, package)
        if version is not None:
            tag = replace(tag, package=package if pattern.is_package_scoped else None, version=version)
            try:
                tag = replace(tag, date=client.commit_timestamp(tag.ref).date())
            except GitError as exc:
                logger.warning("Could not resolve the date of tag `%s`: %s", ref.name, exc)
        logger.debug(
            "Identified `%s` as version `%s`",
            tag.name,
            tag.version if tag.is_release else "NOT A VERSION",
        )
        tags.append(tag)

    release_tags = sorted((t for t in tags if t.is_release), key=lambda t: t.version, reverse=True)
    logger.debug("Release tags: `%s`", ", ".join(t.name for t in release_tags))
    return tags, release_tags
