"""
Reference links written at the foot of the changelog.

Each section gets a ``[anchor]: url`` line pointing at the GitHub view
of its commits: a compare view between two releases, the release page
of the oldest release, or the commit list when nothing is released.
"""

from __future__ import annotations

from dataclasses import dataclass

from gen_changelog.changelog.window import (
    FROM_RELEASE_TO_RELEASE,
    HEAD_TO_RELEASE,
    NO_RELEASES,
    Window,
)


GITHUB_URL = "https://github.com"
UNRELEASED = "Unreleased"


@dataclass(frozen=True)
class Link:
    anchor: str
    url: str

    def __str__(self) -> str:
        return f"[{self.anchor}]: {self.url}"


def build_link(window: Window, owner: str, repo: str) -> Link:
    """Build the reference link of the section filled by ``window``.

    URLs name the release tags as they exist in the repository (``v1.2.0``,
    ``release-1.2.0`` or ``core-v1.2.0``). Anchors are the bare version.
    """
    base = f"{GITHUB_URL}/{owner}/{repo}"

    if window.kind == NO_RELEASES:
        return Link(UNRELEASED, f"{base}/commits/main/")
    if window.kind == HEAD_TO_RELEASE:
        return Link(UNRELEASED, f"{base}/compare/{window.tag.name}...HEAD")

    anchor = str(window.tag.version)
    if window.kind == FROM_RELEASE_TO_RELEASE:
        return Link(anchor, f"{base}/compare/{window.next_tag.name}...{window.tag.name}")
    return Link(anchor, f"{base}/releases/tag/{window.tag.name}")
