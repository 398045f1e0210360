"""
Commit range windows bounding each changelog section.

Before any commit is read, the release tags are turned into a sequence
of windows: HEAD down to the newest release, each release down to the
next older one, and the oldest release down to the start of history.
Without release tags a single window covers everything from HEAD.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from gen_changelog.changelog.tag import Tag


NO_RELEASES = "no-releases"
HEAD_TO_RELEASE = "head-to-release"
FROM_RELEASE_TO_RELEASE = "from-release-to-release"
RELEASE_TO_START = "release-to-start"


@dataclass(frozen=True)
class Window:
    """One commit range.

    ``tag`` is the release the range belongs to (the boundary walked
    *to* for HEAD_TO_RELEASE); ``next_tag`` is the older release hidden
    for FROM_RELEASE_TO_RELEASE.
    """

    kind: str
    tag: Optional[Tag] = None
    next_tag: Optional[Tag] = None

    @property
    def section_tag(self) -> Optional[Tag]:
        """The tag of the section this window fills, None for Unreleased."""
        if self.kind in (NO_RELEASES, HEAD_TO_RELEASE):
            return None
        return self.tag

    @property
    def start(self) -> str:
        if self.kind in (NO_RELEASES, HEAD_TO_RELEASE):
            return "HEAD"
        return self.tag.ref

    @property
    def hide(self) -> Optional[str]:
        if self.kind == HEAD_TO_RELEASE:
            return self.tag.ref
        if self.kind == FROM_RELEASE_TO_RELEASE:
            return self.next_tag.ref
        return None

    def describe(self) -> str:
        if self.kind == NO_RELEASES:
            return "from the HEAD to the first commit"
        if self.kind == HEAD_TO_RELEASE:
            return f"from the HEAD to the last release `{self.tag}`"
        if self.kind == FROM_RELEASE_TO_RELEASE:
            return f"from the release `{self.tag}` to release `{self.next_tag}`"
        return f"from the first release `{self.tag}` to the first commit"


def plan_windows(release_tags: Sequence[Tag], limit: Optional[int] = None) -> List[Window]:
    """Return the windows for ``release_tags`` (sorted newest first).

    ``limit`` caps the number of windows; the Unreleased window is always
    the first one.
    """
    if not release_tags:
        windows = [Window(NO_RELEASES)]
    else:
        windows = [Window(HEAD_TO_RELEASE, release_tags[0])]
        for newer, older in zip(release_tags, release_tags[1:]):
            windows.append(Window(FROM_RELEASE_TO_RELEASE, newer, older))
        windows.append(Window(RELEASE_TO_START, release_tags[-1]))

    if limit is not None:
        windows = windows[: max(limit, 1)]
    return windows
