"""
Construction and rendering of the changelog document.

:func:`build_changelog` resolves the release tags, plans one window per
section and walks each window to fill its section. The resulting
:class:`ChangeLog` renders to Markdown: the header, the sections newest
first, and one reference link per section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from gen_changelog.changelog.header import Header
from gen_changelog.changelog.link import Link, build_link
from gen_changelog.changelog.section import Section
from gen_changelog.changelog.tag import Tag, parse_version, resolve_tags
from gen_changelog.changelog.window import (
    FROM_RELEASE_TO_RELEASE,
    HEAD_TO_RELEASE,
    RELEASE_TO_START,
    Window,
    plan_windows,
)
from gen_changelog.config.model import ChangeLogConfig
from gen_changelog.vcs.remote import parse_remote


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CHANGELOG_FILE = "CHANGELOG.md"


@dataclass
class ChangeLog:
    """The changelog of a repository.

    ``sections`` and ``windows`` are parallel lists, newest first.
    ``owner`` and ``repo`` are empty when the remote could not be parsed,
    in which case no links are produced.
    """

    sections: List[Section] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)
    header: Header = field(default_factory=Header)
    owner: str = ""
    repo: str = ""
    release_prefix: str = "v"

    @property
    def links(self) -> List[Link]:
        if not self.owner or not self.repo:
            return []
        return [build_link(window, self.owner, self.repo) for window in self.windows]

    def update_unreleased_to_next_version(
        self, next_version: Optional[str], today: Optional[date] = None
    ) -> "ChangeLog":
        """Turn the Unreleased section into the release ``next_version``.

        Nothing changes when ``next_version`` is None or not a valid
        semantic version, or when the first section is already a release.
        """
        if next_version is None:
            return self
        if not self.sections or self.sections[0].tag is not None:
            logger.warning("No unreleased section to update to `%s`", next_version)
            return self

        text = next_version[1:] if next_version.startswith("v") else next_version
        version = parse_version(text)
        if version is None:
            logger.warning("Next version `%s` is not a semantic version; keeping Unreleased", next_version)
            return self

        if today is None:
            today = datetime.now(timezone.utc).date()
        tag = Tag(id="HEAD", name=f"{self.release_prefix}{version}", version=version, date=today)

        window = self.windows[0]
        if window.kind == HEAD_TO_RELEASE:
            self.windows[0] = Window(FROM_RELEASE_TO_RELEASE, tag, window.tag)
        else:
            self.windows[0] = Window(RELEASE_TO_START, tag)
        self.sections[0] = replace(self.sections[0], tag=tag)
        logger.info("Unreleased changes published as version %s", version)
        return self

    def render(self) -> str:
        """Render the whole document as Markdown."""
        body = "".join(section.markdown() for section in self.sections)
        links = self.links
        if not links:
            logger.warning("Unable to build links as owner and repo are not known")
            footer = ""
        else:
            footer = "\n".join(str(link) for link in links) + "\n"
        return self.header.markdown() + body + footer

    def __str__(self) -> str:
        return self.render()

    def save(self, path: Union[str, Path] = DEFAULT_CHANGELOG_FILE) -> Path:
        """Write the rendered changelog to ``path``.

        Raises
        ------
        OSError
            If the file cannot be written.
        """
        path = Path(path)
        path.write_text(self.render(), encoding="utf-8")
        logger.info("Changelog written to %s", path)
        return path


def build_changelog(
    client,
    config: ChangeLogConfig,
    summary_flag: bool = False,
    package: Optional[str] = None,
) -> ChangeLog:
    """Walk the repository behind ``client`` and build its changelog.

    Parameters
    ----------
    client : GitClient
        Client for the repository.
    config : ChangeLogConfig
        Headings, groups, display limit and release pattern.
    summary_flag : bool
        Emit a summary line for every section.
    package : Optional[str]
        Package name matched by a package-scoped release pattern.

    Raises
    ------
    GitError
        If tags cannot be listed or a window cannot be walked.
    """
    remote = parse_remote(client.get_remote_url())
    if remote is None:
        logger.warning("Owner and repo could not be found from the origin remote; links are omitted")
        owner, repo = "", ""
    else:
        owner, repo = remote

    _, release_tags = resolve_tags(client, config.release_pattern, package)
    windows = plan_windows(release_tags, config.display_sections.limit())

    headings = config.ordered_headings()
    groups_mapping = config.groups_mapping()
    logger.debug("Section headings to publish: %s", headings)

    sections = []
    for window in windows:
        section = Section(
            tag=window.section_tag,
            headings=headings,
            groups_mapping=groups_mapping,
            summary_flag=summary_flag,
        )
        section.walk_repository(window, client)
        sections.append(section)

    prefix = config.release_pattern.prefix
    if config.release_pattern.is_package_scoped and package:
        prefix = f"{package}-{prefix}"

    return ChangeLog(
        sections=sections,
        windows=windows,
        owner=owner,
        repo=repo,
        release_prefix=prefix,
    )
