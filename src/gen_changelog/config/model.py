"""
Configuration model for changelog generation.

The :class:`ChangeLogConfig` controls which commit kinds are grouped
together, which groups are published and in what order, how many
sections are displayed and how release tags are recognised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MISCELLANEOUS = "Miscellaneous"

# (group name, conventional commit types, publish flag)
DEFAULT_GROUPS = [
    ("Added", ["feat"], True),
    ("Fixed", ["fix"], True),
    ("Changed", ["refactor"], True),
    ("Security", ["security", "dependency"], False),
    ("Build", ["build"], False),
    ("Documentation", ["doc", "docs"], False),
    ("Chore", ["chore"], False),
    ("Continuous Integration", ["ci"], False),
    ("Testing", ["test"], False),
    ("Deprecated", ["deprecated"], False),
    ("Removed", ["removed"], False),
    (MISCELLANEOUS, ["misc"], False),
]

DEFAULT_HEADINGS = ["Added", "Fixed", "Changed", "Security"]


class ConfigError(Exception):
    """Raised when the changelog configuration is missing or invalid."""

    pass


@dataclass
class Group:
    """A collection of commit kinds listed under one third-level heading.

    Attributes
    ----------
    name : str
        The heading text used in the changelog.
    publish : bool
        Whether the group is written to the changelog.
    cc_types : List[str]
        The conventional commit types that belong to the group.
    """

    name: str
    publish: bool = False
    cc_types: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DisplaySections:
    """How many changelog sections to display.

    ``mode`` is one of ``all``, ``one`` or ``custom``; ``count`` is only
    meaningful for ``custom``.
    """

    mode: str = "all"
    count: Optional[int] = None

    @classmethod
    def all(cls) -> "DisplaySections":
        return cls("all")

    @classmethod
    def one(cls) -> "DisplaySections":
        return cls("one")

    @classmethod
    def custom(cls, count: int) -> "DisplaySections":
        return cls("custom", count)

    def limit(self) -> Optional[int]:
        """Return the maximum number of sections, or None for no limit."""
        if self.mode == "one":
            return 1
        if self.mode == "custom":
            return self.count
        return None


@dataclass(frozen=True)
class ReleasePattern:
    """Pattern identifying a tag as a release tag.

    ``prefix`` matches tags such as ``v0.2.4``; ``package-prefix``
    matches tags such as ``gen-changelog-v0.1.9`` where the package name
    must equal the package the changelog is generated for.
    """

    kind: str = "prefix"
    prefix: str = "v"

    @classmethod
    def with_prefix(cls, prefix: str) -> "ReleasePattern":
        return cls("prefix", prefix)

    @classmethod
    def with_package_prefix(cls, prefix: str) -> "ReleasePattern":
        return cls("package-prefix", prefix)

    @property
    def is_package_scoped(self) -> bool:
        return self.kind == "package-prefix"


def add_heading(headings: Dict[int, str], name: str) -> Dict[int, str]:
    """Append ``name`` to ``headings`` keeping Miscellaneous last.

    Adding a heading that is already present is a no-op.
    """
    if name in headings.values():
        return headings

    next_priority = max(headings) + 1 if headings else 0
    misc_priority = next(
        (priority for priority, heading in headings.items() if heading == MISCELLANEOUS),
        None,
    )
    if misc_priority is not None and name != MISCELLANEOUS:
        headings[misc_priority] = name
        headings[next_priority] = MISCELLANEOUS
    else:
        headings[next_priority] = name
    return headings


def remove_heading(headings: Dict[int, str], name: str) -> Dict[int, str]:
    """Remove ``name`` from ``headings`` if present."""
    for priority in [p for p, heading in headings.items() if heading == name]:
        del headings[priority]
    return headings


@dataclass
class ChangeLogConfig:
    """Main configuration structure for changelog generation."""

    groups: Dict[str, Group] = field(default_factory=dict)
    headings: Dict[int, str] = field(default_factory=dict)
    display_sections: DisplaySections = field(default_factory=DisplaySections)
    release_pattern: ReleasePattern = field(default_factory=ReleasePattern)

    @classmethod
    def default(cls) -> "ChangeLogConfig":
        """Create the default configuration.

        Twelve groups are defined; Added, Fixed, Changed and Security are
        published, in that order.
        """
        config = cls()
        for name, cc_types, publish in DEFAULT_GROUPS:
            config.groups[name] = Group(name=name, publish=publish, cc_types=list(cc_types))
        for name in DEFAULT_HEADINGS:
            add_heading(config.headings, name)
        logger.debug("Default headings to publish: %s", config.headings)
        return config

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def ordered_headings(self) -> List[str]:
        """Return the heading names in priority order."""
        return [self.headings[priority] for priority in sorted(self.headings)]

    def groups_mapping(self) -> Dict[str, str]:
        """Return the conventional commit type to group name table."""
        mapping: Dict[str, str] = {}
        for group in self.groups.values():
            for cc_type in group.cc_types:
                mapping[cc_type.lower()] = group.name
        return mapping

    # ------------------------------------------------------------------
    # Group publication
    # ------------------------------------------------------------------
    def add_group(self, group: Group) -> "ChangeLogConfig":
        if group.publish:
            add_heading(self.headings, group.name)
        self.groups[group.name] = group
        return self

    def publish_group(self, group_name: str) -> "ChangeLogConfig":
        group = self.groups.get(group_name)
        if group is None:
            logger.warning("Group to publish `%s` was not found", group_name)
        else:
            group.publish = True
        add_heading(self.headings, group_name)
        return self

    def unpublish_group(self, group_name: str) -> "ChangeLogConfig":
        group = self.groups.get(group_name)
        if group is None:
            logger.warning("Group to unpublish `%s` was not found", group_name)
        else:
            group.publish = False
        remove_heading(self.headings, group_name)
        return self

    def add_commit_groups(self, names: Iterable[str]) -> "ChangeLogConfig":
        for name in names:
            self.publish_group(name.title())
        return self

    def remove_commit_groups(self, names: Iterable[str]) -> "ChangeLogConfig":
        for name in names:
            self.unpublish_group(name.title())
        return self

    # ------------------------------------------------------------------
    # Sections and release tags
    # ------------------------------------------------------------------
    def set_display_sections(self, value: Optional[int]) -> "ChangeLogConfig":
        """Set how many sections to display.

        ``None`` leaves the current setting, ``1`` selects a single section
        and larger values a custom count.
        """
        if value is None:
            return self
        if value < 1:
            raise ConfigError(f"Number of sections to display must be at least 1, got {value}")
        self.display_sections = DisplaySections.one() if value == 1 else DisplaySections.custom(value)
        logger.debug("Display sections: %s", self.display_sections)
        return self

    def set_release_pattern(self, pattern: ReleasePattern) -> "ChangeLogConfig":
        self.release_pattern = pattern
        return self
