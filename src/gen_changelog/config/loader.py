"""
Configuration loader for gen_changelog.

The tool reads an optional TOML configuration file, by default named
``gen-changelog.toml`` in the working directory. Values present in the
file override the defaults of :meth:`ChangeLogConfig.default`; keys
that are missing keep their default value.

If an explicitly requested file is missing, or any file is malformed or
holds unknown keys or values of the wrong type, a :class:`ConfigError`
is raised.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import tomli_w

from gen_changelog.config.model import (
    ChangeLogConfig,
    ConfigError,
    DisplaySections,
    Group,
    ReleasePattern,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CONFIG_FILE = "gen-changelog.toml"

GROUPS_COMMENT = """\
# Group tables define the third-level headings used to organize commits in the changelog.
# Each group has the following properties:
#   - name: Display name for the group (should match the table name)
#   - publish: Controls whether this group appears in the published changelog
#   - cc-types: Array of conventional commit types that belong to this group
#
# Note: Each commit type should only belong to one group.
"""

HEADINGS_COMMENT = """\
# Defines the display order of groups in the changelog.
# Groups are listed with their priority values (lower numbers appear first).
# Only groups that should be displayed need to be included here.
"""

DISPLAY_SECTIONS_COMMENT = """\
# Controls the number of changelog sections to display: "all", "one",
# or a table such as { custom = 3 }. Each section is either the
# unreleased changes or one release.
"""

_TOP_LEVEL_KEYS = {"display-sections", "release-pattern", "groups", "headings"}
_GROUP_KEYS = {"name", "publish", "cc-types"}


def _parse_display_sections(value: Any) -> DisplaySections:
    if value == "all":
        return DisplaySections.all()
    if value == "one":
        return DisplaySections.one()
    if isinstance(value, dict) and set(value) == {"custom"}:
        count = value["custom"]
        if isinstance(count, int) and not isinstance(count, bool) and count >= 1:
            return DisplaySections.custom(count)
    raise ConfigError(f"'display-sections' must be \"all\", \"one\" or {{ custom = N }}, got {value!r}")


def _parse_release_pattern(value: Any) -> ReleasePattern:
    if isinstance(value, dict) and len(value) == 1:
        kind, prefix = next(iter(value.items()))
        if kind in ("prefix", "package-prefix") and isinstance(prefix, str):
            return ReleasePattern(kind=kind, prefix=prefix)
    raise ConfigError(
        f"'release-pattern' must be {{ prefix = \"...\" }} or {{ package-prefix = \"...\" }}, got {value!r}"
    )


def _parse_groups(value: Any) -> Dict[str, Group]:
    if not isinstance(value, dict):
        raise ConfigError("'groups' must be a table of group tables")
    groups: Dict[str, Group] = {}
    for key, table in value.items():
        if not isinstance(table, dict):
            raise ConfigError(f"group '{key}' must be a table")
        unknown = set(table) - _GROUP_KEYS
        if unknown:
            raise ConfigError(f"group '{key}' has unknown keys: {', '.join(sorted(unknown))}")
        name = table.get("name", key)
        publish = table.get("publish", False)
        cc_types = table.get("cc-types", [])
        if not isinstance(name, str):
            raise ConfigError(f"'name' of group '{key}' must be a string")
        if not isinstance(publish, bool):
            raise ConfigError(f"'publish' of group '{key}' must be a boolean")
        if not isinstance(cc_types, list) or not all(isinstance(t, str) for t in cc_types):
            raise ConfigError(f"'cc-types' of group '{key}' must be a list of strings")
        groups[name] = Group(name=name, publish=publish, cc_types=list(cc_types))
    return groups


def _parse_headings(value: Any) -> Dict[int, str]:
    if not isinstance(value, dict):
        raise ConfigError("'headings' must be a table of heading = priority")
    headings: Dict[int, str] = {}
    for name, priority in value.items():
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise ConfigError(f"priority of heading '{name}' must be an integer")
        if priority in headings:
            raise ConfigError(
                f"headings '{headings[priority]}' and '{name}' share the priority {priority}"
            )
        headings[priority] = name
    return headings


def config_from_dict(data: Dict[str, Any]) -> ChangeLogConfig:
    """Build a configuration from parsed TOML data.

    Groups read from ``data`` replace the default groups. Published groups
    get a heading unless a ``headings`` table is given, which then decides
    the headings on its own.

    Raises
    ------
    ConfigError
        If ``data`` holds unknown keys or values of the wrong type.
    """
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    config = ChangeLogConfig.default()
    if "groups" in data:
        config.groups = {}
        for group in _parse_groups(data["groups"]).values():
            config.add_group(group)
    if "headings" in data:
        config.headings = _parse_headings(data["headings"])
    if "display-sections" in data:
        config.display_sections = _parse_display_sections(data["display-sections"])
    if "release-pattern" in data:
        config.release_pattern = _parse_release_pattern(data["release-pattern"])
    return config


def config_to_dict(config: ChangeLogConfig) -> Dict[str, Any]:
    """Return the TOML-ready representation of ``config``."""
    display = config.display_sections
    if display.mode == "custom":
        display_value: Any = {"custom": display.count}
    else:
        display_value = display.mode

    return {
        "display-sections": display_value,
        "release-pattern": {config.release_pattern.kind: config.release_pattern.prefix},
        "groups": {
            name: {"name": group.name, "publish": group.publish, "cc-types": list(group.cc_types)}
            for name, group in config.groups.items()
        },
        # Written inverted so that TOML keys are the heading names.
        "headings": {name: priority for priority, name in sorted(config.headings.items())},
    }


def load_config(
    path: Optional[Union[str, Path]] = None,
    search_dir: Optional[Union[str, Path]] = None,
) -> ChangeLogConfig:
    """Load the changelog configuration.

    Args:
        path: Configuration file to read. When omitted, ``gen-changelog.toml``
              in ``search_dir`` is read if it exists, otherwise the
              default configuration is returned.
        search_dir: Directory holding the default file when no ``path`` is
                    given, usually the repository root. Defaults to the
                    current directory.

    Returns:
        The validated :class:`ChangeLogConfig`.

    Raises:
        ConfigError: If the file is missing (explicit path only), malformed
                     or invalid.
    """
    if path is None:
        config_path = Path(search_dir or ".") / DEFAULT_CONFIG_FILE
        if not config_path.is_file():
            logger.debug("No '%s' found, using the default configuration", config_path)
            return ChangeLogConfig.default()
    else:
        config_path = Path(path)
        if not config_path.is_file():
            logger.error("Configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing configuration file: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
        data: Dict[str, Any] = tomllib.loads(content)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid TOML in {config_path.name}: {exc}") from exc

    config = config_from_dict(data)
    logger.debug("Loaded configuration from: %s", config_path)
    logger.debug("Configuration data: %s", config)
    return config


def save_config(config: ChangeLogConfig, path: Optional[Union[str, Path]] = None) -> str:
    """Serialise ``config`` to commented TOML.

    The text is written to ``path`` when one is given and is returned in
    every case. ``OSError`` from writing the file propagates.
    """
    text = tomli_w.dumps(config_to_dict(config))

    for marker, comment in (
        ("[groups.", GROUPS_COMMENT),
        ("[headings]", HEADINGS_COMMENT),
        ("[display-sections]", DISPLAY_SECTIONS_COMMENT),
    ):
        idx = text.find(marker)
        if idx != -1:
            text = text[:idx] + comment + text[idx:]
    if "[display-sections]" not in text:
        idx = text.find("display-sections")
        if idx != -1:
            text = text[:idx] + DISPLAY_SECTIONS_COMMENT + text[idx:]

    if path is not None:
        Path(path).write_text(text, encoding="utf-8")
        logger.info("Saved configuration to %s", path)
    return text
