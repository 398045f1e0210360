"""
Changelog construction.

The tag resolver, window planner, section walker, link builder and
renderer that turn a repository's history into a Markdown changelog.
"""

from .changelog import DEFAULT_CHANGELOG_FILE, ChangeLog, build_changelog  # noqa: F401
from .link import Link, build_link  # noqa: F401
from .section import Section  # noqa: F401
from .tag import Tag, resolve_tags  # noqa: F401
from .window import Window, plan_windows  # noqa: F401
