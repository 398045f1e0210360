"""
Configuration for gen_changelog.

Provides the :class:`ChangeLogConfig` model and the TOML loader/saver.
See :mod:`gen_changelog.config.model` and
:mod:`gen_changelog.config.loader` for implementation details.
"""

from .loader import DEFAULT_CONFIG_FILE, load_config, save_config  # noqa: F401
from .model import (  # noqa: F401
    ChangeLogConfig,
    ConfigError,
    DisplaySections,
    Group,
    ReleasePattern,
)
