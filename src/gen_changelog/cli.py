"""
Command line interface for the gen_changelog tool.

This module defines the ``main`` command group used as the entry point
of the ``gen-changelog`` console script. The ``generate`` command opens
the repository, builds the changelog and writes or prints it; the
``config`` command prints or saves the default configuration. Exit
codes are defined below.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from gen_changelog import __version__
from gen_changelog.changelog.changelog import DEFAULT_CHANGELOG_FILE, build_changelog
from gen_changelog.config.loader import DEFAULT_CONFIG_FILE, load_config, save_config
from gen_changelog.config.model import ChangeLogConfig, ConfigError, ReleasePattern
from gen_changelog.packages import PackageError, get_packages
from gen_changelog.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_WRITE_FAILURE = 7

# Number of sections written by ``config`` when no other value is given.
DEFAULT_SAVED_SECTIONS = 3


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------
# Status lines go to stderr so that ``generate --show`` output can be piped.

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def make_config(
    config_file: Optional[str],
    releases: Optional[int],
    add_groups: Tuple[str, ...],
    remove_groups: Tuple[str, ...],
    repo_root: Optional[Path] = None,
) -> ChangeLogConfig:
    """Load the configuration and apply the command line overrides.

    Without ``config_file`` the default file is looked up in ``repo_root``.

    Raises
    ------
    ConfigError
        If the configuration file is missing or invalid.
    """
    config = load_config(config_file, search_dir=repo_root)
    logger.debug("Initial config to build on: %s", config)

    config.publish_group("Security")
    config.set_display_sections(releases)
    config.add_commit_groups(add_groups)
    config.remove_commit_groups(remove_groups)

    logger.debug("Configuration in use: %s", config)
    return config


def apply_package_scope(config: ChangeLogConfig, repo_root: Path, package: str) -> None:
    """Restrict release tags to those of ``package``.

    Unknown package names are reported but still used for tag matching.
    """
    try:
        packages = get_packages(repo_root)
    except PackageError as exc:
        print_warning(f"{exc}; matching tags for `{package}` anyway")
    else:
        if package not in packages:
            print_warning(f"Package `{package}` not found among: {', '.join(sorted(packages))}")
        else:
            print_info(f"Generating the changelog for package `{package}` at {packages[package]}")
    config.set_release_pattern(ReleasePattern.with_package_prefix(config.release_pattern.prefix))


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gen-changelog")
def main(verbose: bool) -> None:
    """Generate a changelog from the Conventional Commits of a Git repository."""
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )


@main.command()
@click.option("-n", "--next-version", help="The next version number for unreleased changes.")
@click.option(
    "-r",
    "--releases",
    type=click.IntRange(min=1),
    help="The number of level 2 headings (releases) to show in the changelog.",
)
@click.option("-c", "--config-file", help="Configuration file to use instead of gen-changelog.toml.")
@click.option(
    "--repository-dir",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Path to the repository.",
)
@click.option("-d", "--display-summaries", is_flag=True, help="Display a summary of the commits in each section.")
@click.option("--add-groups", multiple=True, help="Add a commit group to the published headings.")
@click.option("--remove-groups", multiple=True, help="Remove a commit group from the published headings.")
@click.option("-p", "--package", help="Generate the changelog for a specific package.")
@click.option("-S", "--no-save", is_flag=True, help="Do not save the changelog.")
@click.option("-s", "--show", is_flag=True, help="Print the changelog to standard output.")
def generate(
    next_version: Optional[str],
    releases: Optional[int],
    config_file: Optional[str],
    repository_dir: Path,
    display_summaries: bool,
    add_groups: Tuple[str, ...],
    remove_groups: Tuple[str, ...],
    package: Optional[str],
    no_save: bool,
    show: bool,
) -> None:
    """Generate the changelog of a repository."""
    try:
        run_generate(
            next_version,
            releases,
            config_file,
            repository_dir,
            display_summaries,
            add_groups,
            remove_groups,
            package,
            no_save,
            show,
        )
    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


def run_generate(
    next_version: Optional[str],
    releases: Optional[int],
    config_file: Optional[str],
    repository_dir: Path,
    display_summaries: bool,
    add_groups: Tuple[str, ...],
    remove_groups: Tuple[str, ...],
    package: Optional[str],
    no_save: bool,
    show: bool,
) -> None:
    """Build the changelog and save or print it, exiting on known errors."""
    repo_root = GitClient.find_repo_root(repository_dir)
    if repo_root is None:
        print_error(f"No Git repository found at {repository_dir} or its parent directories.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    logger.debug("Repository root: %s", repo_root)

    try:
        config = make_config(config_file, releases, add_groups, remove_groups, repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    if package:
        apply_package_scope(config, repo_root, package)

    client = GitClient(repo_root)
    try:
        change_log = build_changelog(
            client,
            config,
            summary_flag=display_summaries,
            package=package,
        )
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)

    change_log.update_unreleased_to_next_version(next_version)

    if not no_save:
        try:
            path = change_log.save(repo_root / DEFAULT_CHANGELOG_FILE)
        except OSError as exc:
            print_error(f"Unable to write the changelog: {exc}")
            raise click.exceptions.Exit(EXIT_WRITE_FAILURE)
        print_success(f"Changelog written to {path}")

    if show:
        click.echo(change_log.render(), nl=False)


@main.command("config")
@click.option("-s", "--save", is_flag=True, help="Save the default configuration to a file.")
@click.option(
    "-f",
    "--file",
    "file",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="File to save the configuration to.",
)
def config_command(save: bool, file: str) -> None:
    """Print or save the default configuration."""
    config = ChangeLogConfig.default()
    config.set_display_sections(DEFAULT_SAVED_SECTIONS)

    if not save:
        click.echo(save_config(config), nl=False)
        return

    try:
        save_config(config, file)
    except OSError as exc:
        print_error(f"Unable to write the configuration: {exc}")
        raise click.exceptions.Exit(EXIT_WRITE_FAILURE)
    print_success(f"Default configuration saved to {file}")
