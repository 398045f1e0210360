"""
Discovery of the Rust packages in a repository.

The changelog can be generated for a single package of a Cargo
workspace. Package names are read from the ``Cargo.toml`` at the
repository root and from the manifests of its workspace members.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class PackageError(Exception):
    """Raised when no package can be found in the repository."""

    pass


def _read_manifest(root: Path) -> Optional[Dict[str, Any]]:
    manifest = root / "Cargo.toml"
    logger.debug("Reading package manifest `%s`", manifest)
    try:
        return tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.debug("Unable to read `%s`: %s", manifest, exc)
        return None


def _package_name(manifest: Dict[str, Any]) -> Optional[str]:
    package = manifest.get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        return package["name"]
    return None


def get_packages(root: Path) -> Dict[str, Path]:
    """Return a mapping of package name to package directory.

    Parameters
    ----------
    root : Path
        The repository root holding the top-level ``Cargo.toml``.

    Raises
    ------
    PackageError
        If neither the root manifest nor any workspace member declares a
        package.
    """
    packages: Dict[str, Path] = {}
    root_manifest = _read_manifest(root)

    if root_manifest is not None:
        name = _package_name(root_manifest)
        if name:
            packages[name] = root

        workspace = root_manifest.get("workspace")
        members = workspace.get("members", []) if isinstance(workspace, dict) else []
        for member in members:
            member_root = root / member
            manifest = _read_manifest(member_root)
            if manifest is None:
                continue
            name = _package_name(manifest)
            if name:
                packages[name] = member_root

    if not packages:
        raise PackageError(f"No Cargo package found under {root}")
    logger.debug("Packages found: %s", packages)
    return packages
