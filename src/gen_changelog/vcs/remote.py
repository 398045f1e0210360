"""
Extraction of the GitHub owner and repository from a remote URL.

Only ``https://github.com/{owner}/{repo}.git`` and
``git@github.com:{owner}/{repo}.git`` are recognised. Anything else is
reported as no match and the changelog is built without links.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


REMOTE_RE = re.compile(
    r"^(?:https://github\.com/|git@github\.com:)"
    r"(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]{0,37}[A-Za-z0-9])?)"
    r"/(?P<repo>[A-Za-z0-9_-]+)\.git$"
)


def parse_remote(url: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return ``(owner, repo)`` parsed from ``url`` or None if it does not match."""
    if not url:
        return None
    match = REMOTE_RE.match(url.strip())
    if match is None:
        return None
    return match.group("owner"), match.group("repo")
