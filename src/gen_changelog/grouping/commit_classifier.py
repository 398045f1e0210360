"""
Parsing of commit summaries with the Conventional Commits grammar.

A summary such as ``✨ feat(core)!: add x`` is split into emoji, kind,
scope, breaking flag and description. Summaries that do not follow the
grammar are kept verbatim as the title with no kind, which places them
in the Unknown group. Only the summary line is analysed; the body is
carried along unchanged.

An emoji is a single token that does not start with an ASCII letter or
digit, so a description such as ``fix: parser: empty input`` keeps
``fix`` as its kind.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from gen_changelog.grouping.group_model import ClassifiedCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONVENTIONAL_RE = re.compile(
    r"^(?:(?P<emoji>[^\sA-Za-z0-9]\S*)\s)??"
    r"(?P<type>[a-z]+)"
    r"(?:\((?P<scope>[^)]+)\))?"
    r"(?P<breaking>!)?"
    r": (?P<description>.*)$"
)


def classify_commit(summary: Optional[str], body: Optional[str] = None) -> ClassifiedCommit:
    """Classify a commit from its summary line and body.

    Parameters
    ----------
    summary : Optional[str]
        The first line of the commit message. ``None`` yields an empty
        record.
    body : Optional[str]
        The rest of the commit message.

    Returns
    -------
    ClassifiedCommit
        The parsed record. This function never raises.
    """
    body_text = body or ""
    if summary is None:
        return ClassifiedCommit(body=body_text)

    match = CONVENTIONAL_RE.match(summary)
    if match is None:
        logger.debug("Summary `%s` is not a conventional commit", summary)
        return ClassifiedCommit(title=summary, body=body_text)

    commit = ClassifiedCommit(
        title=match.group("description"),
        emoji=match.group("emoji"),
        kind=match.group("type"),
        scope=match.group("scope"),
        breaking=match.group("breaking") is not None,
        body=body_text,
    )
    logger.debug("Parsed `%s` as %s", summary, commit)
    return commit
