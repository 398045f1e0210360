"""Title and introduction of the changelog document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


DEFAULT_TITLE = "Changelog"

DEFAULT_PARAGRAPHS = [
    "All notable changes to this project will be documented in this file.",
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/) "
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).",
]


@dataclass
class Header:
    title: str = DEFAULT_TITLE
    paragraphs: List[str] = field(default_factory=lambda: list(DEFAULT_PARAGRAPHS))

    def markdown(self) -> str:
        parts = [f"# {self.title}\n\n"]
        parts.extend(f"{paragraph}\n\n" for paragraph in self.paragraphs)
        return "".join(parts)
