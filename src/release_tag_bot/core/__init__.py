"""Core decision logic for release-tag-bot.

This module contains the fundamental building blocks:
- Version tag parsing, ordering and incrementing
- Conventional commit classification
- The tag decision engine

Nothing in this package performs I/O.
"""

from __future__ import annotations

from release_tag_bot.core.commits import classify_commits, detect_bump
from release_tag_bot.core.decision import (
    Baseline,
    DecisionAction,
    TagDecision,
    decide,
    select_baseline,
)
from release_tag_bot.core.version import (
    BumpType,
    Version,
    compare_versions,
    next_version,
    parse_tag,
)

__all__ = [
    # Decision
    "Baseline",
    # Version
    "BumpType",
    "DecisionAction",
    "TagDecision",
    "Version",
    # Commits
    "classify_commits",
    "compare_versions",
    "decide",
    "detect_bump",
    "next_version",
    "parse_tag",
    "select_baseline",
]
