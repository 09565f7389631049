"""Conventional commit classification.

Commit messages are classified by their header (first line) following the
conventional commits grammar ``type(scope)!: description``. Matching is
header-anchored so words like "fix" in prose never trigger a bump. The one
exception is the breaking-change footer, which may appear on any line.

Precedence, highest first:

- ``type!:`` / ``type(scope)!:`` header, or a ``BREAKING CHANGE`` line -> MAJOR
- ``feat:`` / ``feat(scope):`` header -> MINOR
- ``fix:`` / ``fix(scope):`` header -> PATCH
- anything else -> NONE
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from release_tag_bot.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable

BREAKING_HEADER_PATTERN = re.compile(r"^[a-z]+(?:\([^)]+\))?!:\s", re.IGNORECASE)
FEAT_HEADER_PATTERN = re.compile(r"^feat(?:\([^)]+\))?:\s", re.IGNORECASE)
FIX_HEADER_PATTERN = re.compile(r"^fix(?:\([^)]+\))?:\s", re.IGNORECASE)
BREAKING_FOOTER_PATTERN = re.compile(r"^\s*breaking changes?:?", re.IGNORECASE | re.MULTILINE)

_NEWLINE = re.compile(r"\r?\n")

_BUMP_RANK = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}

# Keywords reported back to users when nothing matched
SEARCHED_KEYWORDS = ("feat", "fix", "BREAKING CHANGE")


def get_header(message: str) -> str:
    """Return the first line of a commit message."""
    return _NEWLINE.split(message, maxsplit=1)[0]


def has_breaking_footer(text: str) -> bool:
    """Check whether any line of the text starts a breaking-change footer."""
    return BREAKING_FOOTER_PATTERN.search(text) is not None


def detect_bump(text: str) -> BumpType:
    """Classify a single unit of text (one commit message, or a PR title and body).

    Args:
        text: Raw, possibly multi-line text whose first line is the header

    Returns:
        The bump implied by the text; NONE when no rule matches
    """
    header = get_header(text)

    if BREAKING_HEADER_PATTERN.match(header) or has_breaking_footer(text):
        return BumpType.MAJOR
    if FEAT_HEADER_PATTERN.match(header):
        return BumpType.MINOR
    if FIX_HEADER_PATTERN.match(header):
        return BumpType.PATCH
    return BumpType.NONE


def highest_bump(bumps: Iterable[BumpType]) -> BumpType:
    """Pick the most significant bump; NONE for an empty iterable."""
    return max(bumps, key=_BUMP_RANK.__getitem__, default=BumpType.NONE)


def classify_commits(
    messages: Iterable[str],
    fallback_text: str | None = None,
) -> BumpType:
    """Classify a whole commit corpus.

    Every message is its own unit with its own header, and the corpus bump
    is the highest bump of any unit. When the corpus yields NONE, the
    fallback text (usually the pull request title and body) is classified
    the same way.

    Args:
        messages: Raw commit messages, in any order
        fallback_text: Text consulted only if the commits carry no signal

    Returns:
        Bump type for the corpus
    """
    bump = highest_bump(detect_bump(message) for message in messages if message.strip())

    if bump is BumpType.NONE and fallback_text and fallback_text.strip():
        bump = detect_bump(fallback_text)

    return bump
