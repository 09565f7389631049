"""Semantic version tags.

Only the plain ``[v]MAJOR.MINOR.PATCH`` scheme is understood. Tags carrying
pre-release or build metadata (``v1.2.3-beta``, ``1.2.3+build``) are not
candidates and parse to None.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

TAG_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$", re.ASCII)


class BumpType(StrEnum):
    """Which version component a change set increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"


@dataclass(frozen=True, order=True, slots=True)
class Version:
    """An immutable MAJOR.MINOR.PATCH triple.

    Instances order lexicographically by (major, minor, patch), so
    ``max(versions)`` yields the latest one.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"Version components must be non-negative: {tuple(self)}")

    def __iter__(self):
        return iter((self.major, self.minor, self.patch))

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def zero(cls) -> Version:
        """Baseline used when a repository has no usable tags."""
        return cls(0, 0, 0)

    def format(self, v_prefix: bool = False) -> str:
        """Render the version as a tag name.

        Args:
            v_prefix: Prepend ``v`` to the rendered version

        Returns:
            Tag name such as ``v1.2.3`` or ``1.2.3``
        """
        prefix = "v" if v_prefix else ""
        return f"{prefix}{self.major}.{self.minor}.{self.patch}"

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for the given bump.

        Raising a component zeroes every lower component.

        Args:
            bump_type: MAJOR, MINOR or PATCH

        Returns:
            New Version instance

        Raises:
            ValueError: If bump_type is NONE; callers must skip tagging instead
        """
        match bump_type:
            case BumpType.MAJOR:
                return Version(self.major + 1, 0, 0)
            case BumpType.MINOR:
                return Version(self.major, self.minor + 1, 0)
            case BumpType.PATCH:
                return Version(self.major, self.minor, self.patch + 1)
            case _:
                raise ValueError(f"Cannot bump version {self} with bump type {bump_type!r}")


def parse_tag(tag_name: str | None) -> Version | None:
    """Parse a tag name into a Version.

    Surrounding whitespace is ignored. Anything other than an optional
    leading ``v`` followed by three dot-separated integers is rejected.

    Args:
        tag_name: Tag name as listed by the repository host

    Returns:
        Parsed Version, or None if the name is not a plain semver tag
    """
    match = TAG_PATTERN.match((tag_name or "").strip())
    if match is None:
        return None
    major, minor, patch = (int(group) for group in match.groups())
    return Version(major, minor, patch)


def compare_versions(a: Version, b: Version) -> Literal[-1, 0, 1]:
    """Compare two versions component by component.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    for left, right in zip(a, b, strict=True):
        if left > right:
            return 1
        if left < right:
            return -1
    return 0


def next_version(current: Version, bump_type: BumpType) -> Version:
    """Functional alias for ``current.bump(bump_type)``."""
    return current.bump(bump_type)
