"""release-tag-bot: semantic version tags from conventional commits."""

from __future__ import annotations

__version__ = "0.3.0"
