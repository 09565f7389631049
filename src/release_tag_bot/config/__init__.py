"""Configuration management for release-tag-bot."""

from __future__ import annotations

from release_tag_bot.config.loader import get_input, load_inputs, load_repository_config
from release_tag_bot.config.models import ActionInputs, RepositoryConfig

__all__ = [
    "ActionInputs",
    "RepositoryConfig",
    "get_input",
    "load_inputs",
    "load_repository_config",
]
