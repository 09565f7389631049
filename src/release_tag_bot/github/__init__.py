"""GitHub integration: event context, REST client and status comments."""

from __future__ import annotations

from release_tag_bot.github.client import GitHubClient
from release_tag_bot.github.comments import CommentMarker, upsert_sticky_comment
from release_tag_bot.github.context import EventContext, PullRequest, load_event_context

__all__ = [
    "CommentMarker",
    "EventContext",
    "GitHubClient",
    "PullRequest",
    "load_event_context",
    "upsert_sticky_comment",
]
