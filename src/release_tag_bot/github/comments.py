"""Sticky pull request status comment.

The bot keeps a single status comment per pull request. The comment body
is wrapped in an HTML marker pair so later runs can find and update it in
place. Only comments authored by a bot account are considered, so a human
quoting the marker cannot capture the status comment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from release_tag_bot.config.models import DEFAULT_COMMENT_MARKER
from release_tag_bot.core.commits import SEARCHED_KEYWORDS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_tag_bot.core.decision import TagDecision
    from release_tag_bot.github.client import GitHubClient

logger = logging.getLogger(__name__)

BOT_USER_TYPE = "Bot"


@dataclass(frozen=True)
class CommentMarker:
    """Start/end HTML comments identifying the sticky comment."""

    name: str = DEFAULT_COMMENT_MARKER

    @property
    def start(self) -> str:
        return f"<!-- {self.name}:start -->"

    @property
    def end(self) -> str:
        return f"<!-- {self.name}:end -->"

    def wrap(self, body: str) -> str:
        return f"{self.start}\n{body}\n{self.end}"


def find_sticky_comment(
    comments: Iterable[dict[str, Any]],
    marker: CommentMarker,
) -> dict[str, Any] | None:
    """Return the first bot comment carrying the marker, if any."""
    for comment in comments:
        body = comment.get("body")
        user = comment.get("user") or {}
        if isinstance(body, str) and marker.start in body and user.get("type") == BOT_USER_TYPE:
            return comment
    return None


def upsert_sticky_comment(
    client: GitHubClient,
    number: int,
    body: str,
    marker: CommentMarker | None = None,
) -> dict[str, Any]:
    """Create or update the status comment on a pull request.

    Args:
        client: GitHub client for the repository
        number: Pull request number
        body: Markdown body, without markers
        marker: Marker identifying the sticky comment

    Returns:
        The created or updated comment as returned by the API
    """
    marker = marker or CommentMarker()
    wrapped = marker.wrap(body)

    existing = find_sticky_comment(client.list_issue_comments(number), marker)
    if existing is not None:
        logger.debug("Updating status comment %s on #%d", existing["id"], number)
        return client.update_issue_comment(existing["id"], wrapped)

    logger.debug("Creating status comment on #%d", number)
    return client.create_issue_comment(number, wrapped)


# =============================================================================
# Comment bodies
# =============================================================================


def render_no_bump_comment() -> str:
    keywords = ", ".join(f"`{keyword}`" for keyword in SEARCHED_KEYWORDS[:-1])
    return (
        "📝 No bump detected.\n\n"
        f"- I looked for {keywords}, or `{SEARCHED_KEYWORDS[-1]}` in the PR commits.\n"
        "- No new tag will be created on merge."
    )


def render_next_tag_comment(decision: TagDecision, v_prefix: bool, merged: bool) -> str:
    """Describe the tag a merge produces (or produced)."""
    if merged:
        status = "PR is merged; tag will be created (or already created) on the merge commit."
    else:
        status = "Preview only; tag will be created if this PR is merged."

    return (
        f"🔖 **Next tag:** `{decision.next_tag}`\n\n"
        f"- Reason: **{decision.bump}** bump inferred from commit messages.\n"
        f"- Previous tag: `{decision.baseline_tag}`\n"
        f"- Prefix `v`: **{'on' if v_prefix else 'off'}**\n"
        f"- Status: {status}"
    )
