"""Exception hierarchy for release-tag-bot.

All errors raised by the package derive from TagBotError so callers
can catch everything the bot raises with a single except clause.

Malformed tag names and non-matching commit headers are never errors:
the decision engine filters them out silently.
"""

from __future__ import annotations


class TagBotError(Exception):
    """Base exception for release-tag-bot."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(TagBotError):
    """Configuration could not be loaded."""


class ConfigValidationError(ConfigError):
    """Configuration values are missing or invalid."""


# =============================================================================
# Pull request preconditions
# =============================================================================


class PreconditionError(TagBotError):
    """The triggering event cannot be processed."""


class NotPullRequestError(PreconditionError):
    """The event payload carries no pull request."""

    def __init__(self, message: str = "Not a PR context.") -> None:
        super().__init__(message)


class MissingMergeCommitError(PreconditionError):
    """A merged pull request has no merge commit to tag."""

    def __init__(self, message: str = "PR has no merge_commit_sha. Cannot create a tag.") -> None:
        super().__init__(message)


# =============================================================================
# GitHub
# =============================================================================


class GitHubError(TagBotError):
    """Base error for GitHub API interaction."""


class GitHubAPIError(GitHubError):
    """GitHub answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubNotFoundError(GitHubAPIError):
    """The requested GitHub resource does not exist."""


class TagAlreadyExistsError(GitHubError):
    """A tag ref was created concurrently by another run."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Tag {tag} already exists")
        self.tag = tag
