"""Implementation of the 'run' command.

The run command processes one pull request event: it previews the next
tag on open pull requests and creates the tag (and optionally a release)
once the pull request is merged.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import httpx

from release_tag_bot.actions import set_output
from release_tag_bot.config import load_inputs, load_repository_config
from release_tag_bot.core.decision import TagDecision, decide
from release_tag_bot.core.version import BumpType
from release_tag_bot.exceptions import (
    GitHubError,
    MissingMergeCommitError,
    NotPullRequestError,
    TagAlreadyExistsError,
    TagBotError,
)
from release_tag_bot.github.client import GitHubClient
from release_tag_bot.github.comments import (
    CommentMarker,
    render_next_tag_comment,
    render_no_bump_comment,
    upsert_sticky_comment,
)
from release_tag_bot.github.context import load_event_context

if TYPE_CHECKING:
    from collections.abc import Mapping

    from release_tag_bot.config.models import ActionInputs
    from release_tag_bot.github.context import EventContext, PullRequest

logger = logging.getLogger(__name__)


def run_from_environment(env: Mapping[str, str] | None = None) -> int:
    """Run the action with configuration taken from the environment.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        Process exit code: 0 on success, including no-op outcomes; 1 on failure
    """
    env = os.environ if env is None else env

    try:
        inputs = load_inputs(env)
        repository = load_repository_config(env)
        context = load_event_context(repository.event_path, env.get("GITHUB_EVENT_NAME"))

        with GitHubClient(
            inputs.token,
            repository.owner,
            repository.repo,
            api_url=repository.api_url,
        ) as client:
            run_action(inputs, context, client, env=env)
    except (TagBotError, httpx.HTTPError) as e:
        logger.error(str(e))
        return 1
    return 0


def run_action(
    inputs: ActionInputs,
    context: EventContext,
    client: GitHubClient,
    env: Mapping[str, str] | None = None,
) -> TagDecision:
    """Process a pull request event.

    Args:
        inputs: Action inputs
        context: Triggering event
        client: GitHub client for the repository
        env: Environment used to locate GITHUB_OUTPUT

    Returns:
        The decision that was acted upon

    Raises:
        NotPullRequestError: If the event carries no pull request
        MissingMergeCommitError: If a merged pull request has no merge commit
        GitHubError: If a required GitHub call fails
    """
    pr = context.pull_request
    if pr is None:
        raise NotPullRequestError()

    if pr.merged and not pr.merge_commit_sha:
        raise MissingMergeCommitError()

    marker = CommentMarker(inputs.comment_marker)
    messages = _collect_commit_messages(client, pr)

    decision = decide(
        messages,
        client.list_tags(),
        inputs.v_prefix,
        fallback_text=pr.fallback_text if inputs.use_pr_fallback else None,
        # A preview never touches refs
        tag_exists=client.tag_exists if pr.merged else None,
    )

    if decision.bump is BumpType.NONE:
        if inputs.comment_pr:
            upsert_sticky_comment(client, pr.number, render_no_bump_comment(), marker)
        _write_outputs(decision, tag_created=False, env=env)
        return decision

    logger.info("Latest tag: %s, Next tag: %s", decision.baseline_tag, decision.next_tag)

    if inputs.comment_pr:
        body = render_next_tag_comment(decision, inputs.v_prefix, merged=pr.merged)
        upsert_sticky_comment(client, pr.number, body, marker)

    if not pr.merged:
        logger.info("Preview only; not creating tags or releases.")
        _write_outputs(decision, tag_created=False, env=env)
        return decision

    sha = pr.merge_commit_sha
    tag_created = False
    if decision.should_create:
        logger.info("Tag %s does not exist; can continue processing.", decision.next_tag)
        try:
            client.create_tag(decision.next_tag, sha)
            tag_created = True
            logger.info("New tag created %s", decision.next_tag)
        except TagAlreadyExistsError:
            logger.info("Tag %s was created concurrently. Nothing to do.", decision.next_tag)

    if inputs.create_release:
        _create_release(client, inputs, decision.next_tag, sha)

    _write_outputs(decision, tag_created=tag_created, env=env)
    return decision


def _collect_commit_messages(client: GitHubClient, pr: PullRequest) -> list[str]:
    """Commit messages of the pull request, merge commit first when merged."""
    messages = client.list_pull_commit_messages(pr.number)

    if pr.merged and pr.merge_commit_sha:
        try:
            messages.insert(0, client.get_commit_message(pr.merge_commit_sha))
        except (GitHubError, httpx.HTTPError):
            logger.info("Could not read merge commit message; continuing.")

    return messages


def _create_release(client: GitHubClient, inputs: ActionInputs, tag: str, sha: str) -> None:
    """Create a release for the tag; failures only warn."""
    try:
        existing = client.get_release_by_tag(tag)
        if existing is not None:
            logger.info("Release for tag %s already exists: %s", tag, existing.get("html_url"))
            return

        release = client.create_release(
            tag,
            sha,
            generate_release_notes=inputs.generate_release_notes,
            make_latest=inputs.mark_release_as_latest,
        )
        logger.info("Release created: %s", release.get("html_url"))
    except (GitHubError, httpx.HTTPError) as e:
        logger.warning("Failed to create release for %s: %s", tag, e)


def _write_outputs(
    decision: TagDecision,
    tag_created: bool,
    env: Mapping[str, str] | None = None,
) -> None:
    outputs = {
        "bump": str(decision.bump),
        "next_tag": decision.next_tag or "",
        "previous_tag": decision.baseline_tag or "",
        "tag_created": "true" if tag_created else "false",
    }
    for name, value in outputs.items():
        set_output(name, value, env)
