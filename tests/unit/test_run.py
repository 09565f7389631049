"""Tests for the 'run' command orchestration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from release_tag_bot.cli.commands.run import run_action, run_from_environment
from release_tag_bot.config.models import ActionInputs
from release_tag_bot.core.decision import DecisionAction
from release_tag_bot.core.version import BumpType
from release_tag_bot.exceptions import (
    GitHubAPIError,
    MissingMergeCommitError,
    NotPullRequestError,
    TagAlreadyExistsError,
)
from release_tag_bot.github.context import EventContext, PullRequest

if TYPE_CHECKING:
    from pathlib import Path
    from unittest.mock import MagicMock


class TestMergedPullRequest:
    """A merged pull request cuts the tag on its merge commit."""

    def test_creates_patch_tag(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        decision = run_action(inputs, merged_context, mock_client)

        mock_client.tag_exists.assert_called_once_with("v1.2.4")
        mock_client.create_tag.assert_called_once_with("v1.2.4", "abc999")
        assert decision.bump == BumpType.PATCH

    def test_creates_minor_tag(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        mock_client.list_pull_commit_messages.return_value = ["feat(api): add feature"]
        run_action(inputs, merged_context, mock_client)
        mock_client.create_tag.assert_called_once_with("v1.3.0", "abc999")

    def test_creates_major_tag(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        mock_client.list_pull_commit_messages.return_value = ["MAJOR!: breaking change"]
        run_action(inputs, merged_context, mock_client)
        mock_client.create_tag.assert_called_once_with("v2.0.0", "abc999")

    def test_merge_commit_message_counts(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        """The merge commit message is classified with the PR commits."""
        mock_client.list_pull_commit_messages.return_value = ["chore: tidy"]
        mock_client.get_commit_message.return_value = "feat: squashed feature (#42)"

        run_action(inputs, merged_context, mock_client)

        mock_client.get_commit_message.assert_called_once_with("abc999")
        mock_client.create_tag.assert_called_once_with("v1.3.0", "abc999")

    def test_unreadable_merge_commit_continues(
        self,
        inputs: ActionInputs,
        merged_context: EventContext,
        mock_client: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ):
        caplog.set_level(logging.INFO, logger="release_tag_bot")
        mock_client.get_commit_message.side_effect = GitHubAPIError("gone", status_code=404)

        run_action(inputs, merged_context, mock_client)

        assert "Could not read merge commit message" in caplog.text
        mock_client.create_tag.assert_called_once_with("v1.2.4", "abc999")

    def test_no_tags_starts_from_zero(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        mock_client.list_tags.return_value = []
        mock_client.list_pull_commit_messages.return_value = ["fix: first patch"]

        run_action(inputs, merged_context, mock_client)

        mock_client.create_tag.assert_called_once_with("v0.0.1", "abc999")

    def test_existing_tag_is_noop(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        """An existing tag is left alone and nothing is created."""
        mock_client.tag_exists.return_value = True

        decision = run_action(inputs, merged_context, mock_client)

        mock_client.tag_exists.assert_called_once_with("v1.2.4")
        mock_client.create_tag.assert_not_called()
        assert decision.action == DecisionAction.SKIP
        assert decision.exists_already

    def test_concurrent_creation_tolerated(
        self,
        inputs: ActionInputs,
        merged_context: EventContext,
        mock_client: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ):
        caplog.set_level(logging.INFO, logger="release_tag_bot")
        mock_client.create_tag.side_effect = TagAlreadyExistsError("v1.2.4")

        run_action(inputs, merged_context, mock_client)

        assert "created concurrently" in caplog.text

    def test_tag_creation_failure_propagates(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        mock_client.create_tag.side_effect = GitHubAPIError("forbidden", status_code=403)

        with pytest.raises(GitHubAPIError):
            run_action(inputs, merged_context, mock_client)

    def test_missing_merge_sha_fails(self, inputs: ActionInputs, mock_client: MagicMock):
        context = EventContext(pull_request=PullRequest(number=1, merged=True))

        with pytest.raises(MissingMergeCommitError, match="merge_commit_sha"):
            run_action(inputs, context, mock_client)

        mock_client.create_tag.assert_not_called()

    def test_no_keywords_creates_nothing(
        self, inputs: ActionInputs, merged_context: EventContext, mock_client: MagicMock
    ):
        mock_client.list_pull_commit_messages.return_value = ["chore: refactor"]

        decision = run_action(inputs, merged_context, mock_client)

        assert decision.bump == BumpType.NONE
        mock_client.list_tags.assert_called_once()
        mock_client.tag_exists.assert_not_called()
        mock_client.create_tag.assert_not_called()


class TestPreview:
    """An open pull request only previews the next tag."""

    def test_preview_creates_nothing(
        self, inputs: ActionInputs, open_context: EventContext, mock_client: MagicMock
    ):
        decision = run_action(inputs, open_context, mock_client)

        assert decision.next_tag == "v1.2.4"
        mock_client.get_commit_message.assert_not_called()
        mock_client.tag_exists.assert_not_called()
        mock_client.create_tag.assert_not_called()
        mock_client.create_release.assert_not_called()

    def test_preview_comment(self, open_context: EventContext, mock_client: MagicMock):
        inputs = ActionInputs(token="t", v_prefix=True, comment_pr=True)

        run_action(inputs, open_context, mock_client)

        number, body = mock_client.create_issue_comment.call_args[0]
        assert number == 42
        assert "`v1.2.4`" in body
        assert "Preview only" in body
        assert body.startswith("<!-- release-tag-commit-bot:start -->")

    def test_no_bump_comment(self, open_context: EventContext, mock_client: MagicMock):
        inputs = ActionInputs(token="t", comment_pr=True, comment_marker="tagger")
        mock_client.list_pull_commit_messages.return_value = ["docs: x"]

        run_action(inputs, open_context, mock_client)

        body = mock_client.create_issue_comment.call_args[0][1]
        assert "No bump detected" in body
        assert body.startswith("<!-- tagger:start -->")

    def test_no_comment_when_disabled(
        self, inputs: ActionInputs, open_context: EventContext, mock_client: MagicMock
    ):
        run_action(inputs, open_context, mock_client)

        mock_client.list_issue_comments.assert_not_called()
        mock_client.create_issue_comment.assert_not_called()


class TestFallback:
    """PR title and body fallback."""

    def test_fallback_enabled(self, mock_client: MagicMock):
        inputs = ActionInputs(token="t", v_prefix=True, use_pr_fallback=True)
        pr = PullRequest(
            number=77, merged=True, merge_commit_sha="abc999", title="feat: exporter", body=None
        )
        mock_client.list_pull_commit_messages.return_value = ["chore: refactor"]

        run_action(inputs, EventContext(pull_request=pr), mock_client)

        mock_client.create_tag.assert_called_once_with("v1.3.0", "abc999")

    def test_fallback_disabled(self, mock_client: MagicMock):
        inputs = ActionInputs(token="t", v_prefix=True)
        pr = PullRequest(number=77, merged=True, merge_commit_sha="abc999", title="feat: exporter")
        mock_client.list_pull_commit_messages.return_value = ["chore: refactor"]

        run_action(inputs, EventContext(pull_request=pr), mock_client)

        mock_client.create_tag.assert_not_called()


class TestRelease:
    """Optional release creation."""

    def test_creates_release(self, merged_context: EventContext, mock_client: MagicMock):
        inputs = ActionInputs(
            token="t",
            v_prefix=True,
            create_release=True,
            mark_release_as_latest=True,
            generate_release_notes=True,
        )

        run_action(inputs, merged_context, mock_client)

        mock_client.create_release.assert_called_once_with(
            "v1.2.4",
            "abc999",
            generate_release_notes=True,
            make_latest=True,
        )

    def test_existing_release_not_recreated(
        self, merged_context: EventContext, mock_client: MagicMock
    ):
        inputs = ActionInputs(token="t", v_prefix=True, create_release=True)
        mock_client.get_release_by_tag.return_value = {"html_url": "https://example/r/1"}

        run_action(inputs, merged_context, mock_client)

        mock_client.create_release.assert_not_called()

    def test_release_after_existing_tag(
        self, merged_context: EventContext, mock_client: MagicMock
    ):
        """A rerun after a failed release still tries to create the release."""
        inputs = ActionInputs(token="t", v_prefix=True, create_release=True)
        mock_client.tag_exists.return_value = True

        run_action(inputs, merged_context, mock_client)

        mock_client.create_tag.assert_not_called()
        mock_client.create_release.assert_called_once()

    def test_release_failure_only_warns(
        self,
        merged_context: EventContext,
        mock_client: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ):
        """The tag stays created when the release fails."""
        caplog.set_level(logging.INFO, logger="release_tag_bot")
        inputs = ActionInputs(token="t", v_prefix=True, create_release=True)
        mock_client.create_release.side_effect = GitHubAPIError("boom", status_code=500)

        decision = run_action(inputs, merged_context, mock_client)

        mock_client.create_tag.assert_called_once_with("v1.2.4", "abc999")
        assert decision.should_create
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Failed to create release for v1.2.4" in warnings[0].getMessage()


class TestOutputs:
    """Step outputs."""

    def test_outputs_written(
        self,
        inputs: ActionInputs,
        merged_context: EventContext,
        mock_client: MagicMock,
        tmp_path: Path,
    ):
        output = tmp_path / "output"
        run_action(inputs, merged_context, mock_client, env={"GITHUB_OUTPUT": str(output)})

        lines = output.read_text().splitlines()
        assert "bump=patch" in lines
        assert "next_tag=v1.2.4" in lines
        assert "previous_tag=v1.2.3" in lines
        assert "tag_created=true" in lines

    def test_outputs_for_skip(
        self,
        inputs: ActionInputs,
        open_context: EventContext,
        mock_client: MagicMock,
        tmp_path: Path,
    ):
        output = tmp_path / "output"
        mock_client.list_pull_commit_messages.return_value = ["docs: x"]

        run_action(inputs, open_context, mock_client, env={"GITHUB_OUTPUT": str(output)})

        lines = output.read_text().splitlines()
        assert "bump=none" in lines
        assert "next_tag=" in lines
        assert "tag_created=false" in lines


class TestPreconditions:
    """Event shape preconditions."""

    def test_not_a_pull_request(self, inputs: ActionInputs, mock_client: MagicMock):
        with pytest.raises(NotPullRequestError, match="Not a PR context."):
            run_action(inputs, EventContext(event_name="push"), mock_client)

        mock_client.list_pull_commit_messages.assert_not_called()


class TestRunFromEnvironment:
    """Tests for run_from_environment()."""

    def test_missing_token_fails(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.INFO, logger="release_tag_bot")

        assert run_from_environment({"GITHUB_REPOSITORY": "octo/widgets"}) == 1
        assert "token" in caplog.text

    def test_not_a_pr_event_fails(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.INFO, logger="release_tag_bot")
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        env = {
            "INPUT_TOKEN": "t",
            "GITHUB_REPOSITORY": "octo/widgets",
            "GITHUB_EVENT_PATH": str(event),
            "GITHUB_EVENT_NAME": "push",
        }

        assert run_from_environment(env) == 1
        assert "Not a PR context." in caplog.text

    def test_unreadable_event_fails(self, tmp_path: Path):
        env = {
            "INPUT_TOKEN": "t",
            "GITHUB_REPOSITORY": "octo/widgets",
            "GITHUB_EVENT_PATH": str(tmp_path / "missing.json"),
        }
        assert run_from_environment(env) == 1
