"""Shared test fixtures."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from release_tag_bot.config.models import ActionInputs
from release_tag_bot.github.client import GitHubClient
from release_tag_bot.github.context import EventContext, PullRequest

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo handlers installed by configure_logging() during a test."""
    logger = logging.getLogger("release_tag_bot")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def inputs() -> ActionInputs:
    """Action inputs with every optional feature off except the v prefix."""
    return ActionInputs(token="test-token", v_prefix=True)


@pytest.fixture
def merged_pr() -> PullRequest:
    return PullRequest(
        number=42,
        merged=True,
        merge_commit_sha="abc999",
        title="Improve parser",
        body="Details",
    )


@pytest.fixture
def open_pr() -> PullRequest:
    return PullRequest(number=42, merged=False, title="Improve parser", body=None)


@pytest.fixture
def merged_context(merged_pr: PullRequest) -> EventContext:
    return EventContext(event_name="pull_request", pull_request=merged_pr)


@pytest.fixture
def open_context(open_pr: PullRequest) -> EventContext:
    return EventContext(event_name="pull_request", pull_request=open_pr)


@pytest.fixture
def mock_client() -> MagicMock:
    """A GitHubClient mock for a repository holding tag v1.2.3."""
    client = MagicMock(spec=GitHubClient)
    client.list_tags.return_value = ["v1.2.3"]
    client.list_pull_commit_messages.return_value = ["fix: bug"]
    client.get_commit_message.return_value = "Merge pull request #42 from octo/parser"
    client.tag_exists.return_value = False
    client.get_release_by_tag.return_value = None
    client.create_release.return_value = {"html_url": "https://github.com/octo/widgets/releases/1"}
    client.list_issue_comments.return_value = []
    return client


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    """Event payload of a merged pull request."""
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps(
            {
                "action": "closed",
                "pull_request": {
                    "number": 7,
                    "merged": True,
                    "merge_commit_sha": "deadbeef",
                    "title": "feat: add exporter",
                    "body": "Adds the exporter.",
                    "user": {"login": "octocat"},
                },
            }
        )
    )
    return path
