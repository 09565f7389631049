"""Pull request context from the workflow event payload."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from release_tag_bot.exceptions import ConfigError


class PullRequest(BaseModel):
    """The fields of a pull request payload the bot relies on."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    number: int
    merged: bool = False
    merge_commit_sha: str | None = None
    title: str = ""
    body: str | None = None

    @property
    def fallback_text(self) -> str:
        """Title and body, classified when commits carry no bump."""
        return f"{self.title}\n{self.body or ''}"


class EventContext(BaseModel):
    """The triggering event; ``pull_request`` is None outside PR events."""

    model_config = ConfigDict(frozen=True)

    event_name: str | None = None
    pull_request: PullRequest | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], event_name: str | None = None) -> EventContext:
        pr = payload.get("pull_request")
        return cls(
            event_name=event_name,
            pull_request=PullRequest.model_validate(pr) if pr else None,
        )


def load_event_context(
    event_path: str | Path | None,
    event_name: str | None = None,
) -> EventContext:
    """Read the event payload written by the runner.

    Args:
        event_path: Value of GITHUB_EVENT_PATH; None yields an empty context
        event_name: Value of GITHUB_EVENT_NAME

    Returns:
        Parsed EventContext

    Raises:
        ConfigError: If the payload cannot be read or is malformed
    """
    if not event_path:
        return EventContext(event_name=event_name)

    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read event payload {path}: {e}") from e

    try:
        return EventContext.from_payload(payload, event_name)
    except ValidationError as e:
        raise ConfigError(f"Malformed pull_request in event payload {path}: {e}") from e
