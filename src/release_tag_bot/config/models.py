"""Configuration models.

Action inputs arrive as strings from the workflow environment. Boolean
flags follow the GitHub Actions convention: ``"true"`` in any letter case
enables a flag, every other value disables it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_COMMENT_MARKER = "release-tag-commit-bot"


def parse_bool_input(value: Any) -> bool:
    """Interpret an action input as a boolean flag."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


class ActionInputs(BaseModel):
    """Inputs accepted by the action."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    token: str = Field(min_length=1, description="Token used to authenticate to GitHub")
    v_prefix: bool = Field(default=False, description="Prefix created tags with 'v'")
    create_release: bool = Field(default=False, description="Create a release for the new tag")
    mark_release_as_latest: bool = Field(
        default=False, description="Mark the created release as the latest release"
    )
    generate_release_notes: bool = Field(
        default=False, description="Let GitHub generate release notes"
    )
    comment_pr: bool = Field(default=False, description="Upsert a status comment on the PR")
    use_pr_fallback: bool = Field(
        default=False,
        description="Classify the PR title and body when commits carry no bump",
    )
    comment_marker: str = Field(
        default=DEFAULT_COMMENT_MARKER,
        min_length=1,
        description="Identifier embedded in the sticky status comment",
    )

    @field_validator(
        "v_prefix",
        "create_release",
        "mark_release_as_latest",
        "generate_release_notes",
        "comment_pr",
        "use_pr_fallback",
        mode="before",
    )
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        return parse_bool_input(value)

    @field_validator("comment_marker", mode="before")
    @classmethod
    def _default_marker(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_COMMENT_MARKER
        return value


class RepositoryConfig(BaseModel):
    """Where the action runs: API endpoint, repository and event payload."""

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(default=DEFAULT_API_URL, description="GitHub REST API base URL")
    repository: str = Field(description="Repository in 'owner/repo' form")
    event_path: str | None = Field(default=None, description="Path to the event payload JSON")

    @field_validator("api_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_API_URL
        return str(value).rstrip("/")

    @field_validator("repository")
    @classmethod
    def _validate_repository(cls, value: str) -> str:
        owner, sep, repo = value.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"expected 'owner/repo', got {value!r}")
        return value

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.repository.partition("/")[2]
