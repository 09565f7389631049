"""Configuration loading from the workflow environment.

GitHub Actions exposes each input ``some name`` as the environment variable
``INPUT_SOME_NAME``; repository details come from the default ``GITHUB_*``
variables set on every runner.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from pydantic import ValidationError

from release_tag_bot.config.models import ActionInputs, RepositoryConfig
from release_tag_bot.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

INPUT_NAMES = tuple(ActionInputs.model_fields)


def input_env_name(name: str) -> str:
    """Environment variable holding the action input ``name``."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, env: Mapping[str, str] | None = None) -> str:
    """Read a single action input, trimmed.

    Args:
        name: Input name as declared in the action metadata
        env: Environment mapping (defaults to os.environ)

    Returns:
        Input value, or an empty string when unset
    """
    env = os.environ if env is None else env
    return env.get(input_env_name(name), "").strip()


def _format_validation_error(error: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )
    return details or str(error)


def load_inputs(env: Mapping[str, str] | None = None) -> ActionInputs:
    """Load the action inputs.

    Unset inputs fall back to their defaults; ``token`` is required.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated ActionInputs

    Raises:
        ConfigValidationError: If the token is missing or an input is invalid
    """
    raw = {name: value for name in INPUT_NAMES if (value := get_input(name, env))}

    if "token" not in raw:
        raise ConfigValidationError("Input required and not supplied: token")

    try:
        return ActionInputs.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid action inputs: {_format_validation_error(e)}"
        ) from e


def load_repository_config(env: Mapping[str, str] | None = None) -> RepositoryConfig:
    """Load repository details from the ``GITHUB_*`` runner variables.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated RepositoryConfig

    Raises:
        ConfigValidationError: If GITHUB_REPOSITORY is missing or malformed
    """
    env = os.environ if env is None else env

    repository = env.get("GITHUB_REPOSITORY", "").strip()
    if not repository:
        raise ConfigValidationError("GITHUB_REPOSITORY is not set")

    try:
        return RepositoryConfig(
            api_url=env.get("GITHUB_API_URL", ""),
            repository=repository,
            event_path=env.get("GITHUB_EVENT_PATH") or None,
        )
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid repository configuration: {_format_validation_error(e)}"
        ) from e
