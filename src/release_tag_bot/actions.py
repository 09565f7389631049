"""GitHub Actions runner integration.

Logging under Actions is rendered as workflow commands so warnings and
errors surface as annotations on the run. Outside Actions, records go to
a rich console handler.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Mapping


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def is_github_actions(env: Mapping[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    return env.get("GITHUB_ACTIONS", "").lower() == "true"


class WorkflowCommandHandler(logging.StreamHandler):
    """Emit log records as ``::warning::``/``::error::``/``::debug::`` commands.

    INFO records are printed as plain lines, which is how the runner shows
    informational output.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            command = "error"
        elif record.levelno >= logging.WARNING:
            command = "warning"
        elif record.levelno >= logging.INFO:
            return message
        else:
            command = "debug"
        return f"::{command}::{escape_data(message)}"


def configure_logging(verbose: bool = False, env: Mapping[str, str] | None = None) -> None:
    """Install the handler matching the environment on the package logger."""
    handler: logging.Handler
    if is_github_actions(env):
        handler = WorkflowCommandHandler()
    else:
        handler = RichHandler(show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("release_tag_bot")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def set_output(name: str, value: str, env: Mapping[str, str] | None = None) -> bool:
    """Append a step output to the file named by GITHUB_OUTPUT.

    Returns:
        True if the output was written, False when GITHUB_OUTPUT is unset
    """
    env = os.environ if env is None else env
    output_path = env.get("GITHUB_OUTPUT")
    if not output_path:
        return False

    if "\n" in value or "\r" in value:
        raise ValueError(f"Output {name!r} must be a single line")

    with Path(output_path).open("a", encoding="utf-8") as fh:
        fh.write(f"{name}={value}\n")
    return True
