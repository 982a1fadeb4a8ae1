"""GitHub Actions runtime helpers: inputs, event context and outputs."""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ActionContext:
    """The pull request a workflow run was triggered for."""

    repository: str
    pr_number: Optional[int] = None

    @property
    def is_pull_request(self) -> bool:
        return self.pr_number is not None


def get_input(name: str, default: str = "") -> str:
    """Read an action input as exposed by the runner.

    The runner upper-cases the input name and keeps dashes, so
    ``fail-on-breaking`` is read from ``INPUT_FAIL-ON-BREAKING``.

    Args:
        name: Input name as declared in action.yml.
        default: Value returned when the input is unset.

    Returns:
        The stripped input value.
    """
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return os.environ.get(key, default).strip()


def get_bool_input(name: str) -> bool:
    """Read a boolean action input; only ``true`` counts as set."""
    return get_input(name).lower() == "true"


def load_event_context() -> ActionContext:
    """Build the run context from GITHUB_REPOSITORY and GITHUB_EVENT_PATH.

    Returns:
        Context whose ``pr_number`` is None for non pull request events.
    """
    repository = os.environ.get("GITHUB_REPOSITORY", "")
    event_path = os.environ.get("GITHUB_EVENT_PATH")

    if not event_path or not Path(event_path).exists():
        return ActionContext(repository=repository)

    with open(event_path) as f:
        event = json.load(f)

    pull_request = event.get("pull_request") or {}
    number = pull_request.get("number")

    return ActionContext(
        repository=repository,
        pr_number=int(number) if number is not None else None,
    )


def write_output(key: str, value: str) -> None:
    """Write a key-value pair to GITHUB_OUTPUT for job outputs.

    Handles multiline values using heredoc syntax.

    Args:
        key: Output variable name.
        value: Output value (can be multiline).
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set, skipping output %s", key)
        return
    with open(output_file, "a") as f:
        if "\n" in value:
            f.write(f"{key}<<EOF\n{value}\nEOF\n")
        else:
            f.write(f"{key}={value}\n")


def write_step_summary(content: str) -> bool:
    """Append Markdown to GITHUB_STEP_SUMMARY.

    Args:
        content: Markdown content to write to the summary.

    Returns:
        True if written, False when no summary file is available.
    """
    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path:
        return False
    with open(summary_path, "a") as f:
        f.write(content)
        f.write("\n")
    return True


def set_failed(message: str) -> None:
    """Emit an error annotation for the current step."""
    sys.stdout.write(f"::error::{message}\n")
    sys.stdout.flush()
