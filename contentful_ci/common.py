"""
Script: contentful_ci/common.py
What: Shared helper functions used by all `contentful_ci` modules.
Doing: Wraps env reads, GitHub step output writes, and timestamp formatting.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Mapping, Sequence


class CiToolError(RuntimeError):
    """Raised when a workflow helper script hits a known error condition."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise CiToolError(f"Missing required environment variable: {name}")
    return value


def missing_env(names: Sequence[str]) -> list[str]:
    """Return the names from `names` that are unset or empty, in order."""
    return [name for name in names if not os.environ.get(name)]


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    """
    output_file = require_env("GITHUB_OUTPUT")
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def format_timestamp(value: str) -> str:
    """
    Render an ISO-8601 API timestamp as `YYYY-MM-DD HH:MM:SS UTC`.

    Contentful sends values like `2024-05-01T09:30:00.123Z`. Anything that does
    not parse is returned unchanged so the report still shows it.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
