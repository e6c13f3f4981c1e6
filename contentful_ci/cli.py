"""
Script: contentful_ci/cli.py
What: Single entrypoint for every Contentful workflow step.
Doing: Resolves a command name to its step module, runs its `main()`, and maps `CiToolError` to exit code 1.
Why: Workflow YAML only needs to know one invocation form: `python3 -m contentful_ci.cli <command>`.
Goal: Keep step names and failure handling the same across workflows.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from collections.abc import Callable, Mapping

from contentful_ci.common import CiToolError


# Command name -> (step module, one-line help shown by `--help`).
COMMANDS: dict[str, tuple[str, str]] = {
    "check-contentful-env": (
        "contentful_ci.check_contentful_env",
        "Report Contentful environments matching BRANCH_NAME.",
    ),
    "branch-search-term": (
        "contentful_ci.branch_search_term",
        "Write the search term derived from BRANCH_NAME to step outputs.",
    ),
}


def command_map() -> dict[str, Callable[[], None]]:
    """Import each step module lazily and return its `main()` by command name."""
    return {
        name: importlib.import_module(module_name).main
        for name, (module_name, _help) in COMMANDS.items()
    }


def build_parser(commands: Mapping[str, Callable[[], None]]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python3 -m contentful_ci.cli",
        description="Run one Contentful workflow helper step.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)
    for name in sorted(commands):
        _module_name, help_text = COMMANDS.get(name, ("", ""))
        subparsers.add_parser(name, help=help_text or None)
    return parser


def run_command(command: str, commands: Mapping[str, Callable[[], None]]) -> None:
    commands[command]()


def main(argv: list[str] | None = None) -> None:
    commands = command_map()
    args = build_parser(commands).parse_args(argv)

    try:
        run_command(args.command, commands)
    except CiToolError as exc:
        # Step errors are already written for humans; no traceback in the job log.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
