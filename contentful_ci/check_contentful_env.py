"""
Script: contentful_ci/check_contentful_env.py
What: Checks whether a Contentful environment exists for a merged pull request branch.
Doing: Reads the space, environments, and memberships from the CMA, matches them against the branch, and prints a report.
Why: Branch environments are easy to forget after merge; this surfaces them in the workflow log.
Goal: Show reviewers which environment (and who created it) can be cleaned up.
"""

from __future__ import annotations

import math
from typing import Mapping, Optional

from contentful_ci.common import (
    CiToolError,
    format_timestamp,
    missing_env,
    optional_env,
    write_github_outputs,
)
from contentful_ci.contentful_api import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ContentfulApiError,
    ContentfulClient,
)
from contentful_ci.matching import (
    Environment,
    MatchResult,
    UserInfo,
    build_user_map,
    extract_search_term,
    find_matching_environments,
    format_user_info,
)


REQUIRED_ENV = ("CONTENTFUL_SPACE_ID", "CONTENTFUL_MANAGEMENT_TOKEN", "BRANCH_NAME")
SEPARATOR = "=" * 39
TROUBLESHOOTING_TIPS = (
    "Troubleshooting tips:",
    "   1. Verify your CONTENTFUL_MANAGEMENT_TOKEN is valid",
    "   2. Ensure the token has access to the specified space",
    "   3. Check that CONTENTFUL_SPACE_ID is correct",
)


def read_timeout() -> float:
    raw = optional_env("CONTENTFUL_REQUEST_TIMEOUT").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise CiToolError(f"CONTENTFUL_REQUEST_TIMEOUT must be a number of seconds, got {raw!r}") from exc
    # requests rejects zero, negative and non-finite timeouts at call time.
    if not math.isfinite(timeout) or timeout <= 0:
        raise CiToolError(f"CONTENTFUL_REQUEST_TIMEOUT must be a positive number of seconds, got {raw!r}")
    return timeout


def format_api_error(exc: ContentfulApiError) -> str:
    """Build the stderr report for a failed CMA call."""
    lines = ["Error occurred while querying Contentful:", ""]
    if exc.message:
        lines.append(f"Message: {exc.message}")
    if exc.status:
        lines.append(f"Status: {exc.status}")
    if exc.status_text:
        lines.append(f"Status Text: {exc.status_text}")
    lines.append("")
    lines.extend(TROUBLESHOOTING_TIPS)
    return "\n".join(lines)


def load_users(client: ContentfulClient, space_id: str) -> Optional[dict[str, UserInfo]]:
    """
    Resolve user ids to names through space memberships.

    Returns None when the lookup fails; the report then shows raw user ids.
    """
    print("Fetching user information...")
    try:
        memberships = client.get_space_memberships(space_id)
    except ContentfulApiError as exc:
        print(f"::warning::Could not fetch user details (will show user IDs only): {exc}")
        print("")
        return None
    users = build_user_map(memberships)
    print(f"Loaded {len(users)} user(s)")
    print("")
    return users


def describe_environment(
    index: int,
    environment: Environment,
    match_type: str,
    users: Optional[Mapping[str, UserInfo]],
) -> list[str]:
    """Return the report block for one matching environment."""
    lines = [
        SEPARATOR,
        f"Environment {index} ({match_type} Match)",
        SEPARATOR,
        f"Environment ID: {environment.id}",
        f"Environment Name: {environment.name}",
    ]
    if environment.status:
        lines.append(f"Status: {environment.status}")
    lines.append("")

    if environment.created_by:
        lines.append("Creator Information:")
        lines.append(f"   Created by: {format_user_info(environment.created_by, users)}")
    if environment.created_at:
        lines.append(f"   Created at: {format_timestamp(environment.created_at)}")
    if environment.updated_at:
        lines.append(f"   Updated at: {format_timestamp(environment.updated_at)}")
    if environment.updated_by:
        lines.append(f"   Updated by: {format_user_info(environment.updated_by, users)}")

    lines.append(SEPARATOR)
    lines.append("")
    return lines


def print_report(
    search_term: str,
    environments: list[Environment],
    result: MatchResult,
    users: Optional[Mapping[str, UserInfo]],
) -> None:
    matches = result.matches
    if not matches:
        print("No matching environment found")
        print(f'   Search term "{search_term}" does not match any environment in the space.')
        print("")
        print("Available environments:")
        for environment in environments:
            print(f"   - {environment.id} ({environment.name})")
        return

    print(f"FOUND {len(matches)} MATCHING ENVIRONMENT(S)")
    print("")
    for index, environment in enumerate(matches, start=1):
        match_type = "Exact" if result.is_exact(environment) else "Partial"
        for line in describe_environment(index, environment, match_type, users):
            print(line)


def check_environment(client: ContentfulClient, space_id: str, branch_name: str) -> MatchResult:
    """
    Run the lookup and print the report.

    Failures of the space or environment calls propagate as
    `ContentfulApiError`; a failed membership call only degrades the report.
    """
    search_term = extract_search_term(branch_name)
    print(f'Checking for Contentful environment matching branch: "{branch_name}"')
    print(f'Search term (extracted): "{search_term}"')
    print(f"Space ID: {space_id}")
    print("")

    space = client.get_space(space_id)
    print(f"Successfully connected to Contentful space: {space.get('name') or space_id}")
    print("")

    environments = [Environment.from_api(item) for item in client.get_environments(space_id)]
    users = load_users(client, space_id)

    result = find_matching_environments(search_term, environments)
    print_report(search_term, environments, result, users)
    return result


def main() -> None:
    # Report every missing variable at once, before any network call.
    missing = missing_env(REQUIRED_ENV)
    if missing:
        raise CiToolError(
            "\n".join(f"Missing required environment variable: {name}" for name in missing)
        )

    space_id = optional_env("CONTENTFUL_SPACE_ID")
    access_token = optional_env("CONTENTFUL_MANAGEMENT_TOKEN")
    branch_name = optional_env("BRANCH_NAME")
    base_url = optional_env("CONTENTFUL_API_BASE_URL") or DEFAULT_BASE_URL
    timeout = read_timeout()

    with ContentfulClient(access_token, base_url=base_url, timeout=timeout) as client:
        try:
            result = check_environment(client, space_id, branch_name)
        except ContentfulApiError as exc:
            raise CiToolError(format_api_error(exc)) from exc

    # Export values so later workflow steps can branch on the result.
    if optional_env("GITHUB_OUTPUT"):
        write_github_outputs(
            {
                "search_term": extract_search_term(branch_name),
                "found": "true" if result.matches else "false",
                "exact_match": "true" if result.exact else "false",
                "environment_ids": ",".join(env.id for env in result.matches),
            }
        )


if __name__ == "__main__":
    main()
