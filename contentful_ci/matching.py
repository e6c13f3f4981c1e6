"""
Script: contentful_ci/matching.py
What: Matches a branch name against Contentful environments.
Doing: Derives a search term from the branch, splits environments into exact and partial matches, and formats user references.
Why: Keeps the only real decision logic free of network calls so it is easy to test.
Goal: Tell reviewers which Contentful environment belongs to a merged branch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


@dataclass(frozen=True)
class UserInfo:
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Environment:
    """
    One environment snapshot from the CMA `environments` listing.

    `created_by` and `updated_by` hold user ids taken from the `sys` links,
    not resolved user records.
    """

    id: str
    name: str
    status: str = ""
    created_at: str = ""
    updated_at: str = ""
    created_by: str = ""
    updated_by: str = ""

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> Environment:
        sys_data = _as_mapping(item.get("sys"))
        env_id = str(sys_data.get("id") or "")
        return cls(
            id=env_id,
            name=str(item.get("name") or ""),
            status=_link_id(sys_data.get("status")),
            created_at=str(sys_data.get("createdAt") or ""),
            updated_at=str(sys_data.get("updatedAt") or ""),
            created_by=_link_id(sys_data.get("createdBy")),
            updated_by=_link_id(sys_data.get("updatedBy")),
        )


@dataclass(frozen=True)
class MatchResult:
    exact: list[Environment] = field(default_factory=list)
    partial: list[Environment] = field(default_factory=list)

    @property
    def matches(self) -> list[Environment]:
        """All matches, exact ones first."""
        return [*self.exact, *self.partial]

    def is_exact(self, environment: Environment) -> bool:
        return any(env is environment for env in self.exact)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _link_id(link: Any) -> str:
    # CMA links look like {"sys": {"type": "Link", "linkType": "User", "id": "..."}}.
    return str(_as_mapping(_as_mapping(link).get("sys")).get("id") or "")


def extract_search_term(branch_name: str) -> str:
    """
    Drop one leading `<prefix>/` segment from a branch name.

    Example: `feat/test-env-deletion` becomes `test-env-deletion`, and
    `feat/a/b` becomes `a/b`. Names without `/` are returned unchanged.
    """
    if "/" in branch_name:
        return branch_name.split("/", 1)[1]
    return branch_name


def _is_exact(environment: Environment, term: str) -> bool:
    return environment.id == term or environment.name == term


def find_matching_environments(term: str, environments: Iterable[Environment]) -> MatchResult:
    """
    Split environments into exact and partial matches for `term`.

    Both lists keep the original fetch order. Comparison is case-sensitive and
    does not treat `-` and `/` as equivalent.
    """
    exact: list[Environment] = []
    partial: list[Environment] = []
    for environment in environments:
        if _is_exact(environment, term):
            exact.append(environment)
        elif term in environment.id or term in environment.name:
            partial.append(environment)
    return MatchResult(exact=exact, partial=partial)


def build_user_map(memberships: Iterable[Mapping[str, Any]]) -> dict[str, UserInfo]:
    """
    Collect user details from space membership items, keyed by user id.

    The user object moved from `user` to `sys.user` in newer API responses,
    so both places are checked. Entries of an unexpected shape are skipped.
    """
    users: dict[str, UserInfo] = {}
    for membership in memberships:
        membership = _as_mapping(membership)
        user = _as_mapping(membership.get("sys")).get("user") or membership.get("user")
        if not isinstance(user, Mapping):
            continue
        user_id = _link_id(user)
        if not user_id:
            continue
        users[user_id] = UserInfo(
            first_name=str(user.get("firstName") or ""),
            last_name=str(user.get("lastName") or ""),
            email=str(user.get("email") or ""),
        )
    return users


def format_user_info(user_id: str, users: Optional[Mapping[str, UserInfo]]) -> str:
    """
    Render a user reference for the report.

    `users` is None when the membership lookup failed; every id is then shown
    as-is.
    """
    if users is None:
        return user_id
    user = users.get(user_id)
    if user is None:
        return user_id
    if user.full_name:
        return f"{user.full_name} ({user.email})"
    return user.email or user_id
