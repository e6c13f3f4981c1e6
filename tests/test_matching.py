"""
Script: tests/test_matching.py
What: Tests branch-to-environment matching in `contentful_ci/matching.py`.
Doing: Checks search-term extraction, exact/partial ordering, user map building, and user formatting.
Why: These rules decide which environment the workflow reports after a merge.
Goal: Keep matching behavior stable when the report code changes.
"""

from __future__ import annotations

import unittest

from contentful_ci.matching import (
    Environment,
    UserInfo,
    build_user_map,
    extract_search_term,
    find_matching_environments,
    format_user_info,
)


class ExtractSearchTermTests(unittest.TestCase):
    def test_drops_leading_prefix_segment(self) -> None:
        self.assertEqual(extract_search_term("feat/test-env"), "test-env")

    def test_keeps_later_segments(self) -> None:
        # Only the first segment is dropped.
        self.assertEqual(extract_search_term("feat/team/test-env"), "team/test-env")

    def test_branch_without_slash_is_unchanged(self) -> None:
        self.assertEqual(extract_search_term("main"), "main")


class FindMatchingEnvironmentsTests(unittest.TestCase):
    def test_splits_exact_and_partial_matches(self) -> None:
        environments = [
            Environment(id="test-env", name="test-env"),
            Environment(id="old-test-env-backup", name="backup"),
            Environment(id="master", name="master"),
        ]
        result = find_matching_environments("test-env", environments)

        self.assertEqual([env.id for env in result.exact], ["test-env"])
        self.assertEqual([env.id for env in result.partial], ["old-test-env-backup"])
        self.assertEqual([env.id for env in result.matches], ["test-env", "old-test-env-backup"])

    def test_exact_matches_come_first_in_fetch_order(self) -> None:
        environments = [
            Environment(id="staging-checkout", name="staging-checkout"),
            Environment(id="env-1", name="checkout"),
            Environment(id="checkout", name="Checkout env"),
            Environment(id="checkout-old", name="old"),
        ]
        result = find_matching_environments("checkout", environments)

        self.assertEqual([env.id for env in result.matches], ["env-1", "checkout", "staging-checkout", "checkout-old"])
        self.assertTrue(result.is_exact(environments[1]))
        self.assertFalse(result.is_exact(environments[0]))

    def test_partial_match_on_name_only(self) -> None:
        environments = [Environment(id="abc123", name="review-test-env")]
        result = find_matching_environments("test-env", environments)
        self.assertEqual(result.exact, [])
        self.assertEqual([env.id for env in result.partial], ["abc123"])

    def test_matching_is_case_and_separator_sensitive(self) -> None:
        environments = [
            Environment(id="Test-Env", name="Test-Env"),
            Environment(id="test_env", name="test/env"),
        ]
        result = find_matching_environments("test-env", environments)
        self.assertEqual(result.matches, [])

    def test_no_match_returns_empty_result(self) -> None:
        environments = [Environment(id="master", name="master")]
        result = find_matching_environments("nothing-here", environments)
        self.assertEqual(result.matches, [])
        self.assertEqual(len(environments), 1)


class EnvironmentFromApiTests(unittest.TestCase):
    def test_reads_sys_fields_and_links(self) -> None:
        item = {
            "name": "test-env",
            "sys": {
                "id": "test-env",
                "status": {"sys": {"type": "Link", "linkType": "Status", "id": "ready"}},
                "createdAt": "2024-05-01T09:30:00.000Z",
                "updatedAt": "2024-05-02T10:00:00.000Z",
                "createdBy": {"sys": {"type": "Link", "linkType": "User", "id": "user-1"}},
                "updatedBy": {"sys": {"type": "Link", "linkType": "User", "id": "user-2"}},
            },
        }
        environment = Environment.from_api(item)

        self.assertEqual(environment.id, "test-env")
        self.assertEqual(environment.status, "ready")
        self.assertEqual(environment.created_by, "user-1")
        self.assertEqual(environment.updated_by, "user-2")
        self.assertEqual(environment.created_at, "2024-05-01T09:30:00.000Z")

    def test_missing_optional_fields_default_to_empty(self) -> None:
        environment = Environment.from_api({"sys": {"id": "master"}})
        self.assertEqual(environment.name, "")
        self.assertEqual(environment.created_by, "")
        self.assertEqual(environment.updated_at, "")

    def test_empty_name_is_kept_as_returned(self) -> None:
        environment = Environment.from_api({"name": "", "sys": {"id": "review-test-env"}})
        self.assertEqual(environment.name, "")
        result = find_matching_environments("review-test-env", [environment])
        self.assertEqual([env.id for env in result.exact], ["review-test-env"])


class UserInfoTests(unittest.TestCase):
    def test_build_user_map_reads_sys_user_and_legacy_user(self) -> None:
        memberships = [
            {"sys": {"id": "m1", "user": {"sys": {"id": "u1"}, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}}},
            {"sys": {"id": "m2"}, "user": {"sys": {"id": "u2"}, "email": "grace@example.com"}},
            {"sys": {"id": "m3"}},
            {"sys": {"id": "m4", "user": {"firstName": "No id"}}},
        ]
        users = build_user_map(memberships)

        self.assertEqual(set(users), {"u1", "u2"})
        self.assertEqual(users["u1"].full_name, "Ada Lovelace")
        self.assertEqual(users["u2"], UserInfo(email="grace@example.com"))

    def test_build_user_map_skips_malformed_entries(self) -> None:
        memberships = [
            {"sys": {"user": {"sys": "u1"}}},
            {"sys": "m2", "user": "u2"},
            "not-a-membership",
            {"sys": {"user": {"sys": {"id": "u3"}, "email": "lin@example.com"}}},
        ]
        users = build_user_map(memberships)
        self.assertEqual(users, {"u3": UserInfo(email="lin@example.com")})

    def test_formats_name_and_email(self) -> None:
        users = {"u1": UserInfo(first_name="Ada", last_name="Lovelace", email="ada@example.com")}
        self.assertEqual(format_user_info("u1", users), "Ada Lovelace (ada@example.com)")

    def test_formats_email_only(self) -> None:
        users = {"u1": UserInfo(email="ada@example.com")}
        self.assertEqual(format_user_info("u1", users), "ada@example.com")

    def test_falls_back_to_id_without_name_or_email(self) -> None:
        self.assertEqual(format_user_info("u1", {"u1": UserInfo()}), "u1")

    def test_unresolved_id_is_shown_raw(self) -> None:
        self.assertEqual(format_user_info("u9", {}), "u9")

    def test_missing_user_map_shows_raw_id(self) -> None:
        self.assertEqual(format_user_info("u1", None), "u1")


if __name__ == "__main__":
    unittest.main()
