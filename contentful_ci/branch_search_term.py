"""
Script: contentful_ci/branch_search_term.py
What: Exports the Contentful search term derived from the merged branch name.
Doing: Strips the leading `<prefix>/` segment from `BRANCH_NAME` and writes `search_term` to step outputs.
Why: Lets other workflow steps address the branch environment without repeating the naming rule.
Goal: Keep one definition of how branches map to environment names.
"""

from __future__ import annotations

from contentful_ci.common import require_env, write_github_outputs
from contentful_ci.matching import extract_search_term


def main() -> None:
    branch_name = require_env("BRANCH_NAME")
    search_term = extract_search_term(branch_name)

    # Consumed in workflow YAML as steps.<id>.outputs.search_term.
    write_github_outputs({"search_term": search_term})
    print(f"Contentful search term for {branch_name}: {search_term}")


if __name__ == "__main__":
    main()
