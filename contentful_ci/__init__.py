"""
Script: contentful_ci package
What: Holds Python workflow helpers for Contentful environment housekeeping.
Doing: Groups CLI entrypoints, the CMA client, and shared utility code in one importable package.
Why: Keeps workflow logic readable and testable instead of inlining it in workflow YAML.
Goal: Provide a clear, maintainable home for branch-to-environment checks.
"""
