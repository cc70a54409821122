"""Branch-name helpers: issue key extraction and git-flow label classification."""

import re

ISSUE_KEY_PATTERN = re.compile(r"[A-Z]+-[0-9]+")

# Order is the tie-break when more than one prefix could match.
LABEL_PREFIXES: tuple[str, ...] = ("feature", "bugfix", "release", "hotfix", "support")


def parse_issue_key(branch: str) -> str | None:
    """Return the first Jira-style key in the branch name, or None.

    feature/PROJ-42-login  → PROJ-42
    chore/cleanup-deps     → None
    """
    match = ISSUE_KEY_PATTERN.search(branch)
    return match.group(0) if match else None


def classify_branch(branch: str, prefixes: tuple[str, ...] | list[str] = LABEL_PREFIXES) -> str | None:
    """Return the first prefix p for which the branch starts with "p/", else None."""
    for prefix in prefixes:
        if branch.startswith(f"{prefix}/"):
            return prefix
    return None


def branch_suffix(branch: str) -> str:
    """Text after the first "/" (feature/PROJ-42 → PROJ-42); empty if there is none."""
    _, sep, rest = branch.partition("/")
    return rest if sep else ""
