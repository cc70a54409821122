"""PR title and description rendering from Jira issue data."""

import re
from collections.abc import Mapping

from prsync.branch import branch_suffix
from prsync.models import IssueRecord

SBI_PLACEHOLDER = "$JIRA_SBI"  # sprint backlog item: the branch suffix
PBI_PLACEHOLDER = "$JIRA_PBI"  # product backlog item: the parent issue key


def format_title(branch: str, summary: str) -> str:
    return f"[{branch}] {summary}"


def build_replacements(branch: str, issue: IssueRecord | None = None) -> dict[str, str]:
    return {
        SBI_PLACEHOLDER: branch_suffix(branch),
        PBI_PLACEHOLDER: (issue.parent_key or "") if issue else "",
    }


def substitute_placeholders(body: str, replacements: Mapping[str, str]) -> str:
    """Replace every placeholder occurrence in a single pass.

    Replacement values are inserted literally and never re-scanned, so a value
    that happens to contain another placeholder is left as-is.
    """
    if not replacements:
        return body
    # Longest first so "$JIRA_PBI_URL" would win over "$JIRA_PBI".
    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(k) for k in keys))
    return pattern.sub(lambda m: replacements[m.group(0)], body)
