"""Tests for prsync.models."""

import pytest

from prsync.models import IssueRecord, PullRequestContext, PullRequestRefs, RunReport


def test_context_frozen(pr_context: PullRequestContext) -> None:
    with pytest.raises(Exception):  # ValidationError or TypeError depending on pydantic version
        pr_context.title = "changed"  # type: ignore[misc]


def test_context_null_body_becomes_empty() -> None:
    ctx = PullRequestContext(
        owner="acme",
        repo="webshop",
        number=1,
        head_ref="feature/PROJ-1",
        base_ref="develop",
        title=None,  # type: ignore[arg-type]
        body=None,  # type: ignore[arg-type]
        author="octocat",
    )
    assert ctx.body == ""
    assert ctx.title == ""


def test_issue_defaults() -> None:
    issue = IssueRecord(key="PROJ-1", summary="Epic")
    assert issue.parent_key is None
    assert issue.components == []
    assert issue.url is None


def test_issue_frozen(issue_record: IssueRecord) -> None:
    with pytest.raises(Exception):
        issue_record.summary = "changed"  # type: ignore[misc]


def test_refs_frozen(pr_refs: PullRequestRefs) -> None:
    with pytest.raises(Exception):
        pr_refs.base_sha = "c" * 40  # type: ignore[misc]


def test_report_defaults() -> None:
    report = RunReport(pull_request="acme/webshop#7")
    assert report.labels == []
    assert report.title is None
    assert report.body_updated is False
    assert report.validations == []
    assert report.dry_run is False
