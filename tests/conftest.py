"""Shared test fixtures."""

import os
from pathlib import Path

import pytest

import prsync.settings as settings_module
from prsync.models import IssueRecord, PullRequestContext, PullRequestRefs
from prsync.settings import PrSyncSettings

_LEAKY_PREFIXES = ("PRSYNC_", "INPUT_", "JIRA_")
_LEAKY_NAMES = (
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_ACTIONS",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run every test in an empty cwd with no CI or prsync variables leaking in from the host."""
    for name in list(os.environ):
        if name.upper().startswith(_LEAKY_PREFIXES) or name.upper() in _LEAKY_NAMES:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


def _make_settings(**kwargs) -> PrSyncSettings:
    defaults = {
        "github_token": "ghp_test_token",
        "jira_base_url": "https://example.atlassian.net",
        "jira_email": "dev@example.com",
        "jira_api_token": "jira_test_token",
    }
    defaults.update(kwargs)
    return PrSyncSettings(**defaults)  # type: ignore[arg-type]


@pytest.fixture
def make_settings():
    """Factory: test credentials plus any overrides."""
    return _make_settings


@pytest.fixture
def settings() -> PrSyncSettings:
    return _make_settings()


@pytest.fixture
def pr_context() -> PullRequestContext:
    return PullRequestContext(
        owner="acme",
        repo="webshop",
        number=7,
        head_ref="feature/PROJ-42",
        base_ref="develop",
        title="WIP",
        body="SBI: $JIRA_SBI\nPBI: $JIRA_PBI",
        author="octocat",
    )


@pytest.fixture
def issue_record() -> IssueRecord:
    return IssueRecord(
        key="PROJ-42",
        summary="Fix login",
        parent_key="PROJ-1",
        components=["backend"],
        url="https://example.atlassian.net/browse/PROJ-42",
    )


@pytest.fixture
def pr_refs() -> PullRequestRefs:
    return PullRequestRefs(
        base_sha="a" * 40,
        base_ref="develop",
        head_sha="b" * 40,
        head_ref="feature/PROJ-42",
    )


@pytest.fixture
def event_payload() -> dict:
    return {
        "action": "opened",
        "pull_request": {
            "number": 7,
            "title": "WIP",
            "body": "SBI: $JIRA_SBI\nPBI: $JIRA_PBI",
            "user": {"login": "octocat"},
            "head": {"ref": "feature/PROJ-42", "sha": "b" * 40},
            "base": {"ref": "develop", "sha": "a" * 40},
        },
        "repository": {"name": "webshop", "owner": {"login": "acme"}},
    }
