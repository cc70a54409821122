"""Shared pydantic models — the contract between providers, workflow and main.py."""

from pydantic import BaseModel, ConfigDict, field_validator


class PullRequestContext(BaseModel):
    """The triggering pull request, read once from the event payload."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    head_ref: str  # feature/PROJ-42
    base_ref: str
    title: str = ""
    body: str = ""
    author: str  # user.login of the PR opener

    @field_validator("title", "body", mode="before")
    @classmethod
    def _none_to_empty(cls, value: str | None) -> str:
        # GitHub sends null for an empty description
        return value or ""


class IssueRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str  # PROJ-42
    summary: str
    parent_key: str | None = None
    components: list[str] = []
    url: str | None = None


class PullRequestRefs(BaseModel):
    """Base/head commit pointers as the source-control host records them."""

    model_config = ConfigDict(frozen=True)

    base_sha: str
    base_ref: str
    head_sha: str
    head_ref: str


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    check: str  # "base-branch" | "up-to-date"
    passed: bool
    message: str = ""


class RunReport(BaseModel):
    """What a successful run applied (or would apply, under dry-run)."""

    model_config = ConfigDict(frozen=True)

    pull_request: str  # owner/repo#number
    assignee: str | None = None
    labels: list[str] = []
    title: str | None = None  # None when the title was left alone
    body_updated: bool = False
    issue: IssueRecord | None = None
    validations: list[ValidationResult] = []
    dry_run: bool = False
