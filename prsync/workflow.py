"""Pull-request synchronisation pipeline.

Runs the checks first and only then mutates the PR, so a run that is going to
fail on the base branch never leaves a half-labelled or retitled pull request:

    VALIDATE_BASE → VALIDATE_UP_TO_DATE → ASSIGN_AUTHOR → DERIVE_LABEL
        → RECONCILE_ISSUE → REWRITE_DESCRIPTION → SUCCEEDED

Any PrSyncError moves the workflow to FAILED, which is terminal; the error is
re-raised unchanged for the caller to report.
"""

import logging
from collections.abc import Callable
from enum import Enum

from prsync.branch import classify_branch, parse_issue_key
from prsync.errors import PrSyncError, ValidationError
from prsync.models import IssueRecord, PullRequestContext, RunReport, ValidationResult
from prsync.providers.base import IssueTracker, PullRequestHost
from prsync.render import build_replacements, format_title, substitute_placeholders
from prsync.repo_state import RepositoryStateReader
from prsync.settings import PrSyncSettings

logger = logging.getLogger(__name__)


class Step(str, Enum):
    PENDING = "pending"
    VALIDATE_BASE = "validate-base"
    VALIDATE_UP_TO_DATE = "validate-up-to-date"
    ASSIGN_AUTHOR = "assign-author"
    DERIVE_LABEL = "derive-label"
    RECONCILE_ISSUE = "reconcile-issue"
    REWRITE_DESCRIPTION = "rewrite-description"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PRWorkflow:
    def __init__(
        self,
        context: PullRequestContext,
        settings: PrSyncSettings,
        host: PullRequestHost,
        tracker: IssueTracker,
        repo_state: RepositoryStateReader,
    ) -> None:
        self.context = context
        self.settings = settings
        self.host = host
        self.tracker = tracker
        self.repo_state = repo_state
        self.step = Step.PENDING
        self.failed_at: Step | None = None
        self.failure: str | None = None

        self._labels: list[str] = []
        self._validations: list[ValidationResult] = []

    @property
    def _pr(self) -> str:
        return f"{self.context.owner}/{self.context.repo}#{self.context.number}"

    def _enter(self, step: Step) -> None:
        logger.debug("%s: %s", self._pr, step.value)
        self.step = step

    def _mutate(self, action: str, call: Callable[..., None], *args: object) -> None:
        if self.settings.dry_run:
            logger.info("[dry-run] would %s", action)
            return
        logger.info("%s", action[:1].upper() + action[1:])
        call(*args)

    # ------------------------------------------------------------------
    # Checks (read-only)
    # ------------------------------------------------------------------

    def validate_base(self) -> ValidationResult:
        self._enter(Step.VALIDATE_BASE)
        intended = self.settings.base_branch
        actual = self.context.base_ref
        if actual != intended:
            raise ValidationError(f"wrong base branch: {self._pr} targets '{actual}' but must target '{intended}'")
        return ValidationResult(check="base-branch", passed=True, message=f"targets '{intended}'")

    def validate_up_to_date(self) -> ValidationResult:
        self._enter(Step.VALIDATE_UP_TO_DATE)
        ctx = self.context
        refs = self.host.get_pull_request(ctx.owner, ctx.repo, ctx.number)
        latest = self.repo_state.latest_remote_sha(ctx.base_ref)
        if refs.base_sha != latest:
            raise ValidationError(
                f"stale branch, update required: '{ctx.base_ref}' is at {latest[:12]} "
                f"but {self._pr} is based on {refs.base_sha[:12]}"
            )
        return ValidationResult(check="up-to-date", passed=True, message=f"based on {latest[:12]}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _add_label(self, label: str) -> None:
        if label in self._labels:
            return
        ctx = self.context
        self._mutate(f"add label '{label}' to {self._pr}", self.host.add_label, ctx.owner, ctx.repo, ctx.number, label)
        self._labels.append(label)

    def assign_author(self) -> str:
        self._enter(Step.ASSIGN_AUTHOR)
        ctx = self.context
        self._mutate(
            f"assign {self._pr} to {ctx.author}", self.host.add_assignee, ctx.owner, ctx.repo, ctx.number, ctx.author
        )
        return ctx.author

    def derive_label(self) -> str | None:
        self._enter(Step.DERIVE_LABEL)
        label = classify_branch(self.context.head_ref, self.settings.label_prefixes)
        if label is None:
            logger.info("Branch '%s' has no recognised prefix; no branch label", self.context.head_ref)
            return None
        self._add_label(label)
        return label

    def reconcile_issue(self) -> tuple[IssueRecord | None, str | None]:
        """Fetch the Jira issue named by the branch; label components and retitle the PR.

        Returns (issue, new_title). Both are None when the branch names no issue.
        """
        self._enter(Step.RECONCILE_ISSUE)
        ctx = self.context
        key = parse_issue_key(ctx.head_ref)
        if key is None:
            logger.info("No issue key in branch '%s'; skipping Jira", ctx.head_ref)
            return None, None

        issue = self.tracker.get_issue(key)
        logger.info("Fetched %s: %s", issue.key, issue.summary)

        if self.settings.sync_labels:
            for component in issue.components:
                self._add_label(component)

        if not self.settings.sync_title:
            return issue, None
        title = format_title(ctx.head_ref, issue.summary)
        if title != ctx.title:
            self._mutate(
                f"set title of {self._pr} to '{title}'", self.host.update_title, ctx.owner, ctx.repo, ctx.number, title
            )
        return issue, title

    def rewrite_description(self, issue: IssueRecord | None) -> bool:
        """Substitute $JIRA_SBI / $JIRA_PBI in the body; returns True if the body changed."""
        self._enter(Step.REWRITE_DESCRIPTION)
        ctx = self.context
        body = substitute_placeholders(ctx.body, build_replacements(ctx.head_ref, issue))
        if body == ctx.body:
            logger.debug("Description has no placeholders; leaving it alone")
            return False
        self._mutate(f"update description of {self._pr}", self.host.update_body, ctx.owner, ctx.repo, ctx.number, body)
        return True

    # ------------------------------------------------------------------

    def run(self) -> RunReport:
        try:
            return self._run()
        except PrSyncError as exc:
            self.failed_at = self.step
            self.failure = str(exc)
            self.step = Step.FAILED
            logger.error("%s failed at %s: %s", self._pr, self.failed_at.value, exc)
            raise

    def _run(self) -> RunReport:
        s = self.settings
        if s.check_base_branch:
            self._validations.append(self.validate_base())
        if s.check_up_to_date:
            self._validations.append(self.validate_up_to_date())

        assignee = self.assign_author() if s.assign_author else None
        if s.sync_labels:
            self.derive_label()
        issue, title = self.reconcile_issue()
        body_updated = self.rewrite_description(issue) if s.sync_description else False

        self._enter(Step.SUCCEEDED)
        return RunReport(
            pull_request=self._pr,
            assignee=assignee,
            labels=list(self._labels),
            title=title,
            body_updated=body_updated,
            issue=issue,
            validations=list(self._validations),
            dry_run=s.dry_run,
        )
