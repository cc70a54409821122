"""prsync CLI — all commands."""

import os
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from prsync.branch import branch_suffix, classify_branch, parse_issue_key
from prsync.errors import PrSyncError
from prsync.event import context_from_event, load_event
from prsync.log import configure_logging
from prsync.models import RunReport
from prsync.providers.base import IssueTracker, PullRequestHost
from prsync.providers.github import GitHubGateway
from prsync.providers.jira import JiraClient
from prsync.repo_state import RepositoryStateReader
from prsync.settings import PrSyncSettings, ensure_credentials, get_settings, resolve_config_path
from prsync.workflow import PRWorkflow

app = typer.Typer(help="prsync: sync pull requests with Jira and guard their base branch", no_args_is_help=True)

ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Repo config file (default .github/prsync.toml)"),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")]


# ---------------------------------------------------------------------------
# Collaborator factories
# ---------------------------------------------------------------------------


def get_gateway(settings: PrSyncSettings) -> PullRequestHost:
    return GitHubGateway(settings)


def get_tracker(settings: PrSyncSettings) -> IssueTracker:
    return JiraClient(settings)


# ---------------------------------------------------------------------------
# Failure reporting
# ---------------------------------------------------------------------------


def _escape_workflow_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _fail(message: str) -> NoReturn:
    """Report a terminal failure the way a CI step expects, then exit 1."""
    typer.echo(f"Action failed: {message}", err=True)
    if os.environ.get("GITHUB_ACTIONS") == "true":
        # Workflow command: surfaces as an error annotation on the run.
        typer.echo(f"::error::{_escape_workflow_data(message)}")
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_report(report: RunReport) -> Table:
    title = f"{report.pull_request} (dry run)" if report.dry_run else report.pull_request
    table = Table(title=title)
    table.add_column("Step", style="bold")
    table.add_column("Result")

    for result in report.validations:
        mark = "[green]✓[/green]" if result.passed else "[red]✗[/red]"
        table.add_row(result.check, f"{mark} {escape(result.message)}")

    table.add_row("assignee", report.assignee or "[dim](skipped)[/dim]")
    table.add_row("labels", escape(", ".join(report.labels)) if report.labels else "[dim](none)[/dim]")
    if report.issue:
        table.add_row("issue", escape(f"{report.issue.key}: {report.issue.summary}"))
        table.add_row("parent", report.issue.parent_key or "—")
    else:
        table.add_row("issue", "[dim](no issue key in branch)[/dim]")
    table.add_row("title", escape(report.title) if report.title else "[dim](unchanged)[/dim]")
    table.add_row("description", "updated" if report.body_updated else "[dim](unchanged)[/dim]")
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("run")
def run_cmd(
    event: Annotated[
        Path | None,
        typer.Option("--event", "-e", help="Event payload JSON (default $GITHUB_EVENT_PATH)"),
    ] = None,
    config: ConfigOpt = None,
    base_branch: Annotated[
        str | None,
        typer.Option("--base-branch", "-b", help="Branch every PR must target"),
    ] = None,
    repo_path: Annotated[
        Path | None,
        typer.Option("--repo-path", help="Checked-out clone used for the freshness check (default cwd)"),
    ] = None,
    remote: Annotated[str, typer.Option("--remote", help="Git remote holding the base branch")] = "origin",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Read and validate, but change nothing")] = False,
    verbose: VerboseOpt = False,
) -> None:
    """Assign, label, retitle and describe the triggering PR, after checking its base branch."""
    configure_logging(verbose)
    try:
        settings = get_settings(config_path=config, base_branch=base_branch, dry_run=True if dry_run else None)
        ensure_credentials(settings)
        # Context is complete before any collaborator is built or any call is made.
        context = context_from_event(load_event(event))
        workflow = PRWorkflow(
            context,
            settings,
            host=get_gateway(settings),
            tracker=get_tracker(settings),
            repo_state=RepositoryStateReader(cwd=repo_path, remote=remote, timeout=settings.timeout),
        )
        report = workflow.run()
    except PrSyncError as exc:
        _fail(str(exc))

    rprint(render_report(report))


@app.command("inspect-branch")
def inspect_branch(
    branch: Annotated[str, typer.Argument(help="Branch name, e.g. feature/PROJ-42")],
    config: ConfigOpt = None,
) -> None:
    """Show what prsync derives from a branch name (no network calls)."""
    try:
        settings = get_settings(config_path=config)
    except PrSyncError as exc:
        _fail(str(exc))

    table = Table(title=escape(branch))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("issue key", parse_issue_key(branch) or "[dim](none)[/dim]")
    table.add_row("label", classify_branch(branch, settings.label_prefixes) or "[dim](no label)[/dim]")
    table.add_row("$JIRA_SBI", branch_suffix(branch) or "[dim](empty)[/dim]")
    rprint(table)


@app.command("get-issue")
def get_issue(
    key: Annotated[str, typer.Argument(help="Jira issue key (e.g. PROJ-42)")],
    config: ConfigOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the Jira fields prsync uses for an issue."""
    configure_logging(verbose)
    try:
        settings = get_settings(config_path=config)
        ensure_credentials(settings, github=False)
        issue = get_tracker(settings).get_issue(key)
    except PrSyncError as exc:
        _fail(str(exc))

    table = Table(title=escape(f"{issue.key}: {issue.summary}"))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Parent", issue.parent_key or "—")
    table.add_row("Components", escape(", ".join(issue.components)) if issue.components else "none")
    table.add_row("URL", issue.url or "—")
    rprint(table)


@app.command("config-show")
def config_show(config: ConfigOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    try:
        settings = get_settings(config_path=config)
    except PrSyncError as exc:
        _fail(str(exc))

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    def flag(val: bool) -> str:
        return "[green]on[/green]" if val else "[dim]off[/dim]"

    table = Table(title="prsync Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("config file", str(resolve_config_path(config)))
    table.add_row("github_auth", settings.github_auth)
    table.add_row(
        "github_token",
        mask(settings.github_token.get_secret_value() if settings.github_token else None),
    )
    table.add_row("github_api_url", settings.github_api_url)
    table.add_row("jira_base_url", settings.jira_base_url or "[dim](not set)[/dim]")
    table.add_row("jira_email", settings.jira_email or "[dim](not set)[/dim]")
    table.add_row(
        "jira_api_token",
        mask(settings.jira_api_token.get_secret_value() if settings.jira_api_token else None),
    )
    table.add_row("base_branch", settings.base_branch)
    table.add_row("label_prefixes", ", ".join(settings.label_prefixes))
    table.add_row("check_base_branch", flag(settings.check_base_branch))
    table.add_row("check_up_to_date", flag(settings.check_up_to_date))
    table.add_row("assign_author", flag(settings.assign_author))
    table.add_row("sync_labels", flag(settings.sync_labels))
    table.add_row("sync_title", flag(settings.sync_title))
    table.add_row("sync_description", flag(settings.sync_description))
    table.add_row("dry_run", flag(settings.dry_run))
    table.add_row("timeout", f"{settings.timeout:g}s")

    rprint(table)
