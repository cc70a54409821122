"""Settings resolution: CLI overrides > env / action inputs > .github/prsync.toml > defaults."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from prsync.branch import LABEL_PREFIXES
from prsync.errors import ConfigurationError

CONFIG_PATH = Path(".github") / "prsync.toml"
CONFIG_TABLE = "prsync"


def _env(*names: str) -> AliasChoices:
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>, hyphens kept.
    return AliasChoices(*names)


class PrSyncSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub
    github_token: SecretStr | None = Field(
        default=None, validation_alias=_env("github_token", "PRSYNC_GITHUB_TOKEN", "INPUT_GITHUB-TOKEN", "GITHUB_TOKEN")
    )
    github_auth: str = "token"  # "token" | "gh-cli"
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=_env("github_api_url", "PRSYNC_GITHUB_API_URL", "GITHUB_API_URL"),
    )

    # Jira
    jira_base_url: str | None = Field(
        default=None, validation_alias=_env("jira_base_url", "PRSYNC_JIRA_BASE_URL", "INPUT_JIRA-BASE-URL")
    )
    jira_email: str | None = Field(
        default=None, validation_alias=_env("jira_email", "PRSYNC_JIRA_EMAIL", "INPUT_JIRA-EMAIL")
    )
    jira_api_token: SecretStr | None = Field(
        default=None, validation_alias=_env("jira_api_token", "PRSYNC_JIRA_API_TOKEN", "INPUT_JIRA-API-TOKEN")
    )

    # Workflow
    base_branch: str = Field(
        default="develop", validation_alias=_env("base_branch", "PRSYNC_BASE_BRANCH", "INPUT_BASE-BRANCH")
    )
    label_prefixes: list[str] = list(LABEL_PREFIXES)
    check_base_branch: bool = True
    check_up_to_date: bool = True
    assign_author: bool = True
    sync_labels: bool = True
    sync_title: bool = True
    sync_description: bool = True
    dry_run: bool = False
    timeout: float = 30.0  # seconds, per outbound call


@lru_cache(maxsize=4)
def _load_toml(path: Path) -> dict[str, Any]:
    """Return the [prsync] table of the repo config file, or {} if the file is missing."""
    if not path.exists():
        return {}
    with path.open() as fh:
        doc = tomlkit.load(fh)
    table = doc.unwrap().get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[{CONFIG_TABLE}] in {path} must be a table")
    return table


def resolve_config_path(config_path: Path | None = None) -> Path:
    if config_path is not None:
        return config_path
    env_path = os.environ.get("PRSYNC_CONFIG")
    return Path(env_path) if env_path else CONFIG_PATH


def get_settings(config_path: Path | None = None, **overrides: Any) -> PrSyncSettings:
    """Return fully resolved settings.

    Precedence (highest to lowest):
    1. overrides (CLI flags); None values are ignored
    2. PRSYNC_* / INPUT_* environment variables and .env in cwd
    3. [prsync] table in .github/prsync.toml (or --config / PRSYNC_CONFIG)
    4. field defaults
    """
    explicit = {k: v for k, v in overrides.items() if v is not None}
    table = _load_toml(resolve_config_path(config_path))

    # model_fields_set covers both init kwargs and env sources, so the TOML
    # table only fills what neither of them provided.
    settings = PrSyncSettings(**explicit)
    unset = {k: v for k, v in table.items() if k in PrSyncSettings.model_fields and k not in settings.model_fields_set}
    if unset:
        settings = PrSyncSettings(**unset, **explicit)
    return settings


def ensure_credentials(settings: PrSyncSettings, github: bool = True, jira: bool = True) -> None:
    """Raise ConfigurationError naming every missing required input."""
    missing: list[str] = []
    if github and settings.github_auth == "token" and not settings.github_token:
        missing.append("github-token")
    if jira:
        if not settings.jira_base_url:
            missing.append("jira-base-url")
        if not settings.jira_email:
            missing.append("jira-email")
        if not settings.jira_api_token:
            missing.append("jira-api-token")
    if missing:
        raise ConfigurationError(
            f"Missing required input(s): {', '.join(missing)}. Set them as action inputs, "
            "PRSYNC_* environment variables, or in the [prsync] table of .github/prsync.toml."
        )
