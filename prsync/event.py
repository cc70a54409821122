"""Build a PullRequestContext from a GitHub Actions pull_request event payload."""

import json
import os
from pathlib import Path
from typing import Any

from prsync.errors import ConfigurationError
from prsync.models import PullRequestContext


def load_event(path: Path | None = None) -> dict[str, Any]:
    """Read the event JSON from path, or from GITHUB_EVENT_PATH."""
    if path is None:
        env_path = os.environ.get("GITHUB_EVENT_PATH")
        if not env_path:
            raise ConfigurationError("GITHUB_EVENT_PATH is not set; pass --event to point at a payload file.")
        path = Path(env_path)
    try:
        return json.loads(path.read_text())
    except OSError as exc:
        raise ConfigurationError(f"Cannot read event payload {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Event payload {path} is not valid JSON: {exc}") from exc


def _require(payload: dict[str, Any], dotted: str) -> Any:
    node: Any = payload
    for part in dotted.split("."):
        if not isinstance(node, dict) or node.get(part) is None:
            raise ConfigurationError(f"Event payload is missing required field '{dotted}'")
        node = node[part]
    return node


def _owner_and_repo(payload: dict[str, Any], repository: str | None) -> tuple[str, str]:
    repo_node = payload.get("repository") or {}
    owner = (repo_node.get("owner") or {}).get("login")
    name = repo_node.get("name")
    if owner and name:
        return owner, name
    full_name = repository or os.environ.get("GITHUB_REPOSITORY", "")
    if "/" not in full_name:
        raise ConfigurationError(
            "Event payload is missing 'repository.owner.login' / 'repository.name' and GITHUB_REPOSITORY is not set"
        )
    owner, name = full_name.split("/", 1)
    return owner, name


def context_from_event(payload: dict[str, Any], repository: str | None = None) -> PullRequestContext:
    """Return the PR context; raises ConfigurationError for any missing required field.

    repository ("owner/name") is only consulted when the payload has no repository block.
    """
    if "pull_request" not in payload:
        raise ConfigurationError("Event payload has no 'pull_request'; run this on pull_request events only.")
    owner, repo = _owner_and_repo(payload, repository)
    pr = payload["pull_request"]
    return PullRequestContext(
        owner=owner,
        repo=repo,
        number=_require(payload, "pull_request.number"),
        head_ref=_require(payload, "pull_request.head.ref"),
        base_ref=_require(payload, "pull_request.base.ref"),
        title=pr.get("title"),
        body=pr.get("body"),
        author=_require(payload, "pull_request.user.login"),
    )
