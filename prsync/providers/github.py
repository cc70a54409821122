"""GitHub REST API v3 pull-request gateway."""

import logging
import subprocess

import httpx

from prsync.errors import ConfigurationError, NetworkError, PrSyncError
from prsync.models import PullRequestRefs
from prsync.providers.base import PullRequestHost, check_response, decode_json
from prsync.settings import PrSyncSettings

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"


class GitHubGateway(PullRequestHost):
    def __init__(self, settings: PrSyncSettings) -> None:
        self._token = self._resolve_token(settings)
        self._base_url = (settings.github_api_url or BASE_URL).rstrip("/")
        self._timeout = settings.timeout
        self._headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _resolve_token(self, settings: PrSyncSettings) -> str:
        if settings.github_auth == "gh-cli":
            try:
                result = subprocess.run(
                    ["gh", "auth", "token"],
                    capture_output=True,
                    text=True,
                    timeout=settings.timeout,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                raise ConfigurationError(f"gh auth token failed: {exc}") from exc
            if result.returncode != 0:
                raise ConfigurationError("gh auth token failed. Run: gh auth login")
            return result.stdout.strip()
        if settings.github_token:
            return settings.github_token.get_secret_value()
        raise ConfigurationError("No GitHub credentials. Set the github-token input or PRSYNC_GITHUB_TOKEN.")

    def _request(self, method: str, path: str, what: str, body: dict | None = None) -> dict | list:
        try:
            response = httpx.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers,
                json=body,
                timeout=self._timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"GitHub request for {what} failed: {exc}") from exc
        check_response(response, "GitHub", what)
        return decode_json(response, "GitHub", what)

    def add_assignee(self, owner: str, repo: str, number: int, login: str) -> None:
        self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/assignees",
            f"{owner}/{repo}#{number}",
            {"assignees": [login]},
        )

    def add_label(self, owner: str, repo: str, number: int, label: str) -> None:
        # One label per call: a failure names exactly the label that was rejected.
        self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/labels",
            f"label '{label}' on {owner}/{repo}#{number}",
            {"labels": [label]},
        )

    def update_title(self, owner: str, repo: str, number: int, title: str) -> None:
        self._request("PATCH", f"/repos/{owner}/{repo}/pulls/{number}", f"{owner}/{repo}#{number}", {"title": title})

    def update_body(self, owner: str, repo: str, number: int, body: str) -> None:
        self._request("PATCH", f"/repos/{owner}/{repo}/pulls/{number}", f"{owner}/{repo}#{number}", {"body": body})

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestRefs:
        path = f"/repos/{owner}/{repo}/pulls/{number}"
        node = self._request("GET", path, f"{owner}/{repo}#{number}")
        try:
            return PullRequestRefs(
                base_sha=node["base"]["sha"],  # type: ignore[call-overload]
                base_ref=node["base"]["ref"],  # type: ignore[call-overload]
                head_sha=node["head"]["sha"],  # type: ignore[call-overload]
                head_ref=node["head"]["ref"],  # type: ignore[call-overload]
            )
        except (KeyError, TypeError) as exc:
            raise PrSyncError(
                f"GitHub API returned a pull request without base/head refs from {self._base_url}{path}: missing {exc}"
            ) from exc
