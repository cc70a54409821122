"""Jira Cloud REST API v2 issue reader."""

import logging

import httpx

from prsync.errors import ConfigurationError, NetworkError, PrSyncError
from prsync.models import IssueRecord
from prsync.providers.base import IssueTracker, check_response, decode_json
from prsync.settings import PrSyncSettings

logger = logging.getLogger(__name__)


class JiraClient(IssueTracker):
    def __init__(self, settings: PrSyncSettings) -> None:
        if not (settings.jira_base_url and settings.jira_email and settings.jira_api_token):
            raise ConfigurationError("jira-base-url, jira-email and jira-api-token are required")
        self._base_url = settings.jira_base_url.rstrip("/")
        # httpx turns the tuple into Authorization: Basic base64(email:token)
        self._auth = (settings.jira_email, settings.jira_api_token.get_secret_value())
        self._timeout = settings.timeout

    def _get(self, path: str, what: str) -> dict | list:
        try:
            response = httpx.get(
                f"{self._base_url}{path}",
                auth=self._auth,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"Jira request for {what} failed: {exc}") from exc
        check_response(response, "Jira", what)
        return decode_json(response, "Jira", what)

    def _record_from_node(self, node: dict, requested_key: str) -> IssueRecord:
        fields = node.get("fields") or {}
        parent = fields.get("parent") or {}
        components: list[str] = []
        for comp in fields.get("components") or []:
            name = comp.get("name")
            if name and name not in components:
                components.append(name)
        key = node.get("key") or requested_key
        return IssueRecord(
            key=key,
            summary=fields.get("summary") or "",
            parent_key=parent.get("key"),
            components=components,
            url=f"{self._base_url}/browse/{key}",
        )

    def get_issue(self, key: str) -> IssueRecord:
        logger.debug("Fetching Jira issue %s", key)
        path = f"/rest/api/2/issue/{key}"
        node = self._get(path, f"issue {key}")
        if not isinstance(node, dict) or not isinstance(node.get("fields") or {}, dict):
            raise PrSyncError(f"Jira API returned an unexpected issue payload from {self._base_url}{path}")
        return self._record_from_node(node, key)
