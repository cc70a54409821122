"""Abstract bases for the two remote collaborators, plus shared HTTP error mapping."""

from abc import ABC, abstractmethod

import httpx

from prsync.errors import AuthenticationError, NotFoundError, PrSyncError
from prsync.models import IssueRecord, PullRequestRefs


class IssueTracker(ABC):
    @abstractmethod
    def get_issue(self, key: str) -> IssueRecord: ...


class PullRequestHost(ABC):
    @abstractmethod
    def add_assignee(self, owner: str, repo: str, number: int, login: str) -> None: ...

    @abstractmethod
    def add_label(self, owner: str, repo: str, number: int, label: str) -> None: ...

    @abstractmethod
    def update_title(self, owner: str, repo: str, number: int, title: str) -> None: ...

    @abstractmethod
    def update_body(self, owner: str, repo: str, number: int, body: str) -> None: ...

    @abstractmethod
    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestRefs: ...


def check_response(response: httpx.Response, service: str, what: str) -> None:
    """Map a non-2xx response onto the error taxonomy."""
    status = response.status_code
    if status in (401, 403):
        raise AuthenticationError(f"{service} API returned {status} for {what}. Check the {service} credentials.")
    if status == 404:
        raise NotFoundError(f"{service} API returned 404: {what} not found.")
    if not response.is_success:
        # Redirects count too: a 307 on a renamed repository means nothing was written.
        raise PrSyncError(f"{service} API returned {status} for {what}: {response.text[:200]}")


def decode_json(response: httpx.Response, service: str, what: str) -> dict | list:
    """Decode a 2xx body, raising PrSyncError when it is not JSON."""
    if response.status_code == 204 or not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise PrSyncError(
            f"{service} API returned a non-JSON body for {what} from {response.request.url}: {response.text[:200]}"
        ) from exc
