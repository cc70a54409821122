"""Error taxonomy. Every failure ends the run with its message."""


class PrSyncError(RuntimeError):
    """Base class for all run-terminating failures."""


class ConfigurationError(PrSyncError):
    """A required input, setting or event field is missing."""


class AuthenticationError(PrSyncError):
    """GitHub or Jira rejected the credentials."""


class NotFoundError(PrSyncError):
    """The issue key or pull request does not exist."""


class NetworkError(PrSyncError):
    """Transport failure or timeout talking to a remote API."""


class ValidationError(PrSyncError):
    """The pull request is not safe to merge (wrong base, stale branch)."""


class CommandExecutionError(PrSyncError):
    """A local git command failed."""
