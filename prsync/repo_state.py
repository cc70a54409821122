"""Read-only queries against the checked-out repository clone."""

import logging
import subprocess
from pathlib import Path

from prsync.errors import CommandExecutionError

logger = logging.getLogger(__name__)


class RepositoryStateReader:
    """Reads ref state with git. The runner must already have fetched the refs it asks about."""

    def __init__(self, cwd: Path | None = None, remote: str = "origin", timeout: float = 30.0) -> None:
        self._cwd = cwd
        self._remote = remote
        self._timeout = timeout

    def _git(self, *args: str) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, cwd=self._cwd, capture_output=True, text=True, timeout=self._timeout)
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise CommandExecutionError(f"{' '.join(cmd)} failed: {exc}") from exc
        if result.returncode != 0:
            raise CommandExecutionError(f"{' '.join(cmd)} exited {result.returncode}: {result.stderr.strip()}")
        return result.stdout.strip()

    def latest_remote_sha(self, branch: str) -> str:
        """Return the SHA at <remote>/<branch> in the local clone."""
        return self._git("rev-parse", "--verify", f"{self._remote}/{branch}")
