"""Runtime and version-control metadata for reports.

Git lookups are best-effort: anything that goes wrong yields "unknown".
"""

import logging
import platform
import subprocess
import sys
from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable

from .models import Environment, VcsInfo

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


@runtime_checkable
class VcsInfoProvider(Protocol):
    """Source of commit/branch facts for the working copy."""

    def get_info(self) -> VcsInfo:
        """Return commit and branch. Must not raise."""
        ...


class GitInfoProvider:
    """Reads commit and branch by shelling out to git."""

    def __init__(self, cwd: Optional[str] = None, timeout_s: float = 5.0):
        self.cwd = cwd
        self.timeout_s = timeout_s

    def _git(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"git {' '.join(args)} failed: {e}")
            return UNKNOWN
        if result.returncode != 0:
            return UNKNOWN
        return result.stdout.strip() or UNKNOWN

    def get_info(self) -> VcsInfo:
        return VcsInfo(
            commit=self._git("rev-parse", "HEAD"),
            branch=self._git("rev-parse", "--abbrev-ref", "HEAD"),
        )


def collect_environment(vcs: Optional[VcsInfoProvider] = None) -> Environment:
    """Snapshot of the interpreter, host and working copy."""
    info = (vcs or GitInfoProvider()).get_info()
    return Environment(
        python_version=platform.python_version(),
        platform=sys.platform,
        arch=platform.machine(),
        timestamp=datetime.now(timezone.utc).isoformat(),
        git_commit=info.commit,
        git_branch=info.branch,
    )
