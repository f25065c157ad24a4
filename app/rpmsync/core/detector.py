"""Version-control management detection.

A module directory that is tracked by Git or Subversion is owned by
whoever manages that working copy, and the adapter must leave it alone.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rpmsync.utils.shell import CommandResult, command_exists, pushd, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ManagementState:
    """Management state of a directory for one reconciliation run.

    Attributes:
        path: Directory that was inspected.
        is_managed: Whether the directory is under version control.
        vcs: Tool that confirmed management ("git" or "svn"), None if unmanaged.
    """

    path: Path
    is_managed: bool
    vcs: str | None = None


class ManagementDetector:
    """Detects whether a directory is under Git or Subversion management.

    Tool absence is not an error: a VCS whose client is not installed
    simply does not apply.
    """

    # (tool, query) pairs, tried in order
    _QUERIES: tuple[tuple[str, list[str]], ...] = (
        ("git", ["git", "ls-files", ".", "--error-unmatch"]),
        ("svn", ["svn", "info"]),
    )

    def __init__(
        self,
        runner: Callable[..., CommandResult] = run_command,
        which: Callable[[str], bool] = command_exists,
    ) -> None:
        """Initialize the detector.

        Args:
            runner: Command runner, replaceable for testing.
            which: Executable lookup, replaceable for testing.
        """
        self._runner = runner
        self._which = which

    def detect(self, path: Path) -> ManagementState:
        """Inspect a directory for version-control management.

        Args:
            path: Directory to inspect.

        Returns:
            ManagementState describing the directory.
        """
        if not path.is_dir():
            return ManagementState(path=path, is_managed=False)

        for tool, query in self._QUERIES:
            if not self._which(tool):
                logger.debug("%s not available, skipping check of %s", tool, path)
                continue
            if self._query(path, query):
                logger.info("%s is managed by %s", path, tool)
                return ManagementState(path=path, is_managed=True, vcs=tool)

        return ManagementState(path=path, is_managed=False)

    def is_managed(self, path: Path) -> bool:
        """Check if a directory is under version-control management."""
        return self.detect(path).is_managed

    def _query(self, path: Path, query: list[str]) -> bool:
        """Run a VCS query from inside the directory.

        Returns:
            True if the query exited successfully.
        """
        try:
            with pushd(path):
                result = self._runner(query)
        except OSError as e:
            logger.debug("%s could not be run in %s: %s", query[0], path, e)
            return False
        return result.success
