"""Filesystem gateway.

Handles directory creation with ownership, group hand-over of installed
trees, and the conservative removal of manifest entries.
"""

import grp
import logging
import os
import pwd
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rpmsync.core.errors import ConfigurationError, ExecutionError
from rpmsync.models.plan import DirectoryStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of a single removal.

    Attributes:
        path: Absolute path that was operated on.
        removed: Whether something was removed.
        reason: Why nothing was removed, None if it was.
    """

    path: Path
    removed: bool
    reason: str | None = None


class FileSystemGateway:
    """Filesystem mutations performed on behalf of the engine.

    Attributes:
        _chown: Ownership change function taking (path, uid, gid).
        _lchown: Ownership change function that does not follow symlinks.
    """

    def __init__(
        self,
        chown: Callable[[str, int, int], None] = os.chown,
        lchown: Callable[[str, int, int], None] = os.lchown,
    ) -> None:
        self._chown = chown
        self._lchown = lchown

    def is_directory(self, path: Path) -> bool:
        """Check if path is a directory (symlinks to directories excluded)."""
        return path.is_dir() and not path.is_symlink()

    def is_symlink(self, path: Path) -> bool:
        """Check if path is a symlink, dangling or not."""
        return path.is_symlink()

    def list_entries(self, path: Path) -> list[str]:
        """List the names of the entries in a directory."""
        return sorted(os.listdir(path))

    def ensure_directory(self, step: DirectoryStep) -> bool:
        """Create a directory with the step's mode and ownership if missing.

        Existing directories are left untouched, including their mode and
        ownership.

        Args:
            step: Directory to create.

        Returns:
            True if the directory was created, False if it already existed.

        Raises:
            ConfigurationError: If the owner or group does not exist.
            ExecutionError: If the directory cannot be created.
        """
        if step.path.is_dir():
            return False

        uid = _lookup_uid(step.owner)
        gid = _lookup_gid(step.group)
        try:
            step.path.mkdir(mode=step.mode)
            # mkdir honours the umask, chmod does not
            os.chmod(step.path, step.mode)
            self._chown(str(step.path), uid, gid)
        except OSError as e:
            raise ExecutionError(f"Cannot create directory {step.path}: {e}") from e

        logger.info("Created %s (%s:%s, %o)", step.path, step.owner, step.group, step.mode)
        return True

    def chown_group_recursive(self, path: Path, group: str) -> int:
        """Hand a tree over to a group, leaving user ownership unchanged.

        Symlinks are changed themselves, never their targets.

        Args:
            path: Root of the tree.
            group: Group name.

        Returns:
            Number of entries changed.

        Raises:
            ConfigurationError: If the group does not exist.
            ExecutionError: If ownership cannot be changed.
        """
        gid = _lookup_gid(group)
        count = 0
        try:
            self._lchown(str(path), -1, gid)
            count += 1
            for root, dirs, files in os.walk(path):
                for name in dirs + files:
                    self._lchown(os.path.join(root, name), -1, gid)
                    count += 1
        except OSError as e:
            raise ExecutionError(f"Cannot change group of {path} to {group}: {e}") from e

        logger.debug("Changed group of %d entries under %s to %s", count, path, group)
        return count

    def remove_entry(self, path: Path, root: Path | None = None) -> RemovalResult:
        """Remove a single manifest entry from the target tree.

        - Symlinks are removed unconditionally.
        - Directories are removed only when empty.
        - Anything else present is removed as a file.
        - Absent paths are skipped.
        - Entries reached through a symlinked directory below root are skipped.

        Args:
            path: Absolute target path.
            root: Target root the path lies under, if known.

        Returns:
            RemovalResult describing what happened.

        Raises:
            ExecutionError: If removal fails.
        """
        link = self._symlinked_parent(path, root) if root is not None else None
        if link is not None:
            logger.warning("Not removing %s: %s is a symlink", path, link)
            return RemovalResult(path=path, removed=False, reason=f"{link} is a symlink")

        try:
            if self.is_symlink(path):
                path.unlink()
            elif path.is_dir():
                if self.list_entries(path):
                    logger.debug("Keeping non-empty directory %s", path)
                    return RemovalResult(path=path, removed=False, reason="directory not empty")
                path.rmdir()
            elif path.exists():
                path.unlink()
            else:
                return RemovalResult(path=path, removed=False, reason="does not exist")
        except OSError as e:
            raise ExecutionError(f"Cannot remove {path}: {e}") from e

        logger.debug("Removed %s", path)
        return RemovalResult(path=path, removed=True)

    def _symlinked_parent(self, path: Path, root: Path) -> Path | None:
        """Return the first symlinked directory between root and path, if any."""
        parent = root
        for part in path.relative_to(root).parts[:-1]:
            parent = parent / part
            if self.is_symlink(parent):
                return parent
        return None


def _lookup_uid(user: str) -> int:
    try:
        return pwd.getpwnam(user).pw_uid
    except KeyError as e:
        raise ConfigurationError(f"Unknown user: {user}") from e


def _lookup_gid(group: str) -> int:
    try:
        return grp.getgrnam(group).gr_gid
    except KeyError as e:
        raise ConfigurationError(f"Unknown group: {group}") from e
