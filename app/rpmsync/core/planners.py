"""Install and uninstall planning.

Planners are pure with respect to the target tree: they read the
filesystem to decide what should happen and return a plan, but never
modify anything themselves.
"""

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from rpmsync.core.errors import ExecutionError
from rpmsync.core.puppet import PuppetSettings
from rpmsync.models.plan import (
    CopyMode,
    DirectoryStep,
    EntryKind,
    PruneEntry,
    PrunePlan,
    SyncPlan,
)
from rpmsync.models.request import ReconciliationRequest

logger = logging.getLogger(__name__)

# Minimum number of non-empty segments in a target root before anything
# may be deleted below it (e.g. /etc/puppetlabs/code/environments/simp/modules)
MIN_TARGET_DEPTH = 3


def plan_sync(
    request: ReconciliationRequest,
    settings: PuppetSettings,
    exists: Callable[[Path], bool] = os.path.exists,
) -> SyncPlan:
    """Plan the installation of a staged module.

    Args:
        request: Reconciliation request for a post-install event.
        settings: Puppet settings providing the group for new directories.
        exists: Existence check, replaceable for testing.

    Returns:
        SyncPlan to execute; a no-op plan when a safe module is upgraded
        over an existing install.

    Raises:
        ConfigurationError: If the Puppet user or group is unknown.
    """
    dest = request.target_module_dir

    if request.is_safe_module and request.is_upgrade and exists(dest):
        logger.info(
            "Safe module %s already installed at %s, not upgrading", request.module_name, dest
        )
        return SyncPlan.noop(source=request.source_dir, dest=dest)

    _, group = settings.require_user_group()

    create_dirs = tuple(
        DirectoryStep(path=directory, group=group)
        for directory in _ancestors(dest)
        if not exists(directory)
    )

    # Safe modules never lose content, whatever the caller asked for
    if request.preserve or request.is_safe_module:
        copy_mode = CopyMode.PRESERVE
    else:
        copy_mode = CopyMode.MIRROR

    return SyncPlan(
        source=request.source_dir,
        dest=dest,
        copy_mode=copy_mode,
        group=group,
        create_dirs=create_dirs,
    )


def _ancestors(path: Path) -> list[Path]:
    """Directories from just below the filesystem root down to path, inclusive."""
    return [*reversed(path.parents), path][1:]


def target_depth(path: Path) -> int:
    """Count the non-empty segments of a path."""
    return len([part for part in path.parts if part.strip("/")])


def walk_manifest(source_dir: Path) -> Iterator[tuple[Path, EntryKind]]:
    """Walk a staged module tree in pre-order.

    The root itself is yielded first as ``.``. Symlinks are yielded but
    never followed, even when they point at directories. Siblings are
    visited in sorted order.

    Args:
        source_dir: Staged module directory.

    Yields:
        Tuples of (path relative to source_dir, entry kind).

    Raises:
        ExecutionError: If a staged directory cannot be read.
    """
    yield Path("."), EntryKind.DIRECTORY
    yield from _walk(source_dir, Path())


def _walk(directory: Path, relative: Path) -> Iterator[tuple[Path, EntryKind]]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise ExecutionError(f"Cannot read staged directory {directory}: {e}") from e

    for entry in entries:
        rel = relative / entry.name
        if entry.is_symlink():
            yield rel, EntryKind.SYMLINK
        elif entry.is_dir(follow_symlinks=False):
            yield rel, EntryKind.DIRECTORY
            yield from _walk(Path(entry.path), rel)
        else:
            yield rel, EntryKind.FILE


def plan_prune(
    request: ReconciliationRequest,
    walker: Callable[[Path], Iterator[tuple[Path, EntryKind]]] = walk_manifest,
) -> PrunePlan:
    """Plan the removal of a module's files from the target tree.

    Only entries that exist in the package's own staged tree are planned,
    mapped onto the target by substituting the module name as their root.
    Entries are ordered deepest first so every directory follows its
    contents.

    Args:
        request: Reconciliation request for a final pre-uninstall event.
        walker: Manifest walker, replaceable for testing.

    Returns:
        PrunePlan, refused when the target root is too shallow or the
        module is a safe module.
    """
    target_root = request.target_dir

    if target_depth(target_root) < MIN_TARGET_DEPTH:
        reason = f"target {target_root} has fewer than {MIN_TARGET_DEPTH} path segments"
        logger.warning("Refusing to prune %s: %s", request.module_name, reason)
        return PrunePlan.refused(target_root, reason)

    if request.is_safe_module:
        reason = f"{request.module_name} is a safe module"
        logger.info("Refusing to prune %s: %s", request.module_name, reason)
        return PrunePlan.refused(target_root, reason)

    module_root = Path(request.module_name)
    visited = [
        PruneEntry(relative_path=module_root / relative, kind=kind)
        for relative, kind in walker(request.source_dir)
    ]
    visited.reverse()

    logger.debug("Planned %d removals for %s", len(visited), request.module_name)
    return PrunePlan(target_root=target_root, entries=tuple(visited))
