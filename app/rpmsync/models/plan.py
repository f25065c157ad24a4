"""Plan models produced by the sync and prune planners.

Plans are pure values: they describe what should happen to the target
tree and are consumed once by the engine's executors.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Owner/group rwx, others nothing
DEFAULT_DIR_MODE = 0o750


class CopyMode(str, Enum):
    """How the staged module is copied into the target.

    Attributes:
        MIRROR: Destination becomes an exact mirror, extraneous files are deleted.
        PRESERVE: Files already present at the destination are left alone.
    """

    MIRROR = "mirror"
    PRESERVE = "preserve"


class EntryKind(str, Enum):
    """Type of a manifest entry as seen in the staged source tree."""

    SYMLINK = "symlink"
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class DirectoryStep:
    """A directory to create if it is missing.

    Attributes:
        path: Absolute directory path.
        mode: Permission bits applied on creation.
        owner: User that owns the new directory.
        group: Group that owns the new directory.
    """

    path: Path
    mode: int = DEFAULT_DIR_MODE
    owner: str = "root"
    group: str = ""


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Install plan for a post-install event.

    Attributes:
        source: Staged module directory.
        dest: Target module directory.
        copy_mode: Mirror or preserve copy.
        group: Group the destination tree is handed to after copying.
        create_dirs: Missing directories, ordered from root down to dest.
        skipped: True when the install is deliberately short-circuited.
    """

    source: Path
    dest: Path
    copy_mode: CopyMode
    group: str
    create_dirs: tuple[DirectoryStep, ...] = ()
    skipped: bool = False

    @classmethod
    def noop(cls, source: Path, dest: Path, group: str = "") -> "SyncPlan":
        """Create a plan that performs no action."""
        return cls(
            source=source,
            dest=dest,
            copy_mode=CopyMode.PRESERVE,
            group=group,
            skipped=True,
        )

    @property
    def is_noop(self) -> bool:
        """Check if executing this plan must not touch the filesystem."""
        return self.skipped


@dataclass(frozen=True, slots=True)
class PruneEntry:
    """A single path from the package manifest, relative to the target root.

    Attributes:
        relative_path: Path rooted at the module name (e.g. mymodule/files/foo.txt).
        kind: What the entry was in the staged source tree.
    """

    relative_path: Path
    kind: EntryKind

    def __str__(self) -> str:
        suffix = "/" if self.kind == EntryKind.DIRECTORY else ""
        return f"{self.relative_path}{suffix}"


@dataclass(frozen=True, slots=True)
class PrunePlan:
    """Uninstall plan for a final pre-uninstall event.

    Attributes:
        target_root: Root of the module tree the entries are relative to.
        entries: Manifest entries, deepest first.
        refused_reason: Why pruning was refused, None if it was not.
    """

    target_root: Path
    entries: tuple[PruneEntry, ...] = ()
    refused_reason: str | None = None

    @classmethod
    def refused(cls, target_root: Path, reason: str) -> "PrunePlan":
        """Create a plan that refuses to delete anything."""
        return cls(target_root=target_root, refused_reason=reason)

    @property
    def is_refused(self) -> bool:
        """Check if pruning was refused as unsafe."""
        return self.refused_reason is not None

    def paths(self) -> list[Path]:
        """Absolute target paths in removal order."""
        return [self.target_root / entry.relative_path for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)
