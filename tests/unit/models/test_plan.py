"""Unit tests for plan models."""

from pathlib import Path

from rpmsync.models.plan import (
    DEFAULT_DIR_MODE,
    CopyMode,
    DirectoryStep,
    EntryKind,
    PruneEntry,
    PrunePlan,
    SyncPlan,
)


class TestSyncPlan:
    """Tests for SyncPlan."""

    def test_noop(self) -> None:
        """A no-op plan is flagged and creates nothing."""
        plan = SyncPlan.noop(source=Path("/src/site"), dest=Path("/t/site"))
        assert plan.is_noop is True
        assert plan.create_dirs == ()

    def test_regular_plan_is_not_noop(self) -> None:
        """A regular plan is not a no-op."""
        plan = SyncPlan(
            source=Path("/src/m"), dest=Path("/t/m"), copy_mode=CopyMode.MIRROR, group="puppet"
        )
        assert plan.is_noop is False


class TestDirectoryStep:
    """Tests for DirectoryStep."""

    def test_defaults(self) -> None:
        """Directories default to root ownership and mode 0750."""
        step = DirectoryStep(path=Path("/opt/env"), group="puppet")
        assert step.owner == "root"
        assert step.mode == DEFAULT_DIR_MODE == 0o750


class TestPrunePlan:
    """Tests for PrunePlan and PruneEntry."""

    def test_refused(self) -> None:
        """A refused plan has a reason and no entries."""
        plan = PrunePlan.refused(Path("/a/b"), "too shallow")
        assert plan.is_refused is True
        assert plan.refused_reason == "too shallow"
        assert len(plan) == 0

    def test_paths_are_absolute_in_order(self) -> None:
        """paths() maps entries onto the target root, keeping their order."""
        plan = PrunePlan(
            target_root=Path("/opt/env/simp/modules"),
            entries=(
                PruneEntry(Path("mymodule/files/foo.txt"), EntryKind.FILE),
                PruneEntry(Path("mymodule/files"), EntryKind.DIRECTORY),
            ),
        )
        assert plan.paths() == [
            Path("/opt/env/simp/modules/mymodule/files/foo.txt"),
            Path("/opt/env/simp/modules/mymodule/files"),
        ]

    def test_entry_str_marks_directories(self) -> None:
        """Directory entries render with a trailing slash."""
        assert str(PruneEntry(Path("mymodule/files"), EntryKind.DIRECTORY)) == "mymodule/files/"
        assert str(PruneEntry(Path("mymodule/a.txt"), EntryKind.FILE)) == "mymodule/a.txt"
