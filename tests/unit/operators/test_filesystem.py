"""Unit tests for FileSystemGateway.

Tests directory creation, group hand-over, and the conservative removal
rules for files, symlinks and directories.
"""

import os
import stat
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rpmsync.core.errors import ConfigurationError, ExecutionError
from rpmsync.models.plan import DirectoryStep
from rpmsync.operators.filesystem import FileSystemGateway


class TestEnsureDirectory:
    """Tests for FileSystemGateway.ensure_directory."""

    def test_creates_missing_directory(self, tmp_path: Path, current_group: str) -> None:
        """A missing directory is created with mode 0750 and chowned to root."""
        chown = MagicMock()
        gateway = FileSystemGateway(chown=chown)
        target = tmp_path / "env"

        created = gateway.ensure_directory(DirectoryStep(path=target, group=current_group))

        assert created is True
        assert target.is_dir()
        assert stat.S_IMODE(target.stat().st_mode) == 0o750
        chown.assert_called_once_with(str(target), 0, os.getgid())

    def test_existing_directory_untouched(self, tmp_path: Path, current_group: str) -> None:
        """An existing directory keeps its mode and ownership."""
        chown = MagicMock()
        target = tmp_path / "env"
        target.mkdir(mode=0o755)
        os.chmod(target, 0o755)

        created = FileSystemGateway(chown=chown).ensure_directory(
            DirectoryStep(path=target, group=current_group)
        )

        assert created is False
        assert stat.S_IMODE(target.stat().st_mode) == 0o755
        chown.assert_not_called()

    def test_unknown_group(self, tmp_path: Path) -> None:
        """A group that does not exist is a configuration error."""
        gateway = FileSystemGateway(chown=MagicMock())
        with pytest.raises(ConfigurationError, match="Unknown group"):
            gateway.ensure_directory(
                DirectoryStep(path=tmp_path / "env", group="no-such-group-rpmsync")
            )

    def test_chown_failure(self, tmp_path: Path, current_group: str) -> None:
        """A failing chown surfaces as ExecutionError."""
        gateway = FileSystemGateway(chown=MagicMock(side_effect=PermissionError("denied")))
        with pytest.raises(ExecutionError, match="Cannot create directory"):
            gateway.ensure_directory(DirectoryStep(path=tmp_path / "env", group=current_group))


class TestChownGroupRecursive:
    """Tests for FileSystemGateway.chown_group_recursive."""

    def test_changes_group_only(self, staged_module: Path, current_group: str) -> None:
        """Every entry gets the group, the user is left unchanged (-1)."""
        lchown = MagicMock()

        count = FileSystemGateway(lchown=lchown).chown_group_recursive(
            staged_module, current_group
        )

        # root, files, manifests, lib, foo.txt, init.pp
        assert count == 6
        for call in lchown.call_args_list:
            assert call.args[1:] == (-1, os.getgid())
        changed = {call.args[0] for call in lchown.call_args_list}
        assert str(staged_module / "files" / "foo.txt") in changed
        assert str(staged_module / "lib") in changed

    def test_failure(self, staged_module: Path, current_group: str) -> None:
        """A failing lchown surfaces as ExecutionError."""
        gateway = FileSystemGateway(lchown=MagicMock(side_effect=PermissionError("denied")))
        with pytest.raises(ExecutionError, match="Cannot change group"):
            gateway.chown_group_recursive(staged_module, current_group)


class TestRemoveEntry:
    """Tests for FileSystemGateway.remove_entry."""

    def test_removes_file(self, tmp_path: Path) -> None:
        """Plain files are removed."""
        target = tmp_path / "foo.txt"
        target.write_text("x")

        result = FileSystemGateway().remove_entry(target)

        assert result.removed is True
        assert not target.exists()

    def test_removes_symlink_not_target(self, tmp_path: Path) -> None:
        """Symlinks are removed, their targets are kept."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.txt").write_text("x")
        link = tmp_path / "link"
        link.symlink_to(real)

        result = FileSystemGateway().remove_entry(link)

        assert result.removed is True
        assert not link.is_symlink()
        assert (real / "keep.txt").exists()

    def test_removes_dangling_symlink(self, tmp_path: Path) -> None:
        """Dangling symlinks are removed."""
        link = tmp_path / "dead"
        link.symlink_to(tmp_path / "nowhere")

        assert FileSystemGateway().remove_entry(link).removed is True
        assert not link.is_symlink()

    def test_removes_empty_directory(self, tmp_path: Path) -> None:
        """Empty directories are removed."""
        target = tmp_path / "empty"
        target.mkdir()

        assert FileSystemGateway().remove_entry(target).removed is True
        assert not target.exists()

    def test_keeps_non_empty_directory(self, tmp_path: Path) -> None:
        """Directories that still hold content are skipped."""
        target = tmp_path / "full"
        target.mkdir()
        (target / "live.txt").write_text("x")

        result = FileSystemGateway().remove_entry(target)

        assert result.removed is False
        assert result.reason == "directory not empty"
        assert (target / "live.txt").exists()

    def test_absent_path_skipped(self, tmp_path: Path) -> None:
        """Absent paths are skipped without error."""
        result = FileSystemGateway().remove_entry(tmp_path / "gone")

        assert result.removed is False
        assert result.reason == "does not exist"

    def test_skips_entry_below_symlinked_directory(self, tmp_path: Path) -> None:
        """Entries reached through a symlinked directory are left alone."""
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        (elsewhere / "foo.txt").write_text("x")
        root = tmp_path / "modules"
        (root / "mymodule").mkdir(parents=True)
        (root / "mymodule" / "files").symlink_to(elsewhere)

        result = FileSystemGateway().remove_entry(
            root / "mymodule" / "files" / "foo.txt", root=root
        )

        assert result.removed is False
        assert result.reason == f"{root / 'mymodule' / 'files'} is a symlink"
        assert (elsewhere / "foo.txt").exists()

    def test_symlinked_root_allowed(self, tmp_path: Path) -> None:
        """Only directories below the root are checked, not the root itself."""
        real = tmp_path / "real"
        (real / "mymodule").mkdir(parents=True)
        (real / "mymodule" / "foo.txt").write_text("x")
        root = tmp_path / "modules"
        root.symlink_to(real)

        result = FileSystemGateway().remove_entry(root / "mymodule" / "foo.txt", root=root)

        assert result.removed is True
        assert not (real / "mymodule" / "foo.txt").exists()


class TestQueries:
    """Tests for the read-only helpers."""

    def test_is_directory_excludes_symlinks(self, staged_module: Path) -> None:
        """A symlink to a directory is not a directory."""
        gateway = FileSystemGateway()
        assert gateway.is_directory(staged_module / "files") is True
        assert gateway.is_directory(staged_module / "lib") is False
        assert gateway.is_symlink(staged_module / "lib") is True

    def test_list_entries(self, staged_module: Path) -> None:
        """Entries are listed by name, sorted."""
        assert FileSystemGateway().list_entries(staged_module) == ["files", "lib", "manifests"]
