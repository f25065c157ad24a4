"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import grp
import os
from pathlib import Path

import pytest
from rpmsync.core.puppet import PuppetSettings
from rpmsync.models.request import LifecyclePhase, ReconciliationRequest


@pytest.fixture
def current_group() -> str:
    """Name of the primary group of the test process."""
    return grp.getgrgid(os.getgid()).gr_name


@pytest.fixture
def puppet_settings(current_group: str) -> PuppetSettings:
    """Puppet settings whose group exists on the test machine."""
    return PuppetSettings(
        codedir="/etc/puppetlabs/code",
        confdir="/etc/puppetlabs/puppet",
        user="puppet",
        group=current_group,
    )


@pytest.fixture
def staged_module(tmp_path: Path) -> Path:
    """A staged module tree as an RPM would drop it.

    Layout::

        mymodule/
            files/foo.txt
            manifests/init.pp
            lib -> files   (symlink to a directory)
    """
    module = tmp_path / "staging" / "mymodule"
    (module / "files").mkdir(parents=True)
    (module / "files" / "foo.txt").write_text("foo\n")
    (module / "manifests").mkdir()
    (module / "manifests" / "init.pp").write_text("class mymodule {}\n")
    (module / "lib").symlink_to("files")
    return module


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    """A module tree root deep enough to allow pruning."""
    return tmp_path / "code" / "environments" / "simp" / "modules"


@pytest.fixture
def make_request(staged_module: Path, target_root: Path):
    """Factory for ReconciliationRequest with sensible defaults."""

    def _make(**overrides: object) -> ReconciliationRequest:
        values: dict[str, object] = {
            "module_name": staged_module.name,
            "source_dir": staged_module,
            "target_dir": target_root,
            "lifecycle_phase": LifecyclePhase.POST,
            "status_code": 1,
            "preserve": False,
            "copy_enabled": True,
            "safe_modules": frozenset({"site"}),
        }
        values.update(overrides)
        return ReconciliationRequest(**values)  # type: ignore[arg-type]

    return _make
