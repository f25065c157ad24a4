"""Reconciliation request model.

This module defines the immutable input of a single reconciliation run:
which module, where it is staged, where it goes, and which RPM scriptlet
invoked us.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path


class LifecyclePhase(str, Enum):
    """RPM scriptlet that invoked the adapter.

    Attributes:
        PRE: %pre, before the package payload is installed.
        POST: %post, after the package payload is installed.
        PREUN: %preun, before the package payload is removed.
        POSTUN: %postun, after the package payload is removed.
    """

    PRE = "pre"
    POST = "post"
    PREUN = "preun"
    POSTUN = "postun"


class RpmStatus(IntEnum):
    """Scriptlet argument passed by RPM.

    RPM passes the number of package instances that will be installed once
    the transaction completes, so any value of two or more is an upgrade.
    """

    FINAL_REMOVAL = 0
    FIRST_INSTALL = 1
    UPGRADE = 2


@dataclass(frozen=True, slots=True)
class ReconciliationRequest:
    """Everything needed to reconcile one module for one lifecycle event.

    Attributes:
        module_name: Name of the module, also the leaf directory under target_dir.
        source_dir: Directory holding the staged module content.
        target_dir: Root of the module tree (e.g. .../environments/simp/modules).
        lifecycle_phase: Scriptlet being executed.
        status_code: RPM scriptlet argument.
        preserve: Keep files already present at the destination.
        copy_enabled: Whether synchronization is enabled at all.
        safe_modules: Modules that must never be overwritten or deleted.
    """

    module_name: str
    source_dir: Path
    target_dir: Path
    lifecycle_phase: LifecyclePhase
    status_code: int
    preserve: bool = False
    copy_enabled: bool = False
    safe_modules: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if self.module_name in ("", ".", "..") or "/" in self.module_name:
            msg = f"Invalid module name: {self.module_name!r}"
            raise ValueError(msg)
        if not self.target_dir.is_absolute():
            msg = f"Target directory must be absolute, got {self.target_dir}"
            raise ValueError(msg)
        if self.status_code < 0:
            msg = f"Status code cannot be negative, got {self.status_code}"
            raise ValueError(msg)

    @property
    def target_module_dir(self) -> Path:
        """Directory the module lives in under the target tree."""
        return self.target_dir / self.module_name

    @property
    def is_safe_module(self) -> bool:
        """Check if the module must never be overwritten or deleted."""
        return self.module_name in self.safe_modules

    @property
    def is_upgrade(self) -> bool:
        """Check if a newer version is replacing an installed one."""
        return self.status_code >= RpmStatus.UPGRADE

    @property
    def is_final_removal(self) -> bool:
        """Check if no version of the package remains after this event."""
        return self.status_code == RpmStatus.FINAL_REMOVAL
