"""Reconciliation engine.

Decides, for one RPM lifecycle event, whether the target tree is touched
at all and then installs or prunes the module. This is the only component
that changes the filesystem, always through its injected operators.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rpmsync.core.detector import ManagementDetector
from rpmsync.core.planners import plan_prune, plan_sync
from rpmsync.core.puppet import PuppetSettings
from rpmsync.models.plan import PrunePlan, SyncPlan
from rpmsync.models.request import LifecyclePhase, ReconciliationRequest
from rpmsync.operators.filesystem import FileSystemGateway
from rpmsync.operators.rsync import RsyncCopier

logger = logging.getLogger(__name__)


class OutcomeAction(str, Enum):
    """What the engine did for a lifecycle event."""

    SKIPPED_MANAGED = "skipped_managed"
    SKIPPED_DISABLED = "skipped_disabled"
    SKIPPED_PHASE = "skipped_phase"
    SKIPPED_SAFE_UPGRADE = "skipped_safe_upgrade"
    SYNCED = "synced"
    PRUNED = "pruned"
    PRUNE_REFUSED = "prune_refused"
    PRUNE_NOT_FINAL = "prune_not_final"


@dataclass(frozen=True, slots=True)
class ReconcileOutcome:
    """Result of a reconciliation run.

    Every outcome corresponds to exit code 0; failures raise instead.

    Attributes:
        action: What was done.
        message: Human-readable summary.
        sync_plan: Executed install plan, if any.
        prune_plan: Executed or refused uninstall plan, if any.
        created_dirs: Directories created during install.
        removed: Paths removed during uninstall.
    """

    action: OutcomeAction
    message: str
    sync_plan: SyncPlan | None = None
    prune_plan: PrunePlan | None = None
    created_dirs: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()

    @property
    def changed(self) -> bool:
        """Check if the target tree was modified."""
        return self.action == OutcomeAction.SYNCED or bool(self.removed)


class ReconciliationEngine:
    """Runs one lifecycle event against the target tree.

    Example:
        >>> engine = ReconciliationEngine(settings=load_puppet_settings())
        >>> outcome = engine.run(request)
        >>> outcome.action
        <OutcomeAction.SYNCED: 'synced'>
    """

    def __init__(
        self,
        settings: PuppetSettings,
        detector: ManagementDetector | None = None,
        filesystem: FileSystemGateway | None = None,
        copier: RsyncCopier | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Puppet settings queried once for this invocation.
            detector: Version-control management detector.
            filesystem: Gateway for directory creation, ownership and removal.
            copier: Executor for the copy step.
        """
        self._settings = settings
        self._detector = detector or ManagementDetector()
        self._filesystem = filesystem or FileSystemGateway()
        self._copier = copier or RsyncCopier()

    def run(self, request: ReconciliationRequest) -> ReconcileOutcome:
        """Reconcile the target tree for a lifecycle event.

        Args:
            request: The lifecycle event to handle.

        Returns:
            ReconcileOutcome describing what was done.

        Raises:
            ConfigurationError: If required Puppet settings are missing.
            ExecutionError: If copying or a filesystem operation fails.
        """
        target = request.target_module_dir

        state = self._detector.detect(target)
        if state.is_managed:
            return self._outcome(
                OutcomeAction.SKIPPED_MANAGED,
                f"{target} is managed by {state.vcs}, leaving it untouched",
            )

        if not request.copy_enabled:
            return self._outcome(
                OutcomeAction.SKIPPED_DISABLED,
                f"Copying of {request.module_name} is disabled, leaving {target} untouched",
            )

        if request.lifecycle_phase == LifecyclePhase.POST:
            return self._install(request)

        if request.lifecycle_phase == LifecyclePhase.PREUN:
            if not request.is_final_removal:
                return self._outcome(
                    OutcomeAction.PRUNE_NOT_FINAL,
                    f"{request.module_name} is being upgraded, not removing files",
                )
            return self._uninstall(request)

        return self._outcome(
            OutcomeAction.SKIPPED_PHASE,
            f"Nothing to do for the {request.lifecycle_phase.value} phase",
        )

    def _install(self, request: ReconciliationRequest) -> ReconcileOutcome:
        plan = plan_sync(request, self._settings)
        if plan.is_noop:
            return self._outcome(
                OutcomeAction.SKIPPED_SAFE_UPGRADE,
                f"{request.module_name} is a safe module and already installed, not upgrading",
                sync_plan=plan,
            )

        created = tuple(
            step.path for step in plan.create_dirs if self._filesystem.ensure_directory(step)
        )
        self._copier.copy(plan)
        self._filesystem.chown_group_recursive(plan.dest, plan.group)

        return self._outcome(
            OutcomeAction.SYNCED,
            f"Installed {request.module_name} into {plan.dest} ({plan.copy_mode.value})",
            sync_plan=plan,
            created_dirs=created,
        )

    def _uninstall(self, request: ReconciliationRequest) -> ReconcileOutcome:
        plan = plan_prune(request)
        if plan.is_refused:
            return self._outcome(
                OutcomeAction.PRUNE_REFUSED,
                f"Not removing {request.module_name}: {plan.refused_reason}",
                prune_plan=plan,
            )

        results = [
            self._filesystem.remove_entry(path, root=plan.target_root) for path in plan.paths()
        ]
        removed = tuple(result.path for result in results if result.removed)

        return self._outcome(
            OutcomeAction.PRUNED,
            f"Removed {len(removed)} of {len(plan)} entries of {request.module_name}",
            prune_plan=plan,
            removed=removed,
        )

    @staticmethod
    def _outcome(
        action: OutcomeAction,
        message: str,
        **kwargs: object,
    ) -> ReconcileOutcome:
        logger.info(message)
        return ReconcileOutcome(action=action, message=message, **kwargs)  # type: ignore[arg-type]
