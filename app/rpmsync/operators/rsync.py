"""Rsync copy operator.

Copies a staged module into the target tree, either mirroring it or
leaving existing destination files alone.
"""

import logging
from collections.abc import Callable

from rpmsync.core.errors import ExecutionError
from rpmsync.models.plan import CopyMode, SyncPlan
from rpmsync.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class RsyncCopier:
    """Executes the copy step of a SyncPlan with rsync."""

    _MODE_FLAGS: dict[CopyMode, str] = {
        CopyMode.MIRROR: "--delete",
        CopyMode.PRESERVE: "--ignore-existing",
    }

    def __init__(self, runner: Callable[..., CommandResult] = run_command) -> None:
        self._runner = runner

    def is_available(self) -> bool:
        """Check if rsync is installed."""
        return command_exists("rsync")

    def build_args(self, plan: SyncPlan) -> list[str]:
        """Build the rsync command line for a plan.

        The trailing slash on the source copies its contents rather than
        the directory itself.
        """
        return [
            "rsync",
            "-a",
            "--force",
            self._MODE_FLAGS[plan.copy_mode],
            f"{plan.source}/",
            str(plan.dest),
        ]

    def copy(self, plan: SyncPlan) -> CommandResult:
        """Copy the plan's source into its destination.

        Args:
            plan: SyncPlan to execute.

        Returns:
            CommandResult of the successful rsync run.

        Raises:
            ExecutionError: If rsync cannot be run or exits non-zero.
        """
        args = self.build_args(plan)
        logger.info("Copying %s to %s (%s)", plan.source, plan.dest, plan.copy_mode.value)

        try:
            result = self._runner(args)
        except OSError as e:
            raise ExecutionError(f"Could not run rsync: {e}") from e

        if not result.success:
            msg = f"Failed to copy {plan.source} to {plan.dest} (exit {result.returncode})"
            raise ExecutionError(msg, output=result.output)

        return result
