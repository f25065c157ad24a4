"""Main CLI application entry point.

Defines the Typer application called from RPM %pre, %post, %preun and
%postun scriptlets, e.g.::

    rpmsync --rpm_dir=/usr/share/simp/modules/foo --rpm_section=post --rpm_status=$1
"""

import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from rpmsync import __version__
from rpmsync.core.config import load_config, merge_cli
from rpmsync.core.engine import ReconcileOutcome, ReconciliationEngine
from rpmsync.core.errors import ConfigurationError, RpmsyncError
from rpmsync.core.paths import DEFAULT_SAFE_MODULES
from rpmsync.core.puppet import load_puppet_settings
from rpmsync.core.resolver import TargetResolver
from rpmsync.models.request import LifecyclePhase, ReconciliationRequest
from rpmsync.utils.formatting import err_console, print_error

app = typer.Typer(
    name="rpmsync",
    help="Copy RPM-staged Puppet modules into the Puppet environment tree.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rpmsync version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def parse_section(value: str | None) -> LifecyclePhase:
    """Validate the --rpm_section value."""
    if not value:
        raise ConfigurationError("--rpm_section is required")
    try:
        return LifecyclePhase(value)
    except ValueError as e:
        choices = ", ".join(phase.value for phase in LifecyclePhase)
        msg = f"--rpm_section must be one of {choices}, got {value!r}"
        raise ConfigurationError(msg) from e


def parse_status(value: str | None) -> int:
    """Validate the --rpm_status value."""
    if value is None or not value.strip():
        raise ConfigurationError("--rpm_status is required")
    try:
        status = int(value)
    except ValueError as e:
        raise ConfigurationError(f"--rpm_status must be an integer, got {value!r}") from e
    if status < 0:
        raise ConfigurationError(f"--rpm_status cannot be negative, got {status}")
    return status


def reconcile(
    rpm_dir: Path | None,
    rpm_section: str | None,
    rpm_status: str | None,
    *,
    config_path: Path | None = None,
    preserve: bool = False,
    enforce: bool = False,
    target_dir: Path | None = None,
) -> ReconcileOutcome:
    """Build a request from command-line input and run it.

    Args:
        rpm_dir: Directory the RPM staged the module into.
        rpm_section: Scriptlet name.
        rpm_status: Scriptlet argument.
        config_path: Adapter configuration file, default path if None.
        preserve: Keep files already present at the destination.
        enforce: Copy even if the configuration disables it.
        target_dir: Explicit module tree root.

    Returns:
        ReconcileOutcome of the engine run.

    Raises:
        ConfigurationError: If input is missing or invalid.
        ExecutionError: If copying or removal fails.
    """
    if rpm_dir is None:
        raise ConfigurationError("--rpm_dir is required")
    phase = parse_section(rpm_section)
    status = parse_status(rpm_status)

    # normpath so a trailing ".." cannot become the module name
    source_dir = Path(os.path.normpath(rpm_dir.absolute()))
    if phase in (LifecyclePhase.POST, LifecyclePhase.PREUN) and not source_dir.is_dir():
        raise ConfigurationError(f"Could not find directory {source_dir}")

    config = merge_cli(load_config(config_path), target_dir=target_dir, enforce=enforce)
    settings = load_puppet_settings()
    target = TargetResolver(settings).resolve_target(config)

    try:
        request = ReconciliationRequest(
            module_name=source_dir.name,
            source_dir=source_dir,
            target_dir=target,
            lifecycle_phase=phase,
            status_code=status,
            preserve=preserve,
            copy_enabled=config.copy_rpm_data,
            safe_modules=DEFAULT_SAFE_MODULES,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return ReconciliationEngine(settings).run(request)


@app.command()
def main(
    rpm_dir: Annotated[
        Path | None,
        typer.Option("--rpm_dir", help="Directory the RPM staged the module into."),
    ] = None,
    rpm_section: Annotated[
        str | None,
        typer.Option("--rpm_section", help="Scriptlet section: pre, post, preun or postun."),
    ] = None,
    rpm_status: Annotated[
        str | None,
        typer.Option("--rpm_status", help="Scriptlet argument passed by RPM ($1)."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Adapter configuration file."),
    ] = None,
    preserve: Annotated[
        bool,
        typer.Option("--preserve", "-p", help="Keep files already present in the target."),
    ] = False,
    enforce: Annotated[
        bool,
        typer.Option("--enforce", "-e", help="Copy even if copy_rpm_data is disabled."),
    ] = False,
    target_dir: Annotated[
        Path | None,
        typer.Option("--target_dir", "-t", help="Module tree root, overrides the configuration."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Reconcile a staged module with the Puppet environment tree.

    Modules under Git or Subversion control are never touched.
    """
    setup_logging(verbose)

    try:
        reconcile(
            rpm_dir,
            rpm_section,
            rpm_status,
            config_path=config,
            preserve=preserve,
            enforce=enforce,
            target_dir=target_dir,
        )
    except RpmsyncError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
