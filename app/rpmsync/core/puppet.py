"""Puppet settings lookup.

Queries the active Puppet server settings once per invocation. The result
is an explicit value passed to every component that needs it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from rpmsync.core.errors import ConfigurationError
from rpmsync.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

PUPPET_SETTINGS = ("codedir", "confdir", "user", "group")


@dataclass(frozen=True, slots=True)
class PuppetSettings:
    """Active Puppet server settings.

    Attributes:
        codedir: Puppet code directory (holds environments/).
        confdir: Puppet configuration directory, used when codedir is unset.
        user: User the Puppet server runs as.
        group: Group the Puppet server runs as.
    """

    codedir: str = ""
    confdir: str = ""
    user: str = ""
    group: str = ""

    @property
    def base_dir(self) -> str:
        """Directory environments are rooted in, empty if unknown."""
        return self.codedir or self.confdir

    def require_user_group(self) -> tuple[str, str]:
        """Get the Puppet user and group.

        Returns:
            Tuple of (user, group).

        Raises:
            ConfigurationError: If either setting could not be determined.
        """
        if not self.user or not self.group:
            msg = "Could not determine the Puppet user and group from 'puppet config print'"
            raise ConfigurationError(msg)
        return self.user, self.group


def parse_settings(output: str) -> PuppetSettings:
    """Parse the output of ``puppet config print <keys>``.

    With several keys Puppet prints ``key = value`` lines; unrelated lines
    are ignored.

    Args:
        output: Raw stdout of the command.

    Returns:
        PuppetSettings with the values that were found.
    """
    values: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or key not in PUPPET_SETTINGS:
            continue
        values[key] = value.strip()
    return PuppetSettings(**values)


def load_puppet_settings(
    runner: Callable[..., CommandResult] = run_command,
    which: Callable[[str], bool] = command_exists,
) -> PuppetSettings:
    """Query the Puppet server settings.

    A missing puppet executable or a failing query yields empty settings;
    callers raise ConfigurationError for the values they actually need.

    Args:
        runner: Command runner, replaceable for testing.
        which: Executable lookup, replaceable for testing.

    Returns:
        PuppetSettings, possibly empty.
    """
    if not which("puppet"):
        logger.debug("puppet executable not found")
        return PuppetSettings()

    try:
        result = runner(["puppet", "config", "print", *PUPPET_SETTINGS, "--section", "server"])
    except OSError as e:
        logger.debug("puppet config print could not be run: %s", e)
        return PuppetSettings()

    if not result.success:
        logger.debug("puppet config print failed: %s", result.output)
        return PuppetSettings()

    settings = parse_settings(result.stdout)
    logger.debug("Puppet settings: %s", settings)
    return settings
