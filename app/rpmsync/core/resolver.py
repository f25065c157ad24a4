"""Target directory resolution."""

import logging
from pathlib import Path

from rpmsync.core.config import AdapterConfig
from rpmsync.core.errors import ConfigurationError
from rpmsync.core.paths import default_target_subpath
from rpmsync.core.puppet import PuppetSettings

logger = logging.getLogger(__name__)


class TargetResolver:
    """Computes the module tree root modules are installed into.

    Resolution order: explicit override, configured target_directory
    (unless "auto"), then the Puppet code directory (or config directory)
    joined with the default subpath.
    """

    def __init__(self, settings: PuppetSettings, subpath: Path | None = None) -> None:
        self._settings = settings
        self._subpath = subpath if subpath is not None else default_target_subpath()

    def resolve_target(self, config: AdapterConfig, override: Path | None = None) -> Path:
        """Resolve the module tree root.

        Args:
            config: Merged adapter configuration.
            override: Target directory given on the command line.

        Returns:
            Absolute path of the module tree root.

        Raises:
            ConfigurationError: If an explicit target is relative, or if no
                Puppet directory can be determined for the automatic target.
        """
        if override is not None:
            return self._require_absolute(override, "--target_dir")

        if not config.is_auto_target:
            return self._require_absolute(Path(config.target_directory), "target_directory")

        base_dir = self._settings.base_dir
        if not base_dir:
            msg = "Could not determine the Puppet codedir or confdir; set target_directory"
            raise ConfigurationError(msg)

        target = Path(base_dir) / self._subpath
        logger.debug("Derived target directory %s", target)
        return target

    @staticmethod
    def _require_absolute(path: Path, source: str) -> Path:
        if not path.is_absolute():
            msg = f"{source} must be an absolute path, got {path}"
            raise ConfigurationError(msg)
        return path
