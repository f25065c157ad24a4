"""Default locations and names used by rpmsync.

The adapter configuration lives in a system-wide YAML file because the
adapter runs from RPM scriptlets as root, not as a user.
"""

import os
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("/etc/simp/adapter_config.yaml")

# Environment variable overriding the default configuration path
CONFIG_ENV_VAR = "RPMSYNC_CONFIG"

DEFAULT_NAMESPACE = "simp"

# Modules that are never overwritten or removed once installed
DEFAULT_SAFE_MODULES: frozenset[str] = frozenset({"site"})


def get_config_path() -> Path:
    """Get the adapter configuration file path.

    Returns:
        Path from RPMSYNC_CONFIG if set, /etc/simp/adapter_config.yaml otherwise.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def default_target_subpath(namespace: str = DEFAULT_NAMESPACE) -> Path:
    """Get the module tree location relative to the Puppet code directory.

    Args:
        namespace: Environment name the modules are installed into.

    Returns:
        Relative path such as environments/simp/modules.
    """
    return Path("environments") / namespace / "modules"
