"""Adapter configuration loading.

This module loads the YAML adapter configuration into a validated Pydantic
model and merges command-line overrides on top of it.
"""

import logging
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rpmsync.core.errors import ConfigurationError
from rpmsync.core.paths import get_config_path

logger = logging.getLogger(__name__)

# Sentinel for "derive the target from Puppet settings"
AUTO_TARGET = "auto"


class AdapterConfig(BaseModel):
    """Adapter configuration.

    Unknown keys in the file are ignored so that older adapters keep working
    with newer configuration files.

    Attributes:
        target_directory: Module tree root, or "auto" to derive it from Puppet.
        copy_rpm_data: Whether staged module content is copied at all.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    target_directory: Annotated[
        str, Field(description="Module tree root or 'auto'")
    ] = AUTO_TARGET
    copy_rpm_data: Annotated[
        bool, Field(description="Copy staged module content into the target")
    ] = False

    @field_validator("target_directory")
    @classmethod
    def validate_target_directory(cls, v: str) -> str:
        """Require an absolute path unless the target is derived."""
        v = v.strip()
        if v == AUTO_TARGET:
            return v
        if not v or not Path(v).is_absolute():
            msg = f"target_directory must be 'auto' or an absolute path, got {v!r}"
            raise ValueError(msg)
        return v

    @property
    def is_auto_target(self) -> bool:
        """Check if the target is derived from Puppet settings."""
        return self.target_directory == AUTO_TARGET


def load_config(path: Path | None = None) -> AdapterConfig:
    """Load and validate the adapter configuration from a YAML file.

    A missing or empty file yields the defaults.

    Args:
        path: Path to the configuration file. If None, uses the default path.

    Returns:
        Validated AdapterConfig.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No configuration at %s, using defaults", config_path)
        return AdapterConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read {config_path}: {e}") from e

    if data is None:
        return AdapterConfig()
    if not isinstance(data, dict):
        msg = f"Configuration in {config_path} must be a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)

    try:
        return AdapterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


def merge_cli(
    config: AdapterConfig,
    *,
    target_dir: Path | None = None,
    enforce: bool = False,
) -> AdapterConfig:
    """Apply command-line overrides to a loaded configuration.

    Args:
        config: Configuration loaded from file.
        target_dir: Explicit target directory from --target_dir.
        enforce: Force copying regardless of copy_rpm_data.

    Returns:
        New AdapterConfig with overrides applied.

    Raises:
        ConfigurationError: If the override target is not absolute.
    """
    updates: dict[str, Any] = {}
    if target_dir is not None:
        updates["target_directory"] = str(target_dir)
    if enforce:
        updates["copy_rpm_data"] = True
    if not updates:
        return config

    try:
        return AdapterConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command-line override: {e}") from e
