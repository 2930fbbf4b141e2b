"""Centralized host-side configuration for winboxctl."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from winboxctl.models.host_config import HostConfigModel
from winboxctl.paths import HostPaths, MachinePaths

logger = logging.getLogger(__name__)


class HostConfig:
    """Manages host-side configuration from ~/.config/winboxctl/config.yml."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or HostPaths.config_file()
        self._model = self._load()

    def _load(self) -> HostConfigModel:
        """Load configuration from file."""
        if not self.config_path.exists():
            return HostConfigModel()

        try:
            with open(self.config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return HostConfigModel()

        if not isinstance(raw_config, dict):
            logger.warning(f"Ignoring {self.config_path}: expected a mapping at top level")
            return HostConfigModel()

        try:
            return HostConfigModel.model_validate(raw_config)
        except ValidationError as e:
            logger.warning(f"Config validation errors: {e}")
            # Keep whatever sections still validate, defaults for the rest
            merged = self._deep_merge(HostConfigModel().model_dump(), raw_config)
            valid = {}
            for key, value in merged.items():
                try:
                    HostConfigModel.model_validate({key: value})
                    valid[key] = value
                except ValidationError:
                    continue
            return HostConfigModel.model_validate(valid)

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge override into base."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @property
    def model(self) -> HostConfigModel:
        return self._model

    @property
    def machine_dir(self) -> Path:
        """Directory holding the base Vagrantfile.

        Priority:
        1. WINBOXCTL_MACHINE_DIR environment variable
        2. machine.dir in config.yml
        3. ~/.local/share/winboxctl/windows-docker-machine
        """
        env_dir = os.getenv("WINBOXCTL_MACHINE_DIR")
        if env_dir:
            return Path(env_dir).expanduser()
        if self._model.machine.dir:
            return Path(self._model.machine.dir).expanduser()
        return HostPaths.default_machine_dir()

    @property
    def box_name(self) -> str:
        return os.getenv("WINBOXCTL_BOX") or self._model.machine.box

    @property
    def overlay_path(self) -> Path:
        return MachinePaths.overlay_file(self.machine_dir, self._model.machine.overlay_name)

    @property
    def default_override_name(self) -> str:
        return self._model.machine.default_override_name

    @property
    def docker_context(self) -> str:
        return self._model.docker.context

    def get(self, *keys, default=None) -> Any:
        """Get nested config value.

        Example: config.get("docker", "powershell_image")
        """
        value: Any = self._model
        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        if hasattr(value, "model_dump"):
            return value.model_dump()
        return value


# Singleton instance
_config: Optional[HostConfig] = None


def get_config() -> HostConfig:
    """Get the global host configuration."""
    global _config
    if _config is None:
        _config = HostConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    _config = None
