"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

import yaml

from ..api.exceptions import ConfigError
from ..constants import PROJECT_CONFIG_FILE
from ..models.config import DeployConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading release configuration"""

    def __init__(self, project_root: Path, config_path: Optional[Path] = None):
        """Initialize config service

        Args:
            project_root: Git repository root
            config_path: Explicit configuration file (defaults to the
                project file at the repository root)
        """
        self.project_root = Path(project_root)
        self.explicit = config_path is not None
        self.config_path = Path(config_path) if config_path else self.project_root / PROJECT_CONFIG_FILE
        self._config: Optional[DeployConfig] = None

    @property
    def config(self) -> DeployConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> DeployConfig:
        """Load configuration from file

        A missing project file yields defaults; a missing explicit file
        is an error.

        Returns:
            Loaded configuration

        Raises:
            ConfigError: File missing (when explicit), unparsable or invalid
        """
        if not self.config_path.exists():
            if self.explicit:
                raise ConfigError(f"Configuration file not found: {self.config_path}")
            logger.debug(f"No {PROJECT_CONFIG_FILE} found, using defaults")
            self._config = DeployConfig()
            return self._config

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping")

        try:
            self._config = DeployConfig.from_dict(data)
        except ValueError as e:
            raise ConfigError(f"{self.config_path}: {e}")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._config

    def with_overrides(self, allowed_branches: Sequence[str] = ()) -> DeployConfig:
        """Get the configuration with command-line overrides applied"""
        config = self.config
        if allowed_branches:
            config.allowed_branches = list(allowed_branches)
        return config
