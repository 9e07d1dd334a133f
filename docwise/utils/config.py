# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Configuration management utilities for the docwise package.

This module provides a centralized configuration system that manages default
options, user-provided settings, and environment variables across the model,
storage, processing and export components.
"""

import os
import yaml
import json
from pathlib import Path
from typing import Dict, Any
from copy import deepcopy

from docwise.utils.logging_helper import setup_logger, ConfigurationError

# Configure module-level logger
logger = setup_logger(__name__)

DEFAULT_MODEL_ID = "us.amazon.nova-lite-v1:0"

# Well-known environment variables mapped onto (section, option)
WELL_KNOWN_ENV_VARS = {
    "DOCWISE_S3_BUCKET": ("storage", "bucket"),
    "DOCWISE_PUBLIC_BASE_URL": ("storage", "public_base_url"),
    "DOCWISE_MODEL_ID": ("model", "model_id"),
    "AWS_PROFILE": ("aws", "profile"),
    "AWS_REGION": ("aws", "region"),
}


class ConfigManager:
    """
    Centralized configuration manager for docwise components.

    This class handles:
    - Default options
    - User-provided options
    - Environment variables
    - Option merging and cascade
    """

    def __init__(
        self, defaults: Dict[str, Any] = None, env_prefix: str = "DOCWISE_"
    ):
        """
        Initialize a configuration manager.

        Args:
            defaults: Dictionary of default options
            env_prefix: Prefix for environment variables
        """
        self.defaults = defaults or {}
        self.env_prefix = env_prefix
        self.user_config = {}

    def get_config(
        self, user_options: Dict[str, Any] = None, section: str = None
    ) -> Dict[str, Any]:
        """
        Get the resolved configuration with defaults, environment vars, and user options.

        Args:
            user_options: User-provided option overrides
            section: Optional section name to retrieve (e.g., 'model', 'storage')

        Returns:
            Dict with the resolved configuration options
        """
        if section and section in self.defaults:
            config = deepcopy(self.defaults[section])
        else:
            config = deepcopy(self.defaults)

        # Apply stored user config
        if section and section in self.user_config:
            config.update(self.user_config[section])
        elif not section:
            config.update(self.user_config)

        self._apply_well_known_env_vars(config, section)
        self._apply_env_vars(config, section)

        # Runtime user options have the highest precedence
        if user_options:
            config.update(
                {key: value for key, value in user_options.items() if value is not None}
            )

        return config

    def set_user_config(self, config: Dict[str, Any], section: str = None) -> None:
        """
        Set persistent user configuration.

        Args:
            config: Dictionary of configuration options
            section: Optional section name
        """
        if section:
            if section not in self.user_config:
                self.user_config[section] = {}
            self.user_config[section].update(config)
        else:
            for key, value in config.items():
                if isinstance(value, dict) and key in self.defaults:
                    self.set_user_config(value, section=key)
                else:
                    self.user_config[key] = value

    def _apply_well_known_env_vars(
        self, config: Dict[str, Any], section: str = None
    ) -> None:
        """Apply the short, unsectioned environment variables (e.g. DOCWISE_S3_BUCKET)."""
        for env_var, (env_section, option_name) in WELL_KNOWN_ENV_VARS.items():
            value = os.environ.get(env_var)
            if not value:
                continue
            if section == env_section:
                config[option_name] = value
            elif section is None and isinstance(config.get(env_section), dict):
                config[env_section][option_name] = value

    def _apply_env_vars(self, config: Dict[str, Any], section: str = None) -> None:
        """
        Apply relevant environment variables to the configuration.

        Args:
            config: Configuration dictionary to update
            section: Optional section name to scope environment variables
        """
        if not section:
            return

        prefix = f"{self.env_prefix}{section.upper()}_"

        for env_var, value in os.environ.items():
            if not env_var.startswith(prefix) or env_var in WELL_KNOWN_ENV_VARS:
                continue

            option_name = env_var[len(prefix) :].lower()

            # Convert value type based on existing config if possible
            if option_name in config and config[option_name] is not None:
                existing_type = type(config[option_name])
                try:
                    if existing_type == bool:
                        value = value.lower() in ("true", "1", "yes", "y")
                    elif existing_type == int:
                        value = int(value)
                    elif existing_type == float:
                        value = float(value)
                    elif existing_type == list:
                        value = [item.strip() for item in value.split(",")]
                except (ValueError, TypeError):
                    logger.warning(
                        f"Could not convert environment variable {env_var} to {existing_type.__name__}"
                    )

            config[option_name] = value
            logger.debug(f"Applied environment variable {env_var}")


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a file.

    Supports YAML (.yaml, .yml) and JSON (.json) formats.

    Args:
        file_path: Path to the configuration file

    Returns:
        Dictionary with configuration options

    Raises:
        ConfigurationError: If file cannot be loaded or parsed
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ConfigurationError(
            f"Unsupported configuration file format: {path.suffix}. "
            "Supported formats: YAML (.yaml, .yml), JSON (.json)"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(f) or {}
            return json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error parsing configuration file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration file: {e}")


def save_config(config: Dict[str, Any], file_path: str, file_format: str = "yaml") -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration dictionary
        file_path: Path to save the configuration file
        file_format: File format ('yaml' or 'json')

    Raises:
        ConfigurationError: If file cannot be written
    """
    if file_format.lower() not in ("yaml", "json"):
        raise ConfigurationError(f"Unsupported format: {file_format}")

    try:
        with open(file_path, "w", encoding="utf-8") as f:
            if file_format.lower() == "yaml":
                yaml.dump(config, f, default_flow_style=False)
            else:
                json.dump(config, f, indent=2)
        logger.info(f"Configuration saved to {file_path}")
    except OSError as e:
        raise ConfigurationError(f"Error saving configuration: {e}")


def build_config_manager() -> ConfigManager:
    """Create a configuration manager populated with the package defaults."""
    return ConfigManager(
        {
            # Hosted model defaults
            "model": {
                "model_id": DEFAULT_MODEL_ID,
                "max_tokens": 4096,
                "temperature": 0.1,
                "top_p": 0.8,
                "max_attempts": 3,
                "backoff_seconds": 1.0,
            },
            # Object storage defaults
            "storage": {
                "bucket": None,
                "upload_prefix": "incoming",
                "processed_prefix": "processed",
                "public_base_url": None,
                "cleanup_uploads": True,
            },
            # Pipeline defaults
            "processing": {
                "save_usage_data": True,
                "usage_data_prefix": None,
            },
            # Download defaults
            "export": {
                "default_format": "pdf",
            },
            "aws": {
                "profile": None,
                "region": None,
            },
        }
    )


# Global instance for shared configuration
config_manager = build_config_manager()
