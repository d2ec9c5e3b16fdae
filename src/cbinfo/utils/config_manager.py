"""
Configuration management module for cbinfo.

This module provides functionality for loading, validating, and managing
configuration settings for the command line tool.
"""
import copy
import yaml
from pathlib import Path
import logging
from typing import Dict, Any, List, Optional, Union
import json

from ..core.errors import ConfigError
from .helpers import update_dict_recursively

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'actions': {
        'species_info': False,
        'print_positions': False,
        'print_orientations': False,
        'analyze_positions': False,
    },
    'selection': {
        'species': [],
    },
    'output': {
        'add_separator': False,
        'directory': None,
        'format': 'yaml',
        'save_histogram': True,
        'plot_histogram': False,
    },
    'logging': {
        'level': 'INFO',
    },
}

VALID_FORMATS = ('yaml', 'json')
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigManager:
    """Class for managing cbinfo configuration settings."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager with the default settings.

        Args:
            config_file: Path to a YAML file overriding the defaults (optional)
        """
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if config_file is not None:
            self.load_config(config_file)

    def load_config(self, config_file: Union[str, Path]) -> None:
        """
        Load configuration from a YAML file on top of the current settings.

        Args:
            config_file: Path to the configuration file
        """
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        logger.info(f"Loading configuration from {config_path}")
        with open(config_path, 'r') as f:
            try:
                user_cfg = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if user_cfg is None:
            logger.warning(f"Configuration file {config_path} is empty; using defaults.")
            return
        if not isinstance(user_cfg, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a mapping.")
        update_dict_recursively(self.config, user_cfg)
        self._validate_config()

    def _validate_config(self) -> None:
        """Validate the loaded configuration."""
        for section, defaults in DEFAULT_CONFIG.items():
            if not isinstance(self.config.get(section), dict):
                raise ConfigError(f"Missing required configuration section: {section}")
            for key in defaults:
                if key not in self.config[section]:
                    raise ConfigError(f"Missing required {section} setting: {key}")
        unknown = set(self.config) - set(DEFAULT_CONFIG)
        if unknown:
            logger.warning(f"Ignoring unknown configuration sections: {sorted(unknown)}")

        for key, value in self.config['actions'].items():
            if not isinstance(value, bool):
                raise ConfigError(f"actions.{key} must be true or false, got {value!r}")

        species = self.config['selection']['species']
        if species is None:
            self.config['selection']['species'] = []
        elif not isinstance(species, list) or not all(isinstance(s, str) for s in species):
            raise ConfigError("selection.species must be a list of species names.")

        output = self.config['output']
        for key in ('add_separator', 'save_histogram', 'plot_histogram'):
            if not isinstance(output[key], bool):
                raise ConfigError(f"output.{key} must be true or false, got {output[key]!r}")
        if output['format'] not in VALID_FORMATS:
            raise ConfigError(f"output.format must be one of {VALID_FORMATS}, got {output['format']!r}")
        if output['directory'] is not None and not isinstance(output['directory'], str):
            raise ConfigError("output.directory must be a path string or null.")

        level = str(self.config['logging']['level']).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of {VALID_LOG_LEVELS}, got {level!r}")
        self.config['logging']['level'] = level

    def get_actions_config(self) -> Dict[str, Any]:
        return self.config.get('actions', {})

    def get_species(self) -> List[str]:
        return list(self.config['selection']['species'])

    def get_output_config(self) -> Dict[str, Any]:
        """
        Get output configuration settings.

        Returns:
            Dictionary of output settings
        """
        return self.config.get('output', {})

    def get_log_level(self) -> str:
        return self.config['logging']['level']

    def update_config(self, updates: Dict[str, Any]) -> None:
        """
        Update configuration settings.

        Args:
            updates: Dictionary of configuration updates
        """
        update_dict_recursively(self.config, updates)
        self._validate_config()

    def save_config(self, output_file: Union[str, Path]) -> None:
        """
        Save current configuration to a file.

        Args:
            output_file: Path to save the configuration to
        """
        output_path = Path(output_file)
        logger.info(f"Saving configuration to {output_path}")

        with open(output_path, 'w') as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)

    def to_json(self) -> str:
        """
        Get the current configuration as a JSON string.

        Returns:
            JSON string representation of configuration
        """
        return json.dumps(self.config, indent=4)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ConfigManager':
        """
        Create a ConfigManager from a (possibly partial) dictionary.

        Args:
            config_dict: Dictionary of configuration settings

        Returns:
            ConfigManager instance
        """
        instance = cls()
        instance.update_config(copy.deepcopy(config_dict))
        return instance
