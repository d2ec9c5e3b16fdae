"""
Utilities module for cbinfo.

This module provides various utility functions and configuration management
for the cbinfo package.
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG
from .helpers import (
    update_dict_recursively,
    ensure_directory,
    validate_array_shape,
    safe_divide
)

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'update_dict_recursively',
    'ensure_directory',
    'validate_array_shape',
    'safe_divide'
]
