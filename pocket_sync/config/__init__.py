"""
pocket_sync Configuration Module

Loads and validates the YAML configuration with environment variable
overrides.

Author: pocket_sync Project
License: MIT
"""

from .schema import Config, AppConfig, PocketConfig, MiSTerConfig, SyncConfig, ConflictResolution
from .config_loader import ConfigLoader, load_config

__all__ = [
    'Config',
    'AppConfig',
    'PocketConfig',
    'MiSTerConfig',
    'SyncConfig',
    'ConflictResolution',
    'ConfigLoader',
    'load_config',
]
