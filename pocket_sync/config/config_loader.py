"""
Configuration Loader

Loads the YAML configuration, merges environment variable overrides and
writes configuration back to disk.

Author: pocket_sync Project
License: MIT
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv
from pydantic import ValidationError

from .schema import Config
from ..exceptions import ConfigError

DEFAULT_CONFIG_PATH = "~/.config/pocket_sync/config.yaml"


class ConfigLoader:
    """
    Configuration loader and manager.
    
    Loads configuration from a YAML file, merges environment variables and
    validates the result.
    """
    
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.
        
        Args:
            config_path: Path to the configuration file. If None, uses
                ``POCKET_SYNC_CONFIG`` or the default location.
        """
        self.config_path = str(Path(
            config_path or os.getenv("POCKET_SYNC_CONFIG", DEFAULT_CONFIG_PATH)
        ).expanduser())
        self._config: Optional[Config] = None
        
        load_dotenv()
    
    def load(self) -> Config:
        """
        Load and validate configuration.
        
        Returns:
            Validated Config object
            
        Raises:
            ConfigError: If YAML parsing or validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)
        
        try:
            self._config = Config(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e
        
        return self._config
    
    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.
        
        Returns:
            Dictionary with configuration data, defaults if the file is absent
        """
        config_file = Path(self.config_path)
        
        if not config_file.exists():
            return self._create_default_config()
        
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML config: {e}") from e
        
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {self.config_path}")
        return data
    
    def _create_default_config(self) -> Dict[str, Any]:
        """
        Create default configuration structure.
        
        Returns:
            Default configuration dictionary
        """
        return {
            "app": {
                "host": "127.0.0.1",
                "port": 8080,
                "log_level": "INFO"
            },
            "pocket": {
                "root_path": "/media/pocket"
            },
            "mister": {
                "host": "mister.local",
                "port": 22,
                "username": "root",
                "password": "1",
                "saves_path": "/media/fat/saves"
            },
            "sync": {
                "state_file": "~/.config/pocket_sync/state.json",
                "apply_newer": True,
                "copy_missing": True,
                "resolve_conflicts": "skip"
            }
        }
    
    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.
        
        Environment variables override config file values.
        
        Args:
            config_data: Configuration dictionary from file
            
        Returns:
            Merged configuration dictionary
        """
        # App settings
        if os.getenv("APP_HOST"):
            config_data.setdefault("app", {})["host"] = os.getenv("APP_HOST")
        if os.getenv("APP_PORT"):
            config_data.setdefault("app", {})["port"] = int(os.getenv("APP_PORT"))
        if os.getenv("APP_LOG_LEVEL"):
            config_data.setdefault("app", {})["log_level"] = os.getenv("APP_LOG_LEVEL")
        
        # Pocket
        if os.getenv("POCKET_ROOT"):
            config_data.setdefault("pocket", {})["root_path"] = os.getenv("POCKET_ROOT")
        
        # MiSTer
        if os.getenv("MISTER_HOST"):
            config_data.setdefault("mister", {})["host"] = os.getenv("MISTER_HOST")
        if os.getenv("MISTER_PORT"):
            config_data.setdefault("mister", {})["port"] = int(os.getenv("MISTER_PORT"))
        if os.getenv("MISTER_USERNAME"):
            config_data.setdefault("mister", {})["username"] = os.getenv("MISTER_USERNAME")
        if os.getenv("MISTER_PASSWORD"):
            config_data.setdefault("mister", {})["password"] = os.getenv("MISTER_PASSWORD")
        if os.getenv("MISTER_KEY_PATH"):
            config_data.setdefault("mister", {})["private_key_path"] = os.getenv("MISTER_KEY_PATH")
        
        # Sync
        if os.getenv("SYNC_STATE_FILE"):
            config_data.setdefault("sync", {})["state_file"] = os.getenv("SYNC_STATE_FILE")
        if os.getenv("SYNC_RESOLVE_CONFLICTS"):
            config_data.setdefault("sync", {})["resolve_conflicts"] = os.getenv("SYNC_RESOLVE_CONFLICTS").lower()
        
        return config_data
    
    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.
        
        Args:
            config: Config object to save
            path: Path to save to (uses default if None)
        """
        save_path = Path(path or self.config_path).expanduser()
        save_path.parent.mkdir(parents=True, exist_ok=True)
        
        config_dict = config.dict()
        
        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
    
    def reload(self) -> Config:
        """Reload configuration from file."""
        return self.load()
    
    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Convenience function to load configuration.
    
    Args:
        config_path: Optional path to config file
        
    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load()
