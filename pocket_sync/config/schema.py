"""
Configuration Schema and Models

Pydantic models for the configuration file: logging, the Pocket mount,
the MiSTer connection and reconciliation behaviour.

Author: pocket_sync Project
License: MIT
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, validator
from pathlib import PurePosixPath, Path


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConflictResolution(str, Enum):
    """What an unattended run does with a conflict."""
    SKIP = "skip"
    POCKET = "pocket"
    MISTER = "mister"


class AppConfig(BaseModel):
    """Application-wide settings."""
    
    host: str = Field(
        default="127.0.0.1",
        description="Web API host address"
    )
    port: int = Field(
        default=8080,
        description="Web API port"
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO.value,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: str = Field(
        default="~/.config/pocket_sync/logs/pocket_sync.log",
        description="Log file location"
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines"
    )
    
    class Config:
        use_enum_values = True


class PocketConfig(BaseModel):
    """Local Pocket SD card settings."""
    
    root_path: str = Field(
        default="/media/pocket",
        description="Mount point of the Pocket SD card"
    )
    
    @validator("root_path")
    def validate_root_path(cls, v):
        """Ensure the root is absolute after expanding ``~``."""
        expanded = str(Path(v).expanduser())
        if not Path(expanded).is_absolute():
            raise ValueError(f"Pocket root_path must be absolute: {v}")
        return expanded


class MiSTerConfig(BaseModel):
    """MiSTer SSH/SFTP connection settings."""
    
    host: str = Field(
        default="mister.local",
        description="MiSTer hostname or IP"
    )
    port: int = Field(
        default=22,
        description="SSH port"
    )
    username: str = Field(
        default="root",
        description="SSH user"
    )
    password: Optional[str] = Field(
        default="1",
        description="SSH password (MiSTer default is 1)"
    )
    private_key_path: Optional[str] = Field(
        default=None,
        description="Private key file, used instead of the password when set"
    )
    saves_path: str = Field(
        default="/media/fat/saves",
        description="Directory holding one save folder per core"
    )
    connection_timeout: int = Field(
        default=10,
        description="Connection timeout in seconds"
    )
    
    @validator("saves_path")
    def validate_saves_path(cls, v):
        """Ensure the remote saves path is absolute."""
        if not PurePosixPath(v).is_absolute():
            raise ValueError(f"MiSTer saves_path must be absolute: {v}")
        return v.rstrip("/") or "/"


class SyncConfig(BaseModel):
    """Reconciliation behaviour."""
    
    state_file: str = Field(
        default="~/.config/pocket_sync/state.json",
        description="File that stores the last-merge watermark"
    )
    apply_newer: bool = Field(
        default=True,
        description="Automatically copy the newer side when only one side changed"
    )
    copy_missing: bool = Field(
        default=True,
        description="Automatically copy saves that exist on only one side"
    )
    resolve_conflicts: ConflictResolution = Field(
        default=ConflictResolution.SKIP.value,
        description="Side that wins conflicts in unattended runs"
    )
    verify_writes: bool = Field(
        default=True,
        description="Hash-check files written to the Pocket"
    )
    
    class Config:
        use_enum_values = True


class Config(BaseModel):
    """
    Root configuration model for pocket_sync.
    
    Loaded from config.yaml and overridable by environment variables.
    """
    
    app: AppConfig = Field(default_factory=AppConfig)
    pocket: PocketConfig = Field(default_factory=PocketConfig)
    mister: MiSTerConfig = Field(default_factory=MiSTerConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_assignment = True
