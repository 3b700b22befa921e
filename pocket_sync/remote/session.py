"""
Remote Session
==============

Sequential file-transfer session to the MiSTer.

The MiSTer runs an SSH server out of the box, so saves are moved over SFTP
using paramiko. A session has a single working directory shared by every
call, so one session must only ever be driven by one caller at a time.

Author: pocket_sync Project
License: MIT
"""

import io
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

import paramiko
from paramiko import SSHClient, AutoAddPolicy

from ..exceptions import TransferError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RemoteSession(ABC):
    """
    Operations the executor and scanner need from the remote side.
    
    Every method raises :class:`TransferError` on failure.
    """
    
    @abstractmethod
    def change_directory(self, path: str) -> None:
        """Make ``path`` the working directory for later calls."""
    
    @abstractmethod
    def retrieve_to_buffer(self, filename: str) -> bytes:
        """Download ``filename`` from the working directory."""
    
    @abstractmethod
    def upload_file(self, filename: str, source: BinaryIO) -> None:
        """Upload ``source`` as ``filename`` in the working directory, replacing it."""
    
    @abstractmethod
    def list_directory(self, path: str) -> List[Tuple[str, int]]:
        """
        List regular files in ``path`` as ``(name, mtime)``.
        
        A missing directory yields an empty list.
        """
    
    def close(self) -> None:
        pass
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SFTPSession(RemoteSession):
    """
    SFTP session over a paramiko SSH connection.
    
    Example:
        ```python
        with SFTPSession(host="mister.local", password="1") as session:
            session.change_directory("/media/fat/saves/GBA")
            data = session.retrieve_to_buffer("Metroid Fusion.sav")
        ```
    """
    
    def __init__(
        self,
        host: str,
        port: int = 22,
        username: str = "root",
        password: Optional[str] = None,
        private_key_path: Optional[str] = None,
        connection_timeout: int = 10
    ):
        """
        Initialize the session. No connection is made until :meth:`connect`.
        
        Args:
            host: MiSTer hostname or IP
            port: SSH port
            username: SSH user
            password: Password, used when no key is given
            private_key_path: Path to a private key file
            connection_timeout: Timeout for establishing the connection (seconds)
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.private_key_path = Path(private_key_path).expanduser() if private_key_path else None
        self.connection_timeout = connection_timeout
        
        self._client: Optional[SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None
    
    @classmethod
    def from_config(cls, mister_config) -> "SFTPSession":
        """Build a session from a :class:`MiSTerConfig`."""
        return cls(
            host=mister_config.host,
            port=mister_config.port,
            username=mister_config.username,
            password=mister_config.password,
            private_key_path=mister_config.private_key_path,
            connection_timeout=mister_config.connection_timeout
        )
    
    def connect(self) -> "SFTPSession":
        """
        Open the SSH connection and the SFTP channel.
        
        Raises:
            TransferError: Connection or authentication failed
        """
        if self._sftp is not None:
            return self
        
        client = SSHClient()
        client.set_missing_host_key_policy(AutoAddPolicy())
        
        logger.info(f"Connecting to MiSTer: {self.username}@{self.host}:{self.port}")
        try:
            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                key_filename=str(self.private_key_path) if self.private_key_path else None,
                timeout=self.connection_timeout,
                look_for_keys=False,
                allow_agent=False
            )
            self._sftp = client.open_sftp()
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise TransferError(f"Could not connect to {self.host}:{self.port}: {e}") from e
        
        self._client = client
        logger.info(f"Connected to {self.host}")
        return self
    
    def close(self) -> None:
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.debug(f"Closed connection to {self.host}")
    
    def __enter__(self):
        return self.connect()
    
    @property
    def sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise TransferError("Session is not connected", self.host)
        return self._sftp
    
    def change_directory(self, path: str) -> None:
        logger.debug(f"cd {path}")
        try:
            self.sftp.chdir(path)
        except (paramiko.SSHException, OSError) as e:
            raise TransferError(f"Could not change directory ({e})", path) from e
    
    def retrieve_to_buffer(self, filename: str) -> bytes:
        buffer = io.BytesIO()
        try:
            self.sftp.getfo(filename, buffer)
        except (paramiko.SSHException, OSError) as e:
            raise TransferError(f"Could not retrieve file ({e})", filename) from e
        logger.debug(f"Retrieved {filename} ({buffer.tell()} bytes)")
        return buffer.getvalue()
    
    def upload_file(self, filename: str, source: BinaryIO) -> None:
        try:
            self.sftp.putfo(source, filename)
        except (paramiko.SSHException, OSError) as e:
            raise TransferError(f"Could not upload file ({e})", filename) from e
        logger.debug(f"Uploaded {filename}")
    
    def list_directory(self, path: str) -> List[Tuple[str, int]]:
        try:
            entries = self.sftp.listdir_attr(path)
        except FileNotFoundError:
            logger.debug(f"Remote directory does not exist: {path}")
            return []
        except (paramiko.SSHException, OSError) as e:
            raise TransferError(f"Could not list directory ({e})", path) from e
        
        return [
            (entry.filename, int(entry.st_mtime or 0))
            for entry in entries
            if entry.st_mode is not None and stat.S_ISREG(entry.st_mode)
        ]
