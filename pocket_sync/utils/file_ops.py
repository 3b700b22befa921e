"""
File Operation Utilities

Local filesystem helpers used when copying save data onto the Pocket:
hashing, verified writes and extension checks.

Author: pocket_sync Project
License: MIT
"""

import os
import hashlib
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .logger import get_logger

logger = get_logger(__name__)


def calculate_file_hash(file_path: str, algorithm: str = "sha256", chunk_size: int = 8192) -> str:
    """
    Calculate hash of a file.
    
    Args:
        file_path: Path to the file
        algorithm: Hash algorithm (md5, sha1, sha256, etc.)
        chunk_size: Size of chunks to read (bytes)
        
    Returns:
        Hexadecimal hash string
        
    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is unsupported
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")
    
    try:
        hash_func = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    
    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)
    
    return hash_func.hexdigest()


def write_file_copy(
    data: bytes,
    destination: str,
    verify_hash: bool = True
) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Write ``data`` to ``destination``, replacing any existing file.
    
    Missing parent directories are created.
    
    Args:
        data: Complete file contents
        destination: Destination file path
        verify_hash: Re-read the written file and compare its SHA256
        
    Returns:
        Tuple of (success: bool, destination_path: str, error_message: str)
    """
    try:
        dest_path = Path(destination)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        
        with open(dest_path, 'wb') as f:
            f.write(data)
        logger.debug(f"Wrote {len(data)} bytes to {dest_path}")
        
        if verify_hash:
            expected = hashlib.sha256(data).hexdigest()
            if calculate_file_hash(str(dest_path)) != expected:
                logger.error(f"Hash mismatch after write: {dest_path}")
                return False, None, "File integrity check failed after write"
        
        return True, str(dest_path), None
        
    except PermissionError as e:
        logger.error(f"Permission error writing file: {e}")
        return False, None, f"Permission denied: {e}"
    except OSError as e:
        logger.error(f"OS error writing file: {e}")
        return False, None, f"OS error: {e}"


def has_extension(file_path: str, extensions: Iterable[str]) -> bool:
    """
    Check whether a file name ends in one of ``extensions``.
    
    Extensions are compared case-insensitively and without dots.
    """
    wanted = {ext.lower().lstrip('.') for ext in extensions}
    return Path(file_path).suffix.lower().lstrip('.') in wanted


def ensure_directory(directory: str) -> bool:
    """
    Ensure a directory exists, creating it if necessary.
    
    Args:
        directory: Directory path
        
    Returns:
        True if directory exists or was created
    """
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {e}")
        return False
