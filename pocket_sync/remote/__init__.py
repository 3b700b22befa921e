"""
Remote Module

File-transfer session to the MiSTer.

Author: pocket_sync Project
License: MIT
"""

from .session import RemoteSession, SFTPSession

__all__ = ['RemoteSession', 'SFTPSession']
