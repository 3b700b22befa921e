"""
Exceptions

Error types raised by the reconciliation and transfer layers.

Author: pocket_sync Project
License: MIT
"""


class PocketSyncError(Exception):
    """Base exception for pocket_sync errors."""


class InvalidOperationError(PocketSyncError):
    """
    An apply operation was invoked on an outcome that lacks the save it needs.

    This signals a bug in the caller and is never caught by the orchestrator.
    """


class SyncError(PocketSyncError):
    """Base class for recoverable errors raised while applying one outcome."""


class TransferError(SyncError):
    """Remote session or local filesystem failure during a single apply call."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(f"{message}: {path}" if path else message)


class ConfigError(PocketSyncError, ValueError):
    """Raised when the configuration file cannot be parsed or validated."""
