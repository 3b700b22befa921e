"""
pocket_sync Core Module

Save model, core registry, inventory scanning, watermark storage and the
reconciliation orchestrator (``pocket_sync.core.orchestrator``).

Author: pocket_sync Project
License: MIT
"""

from .cores import Core
from .models import SaveInfo, PlatformSave, PocketSave, MiSTerSave, SaveRef, Side, Inventory

__all__ = [
    'Core',
    'SaveInfo',
    'PlatformSave',
    'PocketSave',
    'MiSTerSave',
    'SaveRef',
    'Side',
    'Inventory',
]
