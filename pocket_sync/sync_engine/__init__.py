"""
Sync Engine Module

Save pairing, classification, deduplication and the copy executor.

Author: pocket_sync Project
License: MIT
"""

from .comparison import (
    RTC_VALID_THRESHOLD,
    SavePair,
    SaveComparison,
    PocketOnly,
    MiSTerOnly,
    PocketNewer,
    MiSTerNewer,
    Conflict,
    NoSyncNeeded,
    classify,
    classify_pair,
    compare_inventories,
)
from .deduplicator import dedup
from .executor import SyncExecutor, ApplyResult, apply_from_mister, apply_from_pocket
from .rom_discovery import find_matching_roms, rom_path_to_save_path

__all__ = [
    'RTC_VALID_THRESHOLD',
    'SavePair',
    'SaveComparison',
    'PocketOnly',
    'MiSTerOnly',
    'PocketNewer',
    'MiSTerNewer',
    'Conflict',
    'NoSyncNeeded',
    'classify',
    'classify_pair',
    'compare_inventories',
    'dedup',
    'SyncExecutor',
    'ApplyResult',
    'apply_from_mister',
    'apply_from_pocket',
    'find_matching_roms',
    'rom_path_to_save_path',
]
