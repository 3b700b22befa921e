"""
Watermark Store

Persists the time of the last successful reconciliation.

Author: pocket_sync Project
License: MIT
"""

import json
import time
from pathlib import Path

from ..utils.file_ops import ensure_directory
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WatermarkStore:
    """JSON file holding ``{"last_merge": <seconds>}``."""
    
    def __init__(self, state_file: str):
        self.state_file = Path(state_file).expanduser()
    
    def load(self) -> int:
        """
        Read the last-merge timestamp.
        
        Returns:
            Stored timestamp, or 0 when nothing has been stored yet
        """
        if not self.state_file.exists():
            return 0
        
        try:
            with open(self.state_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return int(data.get("last_merge", 0))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Could not read watermark from {self.state_file}: {e}")
            return 0
    
    def save(self, last_merge: int) -> None:
        if not ensure_directory(str(self.state_file.parent)):
            raise OSError(f"Cannot create state directory: {self.state_file.parent}")
        
        with open(self.state_file, 'w', encoding='utf-8') as f:
            json.dump({"last_merge": int(last_merge)}, f)
        logger.info(f"Watermark set to {last_merge}")
    
    def mark_now(self) -> int:
        """Store the current time as the watermark and return it."""
        now = int(time.time())
        self.save(now)
        return now
