"""
Save Inventory Scanner

Builds the Pocket inventory from the SD card and the MiSTer inventory
through a remote session.

Author: pocket_sync Project
License: MIT
"""

import posixpath
from pathlib import Path, PurePosixPath

from ..remote.session import RemoteSession
from ..utils.logger import get_logger
from .cores import Core
from .models import Inventory, SaveInfo, Side

logger = get_logger(__name__)

POCKET_SAVES_DIR = "Saves"
POCKET_SAVES_SUBDIR = "common"
SAVE_EXTENSION = ".sav"


class SaveScanner:
    """Collects save records from both sides for every known core."""
    
    def __init__(self, pocket_root: str, mister_saves_path: str = "/media/fat/saves"):
        self.pocket_root = Path(pocket_root)
        self.mister_saves_path = mister_saves_path
    
    def scan_pocket(self) -> Inventory:
        """
        Scan ``<root>/Saves/<platform>/common`` recursively for ``.sav`` files.
        
        Returns:
            Pocket inventory with paths relative to the Pocket root
        """
        inventory = Inventory(Side.POCKET)
        
        for core in Core:
            save_root = self.pocket_root / POCKET_SAVES_DIR / core.pocket_label / POCKET_SAVES_SUBDIR
            if not save_root.is_dir():
                continue
            
            for save_file in sorted(save_root.rglob(f"*{SAVE_EXTENSION}")):
                if not save_file.is_file():
                    continue
                
                inventory.add(SaveInfo(
                    game=save_file.name,
                    core=core,
                    path=PurePosixPath(save_file.relative_to(self.pocket_root).as_posix()),
                    date_modified=int(save_file.stat().st_mtime)
                ))
        
        logger.info(f"Found {len(inventory)} saves on the Pocket")
        return inventory
    
    def scan_mister(self, session: RemoteSession) -> Inventory:
        """
        List ``<saves_path>/<core folder>`` for every known core.
        
        Raises:
            TransferError: A listing failed for a reason other than a missing folder
        """
        inventory = Inventory(Side.MISTER)
        
        for core in Core:
            core_dir = posixpath.join(self.mister_saves_path, core.mister_label)
            for name, mtime in sorted(session.list_directory(core_dir)):
                if not name.lower().endswith(SAVE_EXTENSION):
                    continue
                
                inventory.add(SaveInfo(
                    game=name,
                    core=core,
                    path=PurePosixPath(core_dir) / name,
                    date_modified=mtime
                ))
        
        logger.info(f"Found {len(inventory)} saves on the MiSTer")
        return inventory
