"""
Sync Executor

Applies a chosen outcome by copying the save from one side to the other:
MiSTer to Pocket through :meth:`SyncExecutor.apply_from_mister`, Pocket to
MiSTer through :meth:`SyncExecutor.apply_from_pocket`.

Author: pocket_sync Project
License: MIT
"""

import io
import posixpath
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional

from ..exceptions import InvalidOperationError, TransferError
from ..remote.session import RemoteSession
from ..utils.file_ops import write_file_copy
from ..utils.logger import get_logger
from .comparison import (
    Conflict,
    MiSTerNewer,
    MiSTerOnly,
    NoSyncNeeded,
    PocketNewer,
    PocketOnly,
    SaveComparison,
)
from .rom_discovery import find_matching_roms, game_title, rom_path_to_save_path

logger = get_logger(__name__)

DEFAULT_MISTER_SAVES_PATH = "/media/fat/saves"


@dataclass
class ApplyResult:
    """Result of applying one outcome."""
    success: bool
    source_path: str
    destination_paths: List[str] = field(default_factory=list)
    skipped: bool = False
    message: Optional[str] = None


class SyncExecutor:
    """
    Moves save bytes between the Pocket filesystem and a remote session.
    
    Both apply methods read or retrieve the whole file before writing it, and
    raise :class:`TransferError` when any step fails. Calling one on an
    outcome that has no save on the required side raises
    :class:`InvalidOperationError`.
    """
    
    def __init__(self, mister_saves_path: str = DEFAULT_MISTER_SAVES_PATH, verify_writes: bool = True):
        """
        Initialize the executor.
        
        Args:
            mister_saves_path: Root of the per-core save folders on the MiSTer
            verify_writes: Hash-check every file written to the Pocket
        """
        self.mister_saves_path = mister_saves_path
        self.verify_writes = verify_writes
    
    def apply_from_mister(
        self,
        outcome: SaveComparison,
        session: RemoteSession,
        local_root: str
    ) -> ApplyResult:
        """
        Copy the MiSTer save over the Pocket save.
        
        For a MiSTer-only save the Pocket destination is derived from every
        matching ROM on the Pocket. No matching ROM is not an error: the save
        is skipped and the result is still successful.
        
        Raises:
            InvalidOperationError: ``outcome`` has no MiSTer save
            TransferError: Retrieval or a local write failed
        """
        mister_save = _require(outcome.mister_save(), outcome, "MiSTer")
        destinations = self._pocket_destinations(outcome, Path(local_root))
        remote_path = mister_save.path
        
        if not destinations:
            message = f"Couldn't find \"{game_title(mister_save.game)}\" on the Pocket, skipping"
            logger.info(message)
            return ApplyResult(
                success=True,
                source_path=str(remote_path),
                skipped=True,
                message=message
            )
        
        session.change_directory(str(remote_path.parent))
        data = session.retrieve_to_buffer(remote_path.name)
        
        logger.info(
            f"Copying {mister_save.game} ({mister_save.core.pocket_label}) MiSTer -> Pocket"
        )
        
        written = []
        for destination in destinations:
            success, dest_path, error = write_file_copy(
                data, str(destination), verify_hash=self.verify_writes
            )
            if not success:
                raise TransferError(error, str(destination))
            written.append(dest_path)
        
        return ApplyResult(success=True, source_path=str(remote_path), destination_paths=written)
    
    def apply_from_pocket(
        self,
        outcome: SaveComparison,
        session: RemoteSession,
        local_root: str
    ) -> ApplyResult:
        """
        Copy the Pocket save over the MiSTer save.
        
        A Pocket-only save is uploaded to the core's folder under
        ``mister_saves_path``; otherwise it replaces the known MiSTer file.
        
        Raises:
            InvalidOperationError: ``outcome`` has no Pocket save
            TransferError: Reading the local file or the upload failed
        """
        pocket_save = _require(outcome.pocket_save(), outcome, "Pocket")
        local_path = Path(local_root) / pocket_save.path
        remote_dir = self._mister_directory(outcome)
        
        try:
            with open(local_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise TransferError(f"Could not read local save ({e})", str(local_path)) from e
        
        logger.info(
            f"Copying {pocket_save.game} ({pocket_save.core.mister_label}) Pocket -> MiSTer"
        )
        
        session.change_directory(remote_dir)
        session.upload_file(pocket_save.path.name, io.BytesIO(data))
        
        return ApplyResult(
            success=True,
            source_path=str(local_path),
            destination_paths=[posixpath.join(remote_dir, pocket_save.path.name)]
        )
    
    def _pocket_destinations(self, outcome: SaveComparison, local_root: Path) -> List[Path]:
        if isinstance(outcome, MiSTerOnly):
            roms = find_matching_roms(
                outcome.save.game,
                outcome.save.core.rom_extensions,
                str(local_root)
            )
            return [local_root / rom_path_to_save_path(rom) for rom in sorted(roms)]
        if isinstance(outcome, (PocketNewer, MiSTerNewer, Conflict)):
            return [local_root / outcome.pair.pocket.path]
        if isinstance(outcome, (PocketOnly, NoSyncNeeded)):
            raise InvalidOperationError(f"No MiSTer save to copy for {outcome!r}")
        raise InvalidOperationError(f"Unknown outcome {outcome!r}")
    
    def _mister_directory(self, outcome: SaveComparison) -> str:
        if isinstance(outcome, PocketOnly):
            return posixpath.join(self.mister_saves_path, outcome.save.core.mister_label)
        if isinstance(outcome, (PocketNewer, MiSTerNewer, Conflict)):
            return str(PurePosixPath(outcome.pair.mister.path).parent)
        if isinstance(outcome, (MiSTerOnly, NoSyncNeeded)):
            raise InvalidOperationError(f"No Pocket save to copy for {outcome!r}")
        raise InvalidOperationError(f"Unknown outcome {outcome!r}")


def _require(save, outcome: SaveComparison, side: str):
    if save is None:
        raise InvalidOperationError(f"Attempt to use a non-existent {side} save: {outcome!r}")
    return save


_default_executor = SyncExecutor()


def apply_from_mister(outcome: SaveComparison, session: RemoteSession, local_root: str) -> ApplyResult:
    """Apply ``outcome`` toward the MiSTer save using default settings."""
    return _default_executor.apply_from_mister(outcome, session, local_root)


def apply_from_pocket(outcome: SaveComparison, session: RemoteSession, local_root: str) -> ApplyResult:
    """Apply ``outcome`` toward the Pocket save using default settings."""
    return _default_executor.apply_from_pocket(outcome, session, local_root)
