"""
Orchestrator

Runs a reconciliation pass: scan both sides, classify and deduplicate the
saves, apply the chosen copies one at a time, then advance the watermark.

Author: pocket_sync Project
License: MIT
"""

from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..config.schema import Config, ConflictResolution
from ..exceptions import SyncError
from ..remote.session import RemoteSession, SFTPSession
from ..sync_engine.comparison import (
    Conflict,
    MiSTerNewer,
    MiSTerOnly,
    NoSyncNeeded,
    PocketNewer,
    PocketOnly,
    SaveComparison,
    compare_inventories,
)
from ..sync_engine.executor import SyncExecutor
from ..utils.logger import get_logger
from .inventory import SaveScanner
from .models import Inventory
from .watermark import WatermarkStore

logger = get_logger(__name__)


class Direction(str, Enum):
    """Which side's save is kept when applying an outcome."""
    POCKET = "pocket"
    MISTER = "mister"


class SyncStatus(Enum):
    """Status of an apply operation."""
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncResult:
    """Result of applying one outcome."""
    
    def __init__(
        self,
        outcome: SaveComparison,
        direction: Direction,
        status: SyncStatus,
        destination_paths: Optional[List[str]] = None,
        error_message: Optional[str] = None
    ):
        """
        Initialize sync result.
        
        Args:
            outcome: The outcome that was applied
            direction: Side whose save was copied
            status: Sync status
            destination_paths: Files written
            error_message: Error or skip message
        """
        self.outcome = outcome
        self.direction = direction
        self.status = status
        self.destination_paths = destination_paths or []
        self.error_message = error_message
        self.timestamp = datetime.now()
    
    def to_dict(self) -> Dict:
        save = self.outcome.pocket_save() or self.outcome.mister_save()
        return {
            "kind": self.outcome.kind,
            "game": save.game if save else None,
            "direction": self.direction.value,
            "status": self.status.value,
            "destination_paths": self.destination_paths,
            "error_message": self.error_message,
            "timestamp": self.timestamp.isoformat()
        }
    
    def __repr__(self) -> str:
        return f"SyncResult(kind={self.outcome.kind}, direction={self.direction.value}, status={self.status.value})"


class Orchestrator:
    """
    Reconciliation coordinator.
    
    Everything runs on the calling thread; the remote session is only ever
    used by one operation at a time.
    """
    
    def __init__(
        self,
        config: Config,
        session_factory: Optional[Callable[[], RemoteSession]] = None
    ):
        """
        Initialize orchestrator.
        
        Args:
            config: Application configuration
            session_factory: Returns a new, unconnected session; defaults to
                an SFTP session built from ``config.mister``
        """
        self.config = config
        self.session_factory = session_factory or (lambda: SFTPSession.from_config(config.mister))
        
        self.scanner = SaveScanner(config.pocket.root_path, config.mister.saves_path)
        self.executor = SyncExecutor(
            mister_saves_path=config.mister.saves_path,
            verify_writes=config.sync.verify_writes
        )
        self.watermark = WatermarkStore(config.sync.state_file)
        
        self.last_comparisons: List[SaveComparison] = []
        self.stats = self._empty_stats()
        
        logger.info("Orchestrator initialized")
    
    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            "runs": 0,
            "copied_to_pocket": 0,
            "copied_to_mister": 0,
            "skipped": 0,
            "conflicts_left": 0,
            "errors": 0
        }
    
    def scan(self, session: RemoteSession) -> Tuple[Inventory, Inventory]:
        """Gather the Pocket and MiSTer inventories."""
        return self.scanner.scan_pocket(), self.scanner.scan_mister(session)
    
    def compare(self, session: RemoteSession) -> List[SaveComparison]:
        """
        Scan both sides and classify every save against the stored watermark.
        
        The result is kept in ``last_comparisons`` for later apply calls.
        """
        pocket_inventory, mister_inventory = self.scan(session)
        last_merge = self.watermark.load()
        logger.info(f"Comparing saves against last merge at {last_merge}")
        
        self.last_comparisons = compare_inventories(pocket_inventory, mister_inventory, last_merge)
        return self.last_comparisons
    
    def plan(self, outcomes: List[SaveComparison]) -> List[Tuple[SaveComparison, Direction]]:
        """
        Choose a direction for every outcome an unattended run may apply.
        
        Outcomes left out of the plan (conflicts under ``skip``, unchanged
        saves, or anything disabled in ``config.sync``) need a human.
        """
        sync_config = self.config.sync
        planned = []
        
        for outcome in outcomes:
            if isinstance(outcome, NoSyncNeeded):
                continue
            elif isinstance(outcome, PocketOnly):
                if sync_config.copy_missing:
                    planned.append((outcome, Direction.POCKET))
            elif isinstance(outcome, MiSTerOnly):
                if sync_config.copy_missing:
                    planned.append((outcome, Direction.MISTER))
            elif isinstance(outcome, PocketNewer):
                if sync_config.apply_newer:
                    planned.append((outcome, Direction.POCKET))
            elif isinstance(outcome, MiSTerNewer):
                if sync_config.apply_newer:
                    planned.append((outcome, Direction.MISTER))
            elif isinstance(outcome, Conflict):
                resolution = ConflictResolution(sync_config.resolve_conflicts)
                if resolution is ConflictResolution.SKIP:
                    logger.warning(f"Conflict needs manual resolution:\n{outcome.pair}")
                    self.stats["conflicts_left"] += 1
                else:
                    planned.append((outcome, Direction(resolution.value)))
            else:
                raise TypeError(f"Unknown outcome {outcome!r}")
        
        return planned
    
    def apply(
        self,
        outcome: SaveComparison,
        direction: Direction,
        session: RemoteSession
    ) -> SyncResult:
        """
        Apply one outcome toward ``direction``.
        
        Transfer failures are recorded on the result. Calling this with a
        direction the outcome has no save for raises
        :class:`InvalidOperationError`.
        """
        local_root = self.config.pocket.root_path
        
        try:
            if direction is Direction.MISTER:
                applied = self.executor.apply_from_mister(outcome, session, local_root)
            else:
                applied = self.executor.apply_from_pocket(outcome, session, local_root)
        except SyncError as e:
            logger.error(f"Failed to apply {outcome.kind} toward {direction.value}: {e}")
            self.stats["errors"] += 1
            return SyncResult(outcome, direction, SyncStatus.FAILED, error_message=str(e))
        
        if applied.skipped:
            self.stats["skipped"] += 1
            return SyncResult(outcome, direction, SyncStatus.SKIPPED, error_message=applied.message)
        
        if direction is Direction.MISTER:
            self.stats["copied_to_pocket"] += 1
        else:
            self.stats["copied_to_mister"] += 1
        return SyncResult(
            outcome,
            direction,
            SyncStatus.COMPLETED,
            destination_paths=applied.destination_paths
        )
    
    def apply_one(self, outcome: SaveComparison, direction: Direction) -> SyncResult:
        """Open a session, apply a single outcome and close the session."""
        with self.session_factory() as session:
            return self.apply(outcome, direction, session)
    
    def run(self) -> List[SyncResult]:
        """
        Run a full unattended reconciliation pass.
        
        The watermark only advances when every planned copy succeeded and
        no outcome was left for manual resolution.
        """
        logger.info("Starting reconciliation run")
        self.stats["runs"] += 1
        results = []
        
        with self.session_factory() as session:
            outcomes = self.compare(session)
            planned = self.plan(outcomes)
            for outcome, direction in planned:
                results.append(self.apply(outcome, direction, session))
        
        planned_outcomes = [outcome for outcome, _ in planned]
        pending = [
            o for o in outcomes
            if not isinstance(o, NoSyncNeeded) and o not in planned_outcomes
        ]
        failed = [r for r in results if r.status is SyncStatus.FAILED]
        if failed:
            logger.warning(f"{len(failed)} of {len(results)} copies failed, watermark not advanced")
        elif pending:
            logger.warning(f"{len(pending)} saves need manual resolution, watermark not advanced")
        else:
            self.watermark.mark_now()
        
        logger.info(f"Reconciliation finished: {len(results)} copies applied")
        return results
    
    def get_stats(self) -> Dict:
        """Get sync statistics."""
        return self.stats.copy()
    
    def reset_stats(self):
        """Reset statistics counters."""
        self.stats = self._empty_stats()
