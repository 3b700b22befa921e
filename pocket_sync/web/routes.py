"""
API Routes
==========

REST endpoints for listing save outcomes and applying them.

Author: pocket_sync Project
License: MIT
"""

import threading

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

from ..core.orchestrator import Direction, SyncStatus
from ..exceptions import TransferError
from ..sync_engine.comparison import SaveComparison
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Global orchestrator reference (set by app.py)
_orchestrator = None

# Endpoints run in the threadpool; one request at a time may touch the
# orchestrator and its MiSTer session
_orchestrator_lock = threading.Lock()


def set_orchestrator(orchestrator):
    """Set orchestrator instance for routes."""
    global _orchestrator
    _orchestrator = orchestrator


def get_orchestrator():
    """Get orchestrator instance."""
    if _orchestrator is None:
        raise HTTPException(status_code=503, detail="Orchestrator not initialized")
    return _orchestrator


api_router = APIRouter()


# ============================================================================
# Pydantic Models for API Requests/Responses
# ============================================================================

class SaveModel(BaseModel):
    """One side of an outcome."""
    game: str
    core: str
    path: str
    date_modified: int


class OutcomeModel(BaseModel):
    """A classified save slot."""
    index: int
    kind: str
    pocket: Optional[SaveModel] = None
    mister: Optional[SaveModel] = None


class ApplyRequest(BaseModel):
    """Apply request: which side's save to keep."""
    direction: Direction = Field(..., description="'pocket' copies Pocket -> MiSTer, 'mister' copies MiSTer -> Pocket")


class WatermarkResponse(BaseModel):
    last_merge: int


def _save_model(save) -> Optional[SaveModel]:
    if save is None:
        return None
    return SaveModel(
        game=save.game,
        core=save.core.pocket_label,
        path=str(save.path),
        date_modified=save.date_modified
    )


def _outcome_model(index: int, outcome: SaveComparison) -> OutcomeModel:
    return OutcomeModel(
        index=index,
        kind=outcome.kind,
        pocket=_save_model(outcome.pocket_save()),
        mister=_save_model(outcome.mister_save())
    )


# ============================================================================
# Save Routes
# ============================================================================

@api_router.get("/saves", response_model=List[OutcomeModel])
def list_saves():
    """
    Scan both sides and return the classified outcomes.
    """
    orchestrator = get_orchestrator()
    try:
        with _orchestrator_lock, orchestrator.session_factory() as session:
            outcomes = orchestrator.compare(session)
    except TransferError as e:
        logger.error(f"Scan failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    
    return [_outcome_model(index, outcome) for index, outcome in enumerate(outcomes)]


@api_router.post("/saves/{index}/apply")
def apply_save(index: int, request: ApplyRequest) -> Dict[str, Any]:
    """
    Apply the outcome at ``index`` from the last scan.
    """
    orchestrator = get_orchestrator()
    with _orchestrator_lock:
        return _apply_locked(orchestrator, index, request)


def _apply_locked(orchestrator, index: int, request: ApplyRequest) -> Dict[str, Any]:
    outcomes = orchestrator.last_comparisons
    
    if index < 0 or index >= len(outcomes):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No outcome at index {index}")
    
    outcome = outcomes[index]
    needed = outcome.mister_save() if request.direction is Direction.MISTER else outcome.pocket_save()
    if needed is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Outcome {outcome.kind} has no {request.direction.value} save"
        )
    
    try:
        with orchestrator.session_factory() as session:
            result = orchestrator.apply(outcome, request.direction, session)
    except TransferError as e:
        logger.error(f"Could not open MiSTer session: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    
    if result.status is SyncStatus.FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error_message)
    
    return result.to_dict()


@api_router.post("/run")
def run_sync() -> Dict[str, Any]:
    """Run an unattended reconciliation pass."""
    orchestrator = get_orchestrator()
    try:
        with _orchestrator_lock:
            results = orchestrator.run()
    except TransferError as e:
        logger.error(f"Reconciliation run failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    
    return {
        "results": [result.to_dict() for result in results],
        "stats": orchestrator.get_stats()
    }


@api_router.get("/watermark", response_model=WatermarkResponse)
def get_watermark():
    orchestrator = get_orchestrator()
    with _orchestrator_lock:
        return WatermarkResponse(last_merge=orchestrator.watermark.load())


@api_router.post("/watermark", response_model=WatermarkResponse)
def mark_merged():
    """Record that every save has been reconciled as of now."""
    orchestrator = get_orchestrator()
    with _orchestrator_lock:
        return WatermarkResponse(last_merge=orchestrator.watermark.mark_now())
