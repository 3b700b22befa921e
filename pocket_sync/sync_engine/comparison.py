"""
Save Comparison

Pairs each save with its counterpart on the other side and classifies the
pair against the last-merge watermark.

Author: pocket_sync Project
License: MIT
"""

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from ..core.models import Inventory, SaveInfo, SaveRef, Side
from ..utils.logger import get_logger
from .deduplicator import dedup

logger = get_logger(__name__)

# A MiSTer without a set RTC stamps files starting at the epoch, so anything
# written in the first day cannot be trusted.
RTC_VALID_THRESHOLD = 86400


@dataclass(frozen=True)
class SavePair:
    """The Pocket and MiSTer records of the same logical save."""
    pocket: SaveInfo
    mister: SaveInfo
    # Refs locate the records; equality is decided by the records alone
    pocket_ref: Optional[SaveRef] = field(default=None, compare=False)
    mister_ref: Optional[SaveRef] = field(default=None, compare=False)
    
    def is_pocket_newer(self) -> bool:
        return self.pocket.date_modified > self.mister.date_modified
    
    def newer_save(self) -> SaveInfo:
        return self.pocket if self.is_pocket_newer() else self.mister
    
    def older_save(self) -> SaveInfo:
        return self.mister if self.is_pocket_newer() else self.pocket
    
    def __str__(self) -> str:
        if self.is_pocket_newer():
            titles = ("-- Pocket (newer)", "-- MiSTer (older)")
        else:
            titles = ("-- MiSTer (newer)", "-- Pocket (older)")
        return (
            f"{titles[0]}\n{self.newer_save()}\n\n--- VS ---\n\n"
            f"{titles[1]}\n{self.older_save()}"
        )


@dataclass(frozen=True)
class SaveComparison:
    """
    Outcome of classifying one save.
    
    Concrete outcomes are the subclasses below; consumers dispatch on them
    exhaustively.
    """
    kind: ClassVar[str] = ""
    
    def pocket_save(self) -> Optional[SaveInfo]:
        """The Pocket record this outcome carries, if any."""
        return None
    
    def mister_save(self) -> Optional[SaveInfo]:
        """The MiSTer record this outcome carries, if any."""
        return None


@dataclass(frozen=True)
class PocketOnly(SaveComparison):
    save: SaveInfo
    ref: Optional[SaveRef] = field(default=None, compare=False)
    kind: ClassVar[str] = "pocket_only"
    
    def pocket_save(self) -> Optional[SaveInfo]:
        return self.save


@dataclass(frozen=True)
class MiSTerOnly(SaveComparison):
    save: SaveInfo
    ref: Optional[SaveRef] = field(default=None, compare=False)
    kind: ClassVar[str] = "mister_only"
    
    def mister_save(self) -> Optional[SaveInfo]:
        return self.save


@dataclass(frozen=True)
class _PairComparison(SaveComparison):
    pair: SavePair
    
    def pocket_save(self) -> Optional[SaveInfo]:
        return self.pair.pocket
    
    def mister_save(self) -> Optional[SaveInfo]:
        return self.pair.mister


@dataclass(frozen=True)
class PocketNewer(_PairComparison):
    kind: ClassVar[str] = "pocket_newer"


@dataclass(frozen=True)
class MiSTerNewer(_PairComparison):
    kind: ClassVar[str] = "mister_newer"


@dataclass(frozen=True)
class Conflict(_PairComparison):
    kind: ClassVar[str] = "conflict"


@dataclass(frozen=True)
class NoSyncNeeded(SaveComparison):
    kind: ClassVar[str] = "no_sync_needed"


def classify_pair(
    pocket: SaveInfo,
    mister: SaveInfo,
    last_merge: int,
    pocket_ref: Optional[SaveRef] = None,
    mister_ref: Optional[SaveRef] = None
) -> SaveComparison:
    """
    Classify the Pocket and MiSTer records of one save against the
    last-merge watermark.
    
    Rules, in order:
    
    1. MiSTer timestamp below ``RTC_VALID_THRESHOLD``: conflict.
    2. Both older than ``last_merge``: nothing to do.
    3. Both newer than ``last_merge``: both sides changed, conflict.
    4. Otherwise the strictly later side wins; ties go to the Pocket.
    """
    pair = SavePair(pocket, mister, pocket_ref, mister_ref)
    pocket_time = pocket.date_modified
    mister_time = mister.date_modified
    
    if mister_time < RTC_VALID_THRESHOLD:
        logger.debug(f"{mister.game}: MiSTer timestamp {mister_time} predates RTC, conflict")
        return Conflict(pair)
    
    if pocket_time < last_merge and mister_time < last_merge:
        return NoSyncNeeded()
    
    if pocket_time > last_merge and mister_time > last_merge:
        return Conflict(pair)
    
    if mister_time > pocket_time:
        return MiSTerNewer(pair)
    return PocketNewer(pair)


def classify(
    save: SaveRef,
    pocket_inventory: Inventory,
    mister_inventory: Inventory,
    last_merge: int
) -> SaveComparison:
    """
    Classify one inventory entry.
    
    The opposite inventory is searched linearly and the first save with the
    same core and game is taken as the counterpart.
    """
    if save.side is Side.POCKET:
        pocket_info = pocket_inventory.resolve(save)
        mister_ref = mister_inventory.find(pocket_info.core, pocket_info.game)
        if mister_ref is None:
            return PocketOnly(pocket_info, save)
        pocket_ref = save
    else:
        mister_info = mister_inventory.resolve(save)
        pocket_ref = pocket_inventory.find(mister_info.core, mister_info.game)
        if pocket_ref is None:
            return MiSTerOnly(mister_info, save)
        mister_ref = save
    
    return classify_pair(
        pocket_inventory.resolve(pocket_ref),
        mister_inventory.resolve(mister_ref),
        last_merge,
        pocket_ref=pocket_ref,
        mister_ref=mister_ref
    )


def compare_inventories(
    pocket_inventory: Inventory,
    mister_inventory: Inventory,
    last_merge: int
) -> List[SaveComparison]:
    """
    Classify every save on both sides and drop the repeated outcomes.
    
    Pocket saves are classified first, then MiSTer saves; a pair found from
    both sides yields the same outcome twice and is collapsed by
    :func:`dedup`.
    """
    outcomes: List[SaveComparison] = []
    for inventory in (pocket_inventory, mister_inventory):
        for ref, _ in inventory.refs():
            outcomes.append(
                classify(ref, pocket_inventory, mister_inventory, last_merge)
            )
    
    singles = dedup(outcomes)
    logger.info(
        f"Compared {len(pocket_inventory)} Pocket and {len(mister_inventory)} MiSTer saves: "
        f"{len(singles)} outcomes"
    )
    return singles
