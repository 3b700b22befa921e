"""
Deduplicator

Collapses the repeated outcomes produced when a pair is classified from
both sides.

Author: pocket_sync Project
License: MIT
"""

from typing import List, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .comparison import SaveComparison


def dedup(outcomes: Sequence["SaveComparison"]) -> List["SaveComparison"]:
    """
    Keep the first of each value-equal outcome, in order.
    
    ``NoSyncNeeded`` entries carry no payload and each one stands for a
    different unchanged slot, so every one of them is kept.
    """
    from .comparison import NoSyncNeeded
    
    singles: List["SaveComparison"] = []
    for outcome in outcomes:
        if isinstance(outcome, NoSyncNeeded) or outcome not in singles:
            singles.append(outcome)
    return singles
