"""
Save Model

Per-side save records and the indexed inventories that hold them.

Author: pocket_sync Project
License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import ClassVar, Iterable, Iterator, List, Optional, Tuple

from .cores import Core


class Side(str, Enum):
    """Which storage location a save lives on."""
    POCKET = "pocket"
    MISTER = "mister"


@dataclass(frozen=True)
class SaveInfo:
    """
    One save file on one side.
    
    ``path`` is relative to the Pocket root for Pocket saves and absolute on
    the MiSTer for MiSTer saves. ``date_modified`` is in whole seconds.
    """
    game: str
    core: Core
    path: PurePosixPath
    date_modified: int
    
    def __str__(self) -> str:
        return (
            f"Game: {self.game}\n"
            f"Core: {self.core.pocket_label}\n"
            f"Path: {self.path}\n"
            f"Modified: {self.date_modified}"
        )


@dataclass(frozen=True)
class PlatformSave:
    """A save tagged with the side it came from."""
    info: SaveInfo
    side: ClassVar[Side]


@dataclass(frozen=True)
class PocketSave(PlatformSave):
    side: ClassVar[Side] = Side.POCKET


@dataclass(frozen=True)
class MiSTerSave(PlatformSave):
    side: ClassVar[Side] = Side.MISTER


@dataclass(frozen=True)
class SaveRef:
    """Stable reference to an entry of an :class:`Inventory`."""
    side: Side
    index: int


class Inventory:
    """
    Append-only, indexed list of the saves found on one side.
    
    Entries are never removed or reordered, so a :class:`SaveRef` handed out
    by :meth:`append` stays valid for the lifetime of the inventory.
    """
    
    def __init__(self, side: Side, saves: Iterable[PlatformSave] = ()):
        self.side = side
        self._saves: List[PlatformSave] = []
        for save in saves:
            self.append(save)
    
    def append(self, save: PlatformSave) -> SaveRef:
        """Add a save and return its reference."""
        if save.side is not self.side:
            raise ValueError(
                f"Cannot add a {save.side.value} save to the {self.side.value} inventory"
            )
        self._saves.append(save)
        return SaveRef(self.side, len(self._saves) - 1)
    
    def add(self, info: SaveInfo) -> SaveRef:
        """Wrap ``info`` for this side and append it."""
        wrapper = PocketSave if self.side is Side.POCKET else MiSTerSave
        return self.append(wrapper(info))
    
    def resolve(self, ref: SaveRef) -> SaveInfo:
        if ref.side is not self.side:
            raise ValueError(f"{ref} does not belong to the {self.side.value} inventory")
        return self._saves[ref.index].info
    
    def find(self, core: Core, game: str) -> Optional[SaveRef]:
        """Return the first save with the same core and game, if any."""
        for index, save in enumerate(self._saves):
            if save.info.core == core and save.info.game == game:
                return SaveRef(self.side, index)
        return None
    
    def refs(self) -> Iterator[Tuple[SaveRef, SaveInfo]]:
        for index, save in enumerate(self._saves):
            yield SaveRef(self.side, index), save.info
    
    def __getitem__(self, index: int) -> PlatformSave:
        return self._saves[index]
    
    def __len__(self) -> int:
        return len(self._saves)
    
    def __iter__(self) -> Iterator[PlatformSave]:
        return iter(self._saves)
