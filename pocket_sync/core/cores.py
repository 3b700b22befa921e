"""
Core Registry

Maps each emulated platform to its folder name on the Pocket, its save
folder on the MiSTer and the ROM extensions used to find games locally.

Author: pocket_sync Project
License: MIT
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class Core(str, Enum):
    """Emulated platform, valued by its Pocket platform folder name."""
    GB = "gb"
    GBC = "gbc"
    GBA = "gba"
    NES = "nes"
    SNES = "snes"
    GENESIS = "genesis"
    SMS = "sms"
    GG = "gg"
    PCE = "pce"
    
    @property
    def pocket_label(self) -> str:
        """Folder name under ``Saves/`` and ``Assets/`` on the Pocket."""
        return self.value
    
    @property
    def mister_label(self) -> str:
        """Folder name under the MiSTer saves directory."""
        return _MISTER_LABELS[self]
    
    @property
    def rom_extensions(self) -> Tuple[str, ...]:
        """ROM file extensions for this core, lowercase without dots."""
        return _ROM_EXTENSIONS[self]
    
    @classmethod
    def from_pocket(cls, label: str) -> Optional["Core"]:
        """Look up a core by its Pocket folder name."""
        try:
            return cls(label.lower())
        except ValueError:
            return None
    
    @classmethod
    def from_mister(cls, label: str) -> Optional["Core"]:
        """Look up a core by its MiSTer saves folder name."""
        for core, mister_label in _MISTER_LABELS.items():
            if mister_label.lower() == label.lower():
                return core
        return None


_MISTER_LABELS: Dict[Core, str] = {
    Core.GB: "GAMEBOY",
    Core.GBC: "GBC",
    Core.GBA: "GBA",
    Core.NES: "NES",
    Core.SNES: "SNES",
    Core.GENESIS: "MegaDrive",
    Core.SMS: "SMS",
    Core.GG: "GameGear",
    Core.PCE: "TGFX16",
}

_ROM_EXTENSIONS: Dict[Core, Tuple[str, ...]] = {
    Core.GB: ("gb",),
    Core.GBC: ("gbc",),
    Core.GBA: ("gba",),
    Core.NES: ("nes",),
    Core.SNES: ("sfc", "smc"),
    Core.GENESIS: ("md", "gen", "bin"),
    Core.SMS: ("sms",),
    Core.GG: ("gg",),
    Core.PCE: ("pce",),
}
