"""
Unit Tests for Inventories and Scanning

Author: pocket_sync Project
License: MIT
"""

import os
from pathlib import PurePosixPath

import pytest

from pocket_sync.core.cores import Core
from pocket_sync.core.inventory import SaveScanner
from pocket_sync.core.models import Inventory, MiSTerSave, PocketSave, SaveRef, Side
from pocket_sync.exceptions import TransferError

from conftest import FakeSession, pocket_info, mister_info


class TestInventory:
    """Test suite for indexed inventories."""
    
    def test_append_returns_stable_refs(self):
        inventory = Inventory(Side.POCKET)
        first = inventory.add(pocket_info("A.sav"))
        second = inventory.add(pocket_info("B.sav"))
        
        assert first == SaveRef(Side.POCKET, 0)
        assert second == SaveRef(Side.POCKET, 1)
        assert inventory.resolve(first).game == "A.sav"
        assert isinstance(inventory[1], PocketSave)
        assert len(inventory) == 2
    
    def test_rejects_other_side(self):
        inventory = Inventory(Side.POCKET)
        with pytest.raises(ValueError):
            inventory.append(MiSTerSave(mister_info()))
    
    def test_resolve_rejects_foreign_ref(self):
        inventory = Inventory(Side.MISTER, [MiSTerSave(mister_info())])
        with pytest.raises(ValueError):
            inventory.resolve(SaveRef(Side.POCKET, 0))
    
    def test_find(self):
        inventory = Inventory(Side.MISTER)
        inventory.add(mister_info("A.sav", Core.GB))
        inventory.add(mister_info("A.sav", Core.GBA))
        
        assert inventory.find(Core.GBA, "A.sav") == SaveRef(Side.MISTER, 1)
        assert inventory.find(Core.NES, "A.sav") is None


class TestCores:
    """Test suite for the core registry."""
    
    def test_labels(self):
        assert Core.GB.pocket_label == "gb"
        assert Core.GB.mister_label == "GAMEBOY"
        assert "sfc" in Core.SNES.rom_extensions
    
    def test_lookup(self):
        assert Core.from_pocket("GBA") is Core.GBA
        assert Core.from_mister("megadrive") is Core.GENESIS
        assert Core.from_pocket("n64") is None
        assert Core.from_mister("N64") is None


class TestSaveScanner:
    """Test suite for scanning both sides."""
    
    def test_scan_pocket(self, tmp_path):
        saves = {
            "Saves/gb/common/Tetris.sav": 1700000000,
            "Saves/gba/common/US/Metroid.sav": 1700000100,
            "Saves/gba/common/notes.txt": 1700000200,
            "Saves/unknown/common/Thing.sav": 1700000300,
        }
        for rel, mtime in saves.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"x")
            os.utime(path, (mtime, mtime))
        
        inventory = SaveScanner(str(tmp_path)).scan_pocket()
        
        infos = [save.info for save in inventory]
        assert [(i.game, i.core, i.date_modified) for i in infos] == [
            ("Tetris.sav", Core.GB, 1700000000),
            ("Metroid.sav", Core.GBA, 1700000100),
        ]
        assert infos[1].path == PurePosixPath("Saves/gba/common/US/Metroid.sav")
    
    def test_scan_mister(self):
        session = FakeSession(
            files={
                "/media/fat/saves/GAMEBOY/Tetris.sav": b"",
                "/media/fat/saves/GAMEBOY/Tetris.ss1": b"",
                "/media/fat/saves/SNES/Zelda.sav": b"",
            },
            mtimes={
                "/media/fat/saves/GAMEBOY/Tetris.sav": 1700000000,
                "/media/fat/saves/SNES/Zelda.sav": 1700000500,
            }
        )
        
        inventory = SaveScanner("/pocket").scan_mister(session)
        
        infos = [save.info for save in inventory]
        assert [(i.game, i.core) for i in infos] == [
            ("Tetris.sav", Core.GB),
            ("Zelda.sav", Core.SNES),
        ]
        assert infos[1].path == PurePosixPath("/media/fat/saves/SNES/Zelda.sav")
        assert infos[1].date_modified == 1700000500
    
    def test_scan_mister_propagates_errors(self):
        session = FakeSession()
        session.fail_on.add("ls")
        
        with pytest.raises(TransferError):
            SaveScanner("/pocket").scan_mister(session)
