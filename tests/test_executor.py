"""
Unit Tests for the Sync Executor

Tests both copy directions against a temporary Pocket root and an
in-memory remote session.

Author: pocket_sync Project
License: MIT
"""

import pytest

from pocket_sync.core.cores import Core
from pocket_sync.exceptions import InvalidOperationError, TransferError
from pocket_sync.sync_engine.comparison import (
    SavePair,
    PocketOnly,
    MiSTerOnly,
    PocketNewer,
    MiSTerNewer,
    Conflict,
    NoSyncNeeded,
)
from pocket_sync.sync_engine.executor import SyncExecutor, apply_from_mister

from conftest import FakeSession, pocket_info, mister_info

MISTER_TETRIS = "/media/fat/saves/GAMEBOY/Tetris.sav"


class TestApplyFromMister:
    """Test suite for MiSTer -> Pocket copies."""
    
    @pytest.fixture
    def executor(self):
        return SyncExecutor()
    
    @pytest.fixture
    def session(self):
        return FakeSession(files={MISTER_TETRIS: b"mister-bytes"})
    
    def test_paired_overwrites_pocket_file(self, executor, session, tmp_path):
        local = tmp_path / "Saves/gb/common/Tetris.sav"
        local.parent.mkdir(parents=True)
        local.write_bytes(b"old-pocket-bytes")
        pair = SavePair(pocket=pocket_info(), mister=mister_info())
        
        result = executor.apply_from_mister(MiSTerNewer(pair), session, str(tmp_path))
        
        assert result.success is True
        assert result.skipped is False
        assert local.read_bytes() == b"mister-bytes"
        assert session.calls == [("cd", "/media/fat/saves/GAMEBOY"), ("retr", "Tetris.sav")]
    
    @pytest.mark.parametrize("outcome_type", [PocketNewer, Conflict])
    def test_other_paired_variants(self, executor, session, tmp_path, outcome_type):
        pair = SavePair(pocket=pocket_info(), mister=mister_info())
        
        executor.apply_from_mister(outcome_type(pair), session, str(tmp_path))
        
        assert (tmp_path / "Saves/gb/common/Tetris.sav").read_bytes() == b"mister-bytes"
    
    def test_mister_only_writes_every_rom_variant(self, executor, session, tmp_path):
        for rom in ("Assets/gb/common/Tetris.gb", "Assets/gb/common/Hacks/Tetris.gb"):
            path = tmp_path / rom
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"rom")
        
        result = executor.apply_from_mister(MiSTerOnly(mister_info()), session, str(tmp_path))
        
        assert len(result.destination_paths) == 2
        assert (tmp_path / "Saves/gb/common/Tetris.sav").read_bytes() == b"mister-bytes"
        assert (tmp_path / "Saves/gb/common/Hacks/Tetris.sav").read_bytes() == b"mister-bytes"
        assert session.calls.count(("retr", "Tetris.sav")) == 1
    
    def test_mister_only_without_rom_is_skipped(self, session, tmp_path):
        (tmp_path / "Assets/gb/common").mkdir(parents=True)
        before = sorted(tmp_path.rglob("*"))
        
        result = apply_from_mister(MiSTerOnly(mister_info()), session, str(tmp_path))
        
        assert result.success is True
        assert result.skipped is True
        assert "Tetris" in result.message
        assert sorted(tmp_path.rglob("*")) == before
        assert session.calls == []
    
    @pytest.mark.parametrize("outcome", [PocketOnly(pocket_info()), NoSyncNeeded()])
    def test_outcome_without_mister_save_is_invalid(self, executor, session, tmp_path, outcome):
        with pytest.raises(InvalidOperationError):
            executor.apply_from_mister(outcome, session, str(tmp_path))
        assert session.calls == []
    
    def test_retrieve_failure_propagates(self, executor, session, tmp_path):
        session.fail_on.add("retr")
        pair = SavePair(pocket=pocket_info(), mister=mister_info())
        
        with pytest.raises(TransferError):
            executor.apply_from_mister(MiSTerNewer(pair), session, str(tmp_path))
        
        assert not (tmp_path / "Saves/gb/common/Tetris.sav").exists()
    
    def test_local_write_failure_is_transfer_error(self, executor, session, tmp_path):
        # A file where the destination directory should be
        (tmp_path / "Saves").write_bytes(b"")
        pair = SavePair(pocket=pocket_info(), mister=mister_info())
        
        with pytest.raises(TransferError):
            executor.apply_from_mister(MiSTerNewer(pair), session, str(tmp_path))


class TestApplyFromPocket:
    """Test suite for Pocket -> MiSTer copies."""
    
    @pytest.fixture
    def pocket_root(self, tmp_path):
        save = tmp_path / "Saves/gba/common/Metroid.sav"
        save.parent.mkdir(parents=True)
        save.write_bytes(b"pocket-bytes")
        return tmp_path
    
    def test_pocket_only_goes_to_core_folder(self, pocket_root):
        session = FakeSession()
        executor = SyncExecutor(mister_saves_path="/media/fat/saves")
        outcome = PocketOnly(pocket_info("Metroid.sav", Core.GBA))
        
        result = executor.apply_from_pocket(outcome, session, str(pocket_root))
        
        assert result.destination_paths == ["/media/fat/saves/GBA/Metroid.sav"]
        assert session.files["/media/fat/saves/GBA/Metroid.sav"] == b"pocket-bytes"
        assert session.calls == [("cd", "/media/fat/saves/GBA"), ("put", "Metroid.sav")]
    
    def test_paired_replaces_known_remote_file(self, pocket_root):
        remote = "/media/fat/saves/GBA/sub/Metroid.sav"
        session = FakeSession(files={remote: b"old"})
        pair = SavePair(
            pocket=pocket_info("Metroid.sav", Core.GBA),
            mister=mister_info("Metroid.sav", Core.GBA, path=remote)
        )
        
        SyncExecutor().apply_from_pocket(Conflict(pair), session, str(pocket_root))
        
        assert session.files[remote] == b"pocket-bytes"
        assert session.cwd == "/media/fat/saves/GBA/sub"
    
    @pytest.mark.parametrize("outcome", [MiSTerOnly(mister_info()), NoSyncNeeded()])
    def test_outcome_without_pocket_save_is_invalid(self, pocket_root, outcome):
        with pytest.raises(InvalidOperationError):
            SyncExecutor().apply_from_pocket(outcome, FakeSession(), str(pocket_root))
    
    def test_missing_local_file(self, tmp_path):
        session = FakeSession()
        
        with pytest.raises(TransferError):
            SyncExecutor().apply_from_pocket(PocketOnly(pocket_info()), session, str(tmp_path))
        
        assert session.calls == []
    
    def test_upload_failure_propagates(self, pocket_root):
        session = FakeSession()
        session.fail_on.add("put")
        
        with pytest.raises(TransferError):
            SyncExecutor().apply_from_pocket(
                PocketOnly(pocket_info("Metroid.sav", Core.GBA)), session, str(pocket_root)
            )
