"""
Shared test fixtures.

Author: pocket_sync Project
License: MIT
"""

import posixpath
from pathlib import PurePosixPath

import pytest

from pocket_sync.core.cores import Core
from pocket_sync.core.models import SaveInfo
from pocket_sync.exceptions import TransferError
from pocket_sync.remote.session import RemoteSession


class FakeSession(RemoteSession):
    """In-memory remote session that records every call."""
    
    def __init__(self, files=None, mtimes=None):
        self.files = dict(files or {})
        self.mtimes = dict(mtimes or {})
        self.cwd = "/"
        self.calls = []
        self.fail_on = set()
        self.closed = False
    
    def _check(self, name):
        if name in self.fail_on:
            raise TransferError(f"{name} failed")
    
    def change_directory(self, path):
        self.calls.append(("cd", path))
        self._check("cd")
        self.cwd = path
    
    def retrieve_to_buffer(self, filename):
        self.calls.append(("retr", filename))
        self._check("retr")
        path = posixpath.join(self.cwd, filename)
        if path not in self.files:
            raise TransferError("No such file", path)
        return self.files[path]
    
    def upload_file(self, filename, source):
        self.calls.append(("put", filename))
        self._check("put")
        self.files[posixpath.join(self.cwd, filename)] = source.read()
    
    def list_directory(self, path):
        self.calls.append(("ls", path))
        self._check("ls")
        prefix = path.rstrip("/") + "/"
        return [
            (name[len(prefix):], self.mtimes.get(name, 0))
            for name in sorted(self.files)
            if name.startswith(prefix) and "/" not in name[len(prefix):]
        ]
    
    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


def pocket_info(game="Tetris.sav", core=Core.GB, date_modified=100, path=None):
    return SaveInfo(
        game=game,
        core=core,
        path=PurePosixPath(path or f"Saves/{core.pocket_label}/common/{game}"),
        date_modified=date_modified
    )


def mister_info(game="Tetris.sav", core=Core.GB, date_modified=200, path=None):
    return SaveInfo(
        game=game,
        core=core,
        path=PurePosixPath(path or f"/media/fat/saves/{core.mister_label}/{game}"),
        date_modified=date_modified
    )
