"""
Unit Tests for the SFTP Session

paramiko is mocked; no network access is needed.

Author: pocket_sync Project
License: MIT
"""

import io
import stat
from unittest.mock import MagicMock, patch

import paramiko
import pytest

from pocket_sync.config.schema import MiSTerConfig
from pocket_sync.exceptions import TransferError
from pocket_sync.remote.session import SFTPSession


def _attr(name, mode, mtime):
    entry = paramiko.SFTPAttributes()
    entry.filename = name
    entry.st_mode = mode
    entry.st_mtime = mtime
    return entry


class TestSFTPSession:
    """Test SFTP session behaviour."""
    
    @pytest.fixture
    def mock_client(self):
        with patch('pocket_sync.remote.session.SSHClient') as mock_ssh_client:
            client = MagicMock()
            mock_ssh_client.return_value = client
            yield client
    
    @pytest.fixture
    def sftp(self, mock_client):
        return mock_client.open_sftp.return_value
    
    def test_initialization(self):
        session = SFTPSession(host="mister", password="1")
        
        assert session.host == "mister"
        assert session.port == 22
        assert session.username == "root"
        assert session._sftp is None
    
    def test_from_config(self):
        config = MiSTerConfig(host="10.0.0.5", port=2222, username="me", password="pw")
        session = SFTPSession.from_config(config)
        
        assert session.host == "10.0.0.5"
        assert session.port == 2222
        assert session.username == "me"
    
    def test_connect_with_password(self, mock_client):
        with SFTPSession(host="mister", password="1") as session:
            assert session._sftp is not None
        
        mock_client.connect.assert_called_once()
        kwargs = mock_client.connect.call_args.kwargs
        assert kwargs["hostname"] == "mister"
        assert kwargs["password"] == "1"
        assert kwargs["key_filename"] is None
        mock_client.close.assert_called_once()
    
    def test_connect_failure(self, mock_client):
        mock_client.connect.side_effect = paramiko.AuthenticationException("bad password")
        
        with pytest.raises(TransferError):
            SFTPSession(host="mister", password="wrong").connect()
        mock_client.close.assert_called_once()
    
    def test_not_connected(self):
        with pytest.raises(TransferError):
            SFTPSession(host="mister").change_directory("/media/fat/saves")
    
    def test_change_directory_and_retrieve(self, mock_client, sftp):
        def fake_getfo(filename, buffer):
            buffer.write(b"save-data")
        sftp.getfo.side_effect = fake_getfo
        
        with SFTPSession(host="mister") as session:
            session.change_directory("/media/fat/saves/GBA")
            data = session.retrieve_to_buffer("Metroid.sav")
        
        sftp.chdir.assert_called_once_with("/media/fat/saves/GBA")
        assert data == b"save-data"
    
    def test_change_directory_failure(self, mock_client, sftp):
        sftp.chdir.side_effect = IOError(2, "No such file")
        
        with SFTPSession(host="mister") as session:
            with pytest.raises(TransferError):
                session.change_directory("/nope")
    
    def test_upload(self, mock_client, sftp):
        source = io.BytesIO(b"pocket")
        
        with SFTPSession(host="mister") as session:
            session.upload_file("Metroid.sav", source)
        
        sftp.putfo.assert_called_once_with(source, "Metroid.sav")
    
    def test_upload_failure(self, mock_client, sftp):
        sftp.putfo.side_effect = paramiko.SSHException("channel closed")
        
        with SFTPSession(host="mister") as session:
            with pytest.raises(TransferError):
                session.upload_file("Metroid.sav", io.BytesIO(b""))
    
    def test_list_directory_returns_regular_files(self, mock_client, sftp):
        sftp.listdir_attr.return_value = [
            _attr("Metroid.sav", stat.S_IFREG | 0o644, 1700000000.7),
            _attr("old", stat.S_IFDIR | 0o755, 1600000000),
        ]
        
        with SFTPSession(host="mister") as session:
            entries = session.list_directory("/media/fat/saves/GBA")
        
        assert entries == [("Metroid.sav", 1700000000)]
    
    def test_list_missing_directory(self, mock_client, sftp):
        sftp.listdir_attr.side_effect = FileNotFoundError(2, "No such file")
        
        with SFTPSession(host="mister") as session:
            assert session.list_directory("/media/fat/saves/GBC") == []
    
    def test_list_directory_failure(self, mock_client, sftp):
        sftp.listdir_attr.side_effect = PermissionError(13, "Permission denied")
        
        with SFTPSession(host="mister") as session:
            with pytest.raises(TransferError):
                session.list_directory("/media/fat/saves/GBA")
