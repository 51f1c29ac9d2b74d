"""Test module for main.py functionality."""

from unittest.mock import MagicMock, patch

import pytest

from flickr_backup.config import Settings
from flickr_backup.main import FlickrBackup, main, parse_arguments
from flickr_backup.models import ConfigError, LoginInfo, SyncError
from flickr_backup.storage import BackendKind


def test_main_help(capsys):
    """Test that the main help message is displayed correctly."""
    with pytest.raises(SystemExit) as exc_info:
        with patch("sys.argv", ["flickr-backup", "-h"]):
            parse_arguments()

    assert exc_info.value.code == 0
    help_output = capsys.readouterr().out

    assert "Flickr Backup" in help_output
    for flag in ["--backend", "--backup-dir", "--secrets", "--album", "--user-id", "--use-cache", "--debug"]:
        assert flag in help_output


def test_backend_choices():
    """Test that only known backends are accepted."""
    assert parse_arguments(["--backend", "file"]).backend == "file"
    with pytest.raises(SystemExit):
        parse_arguments(["--backend", "ftp"])


def test_print_settings(capsys):
    """Test the settings summary of a file backup."""
    settings = Settings(backend=BackendKind.FILE, backup_directory="./backup", album_filter=frozenset({"Trip"}))

    FlickrBackup(settings).print_settings()

    output = capsys.readouterr().out
    assert "Backup directory" in output
    assert "./backup" in output
    assert "Trip" in output


def test_run_builds_sync_run(mocker):
    """Test that run passes the configured user and filter to the orchestrator."""
    mock_orchestrator = mocker.patch("flickr_backup.main.SyncOrchestrator")
    settings = Settings(backend=BackendKind.FILE, user_id="999@N00", album_filter=frozenset({"Trip"}))
    backup = FlickrBackup(settings)
    backup.client = MagicMock()
    backup.login = LoginInfo(user_id="12345@N00", username="tester")
    backup.backend = MagicMock()

    backup.run()

    sync_run = mock_orchestrator.call_args[0][0]
    assert sync_run.user_id == "999@N00"
    assert sync_run.album_filter == frozenset({"Trip"})
    assert sync_run.source is backup.client
    mock_orchestrator.return_value.sync_all.assert_called_once()


def test_main_exits_on_config_error(mocker):
    """Test that configuration errors stop the run before any remote call."""
    mocker.patch("flickr_backup.main.load_settings", side_effect=ConfigError("Missing secrets file"))
    mock_auth = mocker.patch("flickr_backup.main.get_flickr_api")

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    mock_auth.assert_not_called()


def test_main_exits_on_sync_error(mocker):
    """Test that an item failure ends the run with an error status."""
    mocker.patch("flickr_backup.main.load_settings", return_value=Settings(backend=BackendKind.FILE))
    mocker.patch.object(FlickrBackup, "authenticate")
    mocker.patch.object(FlickrBackup, "run", side_effect=SyncError("boom", album_title="Trip", item_id="2"))

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
