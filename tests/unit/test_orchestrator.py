"""Unit tests for the sync orchestrator."""

from unittest.mock import MagicMock

import pytest

from flickr_backup.models import Album, MediaKind, RemoteItem, SyncError
from flickr_backup.sync.orchestrator import SyncOrchestrator, SyncRun


def photo(photo_id, title):
    return RemoteItem(id=photo_id, title=title, media_kind=MediaKind.IMAGE, original_format="jpg")


def test_sync_all_filters_albums(make_source, file_backend, fetch, login, sink):
    """Test that only albums in the filter are listed and synced."""
    trip = Album(id="1", title="Trip")
    home = Album(id="2", title="Home")
    source = make_source({trip: [photo("1", "a")], home: [photo("2", "b")]})
    run = SyncRun(
        source=source,
        backend=file_backend,
        fetch=fetch,
        login=login,
        user_id=login.user_id,
        sink=sink,
        album_filter=frozenset({"Trip"}),
    )

    summary = SyncOrchestrator(run).sync_all()

    assert source.listed_albums == ["Trip"]
    assert summary.albums == 1
    assert summary.filtered_out == 1
    assert summary.written == 1
    assert file_backend.list_keys("Home") == set()


def test_sync_all_without_filter(make_source, file_backend, fetch, login, sink):
    """Test that every album is processed in order without a filter."""
    trip = Album(id="1", title="Trip")
    home = Album(id="2", title="Home")
    source = make_source({trip: [photo("1", "a")], home: [photo("2", "b"), photo("3", "c")]})
    run = SyncRun(source=source, backend=file_backend, fetch=fetch, login=login, user_id="someone", sink=sink)

    summary = SyncOrchestrator(run).sync_all()

    assert source.listed_albums == ["Trip", "Home"]
    assert summary.written == 3
    assert summary.short_circuited == 0


def test_sync_all_uses_path_alias_for_duplicates(file_backend, fetch, login, sink):
    """Test that duplicate URLs use the user's path alias."""
    album = Album(id="1", title="Trip")
    source = MagicMock()
    source.list_albums.return_value = [album]
    source.list_album_items.return_value = [RemoteItem(id="1", title="a"), RemoteItem(id="2", title="a")]
    source.get_item_detail.side_effect = lambda item: photo(item.id, item.title + item.id)
    source.get_item_source_url.side_effect = lambda item: f"https://x/{item.id}"
    run = SyncRun(source=source, backend=file_backend, fetch=fetch, login=login, user_id=login.user_id, sink=sink)

    summary = SyncOrchestrator(run).sync_all()

    source.list_albums.assert_called_once_with(login.user_id)
    source.list_album_items.assert_called_once_with(album, login.user_id)
    assert summary.duplicates == 1
    assert sink.duplicates[0].urls[0] == "https://flickr.com/photos/tester/1"


def test_sync_all_listing_failure_names_album(file_backend, fetch, login, sink):
    """Test that a failed photo listing aborts with the album in the error."""
    album = Album(id="1", title="Trip")
    source = MagicMock()
    source.list_albums.return_value = [album]
    source.list_album_items.side_effect = ConnectionError("connection reset")
    run = SyncRun(source=source, backend=file_backend, fetch=fetch, login=login, user_id=login.user_id, sink=sink)

    with pytest.raises(SyncError) as exc_info:
        SyncOrchestrator(run).sync_all()

    assert exc_info.value.album_title == "Trip"
    assert isinstance(exc_info.value.__cause__, ConnectionError)
