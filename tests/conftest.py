"""Test configuration for pytest."""

import sys
from pathlib import Path
from typing import Dict, List

import pytest

from flickr_backup.models import Album, LoginInfo, MediaKind, RemoteItem
from flickr_backup.storage import FileBackend
from flickr_backup.sync.events import EventSink

# Add the project root directory to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class RecordingSink(EventSink):
    """Keeps every event in memory."""

    def __init__(self):
        self.events = []
        self.duplicates = []

    def on_event(self, event):
        self.events.append(event)

    def on_duplicates(self, album_title, groups):
        self.duplicates.extend(groups)

    def outcomes(self):
        return [event.outcome for event in self.events]


class FakeSource:
    """In-memory stand-in for the Flickr client."""

    def __init__(self, albums: Dict[Album, List[RemoteItem]]):
        self.albums = albums
        self.details = {item.id: item for items in albums.values() for item in items}
        self.listed_albums = []

    def list_albums(self, user_id):
        return list(self.albums)

    def list_album_items(self, album, user_id):
        self.listed_albums.append(album.title)
        return [RemoteItem(id=item.id, title=item.title) for item in self.albums[album]]

    def get_item_detail(self, item):
        return self.details[item.id]

    def get_item_source_url(self, item):
        return f"https://live.staticflickr.com/{item.id}_o"


@pytest.fixture
def sink() -> RecordingSink:
    """Create a sink recording progress events."""
    return RecordingSink()


@pytest.fixture
def login() -> LoginInfo:
    """Create the identity of a test user."""
    return LoginInfo(user_id="12345@N00", username="tester", path_alias="tester")


@pytest.fixture
def trip_album():
    """Create the 'Trip' album with a titled photo and an untitled video."""
    album = Album(id="72157", title="Trip")
    items = [
        RemoteItem(id="1", title="sunset", media_kind=MediaKind.IMAGE, original_format="jpg"),
        RemoteItem(id="2", title="", media_kind=MediaKind.VIDEO, original_format="jpg"),
    ]
    return album, items


@pytest.fixture
def file_backend(tmp_path) -> FileBackend:
    """Create a file backend in a temporary directory."""
    return FileBackend(str(tmp_path / "backup"))


@pytest.fixture
def fetch():
    """Create a fetch function returning the URL as bytes."""
    def _fetch(url):
        return url.encode("utf-8")

    return _fetch


@pytest.fixture
def make_source():
    """Return a factory building fake metadata sources from {album: items}."""
    return FakeSource
