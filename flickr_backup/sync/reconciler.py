"""Per-album reconciliation between Flickr and the backup backend."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from flickr_backup.models import Album, RemoteItem, SyncError
from flickr_backup.storage import StorageBackend
from flickr_backup.sync.duplicates import DuplicateGroup, find_duplicates
from flickr_backup.sync.events import EventSink, Outcome, SyncEvent
from flickr_backup.utils.naming import resolve_object_key

logger = logging.getLogger(__name__)


class AlbumState(str, Enum):
    """States an album goes through during a run."""
    PENDING = "pending"
    SHORT_CIRCUIT_SKIP = "short_circuit_skip"
    SCANNING = "scanning"
    PER_ITEM_SYNC = "per_item_sync"
    DONE = "done"


def plan_album(remote_count: int, backed_up_count: int) -> AlbumState:
    """Decide whether an album needs a per-item pass.

    Equal counts are taken to mean the album is already backed up. A backup
    holding the same number of different files is not detected.

    Args:
        remote_count: Number of items in the Flickr album
        backed_up_count: Number of keys stored under the album prefix

    Returns:
        SHORT_CIRCUIT_SKIP or SCANNING
    """
    if remote_count == backed_up_count:
        return AlbumState.SHORT_CIRCUIT_SKIP
    return AlbumState.SCANNING


@dataclass
class AlbumReport:
    """What happened to one album."""
    album_title: str
    states: List[AlbumState] = field(default_factory=lambda: [AlbumState.PENDING])
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    duplicates: List[DuplicateGroup] = field(default_factory=list)

    @property
    def state(self) -> AlbumState:
        return self.states[-1]

    @property
    def short_circuited(self) -> bool:
        return AlbumState.SHORT_CIRCUIT_SKIP in self.states

    def advance(self, state: AlbumState) -> None:
        logger.debug("Album '%s': %s -> %s", self.album_title, self.state.value, state.value)
        self.states.append(state)


class ItemSyncer:
    """Copies a single item to the backend unless it is already there."""

    def __init__(self, backend: StorageBackend, fetch: Callable[[str], bytes], sink: EventSink):
        self.backend = backend
        self.fetch = fetch
        self.sink = sink

    def sync(self, source_url: str, object_key: str) -> Outcome:
        """Back up ``source_url`` under ``object_key``.

        Returns:
            SKIP if the key already exists, DONE once written
        """
        label = f"{source_url} -> {object_key}"
        self.sink.on_event(SyncEvent(Outcome.LOAD, label))

        if self.backend.exists(object_key):
            self.sink.on_event(SyncEvent(Outcome.SKIP, label))
            return Outcome.SKIP

        body = self.fetch(source_url)
        self.backend.write(object_key, body)
        logger.debug("Wrote %d bytes to %s", len(body), object_key)
        self.sink.on_event(SyncEvent(Outcome.DONE, label))
        return Outcome.DONE


class AlbumReconciler:
    """Brings one album of the backup in line with Flickr.

    ``source`` is the metadata client providing ``get_item_detail`` and
    ``get_item_source_url``.
    """

    def __init__(
        self,
        source,
        backend: StorageBackend,
        fetch: Callable[[str], bytes],
        sink: Optional[EventSink] = None,
        owner: Optional[str] = None,
    ):
        self.source = source
        self.backend = backend
        self.sink = sink or EventSink()
        self.owner = owner
        self.item_syncer = ItemSyncer(backend, fetch, self.sink)

    def reconcile(self, album: Album, items: List[RemoteItem]) -> AlbumReport:
        """Back up every item of ``album`` missing from the backend.

        Args:
            album: Album being processed
            items: Items listed for the album, in Flickr order

        Returns:
            Report of the album's run

        Raises:
            SyncError: If any item fails; earlier items stay backed up
        """
        report = AlbumReport(album_title=album.title)
        self.sink.on_event(SyncEvent(Outcome.LOAD, album.title))

        try:
            backed_up = self.backend.list_keys(album.title)
        except Exception as e:
            raise SyncError(
                f"Failed to list backup of album '{album.title}': {e}", album_title=album.title
            ) from e
        state = plan_album(len(items), len(backed_up))
        report.advance(state)

        if state is AlbumState.SHORT_CIRCUIT_SKIP:
            self.sink.on_event(SyncEvent(Outcome.SKIP, album.title))
            report.advance(AlbumState.DONE)
            return report

        logger.info("Flickr album photos: %d", len(items))
        logger.info("Backup album photos: %d", len(backed_up))

        report.duplicates = find_duplicates(items, self.owner)
        self.sink.on_duplicates(album.title, report.duplicates)

        report.advance(AlbumState.PER_ITEM_SYNC)
        for item in items:
            self._sync_item(album, item, report)

        report.advance(AlbumState.DONE)
        return report

    def _sync_item(self, album: Album, item: RemoteItem, report: AlbumReport) -> None:
        object_key = None
        try:
            source_url = self.source.get_item_source_url(item)
            detail = self.source.get_item_detail(item)
            object_key = resolve_object_key(album.title, detail)
            outcome = self.item_syncer.sync(source_url, object_key)
        except Exception as e:
            raise SyncError(
                f"Failed to back up photo {item.id} of album '{album.title}': {e}",
                album_title=album.title,
                item_id=item.id,
                object_key=object_key,
            ) from e

        if outcome is Outcome.DONE:
            report.written.append(object_key)
        else:
            report.skipped.append(object_key)
