"""Sequencing of a full backup run over all albums."""

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional

from flickr_backup.models import Album, LoginInfo, SyncError
from flickr_backup.storage import StorageBackend
from flickr_backup.sync.events import EventSink
from flickr_backup.sync.reconciler import AlbumReconciler, AlbumReport

logger = logging.getLogger(__name__)


@dataclass
class SyncRun:
    """Everything a run needs, built once by the entry point."""
    source: object
    backend: StorageBackend
    fetch: Callable[[str], bytes]
    login: LoginInfo
    user_id: str
    sink: EventSink = field(default_factory=EventSink)
    album_filter: Optional[FrozenSet[str]] = None

    def includes(self, album: Album) -> bool:
        """Return True if the album passes the title filter."""
        return not self.album_filter or album.title in self.album_filter


@dataclass
class SyncSummary:
    """Totals of a finished run."""
    reports: List[AlbumReport] = field(default_factory=list)
    filtered_out: int = 0

    @property
    def albums(self) -> int:
        return len(self.reports)

    @property
    def short_circuited(self) -> int:
        return sum(1 for report in self.reports if report.short_circuited)

    @property
    def written(self) -> int:
        return sum(len(report.written) for report in self.reports)

    @property
    def skipped(self) -> int:
        return sum(len(report.skipped) for report in self.reports)

    @property
    def duplicates(self) -> int:
        return sum(len(report.duplicates) for report in self.reports)


class SyncOrchestrator:
    """Runs the album reconciler over every selected album, one at a time."""

    def __init__(self, run: SyncRun):
        self.run = run
        self.reconciler = AlbumReconciler(
            run.source,
            run.backend,
            run.fetch,
            sink=run.sink,
            owner=run.login.path_alias or run.login.user_id,
        )

    def sync_all(self) -> SyncSummary:
        """Back up all albums of the run's user.

        Raises:
            SyncError: On the first item that cannot be backed up
        """
        summary = SyncSummary()
        albums = self.run.source.list_albums(self.run.user_id)
        logger.info("Found %d albums for user %s", len(albums), self.run.user_id)

        for album in albums:
            if not self.run.includes(album):
                logger.debug("Skipping album '%s' (not in filter)", album.title)
                summary.filtered_out += 1
                continue

            try:
                items = self.run.source.list_album_items(album, self.run.user_id)
            except Exception as e:
                raise SyncError(
                    f"Failed to list photos of album '{album.title}': {e}", album_title=album.title
                ) from e
            summary.reports.append(self.reconciler.reconcile(album, items))

        return summary
