"""Progress events and their console rendering."""

from dataclasses import dataclass
from enum import Enum
from typing import List

from tabulate import tabulate

from flickr_backup.sync.duplicates import DuplicateGroup


class Outcome(str, Enum):
    """Progress of an album or item."""
    LOAD = "LOAD"
    SKIP = "SKIP"
    DONE = "DONE"


@dataclass(frozen=True)
class SyncEvent:
    """An outcome tagged with what it is about."""
    outcome: Outcome
    label: str


class EventSink:
    """Receives progress events. The base class ignores them."""

    def on_event(self, event: SyncEvent) -> None:
        pass

    def on_duplicates(self, album_title: str, groups: List[DuplicateGroup]) -> None:
        pass


class ConsoleSink(EventSink):
    """Prints progress lines and duplicate reports to stdout."""

    def on_event(self, event: SyncEvent) -> None:
        print(f"[{event.outcome.value:^6}] {event.label}", flush=True)

    def on_duplicates(self, album_title: str, groups: List[DuplicateGroup]) -> None:
        if not groups:
            return

        rows = []
        for group in groups:
            urls = group.urls or [item.id for item in group.items]
            for url in urls:
                rows.append([group.title, url])

        print(f"\nDuplicates are found in '{album_title}':")
        print(tabulate(rows, headers=["Title", "Photo"], tablefmt="psql"))

