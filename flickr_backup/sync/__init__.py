"""Album reconciliation and run orchestration."""

from .duplicates import DuplicateGroup, find_duplicates
from .events import ConsoleSink, EventSink, Outcome, SyncEvent
from .orchestrator import SyncOrchestrator, SyncRun, SyncSummary
from .reconciler import AlbumReconciler, AlbumReport, AlbumState, ItemSyncer, plan_album

__all__ = [
    "AlbumReconciler",
    "AlbumReport",
    "AlbumState",
    "ConsoleSink",
    "DuplicateGroup",
    "EventSink",
    "ItemSyncer",
    "Outcome",
    "SyncEvent",
    "SyncOrchestrator",
    "SyncRun",
    "SyncSummary",
    "find_duplicates",
    "plan_album",
]
