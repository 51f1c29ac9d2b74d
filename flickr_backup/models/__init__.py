"""Models for Flickr Backup."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    """Media kind as reported by Flickr."""
    IMAGE = "photo"
    VIDEO = "video"


@dataclass(frozen=True)
class RemoteItem:
    """A single photo or video in the remote library.

    Listing responses only carry ``id`` and ``title``; ``media_kind`` and
    ``original_format`` are filled in by the detail lookup.
    """
    id: str
    title: str
    media_kind: Optional[MediaKind] = None
    original_format: Optional[str] = None


@dataclass(frozen=True)
class Album:
    """A Flickr photoset. The title is used as the backup prefix."""
    id: str
    title: str


@dataclass(frozen=True)
class LoginInfo:
    """Identity of the authenticated user."""
    user_id: str
    username: str
    path_alias: Optional[str] = None


class FlickrBackupError(Exception):
    """Base exception for Flickr Backup."""


class ConfigError(FlickrBackupError):
    """Raised when configuration is missing or invalid."""


class AuthenticationError(FlickrBackupError):
    """Raised when authentication fails."""


class ApiError(FlickrBackupError):
    """Raised when API calls fail or return unexpected payloads."""


class StorageError(FlickrBackupError):
    """Raised when a backend refuses a key."""


class SyncError(FlickrBackupError):
    """Raised when an album or one of its items cannot be backed up."""

    def __init__(
        self,
        message: str,
        album_title: str,
        item_id: Optional[str] = None,
        object_key: Optional[str] = None,
    ):
        super().__init__(message)
        self.album_title = album_title
        self.item_id = item_id
        self.object_key = object_key
