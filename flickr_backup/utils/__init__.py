"""Utility functions for Flickr Backup."""

from .auth import get_flickr_api
from .cache import ResponseCache
from .fetch import fetch_bytes
from .naming import resolve_extension, resolve_object_key

__all__ = ["get_flickr_api", "ResponseCache", "fetch_bytes", "resolve_extension", "resolve_object_key"]
