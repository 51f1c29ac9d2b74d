"""Flickr metadata source."""

from .client import FlickrClient

__all__ = ["FlickrClient"]
