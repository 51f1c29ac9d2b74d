"""Flickr metadata client."""

import logging
from typing import Any, Dict, List, Optional

import requests
from flickrapi.exceptions import FlickrError

from flickr_backup.models import Album, ApiError, LoginInfo, MediaKind, RemoteItem
from flickr_backup.utils.cache import ResponseCache

logger = logging.getLogger(__name__)

VIDEO_ORIGINAL_LABEL = "Video Original"
ORIGINAL_LABEL = "Original"


def _content(value: Any) -> str:
    """Unwrap Flickr's ``{"_content": ...}`` text fields."""
    if isinstance(value, dict):
        value = value.get("_content")
    return "" if value is None else str(value)


def _parse_album(payload: Dict[str, Any]) -> Album:
    try:
        return Album(id=str(payload["id"]), title=_content(payload.get("title")))
    except KeyError as e:
        raise ApiError(f"Photoset without {e} in response") from e


def _parse_listed_item(payload: Dict[str, Any]) -> RemoteItem:
    try:
        return RemoteItem(id=str(payload["id"]), title=_content(payload.get("title")))
    except KeyError as e:
        raise ApiError(f"Photo without {e} in response") from e


def _parse_item_info(payload: Dict[str, Any]) -> RemoteItem:
    try:
        photo_id = str(payload["id"])
        media = payload["media"]
        original_format = payload["originalformat"]
    except KeyError as e:
        raise ApiError(f"Photo info without {e} in response") from e

    try:
        media_kind = MediaKind(media)
    except ValueError as e:
        raise ApiError(f"Unknown media kind {media!r} for photo {photo_id}") from e

    return RemoteItem(
        id=photo_id,
        title=_content(payload.get("title")),
        media_kind=media_kind,
        original_format=original_format,
    )


def _parse_login(payload: Dict[str, Any]) -> LoginInfo:
    try:
        user = payload["user"]
        return LoginInfo(
            user_id=str(user["id"]),
            username=_content(user.get("username")),
            path_alias=user.get("path_alias") or None,
        )
    except KeyError as e:
        raise ApiError(f"Login response without {e}") from e


class FlickrClient:
    """Reads albums and photo metadata through the Flickr REST API."""

    def __init__(self, flickr, cache: Optional[ResponseCache] = None):
        """Initialize the client.

        Args:
            flickr: Authenticated ``flickrapi.FlickrAPI`` in parsed-json mode
            cache: Optional response cache
        """
        self.flickr = flickr
        self.cache = cache

    def _request(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        def call() -> Dict[str, Any]:
            try:
                return self.flickr.do_flickr_call(method, **params)
            except (FlickrError, requests.RequestException) as e:
                raise ApiError(f"{method} failed: {e}") from e

        if self.cache is None:
            return call()
        return self.cache.get_or_call(method, params, call)

    def _paginate(self, method: str, params: Dict[str, Any], container: str, entry: str) -> List[Dict[str, Any]]:
        entries = []
        page = 1
        while True:
            response = self._request(method, {**params, "page": page})
            try:
                body = response[container]
                entries.extend(body.get(entry, []))
                pages = int(body.get("pages", 0))
            except (KeyError, TypeError, ValueError) as e:
                raise ApiError(f"Unexpected {method} response: {e}") from e

            if page >= pages:
                break
            page += 1
        return entries

    def test_login(self) -> LoginInfo:
        """Return the identity of the authenticated user."""
        return _parse_login(self._request("flickr.test.login", {}))

    # https://www.flickr.com/services/api/flickr.photosets.getList.html
    def list_albums(self, user_id: str) -> List[Album]:
        entries = self._paginate(
            "flickr.photosets.getList", {"user_id": user_id}, "photosets", "photoset"
        )
        return [_parse_album(entry) for entry in entries]

    # https://www.flickr.com/services/api/flickr.photosets.getPhotos.html
    def list_album_items(self, album: Album, user_id: str) -> List[RemoteItem]:
        entries = self._paginate(
            "flickr.photosets.getPhotos",
            {"photoset_id": album.id, "user_id": user_id},
            "photoset",
            "photo",
        )
        return [_parse_listed_item(entry) for entry in entries]

    # https://www.flickr.com/services/api/flickr.photos.getInfo.html
    def get_item_detail(self, item: RemoteItem) -> RemoteItem:
        response = self._request("flickr.photos.getInfo", {"photo_id": item.id})
        if "photo" not in response:
            raise ApiError(f"No info returned for photo {item.id}")
        return _parse_item_info(response["photo"])

    # https://www.flickr.com/services/api/flickr.photos.getSizes.html
    def get_item_source_url(self, item: RemoteItem) -> str:
        """Return the download URL of the item's original file.

        Videos expose a "Video Original" size which is preferred over the
        "Original" still.

        Raises:
            ApiError: If the photo has no original size
        """
        response = self._request("flickr.photos.getSizes", {"photo_id": item.id})
        sizes = response.get("sizes", {}).get("size", [])

        for label in (VIDEO_ORIGINAL_LABEL, ORIGINAL_LABEL):
            for size in sizes:
                if size.get("label") == label and size.get("source"):
                    return size["source"]

        raise ApiError(f"No original size available for photo {item.id}")
