"""Object key naming for backed-up items."""

from flickr_backup.models import MediaKind, RemoteItem

# Flickr reports some videos with the format of their poster frame.
MISTAGGED_VIDEO_FORMAT = "jpg"
VIDEO_FORMAT = "mov"


def resolve_extension(item: RemoteItem) -> str:
    """Return the file extension to store an item under.

    Args:
        item: Fully detailed remote item

    Returns:
        The item's original format, or ``mov`` for videos tagged as ``jpg``
    """
    if item.media_kind == MediaKind.VIDEO and item.original_format == MISTAGGED_VIDEO_FORMAT:
        return VIDEO_FORMAT
    return item.original_format


def resolve_stem(item: RemoteItem) -> str:
    """Use the title when there is one, otherwise fall back to the id."""
    return item.title or item.id


def resolve_object_key(album_title: str, item: RemoteItem) -> str:
    """Build the backup key for an item.

    No escaping is applied; album and item titles are used as they come.

    Args:
        album_title: Title of the album the item was listed in
        item: Fully detailed remote item

    Returns:
        Key of the form ``<album title>/<stem>.<extension>``
    """
    return f"{album_title}/{resolve_stem(item)}.{resolve_extension(item)}"
