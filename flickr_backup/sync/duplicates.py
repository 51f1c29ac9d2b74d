"""Detection of photos sharing a title within an album."""

from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Iterable, List, Optional

from flickr_backup.models import RemoteItem

PHOTO_URL = "https://flickr.com/photos/{owner}/{photo_id}"


@dataclass(frozen=True)
class DuplicateGroup:
    """All items of an album carrying the same title."""
    title: str
    items: List[RemoteItem]
    urls: List[str]


def photo_url(owner: str, photo_id: str) -> str:
    """Return the Flickr page of a photo, ``owner`` being a path alias or user id."""
    return PHOTO_URL.format(owner=owner, photo_id=photo_id)


def find_duplicates(items: Iterable[RemoteItem], owner: Optional[str] = None) -> List[DuplicateGroup]:
    """Group items whose titles appear more than once.

    Args:
        items: Items of one album
        owner: Path alias or user id used to build photo URLs

    Returns:
        One group per duplicated title, ordered by title; empty if there are none
    """
    items = list(items)
    counts = Counter(item.title for item in items)
    by_title = defaultdict(list)
    for item in items:
        if counts[item.title] >= 2:
            by_title[item.title].append(item)

    groups = []
    for title in sorted(by_title):
        matching = by_title[title]
        urls = [photo_url(owner, item.id) for item in matching] if owner else []
        groups.append(DuplicateGroup(title=title, items=matching, urls=urls))
    return groups
