from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from client import GooglePhotosClient
from files import MediaFile
from library import list_media_items
from models import Album, MediaItem


@dataclass
class ReconciliationResult:
    """Remote items of an album compared with the local files of a directory, by file name."""
    matching_items: list[MediaItem] = field(default_factory=list)
    non_matching_items: list[MediaItem] = field(default_factory=list)
    missing_files: list[MediaFile] = field(default_factory=list)

    @property
    def remote_count(self) -> int:
        return len(self.matching_items) + len(self.non_matching_items)


def classify_items(items: Iterable[MediaItem], files: Iterable[MediaFile]) -> ReconciliationResult:
    """
    Splits remote items into those with a local file of the same name and those
    without one; local files left unclaimed by any item are the missing ones.
    On a file name collision the last local file wins.
    """
    by_name = {media_file.name: media_file for media_file in files}
    result = ReconciliationResult()

    for item in items:
        if item.filename in by_name:
            result.matching_items.append(item)
        else:
            result.non_matching_items.append(item)
    # two remote items with the same name both match the one local file
    for item in result.matching_items:
        by_name.pop(item.filename, None)

    result.missing_files = list(by_name.values())
    return result


def classify(client: GooglePhotosClient, album: Album,
             files: Iterable[MediaFile]) -> ReconciliationResult:
    """Lists the album once and classifies its items against ``files``."""
    return classify_items(list_media_items(client, album), files)
