"""
Lookups over the remote library.

Every listing is a generator: nothing is fetched until it is iterated and every
call starts a fresh pagination, so results are never cached between calls.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from client import GooglePhotosClient
from models import Album, MediaItem

logger = logging.getLogger(__name__)


def list_albums(client: GooglePhotosClient) -> Iterator[Album]:
    return client.iter_albums()


def list_shared_albums(client: GooglePhotosClient) -> Iterator[Album]:
    return client.iter_shared_albums()


def _title_filter(albums: Iterator[Album], pattern: str, regex: bool) -> Iterator[Album]:
    if regex:
        compiled = re.compile(pattern)
        return (album for album in albums if compiled.search(album.title))
    return (album for album in albums if album.title == pattern)


def albums_by_title(client: GooglePhotosClient, pattern: str,
                    regex: bool = False) -> Iterator[Album]:
    """
    Albums whose title equals ``pattern``, or contains a match of it when
    ``regex`` is set (an empty regular expression matches every album).
    """
    return _title_filter(list_albums(client), pattern, regex)


def shared_albums_by_title(client: GooglePhotosClient, pattern: str,
                           regex: bool = False) -> Iterator[Album]:
    return _title_filter(list_shared_albums(client), pattern, regex)


def get_or_create_album(client: GooglePhotosClient, title: str,
                        log: logging.Logger | None = None) -> Album:
    """
    Returns the first album with exactly this title, creating it when absent.
    Two runs doing this at the same time can both create the album.
    """
    log = log or logger
    album = next(albums_by_title(client, title), None)
    if album is not None:
        return album

    log.debug("Creating album %s", title)
    return client.create_album(title)


def list_media_items(client: GooglePhotosClient, album: Album) -> Iterator[MediaItem]:
    return client.iter_album_items(album.id)
