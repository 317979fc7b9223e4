"""Album listing and sharing actions, applied to albums whose title matches a regular expression."""

from __future__ import annotations

import logging
from pathlib import Path

import requests

import tokens
from client import GooglePhotosClient
from library import albums_by_title, shared_albums_by_title
from models import Album, ShareInfo

logger = logging.getLogger(__name__)


def _sorted_by_title(albums) -> list[Album]:
    return sorted(albums, key=lambda album: album.title)


def _share_role(share_info: ShareInfo) -> str:
    if share_info.is_owned:
        return "owned"
    if share_info.is_joined:
        return "joined"
    return "shared"


def list_albums(client: GooglePhotosClient, pattern: str,
                log: logging.Logger | None = None) -> list[Album]:
    # the shareable URL is only listed with the shared albums
    log = log or logger
    albums = _sorted_by_title(albums_by_title(client, pattern, regex=True))
    for album in albums:
        marker = " (shared)" if album.is_shared else ""
        log.info("%s%s: %s", album.title, marker, album.product_url)
    return albums


def list_shared_albums(client: GooglePhotosClient, pattern: str,
                       log: logging.Logger | None = None) -> list[Album]:
    log = log or logger
    albums = _sorted_by_title(shared_albums_by_title(client, pattern, regex=True))
    for album in albums:
        if album.is_shared:
            log.info("%s (%s): %s", album.title, _share_role(album.share_info),
                     album.share_info.shareable_url)
        else:
            log.info("%s: %s", album.title, album.product_url)
    return albums


def share_albums(client: GooglePhotosClient, pattern: str, collaborative: bool = False,
                 commentable: bool = False,
                 log: logging.Logger | None = None) -> list[tuple[Album, ShareInfo]]:
    log = log or logger
    shared = []
    for album in _sorted_by_title(albums_by_title(client, pattern, regex=True)):
        try:
            share_info = client.share_album(album.id, collaborative, commentable)
        except requests.RequestException as e:
            log.error("Skipping share of %s (%s): %s", album.title, album.product_url, e)
            continue
        log.info("Shared %s: %s", album.title, share_info.shareable_url)
        shared.append((album, share_info))
    return shared


def unshare_albums(client: GooglePhotosClient, pattern: str,
                   log: logging.Logger | None = None) -> list[Album]:
    log = log or logger
    unshared = []
    for album in _sorted_by_title(shared_albums_by_title(client, pattern, regex=True)):
        try:
            client.unshare_album(album.id)
        except requests.RequestException as e:
            log.error("Skipping unshare of %s (%s): %s", album.title, album.product_url, e)
            continue
        log.info("Unshared %s: %s", album.title, album.product_url)
        unshared.append(album)
    return unshared


def export_share_tokens(client: GooglePhotosClient, path: Path, pattern: str,
                        log: logging.Logger | None = None) -> list[str]:
    log = log or logger
    albums = [
        album for album in _sorted_by_title(shared_albums_by_title(client, pattern, regex=True))
        if album.is_shared and album.share_info.share_token
    ]
    try:
        return tokens.export_tokens(albums, path, log)
    except OSError as e:
        log.error("Cannot export share tokens into %s: %s", Path(path).absolute(), e)
        return []


def import_share_tokens(client: GooglePhotosClient, path: Path, bounds: list[int] | None = None,
                        log: logging.Logger | None = None) -> list[tuple[int, Album]]:
    """Joins the albums of the tokens in ``path`` selected by 1-based ``bounds``."""
    log = log or logger
    from_index, to_index = tokens.token_range(bounds)
    log.debug("Importing tokens %d to %s from %s", from_index + 1,
              "end" if to_index is None else to_index + 1, path)
    try:
        share_tokens = tokens.read_tokens(path)
    except OSError as e:
        log.error("Cannot import share tokens from %s: %s", Path(path).absolute(), e)
        return []
    selected = tokens.select_range(share_tokens, from_index, to_index)
    return list(tokens.import_and_join(client, selected, path, log))


def leave_share_tokens(client: GooglePhotosClient, path: Path,
                       log: logging.Logger | None = None) -> list[tuple[str, dict]]:
    log = log or logger
    try:
        share_tokens = tokens.read_tokens(path)
    except OSError as e:
        log.error("Cannot leave share tokens from %s: %s", Path(path).absolute(), e)
        return []
    return list(tokens.leave(client, share_tokens, path, log))
