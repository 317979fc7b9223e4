"""
Share token files.

One token per line, optionally followed by a comment::

    AOVP2f3x... # Holidays 2019; https://photos.app.goo.gl/...

Everything from the first ``#`` on is ignored when reading, and lines without a
token are skipped. Tokens are numbered from 1 in the order they appear.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from itertools import islice
from pathlib import Path

import requests

from client import GooglePhotosClient
from config import SHARE_TOKEN_COMMENT
from models import Album

logger = logging.getLogger(__name__)


def format_token_line(album: Album) -> str:
    return (f"{album.share_info.share_token} {SHARE_TOKEN_COMMENT} "
            f"{album.title}; {album.share_info.shareable_url}")


def export_tokens(albums: Iterable[Album], path: Path,
                  log: logging.Logger | None = None) -> list[str]:
    """
    Writes the share tokens of ``albums`` into a new file and returns the lines.
    Raises FileExistsError rather than overwrite an existing file.
    """
    log = log or logger
    lines = []
    with open(path, "x", encoding="utf-8") as f:
        for album in albums:
            log.info("Exporting token of %s: %s", album.title, album.share_info.shareable_url)
            line = format_token_line(album)
            f.write(line + "\n")
            lines.append(line)
    return lines


def parse_token_line(line: str) -> str | None:
    token = line.split(SHARE_TOKEN_COMMENT, 1)[0].strip()
    return token or None


def parse_token_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        token = parse_token_line(line)
        if token is not None:
            yield token


def read_tokens(path: Path) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return list(parse_token_lines(f))


def token_range(bounds: list[int] | None) -> tuple[int, int | None]:
    """
    Converts 1-based bounds given on the command line into 0-based inclusive
    indices: no bounds select everything, ``[N]`` only token N and ``[N, M]``
    tokens N to M.
    """
    if not bounds:
        return 0, None
    if len(bounds) == 1:
        return bounds[0] - 1, bounds[0] - 1
    return bounds[0] - 1, bounds[1] - 1


def select_range(tokens: Iterable[str], from_index: int = 0,
                 to_index: int | None = None) -> Iterator[tuple[int, str]]:
    """
    Yields ``(number, token)`` for tokens between the 0-based inclusive indices,
    where ``number`` is the 1-based position of the token in ``tokens``.
    Bounds past the end yield whatever tokens there are.
    """
    numbered = enumerate(tokens, 1)
    # limit first, then skip
    if to_index is not None:
        numbered = islice(numbered, max(to_index + 1, 0))
    return islice(numbered, max(from_index, 0), None)


def import_and_join(client: GooglePhotosClient, numbered_tokens: Iterable[tuple[int, str]],
                    source: Path | str = "",
                    log: logging.Logger | None = None) -> Iterator[tuple[int, Album]]:
    """Joins the shared album of every token; tokens that fail are logged and skipped."""
    log = log or logger
    for number, token in numbered_tokens:
        try:
            album = client.join_shared_album(token)
            if album is None:
                raise ValueError("no album in the response")
        except (requests.RequestException, ValueError) as e:
            log.error("Skipping import of token #%d %s from %s: %s", number, token, source, e)
            continue
        log.info("Imported token #%d: %s %s", number, album.title, album.product_url)
        yield number, album


def leave(client: GooglePhotosClient, tokens: Iterable[str], source: Path | str = "",
          log: logging.Logger | None = None) -> Iterator[tuple[str, dict]]:
    """Leaves the shared album of every token; tokens that fail are logged and skipped."""
    log = log or logger
    for token in tokens:
        try:
            response = client.leave_shared_album(token)
        except requests.RequestException as e:
            log.error("Skipping leave of token %s from %s: %s", token, source, e)
            continue
        log.info("Left shared album of token %s", token)
        yield token, response
