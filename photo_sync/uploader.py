"""
Uploads local files into an album.

Every file goes through two steps: its bytes are uploaded for an upload token,
then a new media item carrying the file's fingerprint description is created
from that token. Creation happens in batches of at most
CREATE_MEDIA_ITEMS_BATCH_LIMIT items. A file that fails its upload is logged
and left out; a failing batchCreate call is not caught here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import requests

from client import GooglePhotosClient
from config import CREATE_MEDIA_ITEMS_BATCH_LIMIT
from errors import UploadError
from files import MediaFile
from fingerprint import generate_description
from models import Album, MediaItem

logger = logging.getLogger(__name__)

STATUS_OK = 0


@dataclass
class UploadOutcome:
    """Result of preparing one file: a new media item descriptor, or the error."""
    file: MediaFile
    new_item: dict | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    submitted: int = 0
    created: list[MediaItem] = field(default_factory=list)
    failed: list[tuple[MediaFile, dict]] = field(default_factory=list)


def chunked(items: list, size: int) -> Iterator[list]:
    """Consecutive slices of at most ``size`` items."""
    for i in range(0, len(items), size):
        yield items[i:i + size]


def prepare_new_item(client: GooglePhotosClient, media_file: MediaFile) -> UploadOutcome:
    """Uploads the bytes of one file and builds its new media item descriptor."""
    try:
        token = client.upload_file(media_file.path)
        new_item = {
            "description": generate_description(media_file),
            "simpleMediaItem": {
                "uploadToken": token,
                "fileName": media_file.name,
            },
        }
    except (OSError, UploadError, requests.RequestException) as e:
        return UploadOutcome(media_file, error=e)
    return UploadOutcome(media_file, new_item=new_item)


def prepare_new_items(client: GooglePhotosClient, files: Iterable[MediaFile],
                      log: logging.Logger | None = None) -> list[UploadOutcome]:
    """Prepares every file; failed outcomes are logged and dropped."""
    log = log or logger
    prepared = []
    for media_file in files:
        log.debug("Uploading file %s", media_file.path)
        outcome = prepare_new_item(client, media_file)
        if outcome.ok:
            prepared.append(outcome)
        else:
            log.error("Skipping upload of %s: %s", media_file.path, outcome.error)
    return prepared


def create_batch(client: GooglePhotosClient, album: Album, outcomes: list[UploadOutcome],
                 log: logging.Logger | None = None) -> BatchResult:
    """Submits one batchCreate call; HTTP errors of the call propagate."""
    log = log or logger
    results = client.batch_create(album.id, [outcome.new_item for outcome in outcomes])
    batch = BatchResult(submitted=len(outcomes))

    for outcome, result in zip(outcomes, results):
        status = result.get("status", {})
        if status.get("code", STATUS_OK) == STATUS_OK and "mediaItem" in result:
            batch.created.append(MediaItem.from_api(result["mediaItem"]))
        else:
            batch.failed.append((outcome.file, status))
            log.warning("Media item for %s was not created: %s",
                        outcome.file.path, status.get("message", status))
    # results missing from the response
    for outcome in outcomes[len(results):]:
        batch.failed.append((outcome.file, {}))
        log.warning("Media item for %s was not created: no result returned", outcome.file.path)
    return batch


def upload_and_create(client: GooglePhotosClient, album: Album, files: Iterable[MediaFile],
                      log: logging.Logger | None = None,
                      batch_limit: int = CREATE_MEDIA_ITEMS_BATCH_LIMIT) -> Iterator[MediaItem]:
    """
    Uploads ``files`` into ``album`` and yields the media items that were created,
    batch by batch in the order of the files.
    """
    log = log or logger
    prepared = prepare_new_items(client, files, log)
    log.debug("Creating %d media items", len(prepared))

    for chunk in chunked(prepared, batch_limit):
        batch = create_batch(client, album, chunk, log)
        log.debug("Batch into %s: %d submitted, %d created, %d failed", album.title,
                  batch.submitted, len(batch.created), len(batch.failed))
        yield from batch.created
