"""
Content fingerprint stored in the description of uploaded media items.

The description looks like ``SHA-1:<hex digest>; <ISO-8601 zoned mtime>`` and is
the only place where a remote item remembers which local content it came from.
Descriptions are free text editable by the user, so parsing is lenient.
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime
from pathlib import Path

from config import CHECKSUM_ALGORITHM, CHECKSUM_CHUNK_SIZE, DESCRIPTION_SEPARATOR
from errors import DigestUnavailableError

_SPLIT_RE = re.compile(r"\s*" + re.escape(DESCRIPTION_SEPARATOR) + r"\s*")
# zone region suffix as in "2019-03-01T10:15:30+01:00[Europe/Prague]"
_ZONE_REGION_RE = re.compile(r"\[[^\]]*\]$")


def _new_digest():
    try:
        return hashlib.new(CHECKSUM_ALGORITHM.replace("-", "").lower())
    except ValueError as e:
        raise DigestUnavailableError(f"Cannot find checksum algorithm {CHECKSUM_ALGORITHM}") from e


def compute_checksum(path: Path) -> bytes:
    """Reads the file in chunks and returns its digest."""
    digest = _new_digest()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHECKSUM_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.digest()


def checksum_to_hex(checksum: bytes) -> str:
    """Renders a digest as ``SHA-1:<zero-padded lowercase hex>``."""
    width = len(checksum) * 2
    return f"{CHECKSUM_ALGORITHM}:{int.from_bytes(checksum, 'big'):0{width}x}"


def generate_description(media_file) -> str:
    return (checksum_to_hex(media_file.checksum())
            + DESCRIPTION_SEPARATOR + " "
            + media_file.last_modified().isoformat())


def _description_item(description: str | None, index: int) -> str | None:
    if not description or not description.strip():
        return None
    items = _SPLIT_RE.split(description.strip())
    return items[index] if index < len(items) and items[index] else None


def extract_checksum_string(description: str | None) -> str | None:
    """Returns the checksum field of a description, None if there is none."""
    return _description_item(description, 0)


def extract_last_modified(description: str | None) -> datetime | None:
    """
    Returns the modification time stored in a description.
    None when the field is missing; ValueError when it is present but malformed.
    """
    value = _description_item(description, 1)
    if value is None:
        return None
    value = _ZONE_REGION_RE.sub("", value).replace("Z", "+00:00")
    return datetime.fromisoformat(value)


def is_checksum_matching(media_file, checksum_string: str | None) -> bool:
    if checksum_string is None:
        return False
    return checksum_to_hex(media_file.checksum()).lower() == checksum_string.lower()
