from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from config import MEDIA_FILENAME_REGEX, PHOTO_FILENAME_REGEX, VIDEO_FILENAME_REGEX
from fingerprint import compute_checksum


@dataclass
class MediaFile:
    """A local media file; the checksum is computed once and then remembered."""
    path: Path
    _checksum: bytes | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.path = Path(self.path).absolute()

    @property
    def name(self) -> str:
        return self.path.name

    def is_photo(self) -> bool:
        return re.fullmatch(PHOTO_FILENAME_REGEX, self.name, re.IGNORECASE) is not None

    def is_video(self) -> bool:
        return re.fullmatch(VIDEO_FILENAME_REGEX, self.name, re.IGNORECASE) is not None

    def checksum(self) -> bytes:
        if self._checksum is None:
            self._checksum = compute_checksum(self.path)
        return self._checksum

    def last_modified(self) -> datetime:
        """Modification time in the local time zone."""
        return datetime.fromtimestamp(self.path.stat().st_mtime).astimezone()

    def size(self) -> int:
        return self.path.stat().st_size


def find_media_files(folder: Path, filename_regex: str = MEDIA_FILENAME_REGEX) -> list[MediaFile]:
    """
    Finds media files in a folder (no recursion), sorted by name.
    The built-in media expression ignores case, a custom one is used as given.
    Raises FileNotFoundError/NotADirectoryError when the folder cannot be listed.
    """
    flags = re.IGNORECASE if filename_regex == MEDIA_FILENAME_REGEX else 0
    pattern = re.compile(filename_regex, flags)
    return [
        MediaFile(f) for f in sorted(Path(folder).iterdir())
        if f.is_file() and pattern.fullmatch(f.name)
    ]


def find_subdirectories(folder: Path) -> list[Path]:
    """Non-hidden sub-directories of a folder, sorted by name."""
    return sorted(
        d for d in Path(folder).iterdir()
        if d.is_dir() and not d.name.startswith(".")
    )


def format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"
