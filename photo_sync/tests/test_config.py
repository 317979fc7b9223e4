import re

from config import (
    API_BASE,
    CREATE_MEDIA_ITEMS_BATCH_LIMIT,
    MEDIA_FILENAME_REGEX,
    PHOTO_EXTENSIONS,
    SCOPES,
    VIDEO_EXTENSIONS,
)


def test_scopes_are_urls():
    assert len(SCOPES) > 0
    for scope in SCOPES:
        assert scope.startswith("https://www.googleapis.com/auth/photoslibrary")


def test_api_base_is_https():
    assert API_BASE.startswith("https://")


def test_extensions_are_lowercase_without_dot():
    for ext in PHOTO_EXTENSIONS + VIDEO_EXTENSIONS:
        assert not ext.startswith(".")
        assert ext == ext.lower()


def test_media_regex_matches_whole_name():
    pattern = re.compile(MEDIA_FILENAME_REGEX, re.IGNORECASE)
    for name in ("a.jpg", "B.JPEG", "clip.mp4", "IMG 1.mov"):
        assert pattern.fullmatch(name)
    for name in ("a.jpg.xmp", "notes.txt", "jpg"):
        assert not pattern.fullmatch(name)


def test_batch_limit():
    assert CREATE_MEDIA_ITEMS_BATCH_LIMIT == 50
