# ── Settings ──────────────────────────────────────────────────────────────

APP_NAME = "photo_sync"

SCOPES = [
    # list albums and media items, including shared albums
    "https://www.googleapis.com/auth/photoslibrary.readonly",
    # upload bytes, create media items and albums
    "https://www.googleapis.com/auth/photoslibrary.appendonly",
    # share albums, join and leave shared albums
    "https://www.googleapis.com/auth/photoslibrary.sharing",
]

API_BASE = "https://photoslibrary.googleapis.com/v1"

# Media files recognised in a directory (matched against the whole file name)
PHOTO_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "heic", "webp")
VIDEO_EXTENSIONS = ("mp4", "avi", "mov", "m4v", "3gp")
PHOTO_FILENAME_REGEX = r".*\.(" + "|".join(PHOTO_EXTENSIONS) + ")"
VIDEO_FILENAME_REGEX = r".*\.(" + "|".join(VIDEO_EXTENSIONS) + ")"
MEDIA_FILENAME_REGEX = r".*\.(" + "|".join(PHOTO_EXTENSIONS + VIDEO_EXTENSIONS) + ")"

# Content fingerprint stored in the media item description
CHECKSUM_ALGORITHM = "SHA-1"
CHECKSUM_CHUNK_SIZE = 8192
DESCRIPTION_SEPARATOR = ";"

# batchCreate accepts at most 50 new media items per call
CREATE_MEDIA_ITEMS_BATCH_LIMIT = 50

ALBUMS_PAGE_SIZE = 50
MEDIA_ITEMS_PAGE_SIZE = 100

# ── Files ─────────────────────────────────────────────────────────────────

CONFIG_FILE = "photo_sync.yaml"
CLIENT_SECRET_FILE = "client_secret.json"
TOKEN_FILE = "token.json"
SHARE_TOKENS_FILE = "gphotos-share-tokens.txt"
SHARE_TOKEN_COMMENT = "#"
