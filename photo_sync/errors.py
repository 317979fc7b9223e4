class PhotoSyncError(Exception):
    """Base class for errors raised by photo_sync."""


class DigestUnavailableError(PhotoSyncError):
    """The checksum algorithm is not available in this interpreter."""


class UploadError(PhotoSyncError):
    """Uploading the bytes of a file did not produce an upload token."""


class CredentialsError(PhotoSyncError):
    """The OAuth client secret cannot be found or used."""


class ConfigError(PhotoSyncError):
    """The configuration file exists but cannot be read."""
