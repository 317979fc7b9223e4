from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import requests
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from config import (
    ALBUMS_PAGE_SIZE,
    API_BASE,
    CREATE_MEDIA_ITEMS_BATCH_LIMIT,
    MEDIA_ITEMS_PAGE_SIZE,
)
from errors import UploadError
from models import Album, MediaItem, ShareInfo


class GooglePhotosClient:
    """Client for the Google Photos Library API."""

    def __init__(self, creds: Credentials):
        self.creds = creds
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {creds.token}",
        })

    def _refresh_if_needed(self):
        """Refreshes the access token when it has expired."""
        if self.creds.expired:
            self.creds.refresh(Request())
            self.session.headers["Authorization"] = f"Bearer {self.creds.token}"

    def _paginate(self, method: str, url: str, key: str, page_size: int,
                  body: dict | None = None) -> Iterator[dict]:
        page_token = None

        while True:
            self._refresh_if_needed()
            if method == "GET":
                params = {"pageSize": page_size}
                if page_token:
                    params["pageToken"] = page_token
                resp = self.session.get(url, params=params)
            else:
                payload = dict(body or {}, pageSize=page_size)
                if page_token:
                    payload["pageToken"] = page_token
                resp = self.session.post(url, json=payload)
            resp.raise_for_status()
            data = resp.json()

            yield from data.get(key, [])

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    # ── Albums ────────────────────────────────────────────────────────────

    def iter_albums(self) -> Iterator[Album]:
        """All albums of the library; pages are fetched as the iterator advances."""
        for data in self._paginate("GET", f"{API_BASE}/albums", "albums", ALBUMS_PAGE_SIZE):
            yield Album.from_api(data)

    def iter_shared_albums(self) -> Iterator[Album]:
        """Albums shared by or with the user."""
        for data in self._paginate("GET", f"{API_BASE}/sharedAlbums", "sharedAlbums",
                                   ALBUMS_PAGE_SIZE):
            yield Album.from_api(data)

    def get_album(self, album_id: str) -> Album:
        self._refresh_if_needed()
        resp = self.session.get(f"{API_BASE}/albums/{album_id}")
        resp.raise_for_status()
        return Album.from_api(resp.json())

    def create_album(self, title: str) -> Album:
        self._refresh_if_needed()
        resp = self.session.post(
            f"{API_BASE}/albums",
            json={"album": {"title": title}},
        )
        resp.raise_for_status()
        return Album.from_api(resp.json())

    # ── Media items ───────────────────────────────────────────────────────

    def iter_album_items(self, album_id: str) -> Iterator[MediaItem]:
        for data in self._paginate("POST", f"{API_BASE}/mediaItems:search", "mediaItems",
                                   MEDIA_ITEMS_PAGE_SIZE, body={"albumId": album_id}):
            yield MediaItem.from_api(data)

    def upload_file(self, filepath: Path) -> str:
        """
        Uploads the bytes of a file and returns the upload token.
        This is only the first step, the file is not yet in the library.
        """
        self._refresh_if_needed()
        headers = {
            "Authorization": f"Bearer {self.creds.token}",
            "Content-Type": "application/octet-stream",
            "X-Goog-Upload-File-Name": filepath.name.encode("utf-8"),
            "X-Goog-Upload-Protocol": "raw",
        }

        with open(filepath, "rb") as f:
            resp = requests.post(
                f"{API_BASE}/uploads",
                headers=headers,
                data=f,
            )

        if resp.status_code != 200 or not resp.text:
            raise UploadError(f"Cannot upload {filepath}: {resp.status_code} {resp.text}")
        return resp.text

    def batch_create(self, album_id: str, new_items: list[dict]) -> list[dict]:
        """
        Creates media items from upload tokens in an album.
        Returns the per-item results in the order of ``new_items``.
        """
        if len(new_items) > CREATE_MEDIA_ITEMS_BATCH_LIMIT:
            raise ValueError(f"At most {CREATE_MEDIA_ITEMS_BATCH_LIMIT} items per batch, "
                             f"got {len(new_items)}")
        self._refresh_if_needed()
        resp = self.session.post(
            f"{API_BASE}/mediaItems:batchCreate",
            json={"albumId": album_id, "newMediaItems": new_items},
        )
        resp.raise_for_status()
        return resp.json().get("newMediaItemResults", [])

    # ── Sharing ───────────────────────────────────────────────────────────

    def share_album(self, album_id: str, collaborative: bool = False,
                    commentable: bool = False) -> ShareInfo:
        self._refresh_if_needed()
        resp = self.session.post(
            f"{API_BASE}/albums/{album_id}:share",
            json={"sharedAlbumOptions": {
                "isCollaborative": collaborative,
                "isCommentable": commentable,
            }},
        )
        resp.raise_for_status()
        return ShareInfo.from_api(resp.json().get("shareInfo", {}))

    def unshare_album(self, album_id: str):
        self._refresh_if_needed()
        resp = self.session.post(f"{API_BASE}/albums/{album_id}:unshare", json={})
        resp.raise_for_status()

    def join_shared_album(self, share_token: str) -> Album | None:
        """Joins a shared album; None if the response carries no album."""
        self._refresh_if_needed()
        resp = self.session.post(
            f"{API_BASE}/sharedAlbums:join",
            json={"shareToken": share_token},
        )
        resp.raise_for_status()
        album = resp.json().get("album")
        return Album.from_api(album) if album else None

    def leave_shared_album(self, share_token: str) -> dict:
        self._refresh_if_needed()
        resp = self.session.post(
            f"{API_BASE}/sharedAlbums:leave",
            json={"shareToken": share_token},
        )
        resp.raise_for_status()
        return resp.json()
