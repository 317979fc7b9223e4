from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ShareInfo:
    shareable_url: str = ""
    share_token: str = ""
    is_joined: bool = False
    is_owned: bool = False

    @classmethod
    def from_api(cls, data: dict) -> ShareInfo:
        return cls(
            shareable_url=data.get("shareableUrl", ""),
            share_token=data.get("shareToken", ""),
            is_joined=data.get("isJoined", False),
            is_owned=data.get("isOwned", False),
        )


@dataclass
class Album:
    id: str
    title: str = ""
    product_url: str = ""
    share_info: ShareInfo | None = None   # only for shared albums

    @property
    def is_shared(self) -> bool:
        return self.share_info is not None

    @classmethod
    def from_api(cls, data: dict) -> Album:
        share_info = data.get("shareInfo")
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            product_url=data.get("productUrl", ""),
            share_info=ShareInfo.from_api(share_info) if share_info else None,
        )


@dataclass
class MediaItem:
    id: str
    filename: str
    description: str = ""
    product_url: str = ""

    @classmethod
    def from_api(cls, data: dict) -> MediaItem:
        return cls(
            id=data["id"],
            filename=data.get("filename", ""),
            description=data.get("description") or "",
            product_url=data.get("productUrl", ""),
        )
