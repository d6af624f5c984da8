"""Avatar upload boundary.

The storage service that receives the image bytes lives outside this
package. This module checks a file before it is sent, names it, interprets
the service's reply and feeds the resulting URL back into the store.
"""

from __future__ import annotations

import time
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Mapping, Optional

from .models import Avatar, initials_for

if TYPE_CHECKING:  # pragma: no cover
    from .store import PortfolioStore

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB hard limit


class UploadErrorKind(str, Enum):
    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"
    NO_FILE = "no_file"
    MISCONFIGURED = "misconfigured"
    FAILED = "failed"


_MESSAGES = {
    UploadErrorKind.UNSUPPORTED_TYPE: "Invalid file type. Only JPG, PNG, and WebP are allowed.",
    UploadErrorKind.TOO_LARGE: "File too large. Maximum size is 5MB.",
    UploadErrorKind.NO_FILE: "No file provided",
    UploadErrorKind.MISCONFIGURED: "Upload service is not configured",
    UploadErrorKind.FAILED: "Upload failed",
}


class UploadError(Exception):
    def __init__(self, kind: UploadErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message or _MESSAGES[kind]
        super().__init__(self.message)


def check_upload(content_type: Optional[str], size: Optional[int]) -> None:
    """Raise :class:`UploadError` if the file would be refused by the service."""
    if content_type is None or size is None:
        raise UploadError(UploadErrorKind.NO_FILE)
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadError(UploadErrorKind.UNSUPPORTED_TYPE)
    if size > MAX_UPLOAD_BYTES:
        raise UploadError(UploadErrorKind.TOO_LARGE)


def upload_file_name(original: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = PurePath(original).suffix.lstrip(".").lower() or "png"
    return f"avatar-{stamp}.{suffix}"


def _kind_for(message: str) -> UploadErrorKind:
    lowered = message.lower()
    if "type" in lowered:
        return UploadErrorKind.UNSUPPORTED_TYPE
    if "large" in lowered or "size" in lowered:
        return UploadErrorKind.TOO_LARGE
    if "no file" in lowered:
        return UploadErrorKind.NO_FILE
    if "config" in lowered:
        return UploadErrorKind.MISCONFIGURED
    return UploadErrorKind.FAILED


def parse_upload_response(payload: Mapping[str, object]) -> str:
    """Return ``imageUrl`` from a reply, or raise the error it describes."""
    error = payload.get("error")
    if isinstance(error, str) and error:
        raise UploadError(_kind_for(error), error)
    url = payload.get("imageUrl")
    if not isinstance(url, str) or not url:
        raise UploadError(UploadErrorKind.FAILED)
    return url


def apply_avatar_upload(store: "PortfolioStore", image_url: str) -> Avatar:
    """Point the hero avatar at ``image_url``, keeping initials as fallback."""
    hero = store.content.hero
    avatar = Avatar(
        initials=hero.avatar.initials or initials_for(hero.name),
        image_url=image_url,
    )
    store.update_section("hero", {"avatar": avatar})
    return avatar


def clear_avatar_image(store: "PortfolioStore") -> Avatar:
    avatar = Avatar(initials=store.content.hero.avatar.initials, image_url=None)
    store.update_section("hero", {"avatar": avatar})
    return avatar
