from __future__ import annotations

import pytest

from portfoliobuilder.core.store import PortfolioStore
from portfoliobuilder.core.upload import (
    MAX_UPLOAD_BYTES,
    UploadError,
    UploadErrorKind,
    apply_avatar_upload,
    check_upload,
    clear_avatar_image,
    parse_upload_response,
    upload_file_name,
)


def test_check_upload_accepts_supported_images() -> None:
    check_upload("image/png", 1024)
    check_upload("image/webp", MAX_UPLOAD_BYTES)


@pytest.mark.parametrize(
    "content_type, size, kind",
    [
        (None, None, UploadErrorKind.NO_FILE),
        ("image/gif", 10, UploadErrorKind.UNSUPPORTED_TYPE),
        ("image/jpeg", MAX_UPLOAD_BYTES + 1, UploadErrorKind.TOO_LARGE),
    ],
)
def test_check_upload_rejections(content_type, size, kind) -> None:
    with pytest.raises(UploadError) as info:
        check_upload(content_type, size)
    assert info.value.kind is kind
    assert info.value.message


def test_upload_file_name() -> None:
    assert upload_file_name("me.JPG", now_ms=1700000000000) == "avatar-1700000000000.jpg"
    assert upload_file_name("cropped", now_ms=5) == "avatar-5.png"


def test_parse_upload_response() -> None:
    assert parse_upload_response({"success": True, "imageUrl": "https://cdn/a.png"}) == "https://cdn/a.png"
    with pytest.raises(UploadError) as info:
        parse_upload_response({"error": "File too large. Maximum size is 5MB."})
    assert info.value.kind is UploadErrorKind.TOO_LARGE
    with pytest.raises(UploadError) as info:
        parse_upload_response({})
    assert info.value.kind is UploadErrorKind.FAILED


def test_failed_upload_does_not_touch_content(store: PortfolioStore) -> None:
    before = store.snapshot
    with pytest.raises(UploadError):
        apply_avatar_upload(store, parse_upload_response({"error": "Upload failed"}))
    assert store.snapshot == before


def test_apply_and_clear_avatar(store: PortfolioStore) -> None:
    avatar = apply_avatar_upload(store, "https://cdn/ada.png")
    assert store.content.hero.avatar == avatar
    assert avatar.image_url == "https://cdn/ada.png"
    assert avatar.initials == "JD"
    assert store.can_undo

    cleared = clear_avatar_image(store)
    assert cleared.image_url is None
    assert cleared.initials == "JD"
