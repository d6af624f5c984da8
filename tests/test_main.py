from __future__ import annotations

import json
from pathlib import Path

import pytest

from portfoliobuilder.core.models import DEFAULT_SNAPSHOT
from portfoliobuilder.core.upload import UploadError, UploadErrorKind
from portfoliobuilder.main import AppController, main


def test_controller_loads_saved_state(tmp_path: Path) -> None:
    first = AppController(tmp_path)
    first.store.update_section("hero", {"name": "Ada Lovelace"})
    second = AppController(tmp_path)
    assert second.store.content.hero.name == "Ada Lovelace"


def test_reset_clears_only_application_slots(tmp_path: Path) -> None:
    controller = AppController(tmp_path)
    controller.store.update_section("hero", {"name": "Ada"})
    controller.store.set_theme("dark")
    controller.storage.set_item("unrelated", "keep")

    controller.reset()

    assert controller.store.snapshot == DEFAULT_SNAPSHOT
    assert controller.store.theme is None
    assert controller.storage.keys() == ["unrelated"]
    assert AppController(tmp_path).store.snapshot == DEFAULT_SNAPSHOT


def test_controller_exports(tmp_path: Path) -> None:
    controller = AppController(tmp_path / "data")
    exported = controller.export_json(tmp_path)
    assert exported.name == "john-doe-portfolio.json"
    assert controller.export_site(tmp_path / "site").exists()
    assert (tmp_path / "site" / "portfolio.json").exists()
    (tmp_path / "zip").mkdir()
    assert controller.export_zip(tmp_path / "zip").name == "portfolio.zip"


def test_main_import_and_export(tmp_path: Path) -> None:
    data = DEFAULT_SNAPSHOT.to_dict()
    data["content"]["hero"]["name"] = "Grace Hopper"
    source = tmp_path / "in.json"
    source.write_text(json.dumps(data), encoding="utf-8")
    target = tmp_path / "out.json"

    code = main(["--data-dir", str(tmp_path / "data"), "--import", str(source), "--export", str(target)])

    assert code == 0
    assert json.loads(target.read_text(encoding="utf-8"))["content"]["hero"]["name"] == "Grace Hopper"


def test_main_rejects_invalid_import(tmp_path: Path) -> None:
    source = tmp_path / "bad.json"
    source.write_text("{}", encoding="utf-8")
    assert main(["--data-dir", str(tmp_path / "data"), "--import", str(source)]) == 1


def test_upload_response_sets_avatar(tmp_path: Path) -> None:
    controller = AppController(tmp_path)
    avatar = controller.apply_upload_response({"imageUrl": "https://blob.example/avatar-1.png"})
    assert avatar.image_url == "https://blob.example/avatar-1.png"
    assert avatar.initials == "JD"
    assert AppController(tmp_path).store.content.hero.avatar == avatar


def test_upload_error_leaves_avatar_alone(tmp_path: Path) -> None:
    controller = AppController(tmp_path)
    before = controller.store.snapshot
    with pytest.raises(UploadError) as info:
        controller.apply_upload_response({"error": "File too large. Maximum size is 5MB."})
    assert info.value.kind is UploadErrorKind.TOO_LARGE
    assert controller.store.snapshot == before


def test_avatar_url_can_be_set_and_cleared(tmp_path: Path) -> None:
    controller = AppController(tmp_path)
    controller.set_avatar_url("https://cdn.example/me.png")
    assert controller.store.content.hero.avatar.image_url == "https://cdn.example/me.png"
    controller.set_avatar_url("")
    assert controller.store.content.hero.avatar.image_url is None


def test_main_applies_avatar_options(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    assert main(["--data-dir", str(data_dir), "--avatar-url", "https://cdn.example/me.png"]) == 0
    assert AppController(data_dir).store.content.hero.avatar.image_url == "https://cdn.example/me.png"

    reply = tmp_path / "reply.json"
    reply.write_text(json.dumps({"imageUrl": "https://blob.example/avatar-2.png"}), encoding="utf-8")
    assert main(["--data-dir", str(data_dir), "--upload-response", str(reply)]) == 0
    assert AppController(data_dir).store.content.hero.avatar.image_url == "https://blob.example/avatar-2.png"

    reply.write_text(json.dumps({"error": "Invalid file type"}), encoding="utf-8")
    assert main(["--data-dir", str(data_dir), "--upload-response", str(reply)]) == 1
    assert AppController(data_dir).store.content.hero.avatar.image_url == "https://blob.example/avatar-2.png"
