from __future__ import annotations

import dataclasses
import io
import json
import zipfile
from pathlib import Path

import pytest

from portfoliobuilder.core import generator
from portfoliobuilder.core.generator import ICON_SVG, icon_svg, render_site, render_site_files, write_site_archive
from portfoliobuilder.core.models import DEFAULT_SNAPSHOT, ServiceIcon
from portfoliobuilder.core.store import PortfolioStore
from portfoliobuilder.core.validation import validate_document


def test_every_icon_has_a_glyph() -> None:
    assert set(ICON_SVG) == set(ServiceIcon)
    assert "<svg" in icon_svg("Unknown")


def test_only_selected_sections_are_rendered_in_order() -> None:
    snapshot = dataclasses.replace(DEFAULT_SNAPSHOT, selected_sections=("contact", "hero"))
    html = render_site_files(snapshot)["index.html"]
    assert 'id="about"' not in html
    assert html.index('id="contact"') < html.index('id="hero"')
    assert "John Doe&#39;s Portfolio" in html or "John Doe's Portfolio" in html


def test_enabled_flags_are_honoured() -> None:
    store = PortfolioStore()
    store.set_selected_sections(["contact"])
    store.update_section("contact", {"phoneEnabled": False, "formEnabled": False})
    html = render_site_files(store.snapshot)["index.html"]
    assert "+1 (555) 123-4567" not in html
    assert "contact-form" not in html
    assert "john.doe@example.com" in html


def test_content_is_escaped() -> None:
    store = PortfolioStore()
    store.update_section("hero", {"description": "<script>alert(1)</script>"})
    html = render_site_files(store.snapshot)["index.html"]
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_avatar_image_or_initials() -> None:
    html = render_site_files(DEFAULT_SNAPSHOT)["index.html"]
    assert '<span class="avatar">JD</span>' in html
    store = PortfolioStore()
    store.update_section("hero", {"avatar": {"initials": "JD", "imageUrl": "https://cdn/a.png"}})
    assert 'src="https://cdn/a.png"' in render_site_files(store.snapshot)["index.html"]


def test_render_site_and_archive(tmp_path: Path) -> None:
    snapshot = dataclasses.replace(DEFAULT_SNAPSHOT, selected_sections=("hero", "about", "projects"))
    index = render_site(snapshot, tmp_path / "site", theme="dark")
    assert index.exists()
    assert 'data-theme="dark"' in index.read_text(encoding="utf-8")
    assert (tmp_path / "site" / "assets" / "css" / "style.css").exists()

    archive = write_site_archive(snapshot, tmp_path / "out" / "portfolio.zip")
    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == ["assets/css/style.css", "index.html", "portfolio.json"]
        assert "E-Commerce Platform" in zf.read("index.html").decode("utf-8")
        document = json.loads(zf.read("portfolio.json"))
    assert document == snapshot.to_export_dict()
    assert validate_document(document).ok


def test_local_images_are_bundled(tmp_path: Path) -> None:
    avatar = tmp_path / "me.PNG"
    avatar.write_bytes(b"\x89PNG avatar")
    shot = tmp_path / "shot.jpg"
    shot.write_bytes(b"jpeg bytes")
    store = PortfolioStore()
    store.set_selected_sections(["hero", "projects"])
    store.update_section("hero", {"avatar": {"initials": "JD", "imageUrl": str(avatar)}})
    store.update_project("1", {"image": shot.as_uri()})

    files = render_site_files(store.snapshot)
    assert files["assets/images/avatar.png"] == b"\x89PNG avatar"
    assert files["assets/images/project-1.jpg"] == b"jpeg bytes"
    html = files["index.html"]
    assert 'src="assets/images/avatar.png"' in html
    assert 'src="assets/images/project-1.jpg"' in html

    index = render_site(store.snapshot, tmp_path / "site")
    assert (index.parent / "assets" / "images" / "avatar.png").read_bytes() == b"\x89PNG avatar"


def test_unreadable_images_keep_their_url(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    store = PortfolioStore()
    store.set_selected_sections(["hero", "projects"])
    missing = (tmp_path / "gone.png").as_uri()
    store.update_section("hero", {"avatar": {"initials": "JD", "imageUrl": missing}})
    with caplog.at_level("WARNING", logger="portfoliobuilder.generator"):
        files = render_site_files(store.snapshot)
    assert f'src="{missing}"' in files["index.html"]
    assert 'src="/placeholder.svg?height=300&amp;width=500"' in files["index.html"]
    assert not [name for name in files if name.startswith("assets/images/")]
    assert "gone.png" in caplog.text


def test_remote_images_are_only_fetched_on_request(monkeypatch: pytest.MonkeyPatch) -> None:
    class Response(io.BytesIO):
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    requested = []

    def fake_urlopen(url, timeout=None):
        requested.append(url)
        return Response(b"remote bytes")

    monkeypatch.setattr(generator.urllib.request, "urlopen", fake_urlopen)
    store = PortfolioStore()
    store.update_section("hero", {"avatar": {"initials": "JD", "imageUrl": "https://cdn.example/a.webp"}})

    assert "assets/images/avatar.webp" not in render_site_files(store.snapshot)
    assert requested == []
    files = render_site_files(store.snapshot, fetch_remote=True)
    assert files["assets/images/avatar.webp"] == b"remote bytes"
    assert requested == ["https://cdn.example/a.webp"]
