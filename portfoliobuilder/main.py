"""Application wiring and command-line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from PyQt6 import QtCore

from . import config
from .core import generator
from .core.models import Avatar
from .core.storage import LocalStorage, PortfolioPersistence
from .core.store import PortfolioStore
from .core.upload import (
    UploadError,
    UploadErrorKind,
    apply_avatar_upload,
    clear_avatar_image,
    parse_upload_response,
)
from .importers import ImportResult, export_to_file, import_from_file

log = logging.getLogger("portfoliobuilder")


class AppController(QtCore.QObject):
    """Owns the storage, persistence adapter and store for one session."""

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        *,
        history_limit: int = config.HISTORY_LIMIT,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.storage = LocalStorage(data_dir if data_dir is not None else config.app_data_dir())
        self.persistence = PortfolioPersistence(self.storage)
        self.store = PortfolioStore.from_persistence(
            self.persistence,
            history_limit=history_limit,
            parent=self,
        )

    def reset(self) -> None:
        """Confirmed reset: defaults in memory, application slots cleared."""
        self.store.reset_to_defaults()
        self.store.set_theme(None)
        self.persistence.clear()

    def apply_upload_response(self, payload: Mapping[str, object]) -> Avatar:
        """Adopt the upload service's reply; raises :class:`UploadError` on failure."""
        return apply_avatar_upload(self.store, parse_upload_response(payload))

    def set_avatar_url(self, url: str) -> Avatar:
        """Point the avatar at ``url``; an empty value falls back to initials."""
        if not url:
            return clear_avatar_image(self.store)
        return apply_avatar_upload(self.store, url)

    def export_json(self, target: str | Path) -> Path:
        return export_to_file(self.store, target)

    def import_json(self, source: str | Path) -> ImportResult:
        return import_from_file(self.store, source)

    def export_site(self, output_dir: str | Path) -> Path:
        return generator.render_site(
            self.store.snapshot, output_dir, theme=self.store.theme, fetch_remote=True
        )

    def export_zip(self, target: str | Path) -> Path:
        path = Path(target)
        if path.is_dir():
            path = path / config.SITE_ARCHIVE_NAME
        return generator.write_site_archive(
            self.store.snapshot, path, theme=self.store.theme, fetch_remote=True
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-builder",
        description="Manage the saved portfolio and export it.",
    )
    parser.add_argument("--data-dir", type=Path, help="directory holding saved state")
    parser.add_argument("--reset-appdata", action="store_true", help="restore defaults and clear saved state")
    parser.add_argument("--import", dest="import_path", type=Path, help="load a portfolio JSON document")
    parser.add_argument("--avatar-url", help="use this image URL for the avatar (empty string clears it)")
    parser.add_argument(
        "--upload-response",
        type=Path,
        help="apply an avatar upload service reply (JSON with imageUrl or error)",
    )
    parser.add_argument("--export", dest="export_path", type=Path, help="write the portfolio JSON document")
    parser.add_argument("--export-site", type=Path, help="render the static site into a directory")
    parser.add_argument("--export-zip", type=Path, help="write the static site as a ZIP archive")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication(sys.argv[:1])
    app.setApplicationName(config.APP_NAME)
    controller = AppController(args.data_dir)

    if args.reset_appdata:
        controller.reset()
        log.info("Saved state cleared")

    if args.import_path is not None:
        result = controller.import_json(args.import_path)
        for warning in result.warnings:
            log.warning(warning)
        if not result.ok:
            for error in result.errors:
                log.error(error)
            return 1
        log.info("Imported %s", args.import_path)

    if args.avatar_url is not None:
        controller.set_avatar_url(args.avatar_url)
    if args.upload_response is not None:
        try:
            payload = json.loads(args.upload_response.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise UploadError(UploadErrorKind.FAILED)
            controller.apply_upload_response(payload)
        except (OSError, json.JSONDecodeError) as exc:
            log.error("Could not read upload response %s: %s", args.upload_response, exc)
            return 1
        except UploadError as exc:
            log.error("Avatar upload failed: %s", exc.message)
            return 1

    if args.export_path is not None:
        log.info("Exported %s", controller.export_json(args.export_path))
    if args.export_site is not None:
        log.info("Rendered %s", controller.export_site(args.export_site))
    if args.export_zip is not None:
        log.info("Wrote %s", controller.export_zip(args.export_zip))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
