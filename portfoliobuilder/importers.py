"""Moving portfolio documents in and out of a store."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from . import config
from .core.models import PortfolioContent
from .core.store import PortfolioStore
from .core.validation import PortfolioDocument, validate_json

log = logging.getLogger("portfoliobuilder.importers")


@dataclass(slots=True)
class ImportResult:
    document: Optional[PortfolioDocument] = None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors


def slugify_filename(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def export_filename(content: PortfolioContent) -> str:
    """``ada-lovelace-portfolio.json`` for Ada Lovelace, else the default name."""
    slug = slugify_filename(content.hero.name)
    return f"{slug}-portfolio.json" if slug else config.DEFAULT_EXPORT_NAME


def build_export_payload(store: PortfolioStore) -> Dict[str, object]:
    return store.snapshot.to_export_dict(store.theme)


def export_document(store: PortfolioStore) -> str:
    return json.dumps(build_export_payload(store), indent=2, ensure_ascii=False)


def export_to_file(store: PortfolioStore, target: str | Path) -> Path:
    """Write the export; a directory target gets the generated file name."""
    path = Path(target)
    if path.is_dir():
        path = path / export_filename(store.content)
    path.write_text(export_document(store), encoding="utf-8")
    return path


def import_document(store: PortfolioStore, text: str) -> ImportResult:
    """Validate ``text`` and, only if it is fully valid, load it into ``store``."""
    validation = validate_json(text)
    result = ImportResult(errors=list(validation.errors))
    document = validation.document
    if not validation.ok or document is None:
        log.info("Rejected portfolio import: %s", "; ".join(result.errors[:3]))
        return result
    if document.version is not None and document.version > config.EXPORT_VERSION:
        result.warnings.append(
            f"Document version {document.version} is newer than {config.EXPORT_VERSION}; "
            "unknown fields were ignored"
        )
    store.load_document(document)
    result.document = document
    return result


def import_from_file(store: PortfolioStore, source: str | Path) -> ImportResult:
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ImportResult(errors=[f"Could not read {path.name}: {exc}"])
    return import_document(store, text)
