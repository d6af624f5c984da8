"""Durable key-value slots and the persistence adapter built on them."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from .. import config
from .models import Snapshot
from .validation import validate_json

log = logging.getLogger("portfoliobuilder.storage")

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """String values stored one file per key under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Could not read slot %s: %s", key, exc)
            return None

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))


class PortfolioPersistence:
    """Reads and writes the portfolio snapshot and theme preference.

    Writes are best effort: a failure is logged and reported as ``False`` but
    never raised, so the in-memory state stays authoritative for the session.
    """

    def __init__(
        self,
        storage: LocalStorage,
        state_key: str = config.STATE_KEY,
        theme_key: str = config.THEME_KEY,
    ) -> None:
        self.storage = storage
        self.state_key = state_key
        self.theme_key = theme_key

    @property
    def owned_keys(self) -> tuple[str, ...]:
        return (self.state_key, self.theme_key)

    def load(self) -> Optional[Snapshot]:
        """Return the saved snapshot, or ``None`` when absent or corrupt.

        A slot that fails the strict document check but still holds a JSON
        object with a ``content`` object is read leniently, so one odd value
        never costs the user every other saved edit.
        """
        raw = self.storage.get_item(self.state_key)
        if raw is None:
            return None
        result = validate_json(raw)
        if result.ok and result.document is not None:
            return result.document.snapshot
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict) or not isinstance(data.get("content"), dict):
            log.warning("Ignoring unreadable saved state: %s", "; ".join(result.errors[:3]))
            return None
        log.warning("Saved state needed repair: %s", "; ".join(result.errors[:3]))
        return Snapshot.from_dict(data)

    def save(self, snapshot: Snapshot) -> bool:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False)
        try:
            self.storage.set_item(self.state_key, payload)
        except OSError as exc:
            log.warning("Could not persist portfolio state: %s", exc)
            return False
        return True

    def load_theme(self) -> Optional[str]:
        raw = self.storage.get_item(self.theme_key)
        if raw is None:
            return None
        try:
            theme = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable theme preference")
            return None
        return theme if isinstance(theme, str) else None

    def save_theme(self, theme: Optional[str]) -> bool:
        try:
            if theme is None:
                self.storage.remove_item(self.theme_key)
            else:
                self.storage.set_item(self.theme_key, json.dumps(theme))
        except OSError as exc:
            log.warning("Could not persist theme preference: %s", exc)
            return False
        return True

    def clear(self, keys: Iterable[str] | None = None) -> None:
        """Remove application-owned slots only; other keys are left alone."""
        for key in keys if keys is not None else self.owned_keys:
            try:
                self.storage.remove_item(key)
            except OSError as exc:
                log.warning("Could not clear slot %s: %s", key, exc)
