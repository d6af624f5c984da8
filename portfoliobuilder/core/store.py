"""The portfolio store: current content, section selection and editor state.

A store is constructed once at application start and handed to whoever needs
it. Every accepted mutation records one step in the undo history. When it
alters the current :class:`Snapshot` the new immutable one is also written
through the persistence adapter (best effort) and ``content_changed`` is
emitted. Views only read; they never mutate records directly.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, Iterable, Mapping, Optional

from PyQt6 import QtCore

from .. import config
from .history import History
from .models import (
    DEFAULT_SNAPSHOT,
    SECTION_TYPES,
    PortfolioContent,
    Project,
    SectionType,
    Snapshot,
    merge_fields,
    normalize_sections,
)
from .storage import PortfolioPersistence
from .validation import PortfolioDocument

log = logging.getLogger("portfoliobuilder.store")


def _section_tag(section: Optional[str]) -> Optional[SectionType]:
    if section not in SECTION_TYPES:
        log.warning("Ignoring unknown section %r", section)
        return None
    return section  # type: ignore[return-value]


class PortfolioStore(QtCore.QObject):
    content_changed = QtCore.pyqtSignal(object)
    editing_changed = QtCore.pyqtSignal(object)
    history_changed = QtCore.pyqtSignal(bool, bool)
    theme_changed = QtCore.pyqtSignal(object)

    def __init__(
        self,
        initial: Optional[Snapshot] = None,
        persistence: Optional[PortfolioPersistence] = None,
        *,
        theme: Optional[str] = None,
        history_limit: int = config.HISTORY_LIMIT,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._last_id_ms = 0
        self._snapshot = DEFAULT_SNAPSHOT
        if initial is not None:
            projects = self._unique_ids(initial.content.projects.projects)
            self._snapshot = self._with_projects(projects, initial)
        self._editing: Optional[SectionType] = None
        self._theme = theme
        self._history: History[Snapshot] = History(self._snapshot, limit=history_limit)
        self._persistence = persistence

    @classmethod
    def from_persistence(
        cls,
        persistence: PortfolioPersistence,
        **kwargs: Any,
    ) -> "PortfolioStore":
        """Seed a store from saved state, or defaults when none is usable."""
        return cls(
            persistence.load(),
            persistence,
            theme=persistence.load_theme(),
            **kwargs,
        )

    # ---------- accessors ----------
    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def content(self) -> PortfolioContent:
        return self._snapshot.content

    @property
    def selected_sections(self) -> tuple[SectionType, ...]:
        return self._snapshot.selected_sections

    @property
    def editing_section(self) -> Optional[SectionType]:
        return self._editing

    @property
    def theme(self) -> Optional[str]:
        return self._theme

    @property
    def history(self) -> History[Snapshot]:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # ---------- internals ----------
    def _apply(self, snapshot: Snapshot, *, persist: bool = True) -> None:
        changed = snapshot != self._snapshot
        self._snapshot = snapshot
        if self._editing is not None and self._editing not in snapshot.selected_sections:
            self._editing = None
            self.editing_changed.emit(None)
        if changed:
            if persist and self._persistence is not None:
                self._persistence.save(snapshot)
            self.content_changed.emit(snapshot)
        self.history_changed.emit(self.can_undo, self.can_redo)

    def _commit(self, snapshot: Snapshot) -> bool:
        """Record ``snapshot`` as one undo step; returns whether content changed.

        A mutation that changes nothing still takes a step so that N calls are
        always undone by N ``undo()`` calls.
        """
        changed = snapshot != self._snapshot
        self._history.record(snapshot)
        self._apply(snapshot)
        return changed

    def _with_content(self, content: PortfolioContent, base: Optional[Snapshot] = None) -> Snapshot:
        return dataclasses.replace(base or self._snapshot, content=content)

    def _with_projects(self, projects: tuple[Project, ...], base: Optional[Snapshot] = None) -> Snapshot:
        content = (base or self._snapshot).content
        section = dataclasses.replace(content.projects, projects=projects)
        return self._with_content(dataclasses.replace(content, projects=section), base)

    def _next_project_id(self, taken: Iterable[str] = ()) -> str:
        candidate = max(int(time.time() * 1000), self._last_id_ms + 1)
        used = {project.id for project in self.content.projects.projects}
        used.update(taken)
        while str(candidate) in used:
            candidate += 1
        self._last_id_ms = candidate
        return str(candidate)

    def _unique_ids(self, projects: tuple[Project, ...]) -> tuple[Project, ...]:
        """Give blank or repeated project ids a fresh one; first occurrence wins."""
        all_ids = {project.id for project in projects}
        seen: set[str] = set()
        repaired = []
        for project in projects:
            if not project.id or project.id in seen:
                fresh = self._next_project_id(all_ids)
                log.info("Assigned id %s to project %r (was %r)", fresh, project.title, project.id)
                project = dataclasses.replace(project, id=fresh)
                all_ids.add(fresh)
            seen.add(project.id)
            repaired.append(project)
        return tuple(repaired)

    # ---------- content ----------
    def update_section(self, section: str, fields: Mapping[str, Any]) -> PortfolioContent:
        """Shallow-merge ``fields`` into one section record.

        Nested records such as ``social_links`` must be supplied whole; they
        replace the current value rather than being merged into it. An unknown
        section is logged and ignored.
        """
        tag = _section_tag(section)
        if tag is None:
            return self.content
        record = merge_fields(self.content.section(tag), fields)
        if tag == "projects":
            record = dataclasses.replace(record, projects=self._unique_ids(record.projects))
        self._commit(self._with_content(dataclasses.replace(self.content, **{tag: record})))
        return self.content

    def add_project(self, project: Project | Mapping[str, Any]) -> Project:
        """Append ``project`` under a freshly generated id and return it."""
        fields = project.to_dict() if isinstance(project, Project) else dict(project)
        fields.pop("id", None)
        created = merge_fields(Project(id=self._next_project_id()), fields)
        self._commit(self._with_projects(self.content.projects.projects + (created,)))
        return created

    def update_project(self, project_id: str, fields: Mapping[str, Any]) -> PortfolioContent:
        """Merge ``fields`` into one project; an unknown id changes nothing."""
        changes = {key: value for key, value in fields.items() if key != "id"}
        updated = tuple(
            merge_fields(project, changes) if project.id == project_id else project
            for project in self.content.projects.projects
        )
        self._commit(self._with_projects(updated))
        return self.content

    def delete_project(self, project_id: str) -> PortfolioContent:
        projects = self.content.projects.projects
        self._commit(self._with_projects(tuple(p for p in projects if p.id != project_id)))
        return self.content

    # ---------- selection / editor ----------
    def set_selected_sections(self, sections: Iterable[str]) -> tuple[SectionType, ...]:
        kept, rejected = normalize_sections(sections)
        if rejected:
            log.warning("Ignoring unknown or repeated sections: %s", ", ".join(rejected))
        self._commit(dataclasses.replace(self._snapshot, selected_sections=kept))
        return self.selected_sections

    def toggle_section(self, section: str) -> bool:
        """Add or remove ``section``; returns whether it is now selected."""
        tag = _section_tag(section)
        current = self.selected_sections
        if tag is None:
            return False
        if tag in current:
            self.set_selected_sections([s for s in current if s != tag])
            return False
        self.set_selected_sections([*current, tag])
        return True

    def set_editing_section(self, section: Optional[str]) -> Optional[SectionType]:
        """Open ``section`` in the editor; asking for the open one closes it."""
        target: Optional[SectionType] = None
        if section is not None:
            tag = _section_tag(section)
            if tag is None:
                return self._editing
            if tag not in self.selected_sections:
                log.debug("Not editing %s: section is not selected", tag)
                return self._editing
            if tag != self._editing:
                target = tag
        if target != self._editing:
            self._editing = target
            self.editing_changed.emit(target)
        return self._editing

    # ---------- history ----------
    def undo(self) -> bool:
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._apply(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._apply(snapshot)
        return True

    # ---------- wholesale replacement ----------
    def load_document(self, document: PortfolioDocument) -> None:
        """Adopt an imported document; the undo history starts over."""
        snapshot = document.snapshot
        self._history.reset(snapshot)
        self._apply(snapshot)
        if document.theme is not None:
            self.set_theme(document.theme)

    def reset_to_defaults(self) -> None:
        """Restore the default document and selection.

        Durable storage is left to the caller; see ``AppController.reset``.
        """
        self._history.reset(DEFAULT_SNAPSHOT)
        self._apply(DEFAULT_SNAPSHOT, persist=False)
        if self._editing is not None:
            self._editing = None
            self.editing_changed.emit(None)

    def set_theme(self, theme: Optional[str]) -> None:
        if theme == self._theme:
            return
        self._theme = theme
        if self._persistence is not None:
            self._persistence.save_theme(theme)
        self.theme_changed.emit(theme)
