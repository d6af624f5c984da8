from __future__ import annotations

import pytest

from portfoliobuilder.core.history import History


def test_undo_and_redo_walk_the_timeline() -> None:
    history = History("a")
    history.record("b")
    history.record("c")
    assert history.undo() == "b"
    assert history.undo() == "a"
    assert history.undo() is None
    assert history.redo() == "b"
    assert history.redo() == "c"
    assert history.redo() is None


def test_new_record_discards_redo_branch() -> None:
    history = History("a")
    history.record("b")
    history.undo()
    history.record("x")
    assert not history.can_redo
    assert history.redo() is None
    assert history.present == "x"
    assert len(history) == 2


def test_limit_drops_oldest_entries() -> None:
    history = History(0, limit=3)
    for value in range(1, 6):
        history.record(value)
    assert len(history) == 3
    assert history.present == 5
    assert history.undo() == 4
    assert history.undo() == 3
    assert not history.can_undo


def test_reset_leaves_single_entry() -> None:
    history = History("a")
    history.record("b")
    history.reset("z")
    assert len(history) == 1
    assert history.position == 0
    assert history.present == "z"
    assert not history.can_undo and not history.can_redo


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        History("a", limit=0)
