from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PyQt6 import QtCore

sys.path.append(str(Path(__file__).resolve().parents[1]))

from portfoliobuilder.core.storage import LocalStorage, PortfolioPersistence
from portfoliobuilder.core.store import PortfolioStore


@pytest.fixture(scope="session", autouse=True)
def qt_app() -> QtCore.QCoreApplication:
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    return app


@pytest.fixture
def persistence(tmp_path: Path) -> PortfolioPersistence:
    return PortfolioPersistence(LocalStorage(tmp_path / "data"))


@pytest.fixture
def store(persistence: PortfolioPersistence) -> PortfolioStore:
    return PortfolioStore.from_persistence(persistence)
