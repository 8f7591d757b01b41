"""
Shared test fixtures: platform table, exhibit catalogs and a Qt core
application for the timer-driven navigation store.
"""
import time

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop

from exhibitspace.model.exhibits import DisplayKind, Exhibit, ExhibitCatalog
from exhibitspace.model.io import load_exhibit_catalog
from exhibitspace.model.platforms import PlatformRegistry
from exhibitspace.model.viewpoints import ViewpointResolver
from exhibitspace.config import SAMPLE_CATALOG_PATH


def make_catalog(platform_id, booths=0, walls=0, both=0, guidelines=()):
    """Catalog with `booths`/`walls`/`both` exhibits on one platform, ids b0.., w0.., x0.."""
    exhibits = (
        [Exhibit(f"b{i}", frozenset({platform_id}), DisplayKind.BOOTH) for i in range(booths)]
        + [Exhibit(f"w{i}", frozenset({platform_id}), DisplayKind.WALL) for i in range(walls)]
        + [Exhibit(f"x{i}", frozenset({platform_id}), DisplayKind.BOTH) for i in range(both)]
    )
    return ExhibitCatalog.from_exhibits(exhibits, guidelines)


def process_events_until(predicate, timeout_s=2.0):
    """Pump the Qt event loop until `predicate()` is true or the timeout expires."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 20)
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture(scope="session")
def registry():
    return PlatformRegistry.default()


@pytest.fixture(scope="session")
def sample_catalog():
    return load_exhibit_catalog(SAMPLE_CATALOG_PATH)


@pytest.fixture
def resolver(registry, sample_catalog):
    return ViewpointResolver.for_catalog(registry, sample_catalog)
