"""
Application Initialization
==========================
Builds the object graph once at start and hands out the pieces.

It acts as the "Dependency Injection" root. It:
1. Creates (or reuses) the Qt core application that drives timers.
2. Loads the platform table and the exhibit catalog.
3. Builds the ViewpointResolver and injects it into the NavigationStore.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import sys

from PySide6.QtCore import QCoreApplication

from exhibitspace.config import (
    DEFAULT_PLATFORMS_PATH, SAMPLE_CATALOG_PATH, START_PLATFORM_ID, TRANSPORT_FALLBACK_MS, VIEW_SETTLE_MS
)
from exhibitspace.app.state import NavigationStore
from exhibitspace.model.exhibits import ExhibitCatalog
from exhibitspace.model.io import load_exhibit_catalog, load_platform_registry
from exhibitspace.model.platforms import PlatformRegistry
from exhibitspace.model.viewpoints import ViewpointResolver

ORG_ID = "exhibitspace"
APP_ID = "exhibitspace"


def create_app(argv: Optional[list[str]] = None) -> QCoreApplication:
    """Create the Qt core application, or return the running one."""
    app = QCoreApplication.instance()
    if app is None:
        QCoreApplication.setOrganizationName(ORG_ID)
        QCoreApplication.setApplicationName(APP_ID)
        app = QCoreApplication(argv if argv is not None else sys.argv[:1])
    return app


@dataclass
class Session:
    registry: PlatformRegistry
    catalog: ExhibitCatalog
    resolver: ViewpointResolver
    navigation: NavigationStore


def create_session(
    catalog_path: str = SAMPLE_CATALOG_PATH,
    platforms_path: str = DEFAULT_PLATFORMS_PATH,
    *,
    start_platform_id: str = START_PLATFORM_ID,
    fallback_ms: int = TRANSPORT_FALLBACK_MS,
    settle_ms: int = VIEW_SETTLE_MS
) -> Session:
    registry = load_platform_registry(platforms_path)
    if start_platform_id not in registry:
        raise ValueError(f"Start platform '{start_platform_id}' is not in the platform table.")
    catalog = load_exhibit_catalog(catalog_path)
    resolver = ViewpointResolver.for_catalog(registry, catalog)
    navigation = NavigationStore(
        resolver,
        start_platform_id,
        fallback_ms=fallback_ms,
        settle_ms=settle_ms,
    )
    return Session(registry=registry, catalog=catalog, resolver=resolver, navigation=navigation)
