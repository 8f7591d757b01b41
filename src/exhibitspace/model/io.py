"""
Input/Output Manager (JSON)
Loads the static platform table and the exhibit catalog from JSON files.
The layout itself is never persisted; it is recomputed from these inputs.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

from exhibitspace.model.exhibits import Exhibit, ExhibitCatalog
from exhibitspace.model.platforms import Connection, Platform, PlatformRegistry

logger = logging.getLogger(__name__)


def _read_json(filepath: str) -> Dict[str, Any]:
    if not os.path.exists(filepath):
        msg = f"File '{filepath}' does not exist."
        logger.error(msg)
        raise FileNotFoundError(msg)
    with open(filepath, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"File '{filepath}' is not valid JSON: {e}")
            raise ValueError(f"File '{filepath}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"File '{filepath}' must contain a JSON object at top level.")
    return data


def platform_registry_from_dict(data: Dict[str, Any]) -> PlatformRegistry:
    platforms = []
    for record in data.get("platforms", []):
        try:
            platforms.append(Platform.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid platform record {record!r}: {e}")
            raise ValueError(f"Invalid platform record {record!r}: {e}") from e
    connections = []
    for record in data.get("connections", []):
        try:
            connections.append(Connection.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid connection record {record!r}: {e}")
            raise ValueError(f"Invalid connection record {record!r}: {e}") from e
    return PlatformRegistry.from_platforms(platforms, connections)


def exhibit_catalog_from_dict(data: Dict[str, Any]) -> ExhibitCatalog:
    exhibits = []
    for record in data.get("exhibits", []):
        try:
            exhibits.append(Exhibit.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid exhibit record {record!r}: {e}")
            raise ValueError(f"Invalid exhibit record {record!r}: {e}") from e
    guidelines = [str(g) for g in data.get("guidelines", [])]
    return ExhibitCatalog.from_exhibits(exhibits, guidelines)


def load_platform_registry(filepath: str) -> PlatformRegistry:
    logger.info(f"Loading platform table from: {filepath}")
    registry = platform_registry_from_dict(_read_json(filepath))
    logger.debug(f"Loaded {len(registry)} platforms, {len(registry.connections)} connections.")
    return registry


def load_exhibit_catalog(filepath: str) -> ExhibitCatalog:
    logger.info(f"Loading exhibit catalog from: {filepath}")
    catalog = exhibit_catalog_from_dict(_read_json(filepath))
    logger.debug(f"Loaded {len(catalog)} exhibits, {len(catalog.guidelines)} guideline posters.")
    return catalog


def save_platform_registry(registry: PlatformRegistry, filepath: str) -> None:
    logger.info(f"Saving platform table to: {filepath}")
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(registry.to_dict(), f, indent=2)
