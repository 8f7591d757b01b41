"""
Configuration & Path Management
===============================
This module serves as the central registry for resource paths and global
constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers (timings,
   start platform) scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the JSON resources when the app is frozen into an executable.

Exports:
    DEFAULT_PLATFORMS_PATH (str): Platform geometry table.
    SAMPLE_CATALOG_PATH (str): Demo exhibit catalog.
    HUB_PLATFORM_ID (str): The central hub platform (guideline posters, reception).
    START_PLATFORM_ID (str): Platform the viewer starts on.
    TRANSPORT_FALLBACK_MS (int): Safety timeout forcing a transport to finish.
    VIEW_SETTLE_MS (int): Delay between arrival and applying a pending view.
"""
import os
import sys
from importlib.resources import files


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to a bundled resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "exhibitspace", "resources", relative_path)

    return str(files("exhibitspace.resources").joinpath(relative_path))


# Resource files
DEFAULT_PLATFORMS_PATH: str = get_resource_path("platforms.json")
SAMPLE_CATALOG_PATH: str = get_resource_path("sample_catalog.json")

# Navigation
HUB_PLATFORM_ID: str = "S"
START_PLATFORM_ID: str = HUB_PLATFORM_ID
TRANSPORT_FALLBACK_MS: int = 4000
VIEW_SETTLE_MS: int = 150
