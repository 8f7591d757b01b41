"""
Exhibition space core: platform geometry, exhibit layout, camera viewpoints
and the navigation state machine that sequences camera transport.
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("exhibitspace")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
