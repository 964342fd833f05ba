"""
Application layer: settings, component wiring and the command line.
"""

from .config import Settings, get_settings, load_settings
from .factory import RagComponents, build_components

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "RagComponents",
    "build_components",
]
