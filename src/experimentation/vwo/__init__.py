"""VWO connector."""

from .campaigns import build_experiments, parse_settings
from .listener import VwoListener
from .provider import VwoProvider

__all__ = [
    "VwoProvider",
    "VwoListener",
    "build_experiments",
    "parse_settings",
]
