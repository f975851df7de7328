"""Discovery tools — status, capabilities, named locations, coordinates."""

from .api import register_discovery_tools

__all__ = ["register_discovery_tools"]
