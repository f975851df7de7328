"""Lookup tools — heights, gradients and candidate tiles."""

from .api import register_lookup_tools

__all__ = ["register_lookup_tools"]
