"""Index tools — fragment building and listing."""

from .api import register_index_tools

__all__ = ["register_index_tools"]
