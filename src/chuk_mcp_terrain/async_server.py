#!/usr/bin/env python3
"""
Async Terrain MCP Server using chuk-mcp-server

Terrain height and gradient lookups over a tiled atlas of GeoTIFF elevation
models in UTM zone 33. Tiles live below a map directory, either loose or
inside zip archives that are mounted read-only on first use.

The map directory, default resolution and synthetic-surface mode are read
from the environment when this module is imported.
"""

import logging
import os

from chuk_mcp_server import ChukMCPServer

from .constants import DEFAULT_RESOLUTION, EnvVar, ServerConfig, SuccessMessages
from .core.atlas_manager import AtlasManager
from .core.map_folder import MapFolder
from .tools.discovery import register_discovery_tools
from .tools.index import register_index_tools
from .tools.lookup import register_lookup_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_manager() -> AtlasManager:
    """Build an atlas manager from environment variables."""
    map_dir = os.environ.get(EnvVar.MAP_DIR)
    resolution = float(os.environ.get(EnvVar.RESOLUTION) or DEFAULT_RESOLUTION)
    mockup = os.environ.get(EnvVar.MOCKUP, "").lower() in ("1", "true", "yes")

    folder = MapFolder(map_dir) if map_dir else None
    if folder is None and not mockup:
        logger.warning(f"{EnvVar.MAP_DIR} not set; lookups will fail until it is configured")

    return AtlasManager(folder=folder, default_resolution=resolution, mockup=mockup)


# Create the MCP server instance
mcp = ChukMCPServer(ServerConfig.NAME)

# Create atlas manager instance
manager = create_manager()

# Register all tool modules
register_discovery_tools(mcp, manager)
register_lookup_tools(mcp, manager)
register_index_tools(mcp, manager)

# Run the server
if __name__ == "__main__":
    logger.info("Starting Terrain MCP Server...")
    logger.info(
        SuccessMessages.STATUS.format(
            ServerConfig.VERSION,
            0,
            manager.default_resolution,
            manager.folder.root if manager.folder else "not configured",
        )
    )
    try:
        mcp.run(stdio=True)
    finally:
        if manager.folder is not None:
            manager.folder.close_all()
