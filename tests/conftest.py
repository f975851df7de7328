"""Shared test fixtures for chuk-mcp-terrain."""

import numpy as np
import pytest
from unittest.mock import MagicMock

from chuk_mcp_terrain.core.map_folder import MapFolder
from chuk_mcp_terrain.core.raster_io import write_geotiff


@pytest.fixture
def ramp_elevation():
    """10x10 elevation ramp: value = row * 10 + col."""
    rows, cols = np.mgrid[0:10, 0:10]
    return (rows * 10 + cols).astype(np.float32)


@pytest.fixture
def map_root(tmp_path, ramp_elevation):
    """Map root with one 10x10 tile, NW corner N10E0, 1 m pixels."""
    write_geotiff(tmp_path / "ramp.tif", ramp_elevation, 0.0, 10.0, 1.0, 1.0)
    return tmp_path


@pytest.fixture
def utm_map_root(tmp_path):
    """Map root with two adjacent 20x20 tiles at 10 m in a tiles/ subdirectory.

    west.tif covers E100000-100200, east.tif covers E100200-100400, both
    N6800000-6800200. West heights are 100 + col, east heights 200 + col.
    """
    tiles = tmp_path / "tiles"
    tiles.mkdir()
    cols = np.tile(np.arange(20, dtype=np.float32), (20, 1))
    write_geotiff(tiles / "west.tif", 100.0 + cols, 100_000.0, 6_800_200.0, 10.0, 10.0)
    write_geotiff(tiles / "east.tif", 200.0 + cols, 100_200.0, 6_800_200.0, 10.0, 10.0)
    (tiles / "readme.txt").write_text("not a raster")
    return tmp_path


@pytest.fixture
def map_folder(map_root):
    """MapFolder over the single-tile map root."""
    return MapFolder(map_root)


@pytest.fixture
def mock_manager():
    """Mock AtlasManager."""
    manager = MagicMock()
    manager.default_resolution = 10.0
    manager.mockup = False
    manager.loaded_resolutions = []
    manager.cached_atlas.return_value = None
    return manager


@pytest.fixture
def mock_mcp():
    """Mock ChukMCPServer."""
    mcp = MagicMock()
    mcp.tool = MagicMock(return_value=lambda fn: fn)
    return mcp
