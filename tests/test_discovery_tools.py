"""Tests for discovery tools (terrain_status, terrain_capabilities,
terrain_list_locations, terrain_describe_coordinate).
"""

import json

import pytest
from unittest.mock import MagicMock, patch

from chuk_mcp_terrain.constants import INDEX_TOOLS, LOCATIONS, LOOKUP_TOOLS, ServerConfig
from chuk_mcp_terrain.core.atlas import Atlas
from chuk_mcp_terrain.core.atlas_manager import AtlasManager
from chuk_mcp_terrain.core.map_folder import MapFolder
from chuk_mcp_terrain.tools.discovery.api import register_discovery_tools


def _register(manager):
    tools = {}
    mcp = MagicMock()

    def capture_tool(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn

        return decorator

    mcp.tool = capture_tool
    register_discovery_tools(mcp, manager)
    return tools


@pytest.fixture
def discovery_tools():
    return _register(AtlasManager(mockup=True))


# ── Registration ───────────────────────────────────────────────────


class TestRegistration:
    def test_registers_four_tools(self, discovery_tools):
        assert set(discovery_tools) == {
            "terrain_status",
            "terrain_capabilities",
            "terrain_list_locations",
            "terrain_describe_coordinate",
        }


# ── terrain_status ─────────────────────────────────────────────────


class TestStatus:
    async def test_unconfigured(self, discovery_tools):
        data = json.loads(await discovery_tools["terrain_status"]())
        assert data["server"] == ServerConfig.NAME
        assert data["version"] == ServerConfig.VERSION
        assert data["map_dir"] is None
        assert data["mockup"] is True
        assert data["tile_count"] == 0
        assert data["mounted_archives"] == []

    async def test_with_loaded_atlas(self, map_root):
        folder = MapFolder(map_root)
        Atlas.from_directory(folder).write(map_root / "atlas.json")
        manager = AtlasManager(folder=folder, default_resolution=1.0)
        manager.get_atlas()

        tools = _register(manager)
        data = json.loads(await tools["terrain_status"]())
        assert data["map_dir"] == str(map_root)
        assert data["tile_count"] == 1
        assert data["loaded_resolutions"] == [1.0]

    async def test_mount_availability(self, discovery_tools):
        with patch("chuk_mcp_terrain.core.map_folder.shutil.which", return_value=None):
            data = json.loads(await discovery_tools["terrain_status"]())
        assert data["mount_available"] is False

    async def test_text(self, discovery_tools):
        result = await discovery_tools["terrain_status"](output_mode="text")
        assert "Map dir: not configured" in result

    async def test_error(self, mock_manager):
        mock_manager.cached_atlas.side_effect = RuntimeError("broken")
        data = json.loads(await _register(mock_manager)["terrain_status"]())
        assert data == {"error": "broken"}


# ── terrain_capabilities ───────────────────────────────────────────


class TestCapabilities:
    async def test_json(self, discovery_tools):
        data = json.loads(await discovery_tools["terrain_capabilities"]())
        assert data["lookup_tools"] == LOOKUP_TOOLS
        assert data["index_tools"] == INDEX_TOOLS
        assert data["location_count"] == len(LOCATIONS)
        assert data["default_resolution_m"] == 10.0
        assert "terrain_lookup_height" in data["llm_guidance"]

    async def test_text(self, discovery_tools):
        result = await discovery_tools["terrain_capabilities"](output_mode="text")
        assert "Lookup tools:" in result


# ── terrain_list_locations ─────────────────────────────────────────


class TestListLocations:
    async def test_json(self, discovery_tools):
        data = json.loads(await discovery_tools["terrain_list_locations"]())
        assert len(data["locations"]) == len(LOCATIONS)
        assert data["message"] == f"{len(LOCATIONS)} named locations available"

    async def test_text(self, discovery_tools):
        result = await discovery_tools["terrain_list_locations"](output_mode="text")
        assert f"Galdhøpiggen: {LOCATIONS['Galdhøpiggen']}" in result


# ── terrain_describe_coordinate ────────────────────────────────────


class TestDescribeCoordinate:
    async def test_numeric(self, discovery_tools):
        data = json.loads(
            await discovery_tools["terrain_describe_coordinate"](coordinate="N6800100E100100")
        )
        assert data["coordinate"] == "N6800100E100100"
        assert data["easting"] == 100100.0
        assert data["northing"] == 6800100.0
        assert data["bucket"] == 8_000_440
        assert data["message"].startswith("Coordinate N6800100E100100 (lat ")

    async def test_named(self, discovery_tools):
        data = json.loads(
            await discovery_tools["terrain_describe_coordinate"](coordinate="Galdhøpiggen")
        )
        assert 61.0 < data["lat"] < 62.0
        assert 8.0 < data["lon"] < 9.0

    async def test_invalid(self, discovery_tools):
        data = json.loads(await discovery_tools["terrain_describe_coordinate"](coordinate="x"))
        assert data == {"error": "Invalid coordinate x"}
