"""Tests for server.py and async_server.py."""

import importlib
import os
import sys

import pytest
from unittest.mock import MagicMock, patch

import chuk_mcp_terrain
from chuk_mcp_terrain.core.map_folder import MapFolder

# ---------------------------------------------------------------------------
# Helpers: importing server.py triggers `from .async_server import manager, mcp`
# which builds a ChukMCPServer and an AtlasManager from the environment, so
# the server library is replaced with a mock and both modules are re-imported
# fresh in every test.
# ---------------------------------------------------------------------------

SERVER_MODULES = ("chuk_mcp_terrain.server", "chuk_mcp_terrain.async_server")


def _mock_server_module():
    module = MagicMock()
    instance = MagicMock(name="mcp_instance")
    instance.tool = MagicMock(return_value=lambda fn: fn)
    module.ChukMCPServer.return_value = instance
    return module


def _forget_server_modules():
    """Drop server modules from sys.modules and from the package namespace."""
    removed = {k: sys.modules.pop(k) for k in list(sys.modules) if k.startswith(SERVER_MODULES)}
    for name in ("server", "async_server"):
        if hasattr(chuk_mcp_terrain, name):
            delattr(chuk_mcp_terrain, name)
    return removed


@pytest.fixture
def clean_server_import():
    """Remove cached server modules so they are re-imported with fresh mocks."""
    saved = _forget_server_modules()
    mock_module = _mock_server_module()
    with patch.dict(sys.modules, {"chuk_mcp_server": mock_module}):
        yield mock_module
    _forget_server_modules()
    sys.modules.update(saved)
    for key, module in saved.items():
        setattr(chuk_mcp_terrain, key.rpartition(".")[2], module)


# =====================================================================
# async_server
# =====================================================================


class TestAsyncServer:
    def test_server_named(self, clean_server_import):
        with patch.dict(os.environ, {}, clear=True):
            import chuk_mcp_terrain.async_server  # noqa: F401

        clean_server_import.ChukMCPServer.assert_called_once_with("chuk-mcp-terrain")

    def test_unconfigured_manager(self, clean_server_import):
        with patch.dict(os.environ, {}, clear=True):
            from chuk_mcp_terrain.async_server import manager

        assert manager.folder is None
        assert manager.default_resolution == 10.0
        assert manager.mockup is False

    def test_manager_from_environment(self, clean_server_import, tmp_path):
        env = {
            "TERRAIN_MAP_DIR": str(tmp_path),
            "TERRAIN_RESOLUTION": "1",
            "TERRAIN_MOCKUP": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            from chuk_mcp_terrain.async_server import manager

        assert manager.folder.root == tmp_path
        assert manager.default_resolution == 1.0
        assert manager.mockup is True

    def test_create_manager_mockup_values(self, clean_server_import):
        with patch.dict(os.environ, {}, clear=True):
            from chuk_mcp_terrain.async_server import create_manager

        for value, expected in [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("", False)]:
            with patch.dict(os.environ, {"TERRAIN_MOCKUP": value}, clear=True):
                assert create_manager().mockup is expected, value

    def test_registers_all_tools(self, clean_server_import):
        with patch.dict(os.environ, {}, clear=True):
            from chuk_mcp_terrain.async_server import mcp

        # ten tools across discovery, lookup and index
        assert mcp.tool.call_count == 10


# =====================================================================
# server.main
# =====================================================================


class TestMain:
    def _main(self, argv, env=None, isatty=True):
        with patch.dict(os.environ, env or {}, clear=True):
            server = importlib.import_module("chuk_mcp_terrain.server")

            with (
                patch.object(sys, "argv", ["chuk-mcp-terrain", *argv]),
                patch("sys.stdin", MagicMock(isatty=MagicMock(return_value=isatty))),
            ):
                server.main()
        return server

    def test_stdio(self, clean_server_import):
        server = self._main(["stdio"])
        server.mcp.run.assert_called_once_with(stdio=True)

    def test_http(self, clean_server_import):
        server = self._main(["http", "--host", "0.0.0.0", "--port", "9000"])
        server.mcp.run.assert_called_once_with(host="0.0.0.0", port=9000, stdio=False)

    def test_auto_stdio_from_env(self, clean_server_import):
        server = self._main([], env={"MCP_STDIO": "1"})
        server.mcp.run.assert_called_once_with(stdio=True)

    def test_auto_stdio_when_piped(self, clean_server_import):
        server = self._main([], isatty=False)
        server.mcp.run.assert_called_once_with(stdio=True)

    def test_auto_http(self, clean_server_import):
        server = self._main([])
        server.mcp.run.assert_called_once_with(host="localhost", port=8004, stdio=False)

    def test_mounts_released_on_exit(self, clean_server_import, tmp_path):
        with patch.object(MapFolder, "close_all") as close_all:
            self._main(["stdio"], env={"TERRAIN_MAP_DIR": str(tmp_path)})
        close_all.assert_called_once()

    def test_each_import_sees_current_server_mock(self, clean_server_import):
        server = self._main(["stdio"])
        assert server.mcp is clean_server_import.ChukMCPServer.return_value
