"""
Shared helper for running chuk-mcp-terrain MCP tools directly from Python.

Provides a ToolRunner class that registers all MCP tools on an
AtlasManager, without requiring a full MCP transport layer.
Demo scripts use this to call tools as plain async functions.

Usage:
    from tool_runner import ToolRunner

    async def main():
        runner = ToolRunner(mockup=True)
        result = await runner.run("terrain_lookup_height", coordinate="Galdhøpiggen")
        print(result)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from chuk_mcp_terrain.core.atlas_manager import AtlasManager
from chuk_mcp_terrain.core.map_folder import MapFolder
from chuk_mcp_terrain.tools.discovery import register_discovery_tools
from chuk_mcp_terrain.tools.index import register_index_tools
from chuk_mcp_terrain.tools.lookup import register_lookup_tools


class _MiniMCP:
    """Minimal MCP server that captures tools registered via @mcp.tool."""

    def __init__(self) -> None:
        self._tools: dict[str, Any] = {}

    def tool(self) -> Any:
        """Decorator factory matching @mcp.tool() usage."""

        def decorator(fn: Any) -> Any:
            self._tools[fn.__name__] = fn
            return fn

        return decorator

    def get_tool(self, name: str) -> Any:
        return self._tools[name]


class ToolRunner:
    """
    Run chuk-mcp-terrain MCP tools directly from Python.

    All 10 tools are registered and callable via run(tool_name, **kwargs).
    Returns parsed JSON by default. Use run_text() for human-readable output.
    Pass a map directory to work on real tiles, or mockup=True for the
    synthetic surface.
    """

    def __init__(
        self,
        map_dir: str | Path | None = None,
        default_resolution: float = 10.0,
        mockup: bool = False,
    ) -> None:
        self._mcp = _MiniMCP()
        self.manager = AtlasManager(
            folder=MapFolder(map_dir) if map_dir else None,
            default_resolution=default_resolution,
            mockup=mockup,
            progress_callback=lambda message: print(f"  [progress] {message}"),
        )
        register_discovery_tools(self._mcp, self.manager)
        register_lookup_tools(self._mcp, self.manager)
        register_index_tools(self._mcp, self.manager)

    @property
    def tool_names(self) -> list[str]:
        return list(self._mcp._tools.keys())

    async def run(self, tool_name: str, **kwargs: Any) -> dict[str, Any]:
        """Call a tool by name and return parsed JSON."""
        fn = self._mcp.get_tool(tool_name)
        raw = await fn(**kwargs)
        return json.loads(raw)

    async def run_text(self, tool_name: str, **kwargs: Any) -> str:
        """Call a tool by name with output_mode='text' and return plaintext."""
        fn = self._mcp.get_tool(tool_name)
        return await fn(output_mode="text", **kwargs)

    async def close(self) -> None:
        """Release any archive mounts."""
        await self.manager.close()
