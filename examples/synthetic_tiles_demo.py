#!/usr/bin/env python3
"""
Synthetic Tiles Demo -- chuk-mcp-terrain

Writes a 2x2 mosaic of small GeoTIFF tiles around Galdhøpiggen into a
temporary map directory, indexes it into an atlas fragment, and then looks
up heights, gradients and candidate tiles through the MCP tools. Shows the
lazy loading: only tiles that answer a lookup are read from disk.

Usage:
    python examples/synthetic_tiles_demo.py
"""

import asyncio
import tempfile
from pathlib import Path

import numpy as np

from chuk_mcp_terrain.core.coord import Coord
from chuk_mcp_terrain.core.raster_io import write_geotiff
from tool_runner import ToolRunner

TILE_PIXELS = 100
RESOLUTION_M = 10.0
TILE_SIZE_M = TILE_PIXELS * RESOLUTION_M
PEAK = Coord.parse("Galdhøpiggen")


def _write_mosaic(tiles_dir: Path) -> None:
    """A cone around the peak, split over four 1 km tiles."""
    origin = Coord(
        round(PEAK.e / TILE_SIZE_M) * TILE_SIZE_M - TILE_SIZE_M,
        round(PEAK.n / TILE_SIZE_M) * TILE_SIZE_M + TILE_SIZE_M,
    )
    for row in range(2):
        for col in range(2):
            nw = origin + Coord(col * TILE_SIZE_M, -row * TILE_SIZE_M)
            # Pixel centres of this tile
            e = nw.e + (np.arange(TILE_PIXELS) + 0.5) * RESOLUTION_M
            n = nw.n - (np.arange(TILE_PIXELS) + 0.5) * RESOLUTION_M
            ee, nn = np.meshgrid(e, n)
            distance = np.hypot(ee - PEAK.e, nn - PEAK.n)
            heights = 2469.0 - 0.4 * distance
            write_geotiff(tiles_dir / f"tile_{row}_{col}.tif", heights, nw.e, nw.n, RESOLUTION_M, RESOLUTION_M)


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        map_dir = Path(tmp)
        (map_dir / "galdhopiggen").mkdir()
        _write_mosaic(map_dir / "galdhopiggen")

        runner = ToolRunner(map_dir=map_dir, default_resolution=RESOLUTION_M)

        print("=" * 60)
        print("chuk-mcp-terrain -- Synthetic Tiles")
        print("=" * 60)

        print("\nIndexing tiles:")
        index = await runner.run("terrain_build_index", directory="galdhopiggen")
        print(f"  {index['message']}")

        fragments = await runner.run("terrain_list_fragments")
        for frag in fragments["fragments"]:
            print(f"  {frag['name']}: {frag['tile_count']} tiles at {frag['resolution_m']}m")

        print("\nHeight at the peak:")
        height = await runner.run("terrain_lookup_height", coordinate="Galdhøpiggen")
        print(f"  {height['message']}")

        print("\nWalking east from the peak:")
        points = [str(PEAK + Coord(d, 0.0)) for d in (0.0, 200.0, 400.0, 600.0)]
        heights = await runner.run("terrain_lookup_heights", coordinates=points)
        for p in heights["points"]:
            h = f"{p['height_m']:.1f}m" if p["height_m"] is not None else "no data"
            print(f"  {p['coordinate']}: {h}")

        print("\nSlope on the flank:")
        print(await runner.run_text("terrain_lookup_gradient", coordinate=points[2]))

        print("\nCandidate tiles at the peak:")
        print(await runner.run_text("terrain_lookup_tiles", coordinate="Galdhøpiggen"))

        print("\nStatus:")
        print(await runner.run_text("terrain_status"))

        await runner.close()


if __name__ == "__main__":
    asyncio.run(main())
