"""
Lookup tools — point height, gradient, batch heights, candidate tiles.

These tools may read tile pixel data from disk on first use of a tile.
"""

import logging

from ...constants import SuccessMessages
from ...models.responses import (
    ErrorResponse,
    GradientResponse,
    HeightResponse,
    MultiHeightResponse,
    PointHeight,
    TileInfo,
    TilesResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_lookup_tools(mcp, manager):
    """Register lookup tools with the MCP server."""

    @mcp.tool()
    async def terrain_lookup_height(
        coordinate: str,
        resolution_m: float | None = None,
        output_mode: str = "json",
    ) -> str:
        """Get the terrain height at a coordinate.

        Args:
            coordinate: N<northing>E<easting> (UTM 33) or a landmark name
            resolution_m: Atlas resolution in metres (None = server default)
            output_mode: "json" or "text"

        Returns:
            Height in metres and the candidate tiles for the coordinate
        """
        try:
            result = await manager.lookup_height(coordinate, resolution_m)

            response = HeightResponse(
                coordinate=result.coordinate,
                height_m=result.height_m,
                resolution_m=result.resolution_m,
                tiles=result.tiles,
                message=SuccessMessages.HEIGHT.format(result.coordinate, result.height_m),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_lookup_height failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_lookup_gradient(
        coordinate: str,
        resolution_m: float | None = None,
        output_mode: str = "json",
    ) -> str:
        """Get the terrain height, gradient, slope and aspect at a coordinate.

        Args:
            coordinate: N<northing>E<easting> (UTM 33) or a landmark name
            resolution_m: Atlas resolution in metres (None = server default)
            output_mode: "json" or "text"

        Returns:
            Height, height change per metre east and north, slope and aspect
        """
        try:
            result = await manager.lookup_gradient(coordinate, resolution_m)

            response = GradientResponse(
                coordinate=result.coordinate,
                height_m=result.height_m,
                d_east=result.d_east,
                d_north=result.d_north,
                slope_degrees=result.slope_degrees,
                aspect_degrees=result.aspect_degrees,
                resolution_m=result.resolution_m,
                message=SuccessMessages.GRADIENT.format(
                    result.coordinate, result.height_m, result.slope_degrees
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_lookup_gradient failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_lookup_heights(
        coordinates: list[str],
        resolution_m: float | None = None,
        output_mode: str = "json",
    ) -> str:
        """Get terrain heights at several coordinates in one call.

        Coordinates without tile coverage are returned with a null height.

        Args:
            coordinates: List of N<northing>E<easting> strings or landmark names
            resolution_m: Atlas resolution in metres (None = server default)
            output_mode: "json" or "text"

        Returns:
            Per-coordinate heights and the number found
        """
        try:
            result = await manager.lookup_heights(coordinates, resolution_m)

            points = [
                PointHeight(coordinate=c, height_m=h)
                for c, h in zip(result.coordinates, result.heights)
            ]
            response = MultiHeightResponse(
                points=points,
                found=result.found,
                resolution_m=manager.default_resolution if resolution_m is None else resolution_m,
                message=SuccessMessages.HEIGHTS.format(result.found, len(points)),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_lookup_heights failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_lookup_tiles(
        coordinate: str,
        resolution_m: float | None = None,
        output_mode: str = "json",
    ) -> str:
        """List the tiles indexed for the grid cell containing a coordinate.

        Args:
            coordinate: N<northing>E<easting> (UTM 33) or a landmark name
            resolution_m: Atlas resolution in metres (None = server default)
            output_mode: "json" or "text"

        Returns:
            Candidate tile files with corners and load state
        """
        try:
            numeric = str(manager.parse_coordinate(coordinate))
            tiles = [TileInfo(**t) for t in await manager.lookup_tiles(coordinate, resolution_m)]

            response = TilesResponse(
                coordinate=numeric,
                tiles=tiles,
                message=SuccessMessages.TILES.format(len(tiles), numeric),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_lookup_tiles failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
