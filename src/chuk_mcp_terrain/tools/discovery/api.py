"""
Discovery tools — server status, capabilities, named locations, coordinates.

These tools read no raster data and return information about the server
configuration and the coordinate system.
"""

import logging

from ...constants import (
    INDEX_TOOLS,
    LOCATIONS,
    LOOKUP_TOOLS,
    RESOLUTIONS,
    ServerConfig,
    SuccessMessages,
)
from ...core.map_folder import MapFolder
from ...models.responses import (
    CapabilitiesResponse,
    CoordinateResponse,
    ErrorResponse,
    LocationInfo,
    LocationsResponse,
    StatusResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_discovery_tools(mcp, manager):
    """Register discovery tools with the MCP server."""

    @mcp.tool()
    async def terrain_status(output_mode: str = "json") -> str:
        """Get server status including map directory, default resolution, and mounts.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Server status information
        """
        try:
            atlas = manager.cached_atlas()
            folder = manager.folder

            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                map_dir=str(folder.root) if folder is not None else None,
                default_resolution_m=manager.default_resolution,
                mockup=manager.mockup,
                loaded_resolutions=manager.loaded_resolutions,
                tile_count=len(atlas.tiles()) if atlas is not None else 0,
                mounted_archives=folder.mounted_archives if folder is not None else [],
                mount_available=MapFolder.available(),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_status failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_capabilities(output_mode: str = "json") -> str:
        """Get full server capabilities including resolutions and available tools.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Complete server capabilities
        """
        try:
            response = CapabilitiesResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                resolutions=RESOLUTIONS,
                default_resolution_m=manager.default_resolution,
                lookup_tools=LOOKUP_TOOLS,
                index_tools=INDEX_TOOLS,
                location_count=len(LOCATIONS),
                llm_guidance=(
                    "Coordinates are UTM zone 33 strings like N6851889E146005, or a named "
                    "location from terrain_list_locations. "
                    "Use terrain_lookup_height for a single height and terrain_lookup_gradient "
                    "for slope and aspect. Use terrain_lookup_heights for batches. "
                    "Use terrain_build_index once per tile directory or zip archive before "
                    "looking up heights there."
                ),
                message=f"{ServerConfig.NAME} v{ServerConfig.VERSION} capabilities",
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_capabilities failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_list_locations(output_mode: str = "json") -> str:
        """List the named landmarks that can be used in place of a coordinate.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Landmark names with their UTM 33 coordinates
        """
        try:
            locations = [LocationInfo(**loc) for loc in manager.list_locations()]
            response = LocationsResponse(
                locations=locations,
                message=SuccessMessages.LOCATIONS_LIST.format(len(locations)),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_list_locations failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_describe_coordinate(coordinate: str, output_mode: str = "json") -> str:
        """Resolve a coordinate or landmark name to UTM, WGS84 and its index bucket.

        Args:
            coordinate: N<northing>E<easting> string or a landmark name
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Numeric coordinate, latitude/longitude and bucket id
        """
        try:
            data = manager.describe_coordinate(coordinate)
            response = CoordinateResponse(
                **data,
                message=SuccessMessages.COORDINATE_DESCRIBE.format(
                    data["coordinate"], data["lat"], data["lon"]
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_describe_coordinate failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
