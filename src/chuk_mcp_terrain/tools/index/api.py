"""
Index tools — build atlas fragments and list the fragment store.

Building a fragment reads every tile header in a directory or zip archive
below the map root and writes the tile metadata next to it.
"""

import logging

from ...constants import SuccessMessages
from ...models.responses import (
    ErrorResponse,
    FragmentInfo,
    FragmentsResponse,
    IndexResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_index_tools(mcp, manager):
    """Register index tools with the MCP server."""

    @mcp.tool()
    async def terrain_build_index(
        directory: str | None = None,
        archive: str | None = None,
        output_mode: str = "json",
    ) -> str:
        """Index a tile directory or zip archive into an atlas fragment.

        Give a directory relative to the map root (omit both for the root
        itself), or a zip archive name which is mounted and indexed.

        Args:
            directory: Directory of GeoTIFF tiles relative to the map root
            archive: Zip archive of GeoTIFF tiles relative to the map root
            output_mode: "json" or "text"

        Returns:
            Written fragment name, tile and bucket counts, and resolution
        """
        try:
            result = await manager.build_index(directory=directory, archive=archive)

            response = IndexResponse(
                source=result.source,
                fragment=result.fragment,
                tile_count=result.tile_count,
                bucket_count=result.bucket_count,
                resolution_m=result.resolution_m,
                message=SuccessMessages.INDEX_COMPLETE.format(
                    result.tile_count, result.bucket_count, result.fragment
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_build_index failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def terrain_list_fragments(output_mode: str = "json") -> str:
        """List the atlas fragments in the map root with their resolutions.

        Args:
            output_mode: "json" or "text"

        Returns:
            Fragment file names, tile counts and resolutions
        """
        try:
            fragments = [FragmentInfo(**f) for f in manager.list_fragments()]

            response = FragmentsResponse(
                map_dir=str(manager.folder.root),
                fragments=fragments,
                message=SuccessMessages.FRAGMENTS_LIST.format(len(fragments)),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"terrain_list_fragments failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
