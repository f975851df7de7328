"""
Constants for chuk-mcp-terrain.

All magic strings, grid parameters, TIFF tags, and configuration values live here.
"""


class ServerConfig:
    NAME = "chuk-mcp-terrain"
    VERSION = "0.1.0"
    DESCRIPTION = "Terrain Elevation Atlas: lazy GeoTIFF tile index with point and slope lookups"


class EnvVar:
    MAP_DIR = "TERRAIN_MAP_DIR"
    RESOLUTION = "TERRAIN_RESOLUTION"
    MOCKUP = "TERRAIN_MOCKUP"
    MCP_STDIO = "MCP_STDIO"


# Spatial hash grid (UTM zone 33 metres)
BUCKET_SIZE_M = 500.0
BUCKET_ORIGIN_NORTH = 6_400_000.0
BUCKET_OFFSET_EAST = 120_000.0
BUCKET_ROW_STRIDE = 10_000

# Projection
GEOGRAPHIC_CRS = "EPSG:4326"
PROJECTED_CRS = "EPSG:32633"

# GeoTIFF tags
TAG_IMAGE_WIDTH = 256
TAG_IMAGE_LENGTH = 257
TAG_MODEL_PIXEL_SCALE = 0x830E
TAG_MODEL_TIEPOINT = 0x8482

RASTER_EXTENSIONS = (".tif", ".tiff")

# Serialized index fragments
FRAGMENT_SUFFIX = "atlas.json"
DIRECTORY_FRAGMENT_NAME = "atlas.json"

# Archive mounts
ARCHIVE_EXTENSION = ".zip"
MOUNT_DIR_SUFFIX = ".dir"
MOUNT_COMMAND = "fuse-zip"
UNMOUNT_COMMAND = "fusermount"

# Lookup defaults
DEFAULT_RESOLUTION = 10.0
RESOLUTIONS = [1.0, 10.0, 50.0]
FLAT_ASPECT = -1.0

# Synthetic terrain surface
MOCKUP_BASE_M = 1000.0
MOCKUP_AMPLITUDE_M = 500.0
MOCKUP_PERIOD_NORTH_M = 10000.0
MOCKUP_PERIOD_EAST_M = 20000.0

# Named landmarks (UTM 33 northing/easting)
LOCATIONS: dict[str, str] = {
    "Austerdalsbreen": "N6857378.59E74028.82",
    "Bukkehåmåren": "N6831287.57E165104.69",
    "Dalegubben": "N6929342.17E55699.65",
    "Dørålseter": "N6884975.42E228065.39",
    "Galdhøpiggen": "N6851889.09E146005.17",
    "Giklingdalen": "N6968433.83E181437.49",
    "Gråkallen": "N7041229.73E263033.76",
    "Higravtind": "N7582614.25E491443.74",
    "Innerdalen": "N6970663.77E181965.81",
    "Jønshornet": "N6939567.47E51789.75",
    "Koven": "N7801561.74E796000.84",
    "Kufot": "N7777944.37E829160.64",
    "Litjdalen": "N6957527.09E167573.23",
    "Litlefjellet": "N6951428.83E129294.17",
    "Lodalskåpa": "N6875511.46E89605.11",
    "Loenvatnet": "N6878404.9E78921.26",
    "Neådalssnota": "N6975732.57E196332.68",
    "Nordre Sætertind": "N6934326.09E52020.75",
    "Nordre Trolltind": "N6949920.69E125714.78",
    "Olsanestinden": "N7590523.96E503865.44",
    "Midtronden": "N6878653.14E230391.25",
    "Olstinden": "N7539262.19E419471.91",
    "Rødøyløva": "N7396875.03E413808.27",
    "Sanna": "N7379422.66E368557.76",
    "Sautso": "N7761024.88E838717.86",
    "Slogen": "N6925227.33E67695.5",
    "Smedhamran": "N6877556.88E225420.61",
    "Smørstabbtindan": "N6844576.5E135670.28",
    "Snøheim": "N6919748.71E207190.05",
    "Snøhetta": "N6922988.3E203182.98",
    "Stetinden": "N7562126.7E566097.85",
    "Store Knutholstind": "N6827003.55E156852.26",
    "Store Ringstind": "N6833238.42E116579.44",
    "Store Skagastølstind": "N6834962.93E120609",
    "Store Vengetind": "N6951177.34E131787.15",
    "Storsylen": "N6990928.53E358250.73",
    "Torghatten": "N7255964.08E364892.09",
}

LOOKUP_TOOLS = [
    "terrain_lookup_height",
    "terrain_lookup_gradient",
    "terrain_lookup_heights",
    "terrain_lookup_tiles",
]
INDEX_TOOLS = ["terrain_build_index", "terrain_list_fragments"]


class ErrorMessages:
    INVALID_COORDINATE = "Invalid coordinate {}"
    LOOKUP_FAILED = "Lookup '{}' on tile '{}' failed"
    TILE_NOT_FOUND = "No tile for coordinate '{}'"
    TILE_NOT_LOADED = "Tile not loaded '{}'"
    MISSING_TAG = "Missing or malformed GeoTIFF tag {} in '{}'"
    UNREADABLE_TILE = "Cannot read GeoTIFF header of '{}': {}"
    UNREADABLE_RASTER = "Cannot decode raster '{}': {}"
    UNREADABLE_DIRECTORY = "Cannot read tile directory '{}': {}"
    UNREADABLE_FRAGMENT = "Cannot read atlas fragment '{}': {}"
    SHORT_RASTER = "Raster '{}' returned {} samples, expected {}"
    NOT_AN_ARCHIVE = "Not a zip archive: '{}'"
    MOUNT_FAILED = "Failed to mount '{}': {}"
    UNMOUNT_FAILED = "Failed to unmount '{}': {}"
    NO_TILE_FOLDER = "Tile '{}' has no map folder to load from"
    NO_MAP_DIR = "Map directory is not configured. Set {} or pass --map-dir"
    INDEX_SOURCE_CONFLICT = "Give either a directory or an archive, not both"
    INVALID_RESOLUTION = "resolution must be > 0, got {}"
    EMPTY_POINTS = "At least one coordinate is required"
    OUTSIDE_MAP_ROOT = "Path '{}' is outside the map directory {}"


class SuccessMessages:
    STATUS = "Terrain atlas server v{} ({} tiles at {}m, map dir: {})"
    LOCATIONS_LIST = "{} named locations available"
    COORDINATE_DESCRIBE = "Coordinate {} (lat {:.5f}, lon {:.5f})"
    FRAGMENTS_LIST = "{} atlas fragments found"
    HEIGHT = "Height at {}: {:.1f}m"
    GRADIENT = "Height at {}: {:.1f}m, slope {:.1f} degrees"
    HEIGHTS = "Looked up {} of {} coordinates"
    TILES = "{} candidate tiles for {}"
    INDEX_COMPLETE = "Indexed {} tiles into {} buckets ({})"
    FRAGMENTS_READ = "Read metadata for {} atlases with resolution {}."
    TILE_DISCOVERED = "Tile: {} {} -> {}"
    TILE_READING = "Reading file {}"
