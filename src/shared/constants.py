from enum import Enum

# Project identity (reported by get_version / --version)
APP_NAME = 'terrain-mesher'
APP_VERSION = '0.3.0'

# Side of the elevation tile (px); the field is FIELD_SIZE x FIELD_SIZE
FIELD_SIZE = 256

# Total number of values in a decoded elevation field
FIELD_LENGTH = FIELD_SIZE * FIELD_SIZE

# Last valid row/column index of the field
FIELD_MAX_INDEX = FIELD_SIZE - 1

# Highest index read by bilinear sampling (both neighbours clamped to it)
SAMPLE_MAX_INDEX = FIELD_SIZE - 2

# Pixel coordinate span used when mapping lat/lon inside a tile
TILE_PIXEL_SPAN = FIELD_SIZE - 1

# --- Image-encoded tiles
# No-data sentinel in packed 24-bit RGB (2^23)
RGB_NODATA_VALUE = 8388608
# elevation = (R*256^2 + G*256 + B) * RGB_ELEVATION_SCALE + RGB_ELEVATION_OFFSET
RGB_ELEVATION_SCALE = 0.01
RGB_ELEVATION_OFFSET = -10000.0

# PNG magic bytes used to sniff the payload format
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# --- Text-encoded tiles
# Token that marks a missing value
TXT_NODATA_TOKEN = 'e'
# Separator between values on a line
TXT_SEPARATOR = ','

# Substitute for no-data cells (both encodings)
NODATA_FILL_M = 0.0

# File extensions recognised by decode_file
PNG_EXTENSIONS = frozenset({'.png'})
TXT_EXTENSIONS = frozenset({'.txt', '.csv'})


class TileFormat(str, Enum):
    PNG = 'png'
    TXT = 'txt'


class ExportFormat(str, Enum):
    NPZ = 'npz'
    OBJ = 'obj'


# --- Mesh building
# Default span of a tile in world units
DEFAULT_TILE_SIZE = 100.0

# Default vertical exaggeration (1.0 keeps meters as-is)
DEFAULT_VERTICAL_EXAGGERATION = 1.0

# Fallback vertex normal when the accumulated normal has zero length
UP_NORMAL = (0.0, 1.0, 0.0)

# Length below which an accumulated normal is treated as zero
NORMAL_EPSILON = 1e-12

# --- Coordinate transforms
# Mean Earth radius for haversine distance (km)
EARTH_RADIUS_KM = 6371.0
# Web Mercator latitude limit (deg)
MAX_MERCATOR_LAT = 85.0511287798

# --- Batch execution
DEFAULT_CONCURRENCY = 4
MAX_CONCURRENCY = 64

# --- Paths
# Environment variable overriding the profiles directory
PROFILES_DIR_ENV = 'TERRAIN_MESHER_PROFILES_DIR'
PROFILES_DIR = 'configs/profiles'
# Per-user data directory (under home) for profiles and logs
USER_DATA_DIRNAME = '.terrain_mesher'
LOG_FILENAME = 'terrain_mesher.log'
