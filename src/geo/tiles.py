"""Slippy-map tile math and distances used to place terrain tiles in the world."""

import math

from shared.constants import EARTH_RADIUS_KM, MAX_MERCATOR_LAT, TILE_PIXEL_SPAN


def _tiles_per_axis(zoom: int) -> int:
    return 1 << zoom


def _row_edge_lat(row: float, n: int) -> float:
    # Inverse Web Mercator for a (fractional) tile row
    return math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * row / n))))


def lon_to_tile_x(lon_deg: float, zoom: int) -> int:
    """Tile column containing longitude ``lon_deg`` at ``zoom``."""
    n = _tiles_per_axis(zoom)
    x = int((lon_deg + 180.0) / 360.0 * n)
    return min(max(x, 0), n - 1)


def lat_to_tile_y(lat_deg: float, zoom: int) -> int:
    """Tile row containing latitude ``lat_deg`` at ``zoom`` (row 0 is north)."""
    n = _tiles_per_axis(zoom)
    lat_deg = min(max(lat_deg, -MAX_MERCATOR_LAT), MAX_MERCATOR_LAT)
    lat_rad = math.radians(lat_deg)
    merc = math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad))
    y = int((1.0 - merc / math.pi) / 2.0 * n)
    return min(max(y, 0), n - 1)


def latlon_to_tile(lat_deg: float, lon_deg: float, zoom: int) -> tuple[int, int]:
    """(tile_x, tile_y) containing the point."""
    return lon_to_tile_x(lon_deg, zoom), lat_to_tile_y(lat_deg, zoom)


def tile_x_to_lon(tile_x: int, zoom: int) -> float:
    """Longitude of the tile center."""
    n = _tiles_per_axis(zoom)
    return (tile_x + 0.5) / n * 360.0 - 180.0


def tile_y_to_lat(tile_y: int, zoom: int) -> float:
    """Latitude of the tile center (inverse Web Mercator)."""
    return _row_edge_lat(tile_y + 0.5, _tiles_per_axis(zoom))


def tile_bounds(
    tile_x: int, tile_y: int, zoom: int
) -> tuple[float, float, float, float]:
    """(west, south, east, north) of a tile in degrees."""
    n = _tiles_per_axis(zoom)
    west = tile_x / n * 360.0 - 180.0
    east = (tile_x + 1) / n * 360.0 - 180.0
    north = _row_edge_lat(tile_y, n)
    south = _row_edge_lat(tile_y + 1, n)
    return west, south, east, north


def pixel_in_tile(
    lat_deg: float, lon_deg: float, zoom: int, tile_x: int, tile_y: int
) -> tuple[float, float]:
    """
    Fractional pixel position (px, py) of a point inside a tile.

    The tile edges map to 0 and TILE_PIXEL_SPAN (py grows southwards) and
    the result is clamped to that range, so points outside the tile land
    on its border. Latitude is interpolated linearly between the edges.
    """
    west, south, east, north = tile_bounds(tile_x, tile_y, zoom)
    px = (lon_deg - west) / (east - west) * TILE_PIXEL_SPAN
    py = (north - lat_deg) / (north - south) * TILE_PIXEL_SPAN
    return (
        min(max(px, 0.0), float(TILE_PIXEL_SPAN)),
        min(max(py, 0.0), float(TILE_PIXEL_SPAN)),
    )


def tile_x_to_world_x(tile_x: int, tile_size: float) -> float:
    return tile_x * tile_size


def tile_y_to_world_z(tile_y: int, tile_size: float) -> float:
    return tile_y * tile_size


def scale_elevation(elevation_m: float, exaggeration: float) -> float:
    """Apply vertical exaggeration to an elevation."""
    return elevation_m * exaggeration


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers (haversine)."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2.0) ** 2
    )
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c
