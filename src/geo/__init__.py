"""Geo module - tile coordinate conversions."""

from geo.tiles import (
    distance_km,
    lat_to_tile_y,
    latlon_to_tile,
    lon_to_tile_x,
    pixel_in_tile,
    scale_elevation,
    tile_bounds,
    tile_x_to_lon,
    tile_x_to_world_x,
    tile_y_to_lat,
    tile_y_to_world_z,
)

__all__ = [
    'distance_km',
    'lat_to_tile_y',
    'latlon_to_tile',
    'lon_to_tile_x',
    'pixel_in_tile',
    'scale_elevation',
    'tile_bounds',
    'tile_x_to_lon',
    'tile_x_to_world_x',
    'tile_y_to_lat',
    'tile_y_to_world_z',
]
