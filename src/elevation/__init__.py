"""Elevation module - tile decoding into fixed-size elevation fields."""

from .decoder import decode_file, decode_png, decode_tile, decode_txt, sniff_format
from .field import ElevationField, as_field_array, field_index

__all__ = [
    'ElevationField',
    'as_field_array',
    'decode_file',
    'decode_png',
    'decode_tile',
    'decode_txt',
    'field_index',
    'sniff_format',
]
