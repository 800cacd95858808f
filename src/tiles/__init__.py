"""Tiles module - batch execution over tile files."""

from tiles.executor import TileResult, build_tiles, run_tiles

__all__ = [
    'TileResult',
    'build_tiles',
    'run_tiles',
]
