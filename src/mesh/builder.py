"""
Terrain mesh builder.

Turns a 256x256 elevation field into a regular triangle grid sampled at a
LOD-dependent stride, with smooth per-vertex normals.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from elevation.field import as_field_array, field_index
from mesh.lod import LODLevel, resolve_lod
from mesh.models import Mesh
from shared.constants import (
    DEFAULT_TILE_SIZE,
    DEFAULT_VERTICAL_EXAGGERATION,
    FIELD_MAX_INDEX,
    FIELD_SIZE,
    NORMAL_EPSILON,
    UP_NORMAL,
)
from shared.errors import ParameterError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domain.models import MeshSettings
    from elevation.field import ElevationField

logger = logging.getLogger(__name__)


def _positive_finite(name: str, value: float) -> float:
    try:
        fv = float(value)
    except (TypeError, ValueError):
        msg = f'Invalid {name}: {value!r}'
        raise ParameterError(msg) from None
    if not math.isfinite(fv) or fv <= 0.0:
        msg = f'Invalid {name}: {value!r} (must be a positive finite number)'
        raise ParameterError(msg)
    return fv


def sample_indices(stride: int, grid_size: int) -> np.ndarray:
    """Source row/column for each grid coordinate, clamped to the last pixel."""
    return np.minimum(np.arange(grid_size) * stride, FIELD_MAX_INDEX)


def grid_vertices(
    heights: np.ndarray,
    tile_size: float,
    stride: int,
    grid_size: int,
    vertical_exaggeration: float = DEFAULT_VERTICAL_EXAGGERATION,
) -> np.ndarray:
    """
    Vertex positions (grid_size*grid_size, 3) in row-major (y, x) order.

    The tile is centered on the origin in the XZ plane; Y is the elevation
    at the sampled source pixel.
    """
    samples = sample_indices(stride, grid_size)
    sample_y, sample_x = np.meshgrid(samples, samples, indexing='ij')

    pixel_size = tile_size / FIELD_SIZE
    half = tile_size / 2.0

    positions = np.empty((grid_size, grid_size, 3), dtype=np.float64)
    positions[:, :, 0] = sample_x * pixel_size - half
    positions[:, :, 1] = heights[field_index(sample_x, sample_y)] * vertical_exaggeration
    positions[:, :, 2] = sample_y * pixel_size - half
    return positions.reshape(-1, 3)


def grid_indices(grid_size: int) -> np.ndarray:
    """
    Triangle indices (2 per cell, 3 per triangle) for a square vertex grid.

    Each cell (idx0 top-left, idx1 top-right, idx2 bottom-left, idx3
    bottom-right) yields (idx0, idx2, idx1) and (idx1, idx2, idx3), which
    is counter-clockwise seen from +Y.
    """
    cells = grid_size - 1
    rows, cols = np.meshgrid(np.arange(cells), np.arange(cells), indexing='ij')
    idx0 = (rows * grid_size + cols).reshape(-1)
    idx1 = idx0 + 1
    idx2 = idx0 + grid_size
    idx3 = idx2 + 1
    return np.stack([idx0, idx2, idx1, idx1, idx2, idx3], axis=1).reshape(-1)


def face_normals(positions: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Unit normal of each triangle; degenerate triangles get a zero vector."""
    v0 = positions[triangles[:, 0]]
    v1 = positions[triangles[:, 1]]
    v2 = positions[triangles[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(
        normals,
        lengths,
        out=np.zeros_like(normals),
        where=lengths > NORMAL_EPSILON,
    )


def vertex_normals(positions: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Smooth per-vertex normals.

    Face normals are summed into an accumulator per vertex, then each sum
    is normalized. A vertex whose sum has zero length gets UP_NORMAL.
    """
    faces = face_normals(positions, triangles)
    accum = np.zeros_like(positions)
    for corner in range(3):
        np.add.at(accum, triangles[:, corner], faces)

    lengths = np.linalg.norm(accum, axis=1, keepdims=True)
    fallback = np.tile(np.asarray(UP_NORMAL, dtype=accum.dtype), (len(accum), 1))
    degenerate = int(np.count_nonzero(lengths <= NORMAL_EPSILON))
    if degenerate:
        logger.debug('%d vertex normals fell back to up', degenerate)
    return np.divide(accum, lengths, out=fallback, where=lengths > NORMAL_EPSILON)


def build_terrain_mesh(
    elevations: ElevationField | Sequence[float] | np.ndarray,
    tile_size: float = DEFAULT_TILE_SIZE,
    lod: LODLevel | int | str = LODLevel.NEAR,
    *,
    vertical_exaggeration: float = DEFAULT_VERTICAL_EXAGGERATION,
) -> Mesh:
    """
    Build a terrain mesh from a 256x256 elevation field.

    Args:
        elevations: ElevationField or 65536 row-major values (meters).
        tile_size: World-unit span of the tile along X and Z.
        lod: LOD selector (LODLevel, 0-2 or far/mid/near).
        vertical_exaggeration: Multiplier applied to heights.

    Returns:
        Mesh with (256/stride + 1)^2 vertices.

    Raises:
        ShapeError: elevations does not hold exactly 65536 values.
        ParameterError: unknown LOD or invalid tile size / exaggeration.
    """
    heights = as_field_array(elevations)
    level = resolve_lod(lod)
    size = _positive_finite('tile size', tile_size)
    exaggeration = _positive_finite('vertical exaggeration', vertical_exaggeration)

    stride = level.stride
    grid_size = level.grid_size

    positions = grid_vertices(heights, size, stride, grid_size, exaggeration)
    indices = grid_indices(grid_size)
    normals = vertex_normals(positions, indices.reshape(-1, 3))

    mesh = Mesh(
        vertices=positions.astype(np.float32),
        indices=indices.astype(np.uint32),
        normals=normals.astype(np.float32),
        lod=level,
        tile_size=size,
    )
    logger.debug(
        'Built %s mesh: grid=%d, vertices=%d, triangles=%d',
        level.name,
        grid_size,
        mesh.vertex_count,
        mesh.triangle_count,
    )
    return mesh


class TerrainMeshBuilder:
    """
    Builder bound to a tile size and vertical exaggeration.

    Usage:
        builder = TerrainMeshBuilder(tile_size=100.0)
        mesh = builder.build(field, LODLevel.MID)
    """

    def __init__(
        self,
        tile_size: float = DEFAULT_TILE_SIZE,
        *,
        vertical_exaggeration: float = DEFAULT_VERTICAL_EXAGGERATION,
    ) -> None:
        self.tile_size = _positive_finite('tile size', tile_size)
        self.vertical_exaggeration = _positive_finite(
            'vertical exaggeration', vertical_exaggeration
        )

    @classmethod
    def from_settings(cls, settings: MeshSettings) -> TerrainMeshBuilder:
        return cls(
            settings.tile_size,
            vertical_exaggeration=settings.vertical_exaggeration,
        )

    def build(
        self,
        elevations: ElevationField | Sequence[float] | np.ndarray,
        lod: LODLevel | int | str = LODLevel.NEAR,
    ) -> Mesh:
        return build_terrain_mesh(
            elevations,
            self.tile_size,
            lod,
            vertical_exaggeration=self.vertical_exaggeration,
        )
