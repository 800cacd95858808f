"""Mesh container produced by the terrain mesh builder."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mesh.lod import LODLevel
from shared.errors import ShapeError


def _readonly(arr: np.ndarray, dtype: type) -> np.ndarray:
    out = np.ascontiguousarray(arr, dtype=dtype).reshape(-1)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class Mesh:
    """
    Triangle mesh as three flat buffers.

    vertices: float32, x/y/z per vertex (y is height).
    indices: uint32, three per triangle, counter-clockwise seen from +Y.
    normals: float32, one unit vector per vertex.

    Buffers are contiguous and read-only so they can be handed to a
    renderer without copying (see ``buffers()``).
    """

    vertices: np.ndarray
    indices: np.ndarray
    normals: np.ndarray
    lod: LODLevel | None = None
    tile_size: float | None = None

    def __post_init__(self) -> None:
        vertices = _readonly(self.vertices, np.float32)
        indices = _readonly(self.indices, np.uint32)
        normals = _readonly(self.normals, np.float32)

        if vertices.size % 3 != 0:
            msg = f'Vertex buffer length {vertices.size} is not a multiple of 3'
            raise ShapeError(msg)
        if indices.size % 3 != 0:
            msg = f'Index buffer length {indices.size} is not a multiple of 3'
            raise ShapeError(msg)
        if normals.size != vertices.size:
            msg = (
                f'Normal buffer length {normals.size} does not match '
                f'vertex buffer length {vertices.size}'
            )
            raise ShapeError(msg)
        vertex_count = vertices.size // 3
        if indices.size and int(indices.max()) >= vertex_count:
            msg = (
                f'Index {int(indices.max())} out of range for '
                f'{vertex_count} vertices'
            )
            raise ShapeError(msg)

        object.__setattr__(self, 'vertices', vertices)
        object.__setattr__(self, 'indices', indices)
        object.__setattr__(self, 'normals', normals)

    @property
    def vertex_count(self) -> int:
        return self.vertices.size // 3

    @property
    def triangle_count(self) -> int:
        return self.indices.size // 3

    @property
    def grid_size(self) -> int | None:
        return self.lod.grid_size if self.lod is not None else None

    def positions(self) -> np.ndarray:
        """(vertex_count, 3) read-only view of the vertex buffer."""
        return self.vertices.reshape(-1, 3)

    def triangles(self) -> np.ndarray:
        """(triangle_count, 3) read-only view of the index buffer."""
        return self.indices.reshape(-1, 3)

    def vertex_normals(self) -> np.ndarray:
        """(vertex_count, 3) read-only view of the normal buffer."""
        return self.normals.reshape(-1, 3)

    def buffers(self) -> tuple[memoryview, memoryview, memoryview]:
        """Zero-copy (vertices, indices, normals) views for GPU upload."""
        return (
            memoryview(self.vertices),
            memoryview(self.indices),
            memoryview(self.normals),
        )
