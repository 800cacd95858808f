"""Writing meshes to disk (.npz buffers and Wavefront .obj)."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from mesh.lod import resolve_lod
from mesh.models import Mesh
from shared.constants import ExportFormat

logger = logging.getLogger(__name__)

# Sentinel stored in .npz when the mesh carries no LOD/tile size
_NPZ_MISSING = -1


def save_mesh_npz(mesh: Mesh, path: str | Path) -> Path:
    """Save the raw buffers with numpy.savez_compressed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open('wb') as f:
        np.savez_compressed(
            f,
            vertices=mesh.vertices,
            indices=mesh.indices,
            normals=mesh.normals,
            lod=np.int8(mesh.lod if mesh.lod is not None else _NPZ_MISSING),
            tile_size=np.float64(
                mesh.tile_size if mesh.tile_size is not None else _NPZ_MISSING
            ),
        )
    logger.debug('Saved mesh (%d vertices) to %s', mesh.vertex_count, p)
    return p


def load_mesh_npz(path: str | Path) -> Mesh:
    """Load a mesh written by save_mesh_npz."""
    with np.load(Path(path)) as data:
        lod_raw = int(data['lod'])
        tile_size = float(data['tile_size'])
        return Mesh(
            vertices=data['vertices'],
            indices=data['indices'],
            normals=data['normals'],
            lod=resolve_lod(lod_raw) if lod_raw != _NPZ_MISSING else None,
            tile_size=tile_size if tile_size != _NPZ_MISSING else None,
        )


def write_obj(mesh: Mesh, path: str | Path) -> Path:
    """
    Write a Wavefront OBJ with positions, normals and faces.

    Faces reference the normal with the same index (``f a//a b//b c//c``).
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open('w', encoding='utf-8') as f:
        f.write(f'# vertices: {mesh.vertex_count}, triangles: {mesh.triangle_count}\n')
        for x, y, z in mesh.positions():
            f.write(f'v {x:.6f} {y:.6f} {z:.6f}\n')
        for nx, ny, nz in mesh.vertex_normals():
            f.write(f'vn {nx:.6f} {ny:.6f} {nz:.6f}\n')
        # OBJ indices are 1-based
        for a, b, c in mesh.triangles().astype(np.int64) + 1:
            f.write(f'f {a}//{a} {b}//{b} {c}//{c}\n')
    logger.debug('Wrote OBJ (%d triangles) to %s', mesh.triangle_count, p)
    return p


def export_mesh(mesh: Mesh, path: str | Path, fmt: ExportFormat | str) -> Path:
    """Write ``mesh`` in the requested format."""
    if ExportFormat(fmt) is ExportFormat.OBJ:
        return write_obj(mesh, path)
    return save_mesh_npz(mesh, path)
