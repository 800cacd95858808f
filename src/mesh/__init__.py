"""Mesh module - terrain mesh building and export."""

from .builder import TerrainMeshBuilder, build_terrain_mesh
from .export import export_mesh, load_mesh_npz, save_mesh_npz, write_obj
from .lod import LOD_STRIDES, LODLevel, resolve_lod
from .models import Mesh

__all__ = [
    'LOD_STRIDES',
    'LODLevel',
    'Mesh',
    'TerrainMeshBuilder',
    'build_terrain_mesh',
    'export_mesh',
    'load_mesh_npz',
    'resolve_lod',
    'save_mesh_npz',
    'write_obj',
]
