"""Shared utilities and helpers."""
from shared.diagnostics import log_memory_usage, memory_snapshot
from shared.errors import FormatError, ParameterError, ShapeError, TerrainMeshError
from shared.progress import ConsoleProgress
from shared.version import get_version

__all__ = [
    'ConsoleProgress',
    'FormatError',
    'ParameterError',
    'ShapeError',
    'TerrainMeshError',
    'get_version',
    'log_memory_usage',
    'memory_snapshot',
]
