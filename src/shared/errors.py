"""Error types raised by the decoder and the mesh builder.

All of them derive from ValueError so callers that only care about
"bad input" can catch that.
"""


class TerrainMeshError(ValueError):
    """Base class for decoding and mesh building failures."""


class FormatError(TerrainMeshError):
    """Payload cannot be parsed as the declared encoding."""


class ShapeError(TerrainMeshError):
    """Decoded data does not match the fixed expected shape."""


class ParameterError(TerrainMeshError):
    """A control value (LOD, tile size, ...) is out of range."""
