from __future__ import annotations

from enum import Enum

from shared.constants import FIELD_SIZE
from shared.errors import ParameterError


class LODLevel(int, Enum):
    FAR = 0
    MID = 1
    NEAR = 2

    @property
    def stride(self) -> int:
        """Sampling step over the elevation field."""
        return LOD_STRIDES[self]

    @property
    def grid_size(self) -> int:
        """Vertices per side, including the shared far edge row/column."""
        return grid_size_for_stride(self.stride)


# Far samples every 8th pixel (33x33 vertices), Near every 2nd (129x129)
LOD_STRIDES: dict[LODLevel, int] = {
    LODLevel.FAR: 8,
    LODLevel.MID: 4,
    LODLevel.NEAR: 2,
}


def grid_size_for_stride(stride: int) -> int:
    # +1 samples the far edge so neighbouring tiles share boundary vertices
    return FIELD_SIZE // stride + 1


def resolve_lod(value: LODLevel | int | str) -> LODLevel:
    """
    Normalize a LOD selector.

    Accepts a LODLevel, its integer value (0=far, 1=mid, 2=near) or its
    case-insensitive name. Raises ParameterError for anything else.
    """
    if isinstance(value, LODLevel):
        return value
    if isinstance(value, bool):
        msg = f'Invalid LOD level: {value!r} (expected 0-2 or far/mid/near)'
        raise ParameterError(msg)
    if isinstance(value, int):
        try:
            return LODLevel(value)
        except ValueError:
            pass
    elif isinstance(value, str):
        name = value.strip().upper()
        if name in LODLevel.__members__:
            return LODLevel[name]
        if name.isdigit():
            return resolve_lod(int(name))
    msg = f'Invalid LOD level: {value!r} (expected 0-2 or far/mid/near)'
    raise ParameterError(msg)
