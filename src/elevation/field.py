"""Row-major 256x256 elevation field shared by the decoder and the mesh builder."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from shared.constants import FIELD_LENGTH, FIELD_SIZE, SAMPLE_MAX_INDEX
from shared.errors import ShapeError

if TYPE_CHECKING:
    from collections.abc import Sequence


def field_index(x: int, y: int) -> int:
    """Flat index of column ``x`` in row ``y``."""
    return y * FIELD_SIZE + x


def _flat_float32(values: Sequence[float] | np.ndarray, *, copy: bool) -> np.ndarray:
    # Ragged or non-numeric input makes numpy raise a plain ValueError/TypeError
    try:
        if copy:
            arr = np.array(values, dtype=np.float32)
        else:
            arr = np.asarray(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        msg = f'Invalid elevation data: {e}'
        raise ShapeError(msg) from e
    arr = arr.reshape(-1)
    if arr.size != FIELD_LENGTH:
        msg = (
            f'Invalid number of elevation values: {arr.size}, '
            f'expected {FIELD_LENGTH}'
        )
        raise ShapeError(msg)
    return arr


def as_field_array(values: ElevationField | Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Return ``values`` as a flat float32 array of FIELD_LENGTH elements.

    Accepts an ElevationField (returned as-is, no copy), a flat sequence
    or a 256x256 array. Raises ShapeError for any other length and for
    ragged or non-numeric input.
    """
    if isinstance(values, ElevationField):
        return values.values
    return _flat_float32(values, copy=False)


@dataclass(frozen=True, eq=False)
class ElevationField:
    """
    Immutable dense elevation grid (meters), FIELD_SIZE x FIELD_SIZE, row-major.

    Row 0 is the top row of the source raster; ``at(x, y)`` reads column x
    of row y. The backing array is read-only.
    """

    values: np.ndarray
    nodata_count: int = 0

    def __post_init__(self) -> None:
        arr = _flat_float32(self.values, copy=True)
        arr.setflags(write=False)
        object.__setattr__(self, 'values', arr)

    @classmethod
    def from_values(
        cls,
        values: Sequence[float] | np.ndarray,
        *,
        nodata_count: int = 0,
    ) -> ElevationField:
        return cls(np.asarray(values, dtype=np.float32), nodata_count=nodata_count)

    def __len__(self) -> int:
        return FIELD_LENGTH

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElevationField):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def at(self, x: int, y: int) -> float:
        """Elevation at column ``x``, row ``y``."""
        if not (0 <= x < FIELD_SIZE and 0 <= y < FIELD_SIZE):
            msg = f'Field coordinate out of range: ({x}, {y})'
            raise IndexError(msg)
        return float(self.values[field_index(x, y)])

    def sample(self, px: float, py: float) -> float:
        """
        Bilinear elevation at fractional pixel position (``px``, ``py``).

        Both neighbours are clamped to SAMPLE_MAX_INDEX, so the last row
        and column of the field are never read.
        """
        xi = math.floor(px)
        yi = math.floor(py)
        xf = px - xi
        yf = py - yi

        x0 = min(max(xi, 0), SAMPLE_MAX_INDEX)
        x1 = min(max(xi + 1, 0), SAMPLE_MAX_INDEX)
        y0 = min(max(yi, 0), SAMPLE_MAX_INDEX)
        y1 = min(max(yi + 1, 0), SAMPLE_MAX_INDEX)

        v = self.values
        e00 = float(v[field_index(x0, y0)])
        e10 = float(v[field_index(x1, y0)])
        e01 = float(v[field_index(x0, y1)])
        e11 = float(v[field_index(x1, y1)])

        top = e00 * (1.0 - xf) + e10 * xf
        bottom = e01 * (1.0 - xf) + e11 * xf
        return top * (1.0 - yf) + bottom * yf

    def as_grid(self) -> np.ndarray:
        """Read-only (rows, cols) view of the field."""
        return self.values.reshape(FIELD_SIZE, FIELD_SIZE)

    @property
    def min_elevation(self) -> float:
        return float(self.values.min())

    @property
    def max_elevation(self) -> float:
        return float(self.values.max())
