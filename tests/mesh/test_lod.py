"""Tests for mesh.lod module."""

import pytest

from mesh.lod import LOD_STRIDES, LODLevel, grid_size_for_stride, resolve_lod
from shared.errors import ParameterError


class TestLODLevel:
    """Tests for LODLevel enum."""

    def test_values(self):
        assert LODLevel.FAR == 0
        assert LODLevel.MID == 1
        assert LODLevel.NEAR == 2

    def test_strides(self):
        assert LODLevel.FAR.stride == 8
        assert LODLevel.MID.stride == 4
        assert LODLevel.NEAR.stride == 2

    def test_grid_sizes(self):
        """Grid includes the far edge row/column."""
        assert LODLevel.FAR.grid_size == 33
        assert LODLevel.MID.grid_size == 65
        assert LODLevel.NEAR.grid_size == 129

    def test_every_level_has_stride(self):
        for level in LODLevel:
            assert level in LOD_STRIDES

    def test_grid_size_for_stride(self):
        assert grid_size_for_stride(1) == 257


class TestResolveLod:
    """Tests for resolve_lod function."""

    def test_enum_passthrough(self):
        assert resolve_lod(LODLevel.MID) is LODLevel.MID

    @pytest.mark.parametrize(
        ('value', 'expected'),
        [
            (0, LODLevel.FAR),
            (1, LODLevel.MID),
            (2, LODLevel.NEAR),
            ('far', LODLevel.FAR),
            ('Mid', LODLevel.MID),
            (' NEAR ', LODLevel.NEAR),
            ('2', LODLevel.NEAR),
        ],
    )
    def test_accepted(self, value, expected):
        assert resolve_lod(value) is expected

    @pytest.mark.parametrize('value', [3, -1, 255, 'ultra', '', '7', 1.0, None, True])
    def test_rejected(self, value):
        with pytest.raises(ParameterError):
            resolve_lod(value)
