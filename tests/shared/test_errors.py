"""Tests for shared error types and version string."""

import pytest

from shared.errors import FormatError, ParameterError, ShapeError, TerrainMeshError
from shared.version import get_version


class TestErrors:
    """Tests for the error hierarchy."""

    @pytest.mark.parametrize('cls', [FormatError, ShapeError, ParameterError])
    def test_subclass_of_base(self, cls):
        assert issubclass(cls, TerrainMeshError)
        assert issubclass(cls, ValueError)

    def test_catch_as_value_error(self):
        with pytest.raises(ValueError, match='bad'):
            raise ShapeError('bad')


def test_version_string():
    assert get_version() == 'terrain-mesher v0.3.0'
