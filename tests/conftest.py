"""Pytest configuration and fixtures for terrain mesher tests."""

import sys
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


def encode_rgb(combined: np.ndarray) -> np.ndarray:
    """Pack 24-bit values into an (H, W, 3) uint8 RGB array."""
    combined = np.asarray(combined, dtype=np.uint32)
    rgb = np.stack(
        [(combined >> 16) & 0xFF, (combined >> 8) & 0xFF, combined & 0xFF],
        axis=-1,
    )
    return rgb.astype(np.uint8)


def png_bytes(rgb: np.ndarray, fmt: str = 'PNG') -> bytes:
    buf = BytesIO()
    Image.fromarray(np.asarray(rgb, dtype=np.uint8)).save(buf, format=fmt)
    return buf.getvalue()


def text_tile(rows: list[list[str]]) -> str:
    return '\n'.join(','.join(row) for row in rows) + '\n'


@pytest.fixture
def make_png():
    """Factory: 2D array of packed 24-bit values -> PNG bytes."""

    def _make(combined: np.ndarray, fmt: str = 'PNG') -> bytes:
        return png_bytes(encode_rgb(combined), fmt=fmt)

    return _make


@pytest.fixture
def rgb_png():
    """Factory: raw (H, W, C) uint8 array -> PNG bytes."""
    return png_bytes


@pytest.fixture
def make_text():
    """Factory: 2D array of floats (or tokens) -> text tile."""

    def _make(values) -> str:
        return text_tile([[str(v) for v in row] for row in values])

    return _make


@pytest.fixture
def flat_heights() -> np.ndarray:
    return np.zeros(256 * 256, dtype=np.float32)


@pytest.fixture
def ramp_heights() -> np.ndarray:
    """Elevation rising along x, with a bump along y."""
    ys, xs = np.mgrid[0:256, 0:256]
    heights = xs * 0.5 + np.sin(ys / 20.0) * 10.0
    return heights.astype(np.float32).reshape(-1)


def break_second_idat(data: bytes) -> bytes:
    """Overwrite the type of the second IDAT chunk with non-ASCII bytes.

    Pillow opens such a file fine and fails only while loading pixels,
    with SyntaxError('broken PNG file (chunk ...)').
    """
    out = bytearray(data)
    pos = 8
    seen = 0
    while pos + 8 <= len(out):
        length = int.from_bytes(out[pos : pos + 4], 'big')
        if out[pos + 4 : pos + 8] == b'IDAT':
            seen += 1
            if seen == 2:
                out[pos + 4 : pos + 8] = b'\xd8\xc4\xfb1'
                return bytes(out)
        pos += 12 + length
    msg = 'PNG has fewer than two IDAT chunks'
    raise AssertionError(msg)


@pytest.fixture
def corrupt_png():
    """256x256 noise PNG (several IDAT chunks) with a broken chunk header."""
    rng = np.random.default_rng(0)
    noise = rng.integers(0, 256, size=(256, 256, 3), dtype=np.uint8)
    return break_second_idat(png_bytes(noise))
