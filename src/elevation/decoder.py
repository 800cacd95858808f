"""Decoders for raw elevation tiles (RGB-packed images and delimited text).

Both decoders are all-or-nothing: they either return a complete
ElevationField or raise a TerrainMeshError subclass.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image

from elevation.field import ElevationField
from shared.constants import (
    FIELD_LENGTH,
    FIELD_SIZE,
    NODATA_FILL_M,
    PNG_EXTENSIONS,
    PNG_SIGNATURE,
    RGB_ELEVATION_OFFSET,
    RGB_ELEVATION_SCALE,
    RGB_NODATA_VALUE,
    TXT_EXTENSIONS,
    TXT_NODATA_TOKEN,
    TXT_SEPARATOR,
    TileFormat,
)
from shared.errors import FormatError, ShapeError

logger = logging.getLogger(__name__)


def _open_rgb(data: bytes) -> Image.Image:
    # Pillow reports corrupt chunks as SyntaxError, both on open and on load
    try:
        img = Image.open(BytesIO(data))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        msg = f'Failed to read PNG: {e}'
        raise FormatError(msg) from e

    width, height = img.size
    if width != FIELD_SIZE or height != FIELD_SIZE:
        msg = (
            f'Invalid image size: {width}x{height}, '
            f'expected {FIELD_SIZE}x{FIELD_SIZE}'
        )
        raise ShapeError(msg)

    try:
        return img.convert('RGB')
    except (OSError, SyntaxError, ValueError) as e:
        msg = f'Failed to decode PNG: {e}'
        raise FormatError(msg) from e


def decode_rgb_elevation(rgb: np.ndarray) -> tuple[np.ndarray, int]:
    """
    Convert an (H, W, 3) uint8 array to elevations in meters.

    elevation = (R*256^2 + G*256 + B) * 0.01 - 10000, with the packed value
    2^23 treated as no-data and replaced by NODATA_FILL_M.

    Returns (flat float32 elevations in row-major order, no-data count).
    """
    rgb = rgb.astype(np.uint32)
    combined = (rgb[:, :, 0] << 16) | (rgb[:, :, 1] << 8) | rgb[:, :, 2]
    nodata = combined == RGB_NODATA_VALUE
    elevation = combined.astype(np.float64) * RGB_ELEVATION_SCALE + RGB_ELEVATION_OFFSET
    elevation[nodata] = NODATA_FILL_M
    return elevation.astype(np.float32).reshape(-1), int(nodata.sum())


def decode_png(data: bytes) -> ElevationField:
    """
    Decode an RGB-packed elevation image into an ElevationField.

    Any format Pillow can read is accepted; the image must be 256x256.
    Raises FormatError for unreadable bytes and ShapeError for wrong size.
    """
    img = _open_rgb(data)
    values, nodata_count = decode_rgb_elevation(np.asarray(img, dtype=np.uint8))
    logger.debug(
        'Decoded image tile: %d values, %d no-data', values.size, nodata_count
    )
    return ElevationField(values, nodata_count=nodata_count)


def _parse_token(token: str) -> float | None:
    """Parse one text token; None marks no-data."""
    if token == TXT_NODATA_TOKEN:
        return None
    if '_' in token:
        # float() accepts digit separators, the tile format does not
        msg = f'Failed to parse elevation value: {token}'
        raise FormatError(msg)
    try:
        return float(token)
    except ValueError:
        msg = f'Failed to parse elevation value: {token}'
        raise FormatError(msg) from None


def decode_txt(data: str | bytes) -> ElevationField:
    """
    Decode comma-separated text (256 lines x 256 values) into an ElevationField.

    Blank lines are skipped, tokens are trimmed and ``e`` means no-data.
    Raises FormatError for a non-numeric token and ShapeError when the
    total number of values is not 65536.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode('utf-8')
        except UnicodeDecodeError as e:
            msg = f'Text tile is not valid UTF-8: {e}'
            raise FormatError(msg) from e

    values: list[float] = []
    nodata_count = 0
    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        for raw_token in line.split(TXT_SEPARATOR):
            value = _parse_token(raw_token.strip())
            if value is None:
                nodata_count += 1
                value = NODATA_FILL_M
            values.append(value)

    if len(values) != FIELD_LENGTH:
        msg = (
            f'Invalid number of elevation values: {len(values)}, '
            f'expected {FIELD_LENGTH}'
        )
        raise ShapeError(msg)

    logger.debug(
        'Decoded text tile: %d values, %d no-data', len(values), nodata_count
    )
    return ElevationField.from_values(values, nodata_count=nodata_count)


def sniff_format(data: str | bytes) -> TileFormat:
    """Guess the tile encoding from its leading bytes."""
    if isinstance(data, bytes) and data.startswith(PNG_SIGNATURE):
        return TileFormat.PNG
    return TileFormat.TXT


def decode_tile(
    data: str | bytes,
    fmt: TileFormat | str | None = None,
) -> ElevationField:
    """Decode a tile payload, sniffing the encoding when ``fmt`` is None."""
    if fmt is None:
        fmt = sniff_format(data)
    try:
        fmt = TileFormat(fmt.lower())
    except (AttributeError, ValueError):
        msg = f'Unknown tile format: {fmt!r}'
        raise FormatError(msg) from None

    if fmt is TileFormat.PNG:
        if isinstance(data, str):
            msg = 'Image tiles must be passed as bytes'
            raise FormatError(msg)
        return decode_png(data)
    return decode_txt(data)


def decode_file(path: str | Path) -> ElevationField:
    """Read a tile from disk and decode it (format chosen by extension)."""
    p = Path(path)
    data = p.read_bytes()
    suffix = p.suffix.lower()
    if suffix in PNG_EXTENSIONS:
        fmt: TileFormat | None = TileFormat.PNG
    elif suffix in TXT_EXTENSIONS:
        fmt = TileFormat.TXT
    else:
        fmt = None
    logger.debug(
        'Decoding tile file %s (format=%s)', p, fmt.value if fmt else 'auto'
    )
    return decode_tile(data, fmt)
