from pydantic import BaseModel, field_serializer, field_validator

from mesh.lod import LODLevel, resolve_lod
from shared.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_TILE_SIZE,
    DEFAULT_VERTICAL_EXAGGERATION,
    MAX_CONCURRENCY,
    ExportFormat,
)
from shared.errors import ParameterError


class MeshSettings(BaseModel):
    """Settings for decoding tiles and building meshes, stored in profiles."""

    model_config = {
        'extra': 'ignore',  # ignore unknown keys from older profiles
    }

    # Span of one tile in world units (X and Z)
    tile_size: float = DEFAULT_TILE_SIZE
    # Level of detail for generated meshes
    lod: LODLevel = LODLevel.NEAR
    # Height multiplier
    vertical_exaggeration: float = DEFAULT_VERTICAL_EXAGGERATION
    # Tiles processed in parallel by the batch executor
    concurrency: int = DEFAULT_CONCURRENCY
    # Output format for exported meshes
    export_format: ExportFormat = ExportFormat.NPZ

    @field_validator('tile_size', 'vertical_exaggeration')
    @classmethod
    def validate_positive(cls, v: float | str) -> float:
        fv = float(v)
        if not (fv > 0.0 and fv != float('inf')):
            msg = 'Value must be a positive finite number'
            raise ValueError(msg)
        return fv

    @field_validator('lod', mode='before')
    @classmethod
    def validate_lod(cls, v: object) -> LODLevel:
        try:
            return resolve_lod(v)  # type: ignore[arg-type]
        except ParameterError as e:
            raise ValueError(str(e)) from None

    @field_validator('concurrency')
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        # Clamp into 1..MAX_CONCURRENCY
        v = max(int(v), 1)
        return min(v, MAX_CONCURRENCY)

    @field_validator('export_format', mode='before')
    @classmethod
    def validate_export_format(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @field_serializer('lod')
    def serialize_lod(self, lod: LODLevel) -> str:
        # Profiles store the readable name
        return lod.name.lower()

    @field_serializer('export_format')
    def serialize_export_format(self, fmt: ExportFormat) -> str:
        return fmt.value
