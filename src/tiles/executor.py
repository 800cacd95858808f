from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from elevation.decoder import decode_file
from mesh.builder import TerrainMeshBuilder
from shared.errors import TerrainMeshError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from domain.models import MeshSettings
    from mesh.models import Mesh

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileResult:
    """Outcome of decoding and meshing one tile file."""

    path: Path
    mesh: Mesh | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_tiles(
    jobs: Iterable[object],
    *,
    concurrency: int,
    process_tile: Callable[[int, object], Awaitable[None]],
    progress_step: Callable[[int], Awaitable[None]] | None = None,
) -> None:
    """
    Run ``process_tile(idx, job)`` for every job, at most ``concurrency`` at once.

    Exceptions from process_tile propagate after all jobs have finished.
    """
    sem = asyncio.Semaphore(max(1, int(concurrency)))

    async def worker(idx: int, job: object) -> None:
        async with sem:
            await process_tile(idx, job)
        if progress_step:
            await progress_step(1)

    results = await asyncio.gather(
        *(worker(i, job) for i, job in enumerate(jobs)),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result


def _decode_and_build(path: Path, builder: TerrainMeshBuilder, lod) -> Mesh:
    field = decode_file(path)
    return builder.build(field, lod)


async def build_tiles(
    paths: Iterable[str | Path],
    settings: MeshSettings,
    *,
    progress_step: Callable[[int], Awaitable[None]] | None = None,
) -> list[TileResult]:
    """
    Decode and mesh tile files concurrently.

    Each tile runs in a worker thread; results come back in input order.
    A failing tile is reported in its TileResult and does not stop the batch.
    """
    tile_paths = [Path(p) for p in paths]
    builder = TerrainMeshBuilder.from_settings(settings)
    results: list[TileResult | None] = [None] * len(tile_paths)

    async def process_tile(idx: int, job: object) -> None:
        path = tile_paths[idx]
        try:
            mesh = await asyncio.to_thread(
                _decode_and_build, path, builder, settings.lod
            )
        except (TerrainMeshError, OSError) as e:
            logger.warning('Tile %s failed: %s', path, e)
            results[idx] = TileResult(path=path, error=str(e))
        else:
            results[idx] = TileResult(path=path, mesh=mesh)

    await run_tiles(
        tile_paths,
        concurrency=settings.concurrency,
        process_tile=process_tile,
        progress_step=progress_step,
    )
    return [r for r in results if r is not None]
