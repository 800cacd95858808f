"""Command line entry point: decode elevation tiles and export terrain meshes."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from domain.models import MeshSettings
from domain.profiles import load_profile
from mesh.export import export_mesh
from shared.constants import LOG_FILENAME, USER_DATA_DIRNAME, ExportFormat
from shared.diagnostics import log_memory_usage
from shared.progress import ConsoleProgress
from shared.version import get_version
from tiles.executor import build_tiles

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False, log_dir: Path | None = None) -> Path:
    """Configure logging to stdout and a file in the user log directory.

    Returns:
        Path of the log file.
    """
    log_dir = log_dir or Path.home() / USER_DATA_DIRNAME / 'log'
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(str(log_file), encoding='utf-8'),
        ],
        force=True,
    )
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='terrain-mesher',
        description='Decode elevation tiles (PNG or text) into terrain meshes',
    )
    parser.add_argument('inputs', nargs='+', type=Path, help='Tile files')
    parser.add_argument(
        '--profile', help='Profile name or path to a TOML settings file'
    )
    parser.add_argument(
        '--lod', help='Level of detail: far, mid, near (or 0-2)'
    )
    parser.add_argument('--tile-size', type=float, help='Tile span in world units')
    parser.add_argument(
        '--exaggeration', type=float, help='Vertical exaggeration factor'
    )
    parser.add_argument(
        '--format',
        dest='export_format',
        choices=[f.value for f in ExportFormat],
        help='Output format',
    )
    parser.add_argument(
        '--concurrency', type=int, help='Tiles processed in parallel'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        help='Directory for meshes (default: next to each input)',
    )
    parser.add_argument('--log-dir', type=Path, help='Directory for the log file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--version', action='version', version=get_version())
    return parser


def resolve_settings(args: argparse.Namespace) -> MeshSettings:
    """Profile values (or defaults) overridden by explicit CLI flags."""
    settings = load_profile(args.profile) if args.profile else MeshSettings()
    overrides = {
        'lod': args.lod,
        'tile_size': args.tile_size,
        'vertical_exaggeration': args.exaggeration,
        'export_format': args.export_format,
        'concurrency': args.concurrency,
    }
    data = settings.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return MeshSettings.model_validate(data)


def output_path_for(
    input_path: Path, settings: MeshSettings, output_dir: Path | None
) -> Path:
    name = f'{input_path.stem}_{settings.lod.name.lower()}.{settings.export_format.value}'
    return (output_dir or input_path.parent) / name


def _unique_path(path: Path, taken: set[Path]) -> Path:
    """``path``, or ``stem_2``, ``stem_3``... when already used in this batch."""
    candidate = path
    n = 2
    while candidate in taken:
        candidate = path.with_name(f'{path.stem}_{n}{path.suffix}')
        n += 1
    return candidate


async def run(args: argparse.Namespace, settings: MeshSettings) -> int:
    progress = ConsoleProgress(total=len(args.inputs), label='Tiles')
    try:
        results = await build_tiles(
            args.inputs, settings, progress_step=progress.step
        )
    finally:
        progress.close()

    failed = 0
    written: set[Path] = set()
    for result in results:
        if result.mesh is None:
            failed += 1
            logger.error('Skipped %s: %s', result.path, result.error)
            continue
        planned = output_path_for(result.path, settings, args.output_dir)
        out = _unique_path(planned, written)
        if out != planned:
            logger.warning(
                'Output %s already written by this batch, using %s', planned, out
            )
        try:
            export_mesh(result.mesh, out, settings.export_format)
        except OSError as e:
            failed += 1
            logger.error('Failed to write %s: %s', out, e)
            continue
        written.add(out)
        logger.info(
            'Wrote %s (%d vertices, %d triangles)',
            out,
            result.mesh.vertex_count,
            result.mesh.triangle_count,
        )

    logger.info('Done: %d ok, %d failed', len(results) - failed, failed)
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)
    logger.info('Starting %s', get_version())

    try:
        settings = resolve_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error('Invalid settings: %s', e)
        return 2

    baseline = log_memory_usage('before batch')
    result = asyncio.run(run(args, settings))
    log_memory_usage('after batch', baseline)
    return result


if __name__ == '__main__':
    sys.exit(main())
