import logging
import os
from pathlib import Path

import tomlkit

from domain.models import MeshSettings
from shared.constants import PROFILES_DIR, PROFILES_DIR_ENV, USER_DATA_DIRNAME

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) $TERRAIN_MESHER_PROFILES_DIR when set.
    2) <project_root>/configs/profiles if it exists (run-from-repo setups).
    3) Otherwise ~/.terrain_mesher/profiles.
    """
    env_dir = os.getenv(PROFILES_DIR_ENV)
    if env_dir:
        return Path(env_dir)

    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / PROFILES_DIR
    if local_profiles.exists():
        return local_profiles

    return Path.home() / USER_DATA_DIRNAME / 'profiles'


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Profile names without extension."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    return ensure_profiles_dir() / f'{name}.toml'


def load_profile(name_or_path: str) -> MeshSettings:
    """
    Load and validate a TOML profile into MeshSettings.

    Accepts a profile name (without .toml) from the profiles directory or
    a path to a TOML file.
    """
    p = Path(name_or_path)
    path = (
        p if p.suffix.lower() == '.toml' and p.exists() else profile_path(name_or_path)
    )
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
    settings = MeshSettings.model_validate(data)
    logger.info(
        'Loaded profile %s: lod=%s tile_size=%s',
        path.name,
        settings.lod.name,
        settings.tile_size,
    )
    return settings


def save_profile(name: str, settings: MeshSettings) -> Path:
    """Write settings to a TOML profile (no atomic replace, no backups)."""
    path = profile_path(name)
    text = tomlkit.dumps(settings.model_dump())
    path.write_text(text, encoding='utf-8')
    logger.info('Saved profile %s', path)
    return path


def delete_profile(name: str) -> None:
    """Remove the profile file if it exists."""
    path = profile_path(name)
    if path.exists():
        path.unlink()
