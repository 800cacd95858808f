"""Domain layer - settings model and profiles."""
from domain.models import MeshSettings
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'MeshSettings',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
]
