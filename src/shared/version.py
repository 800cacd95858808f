from shared.constants import APP_NAME, APP_VERSION


def get_version() -> str:
    """Return the identity string, e.g. ``terrain-mesher v0.3.0``."""
    return f'{APP_NAME} v{APP_VERSION}'
