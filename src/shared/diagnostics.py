"""Memory snapshots logged around a tile batch."""

import logging

import psutil

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def memory_snapshot() -> dict[str, float]:
    """Process RSS and system available memory, in MB."""
    rss = psutil.Process().memory_info().rss
    available = psutil.virtual_memory().available
    return {
        'rss_mb': round(rss / _MB, 1),
        'available_mb': round(available / _MB, 1),
    }


def log_memory_usage(
    context: str,
    baseline: dict[str, float] | None = None,
) -> dict[str, float] | None:
    """
    Log current memory usage and return the snapshot.

    With ``baseline`` (an earlier snapshot) the RSS growth since then is
    logged too. Returns None when psutil cannot read the process.
    """
    try:
        snapshot = memory_snapshot()
    except psutil.Error as e:
        logger.warning('Memory usage (%s) unavailable: %s', context, e)
        return None

    if baseline is None:
        logger.info(
            'Memory usage (%s): RSS=%.1fMB, available=%.1fMB',
            context,
            snapshot['rss_mb'],
            snapshot['available_mb'],
        )
    else:
        logger.info(
            'Memory usage (%s): RSS=%.1fMB (%+.1fMB), available=%.1fMB',
            context,
            snapshot['rss_mb'],
            snapshot['rss_mb'] - baseline['rss_mb'],
            snapshot['available_mb'],
        )
    return snapshot
