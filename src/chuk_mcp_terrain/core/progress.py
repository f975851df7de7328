"""
Best-effort progress reporting.

Atlas builds and tile loads push human-readable status lines to an optional
callback. A failing callback is logged and ignored; it never aborts the data
operation that reported the progress.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def report(progress: ProgressCallback | None, message: str) -> bool:
    """Log a progress line and forward it to the callback, if any.

    Returns True if the callback was set and called without exceptions.
    """
    logger.debug(message)
    if progress is None:
        return False
    try:
        progress(message)
    except Exception as e:
        logger.warning(f"Progress callback failed: {e}")
        return False
    return True
