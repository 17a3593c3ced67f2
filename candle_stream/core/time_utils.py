"""Time helpers for consistent epoch timestamps across the engine."""

import time


def epoch_seconds() -> float:
    """Return seconds since the Unix epoch."""

    return time.time()
