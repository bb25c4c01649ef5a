"""
Sliding window filter over an ascending series.
"""
from bisect import bisect_left

from core.models.reading import Series


def filter_window(series: Series, window_seconds: float, now: float) -> Series:
    """
    Keep the readings with ``now - timestamp <= window_seconds``.

    The series is ascending, so the kept readings form a contiguous suffix.
    Pure: ``now`` is always supplied by the caller.
    """
    cutoff = now - window_seconds
    start = bisect_left(series, cutoff, key=lambda reading: reading.timestamp)
    if start == 0:
        return tuple(series)
    return tuple(series[start:])
