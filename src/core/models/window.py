"""
Window selector scales: ordinal positions of the time range slider mapped to
trailing durations in seconds.
"""
from enum import Enum
from typing import Dict, List


class WindowDuration(Enum):
    """Enum for trailing window durations in seconds"""
    DURATION_15MIN = 900
    DURATION_1H = 3600
    DURATION_4H = 14400
    DURATION_12H = 43200
    DURATION_1D = 86400
    DURATION_1W = 604800

    def value_seconds(self) -> int:
        """Get duration in seconds"""
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    WindowDuration.DURATION_15MIN: "15m",
    WindowDuration.DURATION_1H: "1h",
    WindowDuration.DURATION_4H: "4h",
    WindowDuration.DURATION_12H: "12h",
    WindowDuration.DURATION_1D: "1d",
    WindowDuration.DURATION_1W: "1w",
}


class WindowScale(Enum):
    """Available slider scales."""
    FULL = "full"
    COMPACT = "compact"  # no 4h / 12h steps


_SCALE_STEPS: Dict[WindowScale, List[WindowDuration]] = {
    WindowScale.FULL: list(WindowDuration),
    WindowScale.COMPACT: [
        WindowDuration.DURATION_15MIN,
        WindowDuration.DURATION_1H,
        WindowDuration.DURATION_1D,
        WindowDuration.DURATION_1W,
    ],
}


def scale_steps(scale: WindowScale) -> List[WindowDuration]:
    """Durations of a scale, in slider order."""
    return list(_SCALE_STEPS[scale])


def resolve_window(ordinal: int, scale: WindowScale = WindowScale.FULL) -> WindowDuration:
    """
    Map a slider ordinal to its duration.

    Raises:
        ValueError: if the ordinal is outside the scale.
    """
    steps = _SCALE_STEPS[scale]
    if isinstance(ordinal, bool) or not isinstance(ordinal, int) or not 0 <= ordinal < len(steps):
        raise ValueError(
            f"Invalid window: {ordinal}. Allowed values are: {list(range(len(steps)))}"
        )
    return steps[ordinal]


def window_seconds(ordinal: int, scale: WindowScale = WindowScale.FULL) -> int:
    """Trailing duration in seconds for a slider ordinal."""
    return resolve_window(ordinal, scale).value_seconds()


def parse_scale(name: str) -> WindowScale:
    """Parse a scale name case-insensitively."""
    try:
        return WindowScale(name.lower())
    except ValueError:
        raise ValueError(
            f"Invalid scale: {name}. Allowed values are: {[s.value for s in WindowScale]}"
        )
