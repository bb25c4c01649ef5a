"""
Tests for the sliding window filter and the window selector scales.
"""
import pytest

from core.models.window import WindowScale, parse_scale, resolve_window, scale_steps, window_seconds
from core.processing.normalizer import normalize_snapshot
from core.processing.window_filter import filter_window


def make_series(*timestamps: int):
    return normalize_snapshot({str(ts): {"temperature": float(ts)} for ts in timestamps})


class TestFilterWindow:
    """Test filter_window"""

    def test_scenario_keeps_recent_reading(self) -> None:
        """now=1150, window=100: only the 1100 reading is kept"""
        series = normalize_snapshot({"1000": {"temperature": 20}, "1100": {"temperature": 21}})
        result = filter_window(series, 100, 1150)
        assert [r.timestamp for r in result] == [1100]
        assert result[0].scalars.temperature == 21.0

    def test_boundary_is_inclusive(self) -> None:
        """now - ts == window is kept"""
        series = make_series(1000, 1050, 1100)
        assert [r.timestamp for r in filter_window(series, 100, 1150)] == [1050, 1100]

    def test_window_covers_everything(self) -> None:
        series = make_series(1000, 1100, 1200)
        assert filter_window(series, 10_000, 1200) == series

    def test_window_covers_nothing(self) -> None:
        """An empty result is valid, not an error"""
        series = make_series(1000, 1100)
        assert filter_window(series, 60, 5000) == ()

    def test_empty_series(self) -> None:
        assert filter_window((), 900, 1000) == ()

    def test_future_readings_are_kept(self) -> None:
        """Readings stamped after now satisfy now - ts <= window"""
        series = make_series(1000, 2000)
        assert [r.timestamp for r in filter_window(series, 50, 1020)] == [1000, 2000]

    def test_input_not_modified(self) -> None:
        series = make_series(1000, 1100, 1200)
        filter_window(series, 50, 1200)
        assert [r.timestamp for r in series] == [1000, 1100, 1200]

    def test_different_now_values(self) -> None:
        """Same series, different now: pure function"""
        series = make_series(1000, 1100, 1200, 1300)
        assert len(filter_window(series, 100, 1300)) == 2
        assert len(filter_window(series, 100, 1400)) == 1
        assert len(filter_window(series, 100, 1300)) == 2

    @pytest.mark.parametrize("window", [0, 1, 50, 99, 100, 150, 250, 400, 1000])
    @pytest.mark.parametrize("now", [1000, 1150, 1300, 1500])
    def test_threshold_and_contiguity(self, window: int, now: int) -> None:
        """Kept readings satisfy the threshold, dropped ones violate it, kept is a suffix"""
        series = make_series(900, 1000, 1100, 1150, 1200, 1300)
        result = filter_window(series, window, now)
        assert all(now - r.timestamp <= window for r in result)
        dropped = series[:len(series) - len(result)]
        assert all(now - r.timestamp > window for r in dropped)
        assert tuple(series[len(series) - len(result):]) == result

    @pytest.mark.parametrize("window", [0, 100, 250, 10_000])
    def test_idempotent(self, window: int) -> None:
        series = make_series(900, 1000, 1100, 1200)
        once = filter_window(series, window, 1200)
        assert filter_window(once, window, 1200) == once


class TestWindowScales:
    """Test window selector ordinals"""

    def test_full_scale(self) -> None:
        assert [window_seconds(i) for i in range(6)] == [900, 3600, 14400, 43200, 86400, 604800]

    def test_compact_scale(self) -> None:
        """Compact scale omits the 4h and 12h steps"""
        assert [window_seconds(i, WindowScale.COMPACT) for i in range(4)] == [900, 3600, 86400, 604800]

    def test_labels(self) -> None:
        assert [d.label for d in scale_steps(WindowScale.FULL)] == ["15m", "1h", "4h", "12h", "1d", "1w"]

    @pytest.mark.parametrize("ordinal", [-1, 6, 100])
    def test_invalid_full_ordinal(self, ordinal: int) -> None:
        with pytest.raises(ValueError, match="Invalid window"):
            resolve_window(ordinal, WindowScale.FULL)

    def test_invalid_compact_ordinal(self) -> None:
        with pytest.raises(ValueError):
            resolve_window(4, WindowScale.COMPACT)

    def test_parse_scale(self) -> None:
        assert parse_scale("FULL") == WindowScale.FULL
        assert parse_scale("compact") == WindowScale.COMPACT
        with pytest.raises(ValueError, match="Invalid scale"):
            parse_scale("huge")
