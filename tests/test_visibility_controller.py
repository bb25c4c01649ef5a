"""
Tests for channel group visibility.
"""
from dataclasses import replace

import pytest

from core.models.channel import BROADBAND_GROUP, CHANNEL_CATALOG, SPECTRAL_GROUP
from core.processing.channel_transformer import transform_series
from core.processing.normalizer import normalize_snapshot
from core.services.visibility_controller import VisibilityController


def hidden_by_label(controller: VisibilityController) -> dict:
    return {c.label: c.hidden for c in controller.apply_visibility(transform_series(()))}


class TestVisibilityController:
    """Test VisibilityController"""

    def test_initial_state(self) -> None:
        """Grouped channels start hidden, base channels are visible"""
        controller = VisibilityController()
        state = hidden_by_label(controller)
        for definition in CHANNEL_CATALOG:
            assert state[definition.label] is (definition.group_id is not None)
        assert controller.groups() == {BROADBAND_GROUP: True, SPECTRAL_GROUP: True}

    def test_toggle_shows_group(self) -> None:
        controller = VisibilityController()
        assert controller.toggle_group(BROADBAND_GROUP) is True
        state = hidden_by_label(controller)
        assert state["TSL2591 Lux"] is False
        assert state["TSL2591 IR"] is False
        assert state["AS7341 NIR"] is True
        assert controller.groups() == {BROADBAND_GROUP: False, SPECTRAL_GROUP: True}

    @pytest.mark.parametrize("group_id", [BROADBAND_GROUP, SPECTRAL_GROUP])
    def test_double_toggle_restores_state(self, group_id: str) -> None:
        """Toggling twice restores every flag, and other groups never change"""
        controller = VisibilityController()
        before = hidden_by_label(controller)
        controller.toggle_group(group_id)
        middle = hidden_by_label(controller)
        for definition in CHANNEL_CATALOG:
            if definition.group_id == group_id:
                assert middle[definition.label] != before[definition.label]
            else:
                assert middle[definition.label] == before[definition.label]
        controller.toggle_group(group_id)
        assert hidden_by_label(controller) == before

    def test_unknown_group_is_noop(self) -> None:
        controller = VisibilityController()
        before = hidden_by_label(controller)
        assert controller.toggle_group("nope") is False
        assert hidden_by_label(controller) == before

    def test_base_channels_always_visible(self) -> None:
        controller = VisibilityController()
        controller.toggle_group(BROADBAND_GROUP)
        controller.toggle_group(SPECTRAL_GROUP)
        controller.toggle_group(SPECTRAL_GROUP)
        state = hidden_by_label(controller)
        assert state["Temperature (°C)"] is False
        assert state["Soil Moisture (%)"] is False

    def test_state_survives_dataset_rebuild(self) -> None:
        """Rebuilding channel series does not reset the flags"""
        controller = VisibilityController()
        controller.toggle_group(SPECTRAL_GROUP)
        first = controller.apply_visibility(transform_series(normalize_snapshot({"1000": {}})))
        second = controller.apply_visibility(transform_series(normalize_snapshot({"1000": {}, "1100": {}})))
        assert [c.hidden for c in first] == [c.hidden for c in second]
        assert next(c for c in second if c.label == "AS7341 415NM").hidden is False

    def test_label_matching_is_case_insensitive(self) -> None:
        controller = VisibilityController()
        controller.toggle_group(BROADBAND_GROUP)
        channel = next(c for c in transform_series(()) if c.label == "TSL2591 Lux")
        assert controller.apply_visibility([replace(channel, label="TSL2591 LUX")])[0].hidden is False

    def test_apply_leaves_other_fields_untouched(self) -> None:
        controller = VisibilityController()
        channels = transform_series(normalize_snapshot({"1000": {"tsl2591": {"lux": 3.0}}}))
        applied = controller.apply_visibility(channels)
        for original, result in zip(channels, applied):
            assert replace(result, hidden=original.hidden) == original

    def test_reset(self) -> None:
        controller = VisibilityController()
        controller.toggle_group(BROADBAND_GROUP)
        controller.reset()
        assert controller.groups() == {BROADBAND_GROUP: True, SPECTRAL_GROUP: True}
