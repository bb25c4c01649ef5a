"""Pytest configuration and fixtures for test suite."""

import pytest
from core.config_loader import config_loader
from core.event_hub import event_hub
from core.services.chart_service import chart_service
from core.services.feed_views import overview_feed_view, sensor_feed_view
from core.services.selection_store import SelectionStore
from core.services.sensor_registry import sensor_registry
from core.services.visibility_controller import visibility_controller


@pytest.fixture(autouse=True)
def reset_global_state(tmp_path):
    """Give every test a fresh feed, registry, visibility state and selection store.

    The selection store is redirected to a temporary file so tests never
    touch the project's storage directory.
    """
    event_hub.init(None)
    event_hub.clear_retained()

    sensor_registry.store = SelectionStore(tmp_path / "selection.json")
    sensor_feed_view.reset()
    sensor_feed_view.open()
    overview_feed_view.open()

    visibility_controller.reset()
    chart_config = config_loader.get_chart_config()
    chart_service.set_detail_window(chart_config.detail_window)
    chart_service.set_overview_window(chart_config.overview_window)

    yield

    event_hub.clear_retained()


@pytest.fixture
def selection_store(tmp_path):
    """A selection store backed by its own temporary file."""
    return SelectionStore(tmp_path / "store" / "selection.json")
