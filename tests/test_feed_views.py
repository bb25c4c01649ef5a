"""
Tests for feed publishing and the consuming views' subscription lifecycle.
"""
from core.event_hub import EventHub
from core.services.feed_publisher import SENSORS_PATH, FeedPublisher, reading_path
from core.services.feed_views import OverviewFeedView, SensorFeedView
from core.services.sensor_registry import SensorRegistry


def make_feed(selection_store, persisted=None):
    if persisted is not None:
        selection_store.set(persisted)
    hub = EventHub()
    registry = SensorRegistry(selection_store)
    view = SensorFeedView(hub, registry)
    view.open()
    return hub, FeedPublisher(hub), registry, view


TREE = {
    "sensorB": {"1000": {"temperature": 20}, "1100": {"temperature": 21}},
    "sensorA": {"1000": {"temperature": 10}},
}


class TestFeedPublisher:
    """Test FeedPublisher paths"""

    def test_publish_all_retains_every_path(self) -> None:
        hub = EventHub()
        FeedPublisher(hub).publish_all(TREE)
        assert hub.get_retained(SENSORS_PATH) == TREE
        assert hub.get_retained(reading_path("sensorA")) == TREE["sensorA"]

    def test_publish_all_clears_vanished_sensor_paths(self) -> None:
        hub = EventHub()
        publisher = FeedPublisher(hub)
        publisher.publish_all(TREE)
        publisher.publish_all({"sensorA": {}})
        assert hub.get_retained(reading_path("sensorB")) is None

    def test_publish_sensor_updates_tree(self) -> None:
        hub = EventHub()
        publisher = FeedPublisher(hub)
        publisher.publish_all(TREE)
        publisher.publish_sensor("sensorC", {"1": {}})
        assert set(hub.get_retained(SENSORS_PATH)) == {"sensorA", "sensorB", "sensorC"}
        assert hub.get_retained(reading_path("sensorC")) == {"1": {}}


class TestSensorFeedView:
    """Test SensorFeedView"""

    def test_first_snapshot_selects_and_loads_series(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        assert registry.selected() == "sensorA"
        assert view.subscribed_sensor == "sensorA"
        assert [r.timestamp for r in registry.series_for("sensorA")] == [1000]

    def test_persisted_selection_is_used(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store, persisted="sensorB")
        publisher.publish_all(TREE)
        assert registry.selected() == "sensorB"
        assert len(registry.series_for("sensorB")) == 2

    def test_select_switches_subscription(self, selection_store) -> None:
        """Old readings subscription is released before the new one is taken"""
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        view.select("sensorB")
        assert view.subscribed_sensor == "sensorB"
        assert hub.subscriber_count(reading_path("sensorA")) == 0
        assert hub.subscriber_count(reading_path("sensorB")) == 1
        # Retained snapshot was replayed on subscribe
        assert len(registry.series_for("sensorB")) == 2

    def test_select_same_sensor_keeps_subscription(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        assert view.select("sensorA") is False
        assert hub.subscriber_count(reading_path("sensorA")) == 1

    def test_new_snapshot_replaces_series(self, selection_store) -> None:
        """Timestamps that vanished from the feed are pruned"""
        hub, publisher, registry, view = make_feed(selection_store, persisted="sensorB")
        publisher.publish_all(TREE)
        publisher.publish_sensor("sensorB", {"1200": {"temperature": 22}})
        assert [r.timestamp for r in registry.series_for("sensorB")] == [1200]

    def test_unselected_sensor_not_streamed(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        publisher.publish_sensor("sensorB", {"1200": {"temperature": 22}})
        assert registry.series_for("sensorB") == ()

    def test_select_before_sensor_exists(self, selection_store) -> None:
        """Optimistic selection picks up the data when it arrives"""
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        view.select("sensorC")
        assert registry.series_for("sensorC") == ()
        publisher.publish_sensor("sensorC", {"1000": {"humidity": 50}})
        assert registry.series_for("sensorC")[0].scalars.humidity == 50.0
        assert "sensorC" in registry.known()

    def test_selected_sensor_vanishing_keeps_last_series(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store, persisted="sensorB")
        publisher.publish_all(TREE)
        publisher.publish_all({"sensorA": TREE["sensorA"]})
        assert registry.selected() == "sensorB"
        assert len(registry.series_for("sensorB")) == 2

    def test_close_releases_everything(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store)
        publisher.publish_all(TREE)
        view.close()
        assert hub.subscriber_count(SENSORS_PATH) == 0
        assert hub.subscriber_count(reading_path("sensorA")) == 0
        assert view.subscribed_sensor is None

    def test_no_feed_means_no_selection(self, selection_store) -> None:
        hub, publisher, registry, view = make_feed(selection_store)
        assert registry.selected() is None
        assert view.subscribed_sensor is None


class TestOverviewFeedView:
    """Test OverviewFeedView"""

    def test_loads_every_sensor(self, selection_store) -> None:
        hub = EventHub()
        registry = SensorRegistry(selection_store)
        view = OverviewFeedView(hub, registry)
        view.open()
        FeedPublisher(hub).publish_all(TREE)
        assert len(registry.series_for("sensorA")) == 1
        assert len(registry.series_for("sensorB")) == 2

    def test_close(self, selection_store) -> None:
        hub = EventHub()
        registry = SensorRegistry(selection_store)
        view = OverviewFeedView(hub, registry)
        view.open()
        view.close()
        FeedPublisher(hub).publish_all(TREE)
        assert registry.series_for("sensorA") == ()
