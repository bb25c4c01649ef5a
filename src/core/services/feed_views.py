"""
Consuming views of the push feed.

Each view exclusively owns its subscriptions. The sensor view keeps at most
one readings subscription, for the selected sensor, and releases it before
subscribing to another sensor.
"""
import logging
from typing import Any, Mapping, Optional

from core.event_hub import EventHub, Subscription, event_hub
from core.services.feed_publisher import SENSORS_PATH, reading_path
from core.services.sensor_registry import SensorRegistry, sensor_registry

logger = logging.getLogger(__name__)


def _sensor_from_topic(topic: str) -> str:
    return topic[len(SENSORS_PATH) + 1:]


class SensorFeedView:
    """Tracks known identities and streams the selected sensor's readings."""

    def __init__(self, hub: EventHub, registry: SensorRegistry):
        self.hub = hub
        self.registry = registry
        self._identity_sub: Optional[Subscription] = None
        self._reading_sub: Optional[Subscription] = None
        self._reading_sensor: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._identity_sub is not None

    @property
    def subscribed_sensor(self) -> Optional[str]:
        return self._reading_sensor

    def open(self):
        if self._identity_sub is None:
            self._identity_sub = self.hub.subscribe(SENSORS_PATH, self._on_identities)
        self._resubscribe()

    def close(self):
        self._release_readings()
        if self._identity_sub is not None:
            self._identity_sub.close()
            self._identity_sub = None

    def reset(self):
        """Drop all registry state; reopen if the view was open."""
        was_open = self.is_open
        self.close()
        self.registry.reset()
        if was_open:
            self.open()

    def select(self, sensor_id: str) -> bool:
        changed = self.registry.select(sensor_id)
        if changed and self.is_open:
            self._resubscribe()
        return changed

    def _on_identities(self, topic: str, message: Any):
        ids = list(message.keys()) if isinstance(message, Mapping) else []
        if self.registry.observe_identities(ids) is not None:
            self._resubscribe()

    def _on_readings(self, topic: str, message: Any):
        sensor_id = _sensor_from_topic(topic)
        if sensor_id != self.registry.selected():
            # Late delivery for a sensor that is no longer selected
            return
        if message is None:
            logger.info(f"Sensor {sensor_id} has no data in the feed, keeping last known series")
            return
        series = self.registry.update_series(sensor_id, message)
        logger.debug(f"Sensor {sensor_id} series replaced ({len(series)} readings)")

    def _release_readings(self):
        if self._reading_sub is not None:
            self._reading_sub.close()
            logger.debug(f"Released readings subscription for {self._reading_sensor}")
        self._reading_sub = None
        self._reading_sensor = None

    def _resubscribe(self):
        target = self.registry.selected()
        if target == self._reading_sensor and self._reading_sub is not None:
            return
        self._release_readings()
        if target is None:
            return
        self._reading_sensor = target
        self._reading_sub = self.hub.subscribe(reading_path(target), self._on_readings)


class OverviewFeedView:
    """Refreshes the series of every sensor from the aggregate path."""

    def __init__(self, hub: EventHub, registry: SensorRegistry):
        self.hub = hub
        self.registry = registry
        self._sub: Optional[Subscription] = None

    @property
    def is_open(self) -> bool:
        return self._sub is not None

    def open(self):
        if self._sub is None:
            self._sub = self.hub.subscribe(SENSORS_PATH, self._on_snapshot)

    def close(self):
        if self._sub is not None:
            self._sub.close()
            self._sub = None

    def _on_snapshot(self, topic: str, message: Any):
        if not isinstance(message, Mapping):
            return
        for sensor_id, readings in message.items():
            if readings is None:
                continue
            self.registry.update_series(str(sensor_id), readings)


sensor_feed_view = SensorFeedView(event_hub, sensor_registry)
overview_feed_view = OverviewFeedView(event_hub, sensor_registry)
sensor_feed_view.open()
overview_feed_view.open()
