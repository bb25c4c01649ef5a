"""
Push feed paths on top of the event hub.

``sensors`` holds the whole tree (sensor id -> timestamp -> value-bag) and
``sensors/<id>`` one sensor's readings. Both are retained full snapshots.
"""
import logging
from typing import Any, Mapping

from core.event_hub import EventHub, event_hub

logger = logging.getLogger(__name__)

SENSORS_PATH = "sensors"


def reading_path(sensor_id: str) -> str:
    return f"{SENSORS_PATH}/{sensor_id}"


class FeedPublisher:
    def __init__(self, hub: EventHub):
        self.hub = hub

    def publish_all(self, snapshot: Any):
        """Replace the whole tree. Per-sensor paths are published first."""
        tree = dict(snapshot) if isinstance(snapshot, Mapping) else {}
        previous = self.hub.get_retained(SENSORS_PATH) or {}
        for sensor_id in previous:
            if sensor_id not in tree:
                self.hub.send_all_on_topic(reading_path(sensor_id), None, retain=True)
        for sensor_id, readings in tree.items():
            self.hub.send_all_on_topic(reading_path(str(sensor_id)), readings, retain=True)
        self.hub.send_all_on_topic(SENSORS_PATH, tree, retain=True)
        logger.debug(f"Published snapshot for {len(tree)} sensors")

    def publish_sensor(self, sensor_id: str, readings: Any):
        """Replace one sensor's readings and the matching branch of the tree."""
        tree = dict(self.hub.get_retained(SENSORS_PATH) or {})
        tree[sensor_id] = readings
        self.hub.send_all_on_topic(reading_path(sensor_id), readings, retain=True)
        self.hub.send_all_on_topic(SENSORS_PATH, tree, retain=True)
        logger.debug(f"Published snapshot for sensor {sensor_id}")


feed_publisher = FeedPublisher(event_hub)
