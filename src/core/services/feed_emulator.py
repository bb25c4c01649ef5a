import threading
import time
import logging
import math
import random
from typing import Dict, List, Optional

from core.config_loader import config_loader
from core.models.reading import SPECTRAL_BANDS
from core.services.feed_publisher import FeedPublisher, feed_publisher

logger = logging.getLogger(__name__)

DAY_SECONDS = 86400


class FeedEmulator:
    """
    Emulates the sensor nodes writing to the feed: one reading per sensor per
    interval, older readings pruned, whole tree published each time.
    """

    def __init__(self, publisher: FeedPublisher, sensors: List[str], interval: float, retention: int):
        self.publisher = publisher
        self.sensors = list(sensors)
        self.interval = interval
        self.retention = retention
        self.running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._history: Dict[str, Dict[str, dict]] = {sensor_id: {} for sensor_id in self.sensors}

    def start(self):
        if self.running:
            return
        self.running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        logger.info(f"FeedEmulator started for {len(self.sensors)} sensors")

    def stop(self):
        self.running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        logger.info("FeedEmulator stopped")

    def _loop(self):
        while True:
            self.emit_once(time.time())
            if self._stop_event.wait(self.interval):
                break

    def emit_once(self, now: float) -> Dict[str, Dict[str, dict]]:
        """Append one reading per sensor at ``now`` and publish the tree."""
        timestamp = int(now)
        cutoff = timestamp - self.retention
        for index, sensor_id in enumerate(self.sensors):
            history = self._history[sensor_id]
            history[str(timestamp)] = self._emulate_values(timestamp, phase=index * 1.5)
            for key in [k for k in history if int(k) < cutoff]:
                del history[key]
        tree = {sensor_id: dict(history) for sensor_id, history in self._history.items()}
        self.publisher.publish_all(tree)
        return tree

    @staticmethod
    def _emulate_values(timestamp: int, phase: float) -> dict:
        # Daily cycle with a little noise
        day = 2 * math.pi * (timestamp % DAY_SECONDS) / DAY_SECONDS + phase
        daylight = max(0.0, math.sin(day))
        lux = 20000 * daylight + random.uniform(0, 50)
        return {
            "temperature": round(18 + 6 * math.sin(day) + random.uniform(-0.3, 0.3), 2),
            "humidity": round(60 - 15 * math.sin(day) + random.uniform(-1, 1), 2),
            "light_level": round(100 * daylight, 2),
            "soil_moisture": round(45 + 5 * math.cos(day / 7) + random.uniform(-0.5, 0.5), 2),
            "tsl2591": {
                "lux": round(lux, 2),
                "visible": round(lux * 0.8, 2),
                "ir": round(lux * 0.2, 2),
            },
            "as7341": {
                band: round(lux * (0.05 + 0.01 * i), 2) for i, band in enumerate(SPECTRAL_BANDS)
            },
        }


_emulator_config = config_loader.get_emulator_config()
feed_emulator = FeedEmulator(
    feed_publisher,
    _emulator_config.sensors,
    _emulator_config.interval_seconds,
    _emulator_config.retention_seconds,
)
