import time
import asyncio
import logging
from typing import Optional

from core.config_loader import config_loader
from core.event_hub import EventHub, Subscription, event_hub
from core.services.chart_service import ChartService, chart_service
from core.services.feed_publisher import SENSORS_PATH

logger = logging.getLogger(__name__)

CHART_UPDATE_TOPIC = "chart_update"


class ChartRefresher:
    """
    Keeps a rendered frame (detail chart + overview) on the chart_update topic.

    The frame is rebuilt on every feed push and on a fixed cadence, so the
    trailing window keeps moving even when the feed is quiet. The last frame
    is retained and served by GET /api/chart/live.
    """

    def __init__(self, service: ChartService, hub: EventHub, interval: float):
        self.service = service
        self.hub = hub
        self.interval = interval
        self.running = False
        self._task: Optional[asyncio.Task] = None
        self._feed_sub: Optional[Subscription] = None

    def start(self):
        if self.running:
            return
        self.running = True
        self._feed_sub = self.hub.subscribe(SENSORS_PATH, self._on_feed, replay=False)
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._refresh_loop())
        logger.info(f"ChartRefresher started (every {self.interval}s)")

    def stop(self):
        self.running = False
        if self._feed_sub:
            self._feed_sub.close()
            self._feed_sub = None
        if self._task:
            self._task.cancel()
            self._task = None
        logger.info("ChartRefresher stopped")

    def refresh_once(self, now: Optional[float] = None) -> dict:
        """Build both charts for ``now`` (wall clock by default) and publish them."""
        if now is None:
            now = time.time()
        frame = {
            "now": now,
            "chart": self.service.build_chart(now),
            "overview": self.service.build_overview(now),
        }
        self.hub.send_all_on_topic(CHART_UPDATE_TOPIC, frame, retain=True)
        return frame

    def latest(self) -> dict:
        """Last published frame, built on demand if none was published yet."""
        frame = self.hub.get_retained(CHART_UPDATE_TOPIC)
        if frame is None:
            frame = self.refresh_once()
        return frame

    def _on_feed(self, topic: str, tree):
        self.refresh_once()

    async def _refresh_loop(self):
        while self.running:
            start_loop = time.time()
            try:
                self.refresh_once(start_loop)
            except Exception as e:
                logger.error(f"Chart refresh failed: {e}")

            elapsed = time.time() - start_loop
            delay = max(0, self.interval - elapsed)
            await asyncio.sleep(delay)


chart_refresher = ChartRefresher(
    chart_service, event_hub, config_loader.get_chart_config().refresh_interval_seconds
)
