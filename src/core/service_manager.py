# External libs
import asyncio
import logging

# Internal libs
from core.event_hub import init_event_hub
from core.services.feed_emulator import feed_emulator
from core.services.feed_views import overview_feed_view, sensor_feed_view
from core.processing.chart_refresher import chart_refresher

logger = logging.getLogger(__name__)


class ServiceManager:

    def __init__(self):
        self.running = False
        self.emulation = False

    async def start_services(self, emulation: bool = True):
        """Start global background services if not already started.
        Args:
            emulation: When True, the feed emulator publishes readings for the configured sensors.
        """
        if self.running:
            return

        logger.info("Starting background services...")
        loop = asyncio.get_running_loop()

        # Init Event Hub
        init_event_hub(loop)

        # Feed views (identity, selected sensor and overview subscriptions)
        sensor_feed_view.open()
        overview_feed_view.open()

        # Chart refresher (live frame, re-rendered on feed pushes and on a fixed cadence)
        chart_refresher.start()

        self.emulation = emulation
        if emulation:
            feed_emulator.start()
        else:
            logger.info("Emulation disabled, waiting for snapshots on the feed API")

        self.running = True
        logger.info("Background services started.")

    def stop_services(self):
        """Stop background services."""
        self.running = False

        if self.emulation:
            feed_emulator.stop()

        chart_refresher.stop()
        sensor_feed_view.close()
        overview_feed_view.close()

        # The loop is about to close, fall back to direct dispatch
        init_event_hub(None)

        logger.info("Background services stopped.")


service_manager = ServiceManager()
