import asyncio
import logging
from typing import Callable, Dict, List, Any, Optional

logger = logging.getLogger(__name__)


class Subscription:
    """Handle of one (topic, handler) registration. Closing it is idempotent."""

    def __init__(self, hub: "EventHub", topic: str, handler: Callable):
        self.hub = hub
        self.topic = topic
        self.handler = handler
        self.active = True

    def close(self):
        if self.active:
            self.hub.unsubscribe(self.topic, self.handler)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class EventHub:
    """
    Topic based publish/subscribe.

    Topics published with retain=True keep their last message; a new
    subscriber receives it right away, so feed paths behave as full-snapshot
    values rather than deltas.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}
        self._retained: Dict[str, Any] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def init(self, loop: Optional[asyncio.AbstractEventLoop]):
        self._loop = loop

    def subscribe(self, topic: str, handler: Callable, replay: bool = True) -> Subscription:
        if topic not in self._subscribers:
            self._subscribers[topic] = []
        if handler not in self._subscribers[topic]:
            self._subscribers[topic].append(handler)
        logger.debug(f"Subscribed to {topic}")
        if replay and topic in self._retained:
            self._dispatch(handler, topic, self._retained[topic])
        return Subscription(self, topic, handler)

    def unsubscribe(self, topic: str, handler: Callable):
        if topic in self._subscribers:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)
                logger.debug(f"Unsubscribed from {topic}")

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    def get_retained(self, topic: str, default: Any = None) -> Any:
        return self._retained.get(topic, default)

    def clear_retained(self):
        self._retained.clear()

    def send_all_on_topic(self, topic: str, message: Any, retain: bool = False):
        if retain:
            self._retained[topic] = message
        if topic in self._subscribers:
            # Copy: handlers may (un)subscribe while being called
            handlers = self._subscribers[topic][:]
            for handler in handlers:
                self._dispatch(handler, topic, message)

    def _dispatch(self, handler: Callable, topic: str, message: Any):
        try:
            if self._loop and not self._loop.is_closed():
                try:
                    current_loop = asyncio.get_running_loop()
                except RuntimeError:
                    current_loop = None

                if current_loop == self._loop:
                    if asyncio.iscoroutinefunction(handler):
                        self._loop.create_task(handler(topic, message))
                    else:
                        handler(topic, message)
                else:
                    # Publisher runs in another thread
                    if asyncio.iscoroutinefunction(handler):
                        asyncio.run_coroutine_threadsafe(handler(topic, message), self._loop)
                    else:
                        self._loop.call_soon_threadsafe(handler, topic, message)
            else:
                if asyncio.iscoroutinefunction(handler):
                    logger.warning(f"EventHub loop not initialized. Cannot dispatch async handler for {topic}")
                else:
                    handler(topic, message)
        except Exception as e:
            logger.error(f"Error handling message on topic {topic}: {e}")


# Global instance
event_hub = EventHub()


def init_event_hub(loop):
    """Initialize the global event hub with the given loop."""
    event_hub.init(loop)
