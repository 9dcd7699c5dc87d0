"""
In-process change broker for realtime setlist synchronization.

Gateways publish the freshly written aggregate document after every successful
write; subscribers registered for that setlist (or for a wildcard topic) get a
callback with the event.
"""

from __future__ import annotations

import fnmatch
import logging
import threading
from collections.abc import Callable
from typing import Any

from stagelist.helpers.time_helper import now_ms

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict[str, Any]], None]


def setlist_topic(setlist_id: str) -> str:
    return f"setlist:{setlist_id}"


class SetListBroker:
    """
    Thread-safe topic broker for setlist change events.

    Topics:
    - setlist:{id} - Changes to one aggregate
    - setlist:* - Changes to any aggregate

    Events are dicts: {"topic", "type", "timestamp", "setlist_id", "document"}.
    Callbacks run on the publishing thread, outside the broker lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[str, dict[str, Any]] = {}  # sub_id -> {pattern, callback}
        self._next_id = 0

    def subscribe(self, pattern: str, callback: ChangeCallback) -> Callable[[], None]:
        """
        Register a callback for a topic pattern.

        Args:
            pattern: Topic or fnmatch pattern (e.g. "setlist:abc", "setlist:*")
            callback: Called with each matching event

        Returns:
            Function that removes the subscription (safe to call twice)
        """
        with self._lock:
            sub_id = f"sub_{self._next_id}"
            self._next_id += 1
            self._subscribers[sub_id] = {"pattern": pattern, "callback": callback}
        logger.debug(f"[SetListBroker] {sub_id} subscribed to {pattern}")

        def unsubscribe() -> None:
            with self._lock:
                if self._subscribers.pop(sub_id, None) is not None:
                    logger.debug(f"[SetListBroker] {sub_id} unsubscribed")

        return unsubscribe

    def publish_change(self, setlist_id: str, document: dict[str, Any]) -> int:
        """Broadcast a written aggregate. Returns the number of callbacks invoked."""
        return self._broadcast(setlist_topic(setlist_id), "changed", setlist_id, document)

    def publish_removed(self, setlist_id: str) -> int:
        return self._broadcast(setlist_topic(setlist_id), "removed", setlist_id, None)

    def _broadcast(self, topic: str, event_type: str, setlist_id: str, document: dict[str, Any] | None) -> int:
        with self._lock:
            targets = [
                (sub_id, info["callback"])
                for sub_id, info in self._subscribers.items()
                if fnmatch.fnmatch(topic, info["pattern"])
            ]
        event = {
            "topic": topic,
            "type": event_type,
            "timestamp": now_ms(),
            "setlist_id": setlist_id,
            "document": document,
        }
        for sub_id, callback in targets:
            self._deliver(sub_id, callback, event)
        if targets:
            logger.debug(f"[SetListBroker] Broadcast {event_type} on {topic} to {len(targets)} subscribers")
        return len(targets)

    @staticmethod
    def _deliver(sub_id: str, callback: ChangeCallback, event: dict[str, Any]) -> None:
        # One failing subscriber must not stop delivery to the rest
        try:
            callback(event)
        except Exception:
            logger.exception(f"[SetListBroker] Subscriber {sub_id} failed on {event['topic']}")
