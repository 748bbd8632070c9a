"""Subscribe to inputs only while someone listens to the output."""

from __future__ import annotations
import threading
from typing import Callable

class SubscriptionGate:
    """Calls on_connect / on_disconnect on listener-count transitions.

    update() calls are serialized, so subscribe and unsubscribe never run
    at the same time.
    """

    def __init__(self, on_connect: Callable[[], None], on_disconnect: Callable[[], None]):
        self._on_connect = on_connect
        self._on_disconnect = on_disconnect
        self._active = False
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    def update(self, num_subscribers: int) -> bool:
        """Report the current listener count; returns whether inputs are active."""
        with self._lock:
            if num_subscribers > 0 and not self._active:
                self._on_connect()
                self._active = True
            elif num_subscribers <= 0 and self._active:
                self._on_disconnect()
                self._active = False
            return self._active
