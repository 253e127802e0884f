"""Token-bucket gate shared by every outbound Shopify call."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RequestGate:
    """Thread-safe token bucket.

    ``rate`` tokens are added per second up to ``burst``.  Each call to
    :meth:`acquire` takes one token, sleeping until one is available.  A
    ``rate`` of zero or less disables the gate entirely.
    """

    def __init__(
        self,
        rate: float,
        burst: int = 1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rate = rate
        self.burst = max(1, burst)
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(self.burst)
        self._updated = clock()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.rate > 0

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._updated
        self._updated = now
        self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)

    def acquire(self) -> float:
        """Block until a token is available. Returns the seconds waited."""
        if not self.enabled:
            return 0.0

        waited = 0.0
        while True:
            with self._lock:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return waited
                wait = (1 - self._tokens) / self.rate
            logger.debug("Request gate full, waiting %.3fs", wait)
            self._sleep(wait)
            waited += wait
