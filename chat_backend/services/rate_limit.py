"""Fixed-window request rate limiting."""
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RateLimiter:
    """
    Per-client rate limiting.

    Tracks requests per client key per minute.
    Counter resets on the minute boundary.
    """

    def __init__(
        self,
        max_requests_per_minute: int = 2000,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize rate limiter."""
        self.max_requests = max_requests_per_minute
        self._clock = clock or _utc_now
        # {client_key: (count, window_start)}
        self._counters: Dict[str, tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, key: str) -> bool:
        """
        Count a request for `key`.

        Returns:
            False once the key has spent its budget for the current minute
        """
        window = self._clock().replace(second=0, microsecond=0)

        with self._lock:
            count, window_start = self._counters.get(key, (0, window))
            if window_start < window:
                count, window_start = 0, window
            if count >= self.max_requests:
                return False
            self._counters[key] = (count + 1, window_start)
            return True
