"""
HTTP politeness helpers for feed downloads.
"""
import asyncio
import logging
import time
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)

# Minimum seconds between two requests to the same host.
MIN_REQUEST_INTERVAL = 1.0
MAX_BACKOFF = 60.0
# Consecutive failures before a host's interval starts to grow.
FAILURE_THRESHOLD = 3
USER_AGENT = "zeitgeist/0.1 (feed reader)"


class RateLimiter:
    """
    Spaces out requests to each host.

    Several feeds are often served by the same site, so downloads are
    throttled per host rather than globally.  Hosts that keep failing are
    given progressively longer intervals, which shrink again on success.
    """
    def __init__(self, min_interval: float = MIN_REQUEST_INTERVAL, max_backoff: float = MAX_BACKOFF):
        self.min_interval = min_interval
        self.max_backoff = max_backoff
        self.last_requests: Dict[str, float] = defaultdict(float)
        self.locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.failure_counts: Dict[str, int] = defaultdict(int)
        self.intervals: Dict[str, float] = {}

    def interval(self, host: str) -> float:
        """Current minimum interval for a host, in seconds."""
        return self.intervals.get(host, self.min_interval)

    async def acquire(self, host: str) -> None:
        """
        Wait until a request to the host is allowed.

        Args:
            host: The host about to be requested
        """
        async with self.locks[host]:
            wait_time = self.interval(host) - (time.monotonic() - self.last_requests[host])
            if wait_time > 0 and self.last_requests[host]:
                logger.debug(f"Rate limiting {host}, waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self.last_requests[host] = time.monotonic()

    def report_success(self, host: str) -> None:
        """
        Record a successful request, relaxing any backoff for the host.

        Args:
            host: The host that answered
        """
        self.failure_counts[host] = 0
        if self.interval(host) > self.min_interval:
            self.intervals[host] = max(self.min_interval, self.interval(host) * 0.8)

    def report_failure(self, host: str) -> None:
        """
        Record a failed request, backing off once failures pile up.

        Args:
            host: The host that failed
        """
        self.failure_counts[host] += 1
        if self.failure_counts[host] >= FAILURE_THRESHOLD:
            self.intervals[host] = min(self.max_backoff, max(self.interval(host), 1.0) * 2.0)
            logger.warning(f"Increased interval for {host} to {self.intervals[host]:.2f}s "
                           f"after {self.failure_counts[host]} failures")
