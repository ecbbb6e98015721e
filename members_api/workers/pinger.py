"""
Keep-Alive Pinger - Periodically calls this service's own /ping route.

Free hosting platforms suspend a process that receives no traffic for
a while. The pinger runs as an asyncio task on the same event loop as
the API and issues one GET to the public ping URL per interval.

It is a two-state machine:

    idle ──(interval elapsed)──► firing ──(response or error)──► idle

There is no retry and no backoff: a failed ping is logged and the
next attempt simply happens one interval later.
"""

import asyncio
import httpx
import logging
from typing import Optional

from ..core.config import KeepAliveConfig
from ..models.schemas import PingerState

logger = logging.getLogger(__name__)


class KeepAlivePinger:
    """
    Fixed-interval self pinger.

    Only the task running start() mutates the pinger; request handling
    never reads or writes its state.
    """

    def __init__(self, config: KeepAliveConfig):
        """Initialize the pinger with its configuration."""
        self.url = config.url
        self.interval = config.interval
        self.timeout = config.timeout
        self.state = PingerState.IDLE
        self.running = False
        self.pings_sent = 0
        self.pings_failed = 0

    async def start(self):
        """
        Run the ping loop until stop() is called or the task is cancelled.

        The first ping happens one interval after start.
        """
        self.running = True
        logger.info(f"Keep-alive started: GET {self.url} every {self.interval:.0f}s")

        while self.running:
            try:
                await asyncio.sleep(self.interval)
                if not self.running:
                    break
                await self.ping_once()
            except asyncio.CancelledError:
                logger.info("Keep-alive received cancellation signal")
                break

        self.running = False
        logger.info(f"Keep-alive stopped. Sent: {self.pings_sent}, Failed: {self.pings_failed}")

    async def stop(self):
        """Ask the loop to exit after the current sleep."""
        self.running = False

    async def ping_once(self) -> Optional[int]:
        """
        Issue a single ping.

        Returns:
            The HTTP status code, or None if the request failed
        """
        self.state = PingerState.FIRING
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
            self.pings_sent += 1
            logger.info(f"Keep-alive ping {self.url}: status {response.status_code}")
            return response.status_code
        except Exception as e:
            self.pings_failed += 1
            logger.error(f"Keep-alive ping {self.url} failed: {str(e)}")
            return None
        finally:
            self.state = PingerState.IDLE
