"""Stream of auction items read from the Shio feed."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, ClassVar, Optional, Tuple

from .keypair import Ed25519KeyPair
from .shio_conn import ShioConnectionError, new_shio_conn
from .shio_executor import ShioExecutor
from .shio_types import SHIO_FEED_URL, ShioItem

logger = logging.getLogger(__name__)

DEFAULT_NUM_RETRIES = 3


class ShioCollector:
    """Yields the items that one feed connection delivers."""

    name: ClassVar[str] = "ShioCollector"

    def __init__(self, receiver: "asyncio.Queue[Any]") -> None:
        self._receiver = receiver

    async def get_event_stream(self) -> AsyncIterator[ShioItem]:
        """Yield items forever; raises ShioConnectionError once the feed is gone."""
        while True:
            item = await self._receiver.get()
            if isinstance(item, BaseException):
                raise ShioConnectionError("ShioCollector stream ended unexpectedly") from item
            yield item


async def collector_without_executor(wss_url: str, num_retries: Optional[int] = None) -> ShioCollector:
    """A collector on its own connection that only reads the feed."""
    logger.warning("only reading from shio feed, not sending any bids")
    _, receiver = await new_shio_conn(wss_url, DEFAULT_NUM_RETRIES if num_retries is None else num_retries)
    return ShioCollector(receiver)


async def new_shio_collector_and_executor(
    keypair: Ed25519KeyPair,
    shio_feed_url: Optional[str] = None,
    num_retries: Optional[int] = None,
) -> Tuple[ShioCollector, ShioExecutor]:
    """A collector and an executor sharing one feed connection."""
    bid_sender, item_receiver = await new_shio_conn(
        SHIO_FEED_URL if shio_feed_url is None else shio_feed_url,
        DEFAULT_NUM_RETRIES if num_retries is None else num_retries,
    )
    return ShioCollector(item_receiver), ShioExecutor(keypair, bid_sender)