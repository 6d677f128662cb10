"""Websocket connection to the Shio feed: bids go out, auction items come in."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Set, Tuple

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from .shio_types import parse_shio_item

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 5.0

_background_tasks: Set["asyncio.Task[None]"] = set()


class ShioConnectionError(RuntimeError):
    """The feed connection failed for good; no more items will arrive."""


async def new_shio_conn(
    wss_url: str, num_retries: int = 3
) -> Tuple["asyncio.Queue[Any]", "asyncio.Queue[Any]"]:
    """Open the feed in the background and return (bid queue, item queue).

    Bids put on the first queue are sent to the server as JSON text. Every text
    message from the server is parsed into a ShioItem and put on the second queue.
    A lost connection is re-established; when that fails num_retries times in a
    row, or the server sends something unexpected, a ShioConnectionError is put
    on the item queue and the connection task ends.
    """
    bids: "asyncio.Queue[Any]" = asyncio.Queue()
    items: "asyncio.Queue[Any]" = asyncio.Queue()
    task = asyncio.get_running_loop().create_task(
        _maintain(wss_url, num_retries, bids, items), name="shio-conn"
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return bids, items


async def _maintain(
    wss_url: str,
    num_retries: int,
    bids: "asyncio.Queue[Any]",
    items: "asyncio.Queue[Any]",
) -> None:
    try:
        await _connection_loop(wss_url, num_retries, bids, items)
    except ShioConnectionError as exc:
        logger.error("%s", exc)
        items.put_nowait(exc)
    except Exception as exc:  # noqa: BLE001 - any other failure also ends the feed
        logger.exception("shio connection failed")
        error = ShioConnectionError(f"shio connection failed: {exc}")
        error.__cause__ = exc
        items.put_nowait(error)


async def _connection_loop(
    wss_url: str,
    num_retries: int,
    bids: "asyncio.Queue[Any]",
    items: "asyncio.Queue[Any]",
) -> None:
    retry_count = 0
    while True:
        try:
            ws = await websockets.connect(wss_url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as exc:
            logger.error("fail to connect to ws server: %s", exc)
            if retry_count == num_retries:
                raise ShioConnectionError(
                    f"fail to connect to ws server after {num_retries} retries"
                ) from exc
            await asyncio.sleep(DEFAULT_RETRY_DELAY)
            retry_count += 1
            continue

        retry_count = 0
        try:
            await _serve(ws, bids, items)
        finally:
            await ws.close()


def _handle_message(message: Any, items: "asyncio.Queue[Any]") -> None:
    if not isinstance(message, str):
        raise ShioConnectionError(f"unexpected websocket message: {message!r}")
    try:
        value = json.loads(message)
    except json.JSONDecodeError as exc:
        logger.error("error parsing json: %s", exc)
        return
    items.put_nowait(parse_shio_item(value))


def _discard(task: Optional["asyncio.Future[Any]"]) -> None:
    if task is None:
        return
    if task.done():
        if not task.cancelled():
            task.exception()
    else:
        task.cancel()


async def _serve(ws: Any, bids: "asyncio.Queue[Any]", items: "asyncio.Queue[Any]") -> None:
    """Pump one connection until it breaks (returns) or turns fatal (raises)."""
    bid_task: Optional["asyncio.Future[Any]"] = None
    recv_task: Optional["asyncio.Future[Any]"] = None
    try:
        while True:
            if bid_task is None:
                bid_task = asyncio.ensure_future(bids.get())
            if recv_task is None:
                recv_task = asyncio.ensure_future(ws.recv())
            done, _ = await asyncio.wait({bid_task, recv_task}, return_when=asyncio.FIRST_COMPLETED)

            if bid_task in done:
                bid = bid_task.result()
                bid_task = None
                try:
                    await ws.send(json.dumps(bid, separators=(",", ":")))
                except ConnectionClosed as exc:
                    logger.error("fail to send message to ws server: %s", exc)
                    return

            if recv_task in done:
                finished, recv_task = recv_task, None
                try:
                    message = finished.result()
                except ConnectionClosedOK as exc:
                    raise ShioConnectionError(f"unexpected websocket message: close ({exc})") from exc
                except ConnectionClosed as exc:
                    logger.error("error receiving websocket message: %s", exc)
                    return
                _handle_message(message, items)
    finally:
        _discard(bid_task)
        _discard(recv_task)