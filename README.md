# suiarb

Building blocks for arbitrage bots on the Sui network:

- **Shio auctions** (`suiarb.shio_types`, `suiarb.shio_conn`,
  `suiarb.shio_collector`, `suiarb.shio_executor`) – a WebSocket connection
  to a Shio feed that yields parsed auction items, and executors that sign
  and submit bids, either over the same WebSocket or over JSON-RPC.
- **Simulation support** (`suiarb.objects`, `suiarb.override_cache`,
  `suiarb.simulator`) – an object model, an override object cache that
  serves objects from a set of overrides (with a live clock object),
  optionally falling back to another store, and the context, result and
  abstract `Simulator` interface a simulator works with.
- **Utilities** – coin lookups over JSON-RPC (`suiarb.coin`), Move struct
  field extraction (`suiarb.move_object`), explorer links in Markdown form
  (`suiarb.links`), Ed25519 signing, base58 and intent digests
  (`suiarb.keypair`), crash reporting and time helpers (`suiarb.util`), and
  build version strings taken from git (`suiarb.version`).

Requires Python 3.10 or later.

## Reading the Shio feed

```python
import asyncio

from suiarb.shio_collector import collector_without_executor
from suiarb.shio_types import AuctionStarted, AuctionEnded


async def watch(feed_url: str) -> None:
    collector = await collector_without_executor(feed_url, 3)
    async for item in collector.get_event_stream():
        if isinstance(item, AuctionStarted):
            for obj in item.created_mutated_objects():
                print(obj.id, obj.object_type)
        elif isinstance(item, AuctionEnded):
            print("auction ended")


asyncio.run(watch("wss://feed.example.com/feed"))
```

Incoming JSON messages are turned into items with `parse_shio_item`; a
message that is neither an auction start nor an auction end becomes a
`DummyItem` holding the raw value. Text that is not valid JSON is logged
and skipped.

`new_shio_conn` reconnects after a lost connection, waiting five seconds
between attempts. When connecting fails `num_retries` times in a row, or the
server sends a non-text message or closes the connection, the stream raises
`ShioConnectionError`.

## Bidding

```python
from suiarb.keypair import parse_keypair
from suiarb.shio_collector import new_shio_collector_and_executor


async def run(encoded_key: str, feed_url: str) -> None:
    keypair = parse_keypair(encoded_key)
    collector, executor = await new_shio_collector_and_executor(keypair, feed_url, 3)
    async for item in collector.get_event_stream():
        ...
        # await executor.execute((tx_bytes, bid_amount, opp_tx_digest))
```

`parse_keypair` reads the keystore form: base64 of the Ed25519 flag byte
followed by the 32-byte private key. A bid action is a tuple of the
BCS-encoded transaction bytes, the bid amount and the opportunity
transaction's digest (raw bytes or its base58 text). The transaction is
signed over the BLAKE2b digest of the Sui transaction intent followed by the
transaction bytes.

`ShioExecutor` puts signed bids on the feed connection's bid queue;
`ShioRPCExecutor` posts them as `shio_submitBid` JSON-RPC calls and logs the
response. Both expose `encode_bid` so the bid payload can be inspected
before it is sent.

## Override cache

```python
from suiarb.override_cache import OverrideCache

cache = OverrideCache(None, overrides)
obj = cache.get_object(object_id)
```

`overrides` is a list of `ObjectReadResult` values. Lookups consult the
overrides first. The clock object (`0x6`) always resolves to a fresh clock
carrying the current time (see `clock_object`). Missing objects go to the
fallback store when one is given; objects read from the fallback by
`get_object` are remembered by version and can be fetched again with
`get_versioned_object_for_comparison`. Reads that cannot be answered raise
`OverrideCacheError` or one of its subclasses
(`InvalidChildObjectAccessError`, `ObjectNotFoundError`,
`ObjectVersionUnavailableError`).

## Utilities

```python
from suiarb import links
from suiarb.coin import format_sui_with_symbol, is_native_coin

print(format_sui_with_symbol(1_500_000_000))   # 1.5 SUI
print(is_native_coin("0x2::sui::SUI"))          # True
print(links.coin("0x2::sui::SUI", None))
```

- `suiarb.coin.CoinReadClient` reads one page of coins from a node with
  `suix_getCoins`; `get_coins`, `get_coin` and `get_gas_coin_refs` filter
  them by minimum balance or leave one coin out. `get_coin` raises
  `CoinNotFoundError` when nothing qualifies.
- `suiarb.move_object` extracts typed fields (`extract_u64_from_move_struct`,
  `extract_struct_array_from_move_struct`, …) and raises
  `FieldExtractionError` on a missing field or a field of the wrong kind.
- `suiarb.util.set_panic_hook()` installs hooks that report every uncaught
  exception, in any thread, to the log and to a Telegram chat; the command
  line is included with arguments longer than 32 characters replaced by
  `[REDACTED]`. The Telegram bot token and chat ids are module-level
  settings in `suiarb.util` and are empty by default.
- `suiarb.version.build_version()` returns a string of the form
  `branch-commit[-dirty]@date` for the current git checkout, by running
  `git`.

## What this package does not do

- It does not execute transactions. `Simulator` is an abstract interface;
  no concrete simulator backed by a node database or by HTTP dry runs is
  included.
- It does not build or BCS-encode transactions; executors take transaction
  bytes that were encoded elsewhere.
- `start_heartbeat` only starts a task that logs that the worker started; it
  sends no heartbeats.
- There is no command-line program.

## Running the tests

Install the `test` extra and run pytest from the project directory.