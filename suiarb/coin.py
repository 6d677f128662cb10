"""Coin lookups over the node's JSON-RPC and SUI amount helpers."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional

import httpx

from .objects import Object, ObjectRef, Owner, normalize_address

SUI_COIN_TYPE = "0x2::sui::SUI"
MIST_PER_SUI = 1_000_000_000
MOCKED_SUI_ID = "0x0000000000000000000000000000000000000000000000000000000000001338"


class CoinReadError(RuntimeError):
    """The coin read API failed or answered with an error."""


class CoinNotFoundError(LookupError):
    """No coin satisfies the requested minimum balance."""


@dataclass(frozen=True)
class Coin:
    coin_type: str
    coin_object_id: str
    version: int
    digest: str
    balance: int
    previous_transaction: str

    @classmethod
    def from_json(cls, data: dict) -> "Coin":
        return cls(
            coin_type=data["coinType"],
            coin_object_id=normalize_address(data["coinObjectId"]),
            version=int(data["version"]),
            digest=data["digest"],
            balance=int(data["balance"]),
            previous_transaction=data["previousTransaction"],
        )

    def object_ref(self) -> ObjectRef:
        return (self.coin_object_id, self.version, self.digest)


class CoinReadClient:
    """Reads coins owned by an address from a full node."""

    def __init__(self, rpc_url: str, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.rpc_url = rpc_url
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def __aenter__(self) -> "CoinReadClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_coins(self, owner: str, coin_type: Optional[str] = None) -> List[Coin]:
        """One page of coins of coin_type (SUI when None) owned by owner."""
        request = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "suix_getCoins",
            "params": [owner, coin_type, None, None],
        }
        try:
            response = await self._http.post(self.rpc_url, json=request)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise CoinReadError(f"coin request failed: {exc}") from exc
        if "error" in payload:
            raise CoinReadError(f"coin request rejected: {payload['error']}")
        try:
            return [Coin.from_json(entry) for entry in payload["result"]["data"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise CoinReadError(f"malformed coin response: {exc}") from exc


async def get_gas_coin_refs(client: CoinReadClient, owner: str, exclude: Optional[str] = None) -> List[ObjectRef]:
    """References to the owner's SUI coins, leaving out exclude."""
    excluded = normalize_address(exclude) if exclude is not None else None
    coins = await client.get_coins(owner)
    return [coin.object_ref() for coin in coins if coin.coin_object_id != excluded]


async def get_coins(client: CoinReadClient, owner: str, coin_type: str, min_balance: int) -> List[Coin]:
    coins = await client.get_coins(owner, coin_type)
    return [coin for coin in coins if coin.balance >= min_balance]


async def get_coin(client: CoinReadClient, owner: str, coin_type: str, min_balance: int) -> Coin:
    coins = await get_coins(client, owner, coin_type, min_balance)
    if not coins:
        raise CoinNotFoundError(f"No coins with balance >= {min_balance}")
    return coins[0]


def mocked_sui(owner: str, amount: int) -> Object:
    """A made-up gas coin of amount MIST owned by owner."""
    return Object.new_gas_coin(MOCKED_SUI_ID, Owner.address_owner(owner), amount)


def is_native_coin(coin_type: str) -> bool:
    return coin_type == SUI_COIN_TYPE


def _format_float(value: float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_sui_with_symbol(value: int) -> str:
    """Render an amount of MIST as SUI, e.g. "1.5 SUI"."""
    return f"{_format_float(value / MIST_PER_SUI)} SUI"