"""Signed Shio bids, delivered over the feed connection or the JSON-RPC endpoint."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

import httpx

from .keypair import Ed25519KeyPair, base58_encode, intent_message_digest
from .shio_types import SHIO_JSON_RPC_URL

logger = logging.getLogger(__name__)

Digest = Union[bytes, str]
# (BCS-encoded transaction data, bid amount, digest of the opportunity transaction)
BidAction = Tuple[bytes, int, Digest]


def _digest_text(digest: Digest) -> str:
    if isinstance(digest, (bytes, bytearray)):
        return base58_encode(bytes(digest))
    return digest


def _signed_parts(keypair: Ed25519KeyPair, tx_bytes: bytes, opp_tx_digest: Digest) -> Tuple[str, str, str]:
    """(opportunity digest, base64 transaction, signature) for a bid."""
    tx_b64 = base64.b64encode(tx_bytes).decode("ascii")
    sig = keypair.sign(intent_message_digest(tx_bytes))
    return _digest_text(opp_tx_digest), tx_b64, sig


class ShioExecutor:
    """Signs bids and hands them to the feed connection for sending."""

    name: ClassVar[str] = "ShioExecutor"

    def __init__(self, keypair: Ed25519KeyPair, bid_sender: "asyncio.Queue[Any]") -> None:
        self.keypair = keypair
        self.bid_sender = bid_sender

    def encode_bid(self, tx_bytes: bytes, bid_amount: int, opp_tx_digest: Digest) -> Dict[str, Any]:
        digest, tx_b64, sig = _signed_parts(self.keypair, tx_bytes, opp_tx_digest)
        return {"oppTxDigest": digest, "bidAmount": bid_amount, "txData": tx_b64, "sig": sig}

    async def execute(self, action: BidAction) -> None:
        tx_bytes, bid_amount, opp_tx_digest = action
        await self.bid_sender.put(self.encode_bid(tx_bytes, bid_amount, opp_tx_digest))


class ShioRPCExecutor:
    """Signs bids and submits them with the shio_submitBid JSON-RPC call."""

    name: ClassVar[str] = "ShioRPCExecutor"

    def __init__(
        self,
        keypair: Ed25519KeyPair,
        http_client: Optional[httpx.AsyncClient] = None,
        rpc_url: str = SHIO_JSON_RPC_URL,
    ) -> None:
        self.keypair = keypair
        self.rpc_url = rpc_url
        self._http = http_client or httpx.AsyncClient()

    async def __aenter__(self) -> "ShioRPCExecutor":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def encode_bid(self, tx_bytes: bytes, bid_amount: int, opp_tx_digest: Digest) -> Dict[str, Any]:
        digest, tx_b64, sig = _signed_parts(self.keypair, tx_bytes, opp_tx_digest)
        return {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "shio_submitBid",
            "params": [digest, bid_amount, tx_b64, sig],
        }

    async def execute(self, action: BidAction) -> None:
        tx_bytes, bid_amount, opp_tx_digest = action
        bid = self.encode_bid(tx_bytes, bid_amount, opp_tx_digest)
        logger.warning(">> %s", json.dumps(bid))
        response = await self._http.post(self.rpc_url, json=bid)
        logger.warning("<< %s %r", response.status_code, response.text)