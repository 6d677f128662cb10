"""Markdown links to the Sui mainnet explorer."""

from __future__ import annotations

SCAN_URL = "https://suiscan.xyz/mainnet"


def tx(digest: object, tag: str | None = None) -> str:
    """Link to a transaction page."""
    label = tag if tag is not None else str(digest)
    return f"[{label}]({SCAN_URL}/tx/{digest})"


def object(object_id: object, tag: str | None = None) -> str:  # noqa: A001
    """Link to an object page."""
    label = tag if tag is not None else str(object_id)
    return f"[{label}]({SCAN_URL}/object/{object_id})"


def account(address: object, tag: str | None = None) -> str:
    """Link to an account's portfolio page."""
    label = tag if tag is not None else str(address)
    return f"[{label}]({SCAN_URL}/account/{address}/portfolio)"


def coin(coin_type: str, tag: str | None = None) -> str:
    """Link to a coin type's transactions page."""
    label = tag if tag is not None else coin_type
    return f"[{label}]({SCAN_URL}/coin/{coin_type}/txs)"


def checkpoint(digest: object, number: int) -> str:
    """Link to a checkpoint page, labelled with its sequence number."""
    return f"[{number}]({SCAN_URL}/checkpoint/{digest})"