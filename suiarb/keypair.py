"""Ed25519 key pairs, Sui-style signatures, digests and base58."""

from __future__ import annotations

import base64
import binascii
import hashlib

from nacl.signing import SigningKey

ED25519_FLAG = 0x00
# Intent scope TransactionData, version V0, app id Sui.
SUI_TRANSACTION_INTENT = bytes([0, 0, 0])

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: index for index, char in enumerate(_BASE58_ALPHABET)}


def blake2b256(data: bytes) -> bytes:
    """The 32-byte BLAKE2b digest used throughout Sui."""
    return hashlib.blake2b(data, digest_size=32).digest()


def intent_message_digest(tx_bytes: bytes) -> bytes:
    """Digest of a BCS-encoded transaction wrapped in the Sui transaction intent."""
    return blake2b256(SUI_TRANSACTION_INTENT + tx_bytes)


def base58_encode(data: bytes) -> str:
    """Encode bytes with the Bitcoin base58 alphabet."""
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_BASE58_ALPHABET[remainder])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading + "".join(reversed(digits))


def base58_decode(text: str) -> bytes:
    """Decode a base58 string; raises ValueError on characters outside the alphabet."""
    number = 0
    for char in text:
        try:
            number = number * 58 + _BASE58_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character: {char!r}") from None
    leading = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading + body


class Ed25519KeyPair:
    """An Ed25519 key pair that produces Sui serialized signatures."""

    def __init__(self, seed: bytes) -> None:
        if len(seed) != 32:
            raise ValueError(f"an Ed25519 private key is 32 bytes, got {len(seed)}")
        self._seed = bytes(seed)
        self._signing_key = SigningKey(self._seed)

    @classmethod
    def generate(cls) -> "Ed25519KeyPair":
        return cls(bytes(SigningKey.generate()))

    @property
    def public_key(self) -> bytes:
        return bytes(self._signing_key.verify_key)

    @property
    def address(self) -> str:
        return "0x" + blake2b256(bytes([ED25519_FLAG]) + self.public_key).hex()

    def encode(self) -> str:
        """Keystore form: base64 of the scheme flag followed by the private key."""
        return base64.b64encode(bytes([ED25519_FLAG]) + self._seed).decode("ascii")

    def sign(self, message: bytes) -> str:
        """Sign and return base64 of flag || signature || public key."""
        signature = self._signing_key.sign(message).signature
        return base64.b64encode(bytes([ED25519_FLAG]) + signature + self.public_key).decode("ascii")

    def __repr__(self) -> str:
        return f"Ed25519KeyPair(address={self.address})"


def parse_keypair(encoded: str) -> Ed25519KeyPair:
    """Read a key pair from its keystore form (base64 of flag and private key)."""
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 key pair: {exc}") from None
    if not raw:
        raise ValueError("empty key pair")
    flag, seed = raw[0], raw[1:]
    if flag != ED25519_FLAG:
        raise ValueError(f"unsupported signature scheme flag: {flag}")
    return Ed25519KeyPair(seed)