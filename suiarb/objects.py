"""On-chain object model: owners, objects, references and transaction inputs."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .keypair import base58_encode, blake2b256

OBJECT_START_VERSION = 1
GENESIS_MARKER_DIGEST = base58_encode(bytes(32))
GAS_COIN_TYPE = "0x2::coin::Coin<0x2::sui::SUI>"

# (object id, version, digest)
ObjectRef = Tuple[str, int, str]

_HEX_BODY = re.compile(r"[0-9a-f]{1,64}")


def normalize_address(value: str) -> str:
    """Return the canonical 0x-prefixed, 64-digit lower-case form of an address."""
    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not _HEX_BODY.fullmatch(text):
        raise ValueError(f"invalid address: {value!r}")
    return "0x" + text.rjust(64, "0")


def address_bytes(value: str) -> bytes:
    """The 32 raw bytes of an address."""
    return bytes.fromhex(normalize_address(value)[2:])


def _length_prefixed(data: bytes) -> bytes:
    return len(data).to_bytes(4, "little") + data


class OwnerKind(enum.Enum):
    ADDRESS_OWNER = 0
    OBJECT_OWNER = 1
    SHARED = 2
    IMMUTABLE = 3


@dataclass(frozen=True)
class Owner:
    kind: OwnerKind
    address: Optional[str] = None
    initial_shared_version: Optional[int] = None

    @classmethod
    def address_owner(cls, address: str) -> "Owner":
        return cls(OwnerKind.ADDRESS_OWNER, address=normalize_address(address))

    @classmethod
    def object_owner(cls, object_id: str) -> "Owner":
        return cls(OwnerKind.OBJECT_OWNER, address=normalize_address(object_id))

    @classmethod
    def shared(cls, initial_shared_version: int) -> "Owner":
        return cls(OwnerKind.SHARED, initial_shared_version=initial_shared_version)

    @classmethod
    def immutable(cls) -> "Owner":
        return cls(OwnerKind.IMMUTABLE)

    @property
    def is_shared(self) -> bool:
        return self.kind is OwnerKind.SHARED

    def encode(self) -> bytes:
        tag = bytes([self.kind.value])
        if self.address is not None:
            return tag + address_bytes(self.address)
        if self.initial_shared_version is not None:
            return tag + self.initial_shared_version.to_bytes(8, "little")
        return tag


@dataclass(frozen=True)
class Object:
    """A versioned object; a package is an object without a Move type."""

    id: str
    version: int
    owner: Owner
    type_: Optional[str]
    contents: bytes = b""
    has_public_transfer: bool = False
    previous_transaction: str = GENESIS_MARKER_DIGEST
    storage_rebate: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_address(self.id))

    @classmethod
    def new_gas_coin(
        cls, object_id: str, owner: Owner, value: int, version: int = OBJECT_START_VERSION
    ) -> "Object":
        """A SUI gas coin holding value MIST."""
        contents = address_bytes(object_id) + value.to_bytes(8, "little")
        return cls(
            id=object_id,
            version=version,
            owner=owner,
            type_=GAS_COIN_TYPE,
            contents=contents,
            has_public_transfer=True,
        )

    @property
    def is_package(self) -> bool:
        return self.type_ is None

    @property
    def coin_value(self) -> Optional[int]:
        """The balance of a coin object, or None when this is not a coin."""
        if self.type_ is None or not self.type_.startswith("0x2::coin::Coin<") or len(self.contents) != 40:
            return None
        return int.from_bytes(self.contents[32:40], "little")

    def with_version(self, version: int) -> "Object":
        return replace(self, version=version)

    def digest(self) -> str:
        encoded = b"".join(
            (
                address_bytes(self.id),
                self.version.to_bytes(8, "little"),
                self.owner.encode(),
                _length_prefixed((self.type_ or "").encode("utf-8")),
                bytes([self.is_package, self.has_public_transfer]),
                _length_prefixed(self.contents),
                _length_prefixed(self.previous_transaction.encode("utf-8")),
                self.storage_rebate.to_bytes(8, "little"),
            )
        )
        return base58_encode(blake2b256(encoded))

    def compute_object_reference(self) -> ObjectRef:
        return (self.id, self.version, self.digest())


@dataclass(frozen=True)
class InputObjectKind:
    """How a transaction names one of its inputs: a package, a shared object or an owned object."""

    object_id: str
    object_ref: Optional[ObjectRef] = None
    initial_shared_version: Optional[int] = None
    mutable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "object_id", normalize_address(self.object_id))
        if self.object_ref is not None and self.initial_shared_version is not None:
            raise ValueError("an input is either owned or shared, not both")

    @classmethod
    def move_package(cls, object_id: str) -> "InputObjectKind":
        return cls(object_id)

    @classmethod
    def shared_move_object(cls, object_id: str, initial_shared_version: int, mutable: bool) -> "InputObjectKind":
        return cls(object_id, initial_shared_version=initial_shared_version, mutable=mutable)

    @classmethod
    def imm_or_owned_move_object(cls, object_ref: ObjectRef) -> "InputObjectKind":
        return cls(object_ref[0], object_ref=object_ref)

    @property
    def is_package(self) -> bool:
        return self.object_ref is None and self.initial_shared_version is None

    @property
    def is_shared(self) -> bool:
        return self.initial_shared_version is not None

    @property
    def version(self) -> Optional[int]:
        return self.object_ref[1] if self.object_ref is not None else None


class ObjectReadResultKind(enum.Enum):
    OBJECT = "object"
    DELETED_SHARED_OBJECT = "deleted_shared_object"
    CANCELLED_TRANSACTION_SHARED_OBJECT = "cancelled_transaction_shared_object"


@dataclass(frozen=True)
class ObjectReadResult:
    """An input as it was read: the object itself, or a marker for a deleted or cancelled shared object."""

    input_object_kind: InputObjectKind
    kind: ObjectReadResultKind = ObjectReadResultKind.OBJECT
    object: Optional[Object] = None
    version: Optional[int] = None
    digest: Optional[str] = None

    def __post_init__(self) -> None:
        has_object = self.object is not None
        if has_object != (self.kind is ObjectReadResultKind.OBJECT):
            raise ValueError("an object is present exactly when the read result kind is OBJECT")

    @classmethod
    def for_object(cls, input_object_kind: InputObjectKind, obj: Object) -> "ObjectReadResult":
        return cls(input_object_kind, ObjectReadResultKind.OBJECT, object=obj)

    @classmethod
    def deleted_shared_object(
        cls, input_object_kind: InputObjectKind, version: int, digest: str
    ) -> "ObjectReadResult":
        return cls(input_object_kind, ObjectReadResultKind.DELETED_SHARED_OBJECT, version=version, digest=digest)

    @classmethod
    def cancelled_transaction_shared_object(
        cls, input_object_kind: InputObjectKind, version: int
    ) -> "ObjectReadResult":
        return cls(input_object_kind, ObjectReadResultKind.CANCELLED_TRANSACTION_SHARED_OBJECT, version=version)

    @property
    def id(self) -> str:
        return self.input_object_kind.object_id


@dataclass(frozen=True)
class ObjectArg:
    """An object argument of a programmable transaction."""

    object_id: str
    initial_shared_version: Optional[int] = None
    mutable: bool = False
    object_ref: Optional[ObjectRef] = None
    receiving: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "object_id", normalize_address(self.object_id))

    @classmethod
    def shared_object(cls, object_id: str, initial_shared_version: int, mutable: bool) -> "ObjectArg":
        return cls(object_id, initial_shared_version=initial_shared_version, mutable=mutable)

    @classmethod
    def imm_or_owned_object(cls, object_ref: ObjectRef) -> "ObjectArg":
        return cls(object_ref[0], object_ref=object_ref)

    @classmethod
    def receiving_object(cls, object_ref: ObjectRef) -> "ObjectArg":
        return cls(object_ref[0], object_ref=object_ref, receiving=True)

    @property
    def is_shared(self) -> bool:
        return self.initial_shared_version is not None