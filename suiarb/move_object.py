"""Annotated Move values and typed field extraction from Move structs."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .objects import Object, ObjectArg, normalize_address


class FieldExtractionError(ValueError):
    """A field is missing from a Move struct or holds a value of the wrong kind."""


class MoveValueKind(enum.Enum):
    BOOL = "bool"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    ADDRESS = "address"
    SIGNER = "signer"
    VECTOR = "vector"
    STRUCT = "struct"


@dataclass(frozen=True)
class MoveValue:
    kind: MoveValueKind
    value: Any


@dataclass(frozen=True)
class MoveStruct:
    type_: str
    fields: Tuple[Tuple[str, MoveValue], ...] = ()


def extract_field_from_move_struct(move_struct: MoveStruct, field_name: str) -> Optional[MoveValue]:
    """The value of the first field with this name, or None."""
    return next((value for name, value in move_struct.fields if name == field_name), None)


def _field(move_struct: MoveStruct, field_name: str) -> MoveValue:
    value = extract_field_from_move_struct(move_struct, field_name)
    if value is None:
        raise FieldExtractionError("field not found")
    return value


def _expect(value: MoveValue, kind: MoveValueKind, what: str) -> Any:
    if value.kind is not kind:
        raise FieldExtractionError(f"expected {what}")
    return value.value


def _vector_of(move_struct: MoveStruct, field_name: str, kind: MoveValueKind, what: str) -> list:
    items = _expect(_field(move_struct, field_name), MoveValueKind.VECTOR, "vector")
    return [_expect(item, kind, what) for item in items]


def extract_struct_from_move_struct(move_struct: MoveStruct, field_name: str) -> MoveStruct:
    return _expect(_field(move_struct, field_name), MoveValueKind.STRUCT, "struct")


def extract_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> List[MoveValue]:
    return list(_expect(_field(move_struct, field_name), MoveValueKind.VECTOR, "vector"))


def extract_object_id_from_move_struct(move_struct: MoveStruct, field_name: str) -> str:
    return normalize_address(_expect(_field(move_struct, field_name), MoveValueKind.ADDRESS, "address"))


def extract_struct_array_from_move_struct(move_struct: MoveStruct, field_name: str) -> List[MoveStruct]:
    items = _expect(_field(move_struct, field_name), MoveValueKind.VECTOR, "array")
    return [_expect(item, MoveValueKind.STRUCT, "struct") for item in items]


def extract_u128_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveValueKind.U128, "u128")


def extract_u64_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveValueKind.U64, "u64")


def extract_u32_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveValueKind.U32, "u32")


def extract_bool_from_move_struct(move_struct: MoveStruct, field_name: str) -> bool:
    return _expect(_field(move_struct, field_name), MoveValueKind.BOOL, "bool")


def extract_u64_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> List[int]:
    return _vector_of(move_struct, field_name, MoveValueKind.U64, "u64")


def extract_u128_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> List[int]:
    return _vector_of(move_struct, field_name, MoveValueKind.U128, "u128")


def shared_obj_arg(obj: Object, mutable: bool) -> ObjectArg:
    """A shared-object argument for obj; a non-shared object gets initial version 0."""
    initial_shared_version = obj.owner.initial_shared_version if obj.owner.is_shared else 0
    return ObjectArg.shared_object(obj.id, initial_shared_version, mutable)