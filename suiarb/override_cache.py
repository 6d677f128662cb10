"""An object store that answers from a list of overridden objects before a fallback store."""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from .objects import (
    OBJECT_START_VERSION,
    InputObjectKind,
    Object,
    ObjectReadResult,
    ObjectReadResultKind,
    ObjectRef,
    Owner,
    address_bytes,
    normalize_address,
)

logger = logging.getLogger(__name__)

SUI_CLOCK_OBJECT_ID = normalize_address("0x6")
CLOCK_TYPE = "0x2::clock::Clock"

# (object id, version)
ObjectKey = Tuple[str, int]
# Either the live object or, for a deleted one, the reference it had before deletion.
ObjectOrTombstone = Union[Object, ObjectRef]


class OverrideCacheError(Exception):
    """A read through the override cache could not be answered."""


class InvalidChildObjectAccessError(OverrideCacheError):
    """A child object was read through a parent that does not own it."""

    def __init__(self, object_id: str, given_parent: str, actual_owner: Owner) -> None:
        super().__init__(
            f"invalid child object access: {object_id} is not owned by {given_parent} "
            f"(actual owner: {actual_owner})"
        )
        self.object_id = object_id
        self.given_parent = given_parent
        self.actual_owner = actual_owner


class ObjectNotFoundError(OverrideCacheError, LookupError):
    """The object does not exist (or has been deleted)."""

    def __init__(self, object_id: str, version: Optional[int] = None) -> None:
        super().__init__(f"object not found: {object_id} (version {version})")
        self.object_id = object_id
        self.version = version


class ObjectVersionUnavailableError(OverrideCacheError):
    """An owned object reference is not available for consumption."""

    def __init__(self, provided_obj_ref: ObjectRef, current_version: int) -> None:
        super().__init__(
            f"object version unavailable for consumption: {provided_obj_ref}, current version {current_version}"
        )
        self.provided_obj_ref = provided_obj_ref
        self.current_version = current_version


class _FallbackStore(Protocol):
    def get_object(self, object_id: str) -> Optional[Object]: ...

    def get_package_object(self, object_id: str) -> Optional[Object]: ...

    def get_object_by_key(self, object_id: str, version: int) -> Optional[Object]: ...

    def get_latest_object_ref_or_tombstone(self, object_id: str) -> Optional[ObjectRef]: ...

    def get_latest_object_or_tombstone(self, object_id: str) -> Optional[Tuple[ObjectKey, ObjectOrTombstone]]: ...

    def get_live_objref(self, object_id: str) -> ObjectRef: ...

    def get_highest_pruned_checkpoint(self) -> int: ...


def clock_object(timestamp_ms: Optional[int] = None) -> Object:
    """The shared clock object, reading timestamp_ms (the current time when None)."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return Object(
        id=SUI_CLOCK_OBJECT_ID,
        version=OBJECT_START_VERSION,
        owner=Owner.shared(OBJECT_START_VERSION),
        type_=CLOCK_TYPE,
        contents=address_bytes(SUI_CLOCK_OBJECT_ID) + timestamp_ms.to_bytes(8, "little"),
        has_public_transfer=False,
    )


def _cancelled() -> OverrideCacheError:
    return OverrideCacheError("override object is in cancelled transaction")


class OverrideCache:
    """Serves overridden objects first, then falls back to an optional backing store.

    Objects fetched from the fallback by get_object are remembered by (id, version)
    so they can later be compared with what execution produced.
    """

    def __init__(self, fallback: Optional[_FallbackStore], overrides: Iterable[ObjectReadResult]) -> None:
        self.fallback = fallback
        self.overrides: List[ObjectReadResult] = list(overrides)
        self._versioned_cache: Dict[ObjectKey, Object] = {}
        self._lock = threading.RLock()

    def get_override(self, object_id: str) -> Optional[ObjectReadResult]:
        """The override for object_id; the clock always reads the current time."""
        object_id = normalize_address(object_id)
        if object_id == SUI_CLOCK_OBJECT_ID:
            return ObjectReadResult.for_object(
                InputObjectKind.shared_move_object(SUI_CLOCK_OBJECT_ID, OBJECT_START_VERSION, True),
                clock_object(),
            )
        return next((result for result in self.overrides if result.id == object_id), None)

    def get_override_object(self, object_id: str) -> Optional[Object]:
        result = self.get_override(object_id)
        if result is None:
            return None
        if result.kind is ObjectReadResultKind.CANCELLED_TRANSACTION_SHARED_OBJECT:
            raise _cancelled()
        return result.object

    def get_versioned_object_for_comparison(self, object_id: str, version: int) -> Optional[Object]:
        with self._lock:
            return self._versioned_cache.get((normalize_address(object_id), version))

    def get_package_object(self, object_id: str) -> Optional[Object]:
        result = self.get_override(object_id)
        if result is not None:
            if result.kind is ObjectReadResultKind.CANCELLED_TRANSACTION_SHARED_OBJECT:
                raise _cancelled()
            return result.object

        logger.warning("[get_package_object] override missing: %s", object_id)
        if self.fallback is None:
            return None
        return self.fallback.get_package_object(normalize_address(object_id))

    def force_reload_system_packages(self, system_package_ids: Sequence[str]) -> None:
        if self.fallback is not None and hasattr(self.fallback, "force_reload_system_packages"):
            self.fallback.force_reload_system_packages(system_package_ids)

    def get_object(self, object_id: str) -> Optional[Object]:
        result = self.get_override(object_id)
        if result is not None:
            if result.kind is ObjectReadResultKind.CANCELLED_TRANSACTION_SHARED_OBJECT:
                raise _cancelled()
            return result.object

        logger.warning("[get_object] override missing: %s", object_id)
        if self.fallback is None:
            return None
        object_id = normalize_address(object_id)
        obj = self.fallback.get_object(object_id)
        if obj is not None:
            with self._lock:
                self._versioned_cache[(object_id, obj.version)] = obj
        return obj

    def get_latest_object_ref_or_tombstone(self, object_id: str) -> Optional[ObjectRef]:
        override_object = self.get_override_object(object_id)
        if override_object is not None:
            return override_object.compute_object_reference()

        # A deleted override has no digest of its own, so the fallback answers for it too.
        logger.warning("[get_latest_object_ref_or_tombstone] override missing: %s", object_id)
        if self.fallback is None:
            return None
        return self.fallback.get_latest_object_ref_or_tombstone(normalize_address(object_id))

    def get_latest_object_or_tombstone(self, object_id: str) -> Optional[Tuple[ObjectKey, ObjectOrTombstone]]:
        result = self.get_override(object_id)
        if result is not None:
            if result.kind is ObjectReadResultKind.OBJECT:
                ref = result.object.compute_object_reference()
                return (ref[0], ref[1]), result.object
            if result.kind is ObjectReadResultKind.DELETED_SHARED_OBJECT:
                if self.fallback is None:
                    return None
                undeleted = self.fallback.get_object(normalize_address(object_id))
                if undeleted is None:
                    return None
                ref = undeleted.compute_object_reference()
                return (ref[0], ref[1]), ref
            raise _cancelled()

        logger.warning("[get_latest_object_or_tombstone] override missing: %s", object_id)
        if self.fallback is None:
            return None
        return self.fallback.get_latest_object_or_tombstone(normalize_address(object_id))

    def get_object_by_key(self, object_id: str, version: int) -> Optional[Object]:
        result = self.get_override(object_id)
        if result is not None:
            if result.kind is ObjectReadResultKind.DELETED_SHARED_OBJECT:
                return None
            if result.kind is ObjectReadResultKind.CANCELLED_TRANSACTION_SHARED_OBJECT:
                raise _cancelled()
            if result.object.version == version:
                return result.object

        logger.warning("[get_object_by_key] override missing: %s, version: %s", object_id, version)
        if self.fallback is None:
            return None
        return self.fallback.get_object_by_key(normalize_address(object_id), version)

    def multi_get_objects_by_key(self, object_keys: Iterable[ObjectKey]) -> List[Optional[Object]]:
        return [self.get_object_by_key(object_id, version) for object_id, version in object_keys]

    def object_exists_by_key(self, object_id: str, version: int) -> bool:
        return self.get_object_by_key(object_id, version) is not None

    def multi_object_exists_by_key(self, object_keys: Iterable[ObjectKey]) -> List[bool]:
        return [self.object_exists_by_key(object_id, version) for object_id, version in object_keys]

    def find_object_lt_or_eq_version(self, object_id: str, version: int) -> Optional[Object]:
        obj = self.get_object(object_id)
        if obj is not None and obj.version <= version:
            return obj
        return None

    def read_child_object(self, parent: str, child: str, child_version_upper_bound: int) -> Optional[Object]:
        """A dynamic child of parent no newer than the bound; raises if parent does not own it."""
        child_object = self.find_object_lt_or_eq_version(child, child_version_upper_bound)
        if child_object is None:
            return None
        if child_object.owner != Owner.object_owner(parent):
            raise InvalidChildObjectAccessError(
                normalize_address(child), normalize_address(parent), child_object.owner
            )
        return child_object

    def get_live_objref(self, object_id: str) -> ObjectRef:
        result = self.get_override(object_id)
        if result is not None:
            if result.kind is ObjectReadResultKind.OBJECT:
                return result.object.compute_object_reference()
            if result.kind is ObjectReadResultKind.DELETED_SHARED_OBJECT:
                raise ObjectNotFoundError(normalize_address(object_id))
            raise _cancelled()

        logger.warning("[get_live_objref] override missing: %s", object_id)
        if self.fallback is None:
            raise OverrideCacheError("No fallback")
        return self.fallback.get_live_objref(normalize_address(object_id))

    def check_owned_objects_are_live(self, owned_object_refs: Iterable[ObjectRef]) -> None:
        for ref in owned_object_refs:
            if self.get_object_by_key(ref[0], ref[1]) is None:
                raise ObjectVersionUnavailableError(ref, ref[1])

    def get_highest_pruned_checkpoint(self) -> int:
        if self.fallback is None:
            return 0
        return self.fallback.get_highest_pruned_checkpoint()