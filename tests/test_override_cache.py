import time

import pytest

from suiarb.objects import (
    OBJECT_START_VERSION,
    InputObjectKind,
    Object,
    ObjectReadResult,
    Owner,
    normalize_address,
)
from suiarb.override_cache import (
    CLOCK_TYPE,
    SUI_CLOCK_OBJECT_ID,
    InvalidChildObjectAccessError,
    ObjectNotFoundError,
    ObjectVersionUnavailableError,
    OverrideCache,
    OverrideCacheError,
    clock_object,
)

OWNER = "0xa"


def make_object(object_id, version=3, owner=None, type_="0x2::foo::Bar", contents=b"x"):
    return Object(
        id=object_id,
        version=version,
        owner=owner or Owner.address_owner(OWNER),
        type_=type_,
        contents=contents,
    )


def owned_override(obj):
    return ObjectReadResult.for_object(
        InputObjectKind.imm_or_owned_move_object(obj.compute_object_reference()), obj
    )


def deleted_override(object_id):
    kind = InputObjectKind.shared_move_object(object_id, 5, True)
    return ObjectReadResult.deleted_shared_object(kind, 9, "digest")


class FakeStore:
    def __init__(self, objects=(), pruned=0):
        self.objects = {o.id: o for o in objects}
        self.pruned = pruned

    def get_object(self, object_id):
        return self.objects.get(object_id)

    def get_package_object(self, object_id):
        return self.objects.get(object_id)

    def get_object_by_key(self, object_id, version):
        obj = self.objects.get(object_id)
        return obj if obj is not None and obj.version == version else None

    def get_latest_object_ref_or_tombstone(self, object_id):
        obj = self.objects.get(object_id)
        return obj.compute_object_reference() if obj else None

    def get_latest_object_or_tombstone(self, object_id):
        obj = self.objects.get(object_id)
        return ((obj.id, obj.version), obj) if obj else None

    def get_live_objref(self, object_id):
        obj = self.objects.get(object_id)
        if obj is None:
            raise KeyError(object_id)
        return obj.compute_object_reference()

    def get_highest_pruned_checkpoint(self):
        return self.pruned


def test_clock_object_layout():
    clock = clock_object(1234)
    assert clock.id == SUI_CLOCK_OBJECT_ID
    assert clock.type_ == CLOCK_TYPE
    assert clock.owner == Owner.shared(OBJECT_START_VERSION)
    assert clock.version == OBJECT_START_VERSION
    assert clock.contents[32:] == (1234).to_bytes(8, "little")
    assert clock.contents[:32] == bytes.fromhex(SUI_CLOCK_OBJECT_ID[2:])


def test_clock_override_reads_current_time():
    cache = OverrideCache(None, [])
    before = time.time_ns() // 1_000_000
    result = cache.get_override("0x6")
    after = time.time_ns() // 1_000_000
    assert result.input_object_kind.is_shared
    assert result.input_object_kind.mutable is True
    stamp = int.from_bytes(result.object.contents[32:], "little")
    assert before <= stamp <= after


def test_override_object_served_without_fallback():
    obj = make_object("0x10")
    cache = OverrideCache(None, [owned_override(obj)])
    assert cache.get_object("0x10") == obj
    assert cache.get_override_object("0x10") == obj
    assert cache.get_package_object("0x10") == obj
    assert cache.get_object("0x11") is None


def test_deleted_override_hides_object():
    fallback_obj = make_object("0x20")
    cache = OverrideCache(FakeStore([fallback_obj]), [deleted_override("0x20")])
    assert cache.get_object("0x20") is None
    assert cache.get_override_object("0x20") is None
    assert cache.get_object_by_key("0x20", 3) is None
    assert cache.get_package_object("0x20") is None


def test_fallback_reads_are_recorded_by_version():
    obj = make_object("0x30", version=7)
    cache = OverrideCache(FakeStore([obj]), [])
    assert cache.get_versioned_object_for_comparison("0x30", 7) is None
    assert cache.get_object("0x30") == obj
    assert cache.get_versioned_object_for_comparison("0x30", 7) == obj
    assert cache.get_versioned_object_for_comparison("0x30", 8) is None


def test_get_object_by_key_version_mismatch_uses_fallback():
    override = make_object("0x40", version=5)
    older = make_object("0x40", version=4)
    cache = OverrideCache(FakeStore([older]), [owned_override(override)])
    assert cache.get_object_by_key("0x40", 5) == override
    assert cache.get_object_by_key("0x40", 4) == older
    assert cache.get_object_by_key("0x40", 6) is None
    assert cache.multi_get_objects_by_key([("0x40", 5), ("0x40", 6)]) == [override, None]
    assert cache.multi_object_exists_by_key([("0x40", 4), ("0x40", 6)]) == [True, False]


def test_latest_ref_for_deleted_override_uses_fallback():
    fallback_obj = make_object("0x50")
    cache = OverrideCache(FakeStore([fallback_obj]), [deleted_override("0x50")])
    assert cache.get_latest_object_ref_or_tombstone("0x50") == fallback_obj.compute_object_reference()


def test_latest_object_or_tombstone():
    live = make_object("0x60", version=2)
    gone = make_object("0x61", version=8)
    cache = OverrideCache(FakeStore([gone]), [owned_override(live), deleted_override("0x61")])
    key, value = cache.get_latest_object_or_tombstone("0x60")
    assert key == (live.id, 2)
    assert value == live
    key, value = cache.get_latest_object_or_tombstone("0x61")
    assert value == gone.compute_object_reference()
    assert key == (gone.id, 8)
    assert OverrideCache(None, [deleted_override("0x61")]).get_latest_object_or_tombstone("0x61") is None


def test_find_object_lt_or_eq_version():
    obj = make_object("0x70", version=5)
    cache = OverrideCache(None, [owned_override(obj)])
    assert cache.find_object_lt_or_eq_version("0x70", 5) == obj
    assert cache.find_object_lt_or_eq_version("0x70", 6) == obj
    assert cache.find_object_lt_or_eq_version("0x70", 4) is None


def test_read_child_object_checks_owner():
    child = make_object("0x80", version=2, owner=Owner.object_owner("0x81"))
    cache = OverrideCache(None, [owned_override(child)])
    assert cache.read_child_object("0x81", "0x80", 3) == child
    assert cache.read_child_object("0x81", "0x99", 3) is None
    with pytest.raises(InvalidChildObjectAccessError) as info:
        cache.read_child_object("0x82", "0x80", 3)
    assert info.value.given_parent == normalize_address("0x82")
    assert info.value.actual_owner == Owner.object_owner("0x81")


def test_get_live_objref():
    obj = make_object("0x90")
    cache = OverrideCache(None, [owned_override(obj), deleted_override("0x91")])
    assert cache.get_live_objref("0x90") == obj.compute_object_reference()
    with pytest.raises(ObjectNotFoundError):
        cache.get_live_objref("0x91")
    with pytest.raises(OverrideCacheError, match="No fallback"):
        cache.get_live_objref("0x92")
    other = make_object("0x92")
    with_fallback = OverrideCache(FakeStore([other]), [])
    assert with_fallback.get_live_objref("0x92") == other.compute_object_reference()


def test_check_owned_objects_are_live():
    obj = make_object("0xa0", version=4)
    cache = OverrideCache(None, [owned_override(obj)])
    assert cache.check_owned_objects_are_live([obj.compute_object_reference()]) is None
    stale = (obj.id, 3, "digest")
    with pytest.raises(ObjectVersionUnavailableError) as info:
        cache.check_owned_objects_are_live([stale])
    assert info.value.provided_obj_ref == stale
    assert info.value.current_version == 3


def test_cancelled_override_is_an_error():
    kind = InputObjectKind.shared_move_object("0xb0", 5, True)
    cancelled = ObjectReadResult.cancelled_transaction_shared_object(kind, 6)
    cache = OverrideCache(None, [cancelled])
    with pytest.raises(OverrideCacheError):
        cache.get_object("0xb0")
    with pytest.raises(OverrideCacheError):
        cache.get_live_objref("0xb0")


def test_highest_pruned_checkpoint():
    assert OverrideCache(None, []).get_highest_pruned_checkpoint() == 0
    assert OverrideCache(FakeStore(pruned=42), []).get_highest_pruned_checkpoint() == 42