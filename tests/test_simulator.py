import time

import pytest

from suiarb.objects import Object, Owner
from suiarb.simulator import (
    SimEpoch,
    SimulateCtx,
    SimulateResult,
    Simulator,
    sim_epoch_from_summary,
)


class EchoSimulator(Simulator):
    name = "EchoSimulator"

    def __init__(self, objects):
        self.objects = objects

    async def simulate(self, tx, ctx):
        return SimulateResult(effects=tx, events=[], object_changes=list(ctx.override_objects))

    async def get_object(self, obj_id):
        return self.objects.get(obj_id)


def test_is_stale_during_epoch():
    now_ms = time.time_ns() // 1_000_000
    assert SimEpoch(epoch_start_timestamp=now_ms, epoch_duration_ms=3_600_000).is_stale() is True


def test_is_not_stale_after_epoch_end():
    assert SimEpoch(epoch_start_timestamp=0, epoch_duration_ms=0).is_stale() is False


def test_sim_epoch_from_summary():
    summary = {
        "epoch": "612",
        "epochStartTimestampMs": "1730000000000",
        "epochDurationMs": 86400000,
        "referenceGasPrice": "750",
    }
    assert sim_epoch_from_summary(summary) == SimEpoch(612, 1730000000000, 86400000, 750)


def test_sim_epoch_from_summary_missing_field():
    with pytest.raises(KeyError):
        sim_epoch_from_summary({"epoch": "1"})


def test_ctx_defaults():
    ctx = SimulateCtx()
    assert ctx.borrowed_coin is None
    assert ctx.override_objects == []
    assert ctx.epoch == SimEpoch()


def test_with_gas_price_does_not_touch_shared_epoch():
    epoch = SimEpoch(epoch_id=3, gas_price=750)
    ctx = SimulateCtx(epoch=epoch)
    ctx.with_gas_price(1000)
    assert ctx.epoch.gas_price == 1000
    assert ctx.epoch.epoch_id == 3
    assert epoch.gas_price == 750


def test_with_borrowed_coin():
    coin = Object.new_gas_coin("0x1338", Owner.address_owner("0x1"), 10)
    ctx = SimulateCtx()
    ctx.with_borrowed_coin((coin, 10))
    assert ctx.borrowed_coin == (coin, 10)


def test_simulator_is_abstract():
    with pytest.raises(TypeError):
        Simulator()


@pytest.mark.asyncio
async def test_subclass_simulate_and_get_object():
    coin = Object.new_gas_coin("0x1338", Owner.address_owner("0x1"), 10)
    sim = EchoSimulator({coin.id: coin})
    result = await sim.simulate("tx", SimulateCtx())
    assert result.effects == "tx"
    assert result.cache_misses == 0
    assert await sim.get_object(coin.id) == coin
    assert await sim.get_object("0x2") is None
    assert Simulator.get_object_layout(sim, coin.id) is None