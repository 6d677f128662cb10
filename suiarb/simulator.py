"""Simulation context and results, and the interface every simulator implements."""

from __future__ import annotations

import abc
import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, ClassVar, List, Mapping, Optional, Tuple

from .objects import Object, ObjectReadResult


@dataclass
class SimEpoch:
    epoch_id: int = 0
    epoch_start_timestamp: int = 0
    epoch_duration_ms: int = 0
    gas_price: int = 0

    def is_stale(self) -> bool:
        """True while the current time is before the end of this epoch."""
        now_ms = time.time_ns() // 1_000_000
        return now_ms < self.epoch_start_timestamp + self.epoch_duration_ms


def sim_epoch_from_summary(summary: Mapping[str, Any]) -> SimEpoch:
    """Build an epoch from a system state summary as returned by the JSON-RPC API."""
    return SimEpoch(
        epoch_id=int(summary["epoch"]),
        epoch_start_timestamp=int(summary["epochStartTimestampMs"]),
        epoch_duration_ms=int(summary["epochDurationMs"]),
        gas_price=int(summary["referenceGasPrice"]),
    )


@dataclass
class SimulateCtx:
    epoch: SimEpoch = field(default_factory=SimEpoch)
    override_objects: List[ObjectReadResult] = field(default_factory=list)
    # (coin, amount): a coin assumed to be held (flash-loaned) during execution
    borrowed_coin: Optional[Tuple[Object, int]] = None

    def with_borrowed_coin(self, borrowed_coin: Tuple[Object, int]) -> None:
        self.borrowed_coin = borrowed_coin

    def with_gas_price(self, gas_price: int) -> None:
        self.epoch = replace(self.epoch, gas_price=gas_price)


@dataclass
class SimulateResult:
    effects: Any
    events: Any
    object_changes: List[ObjectReadResult] = field(default_factory=list)
    balance_changes: List[Any] = field(default_factory=list)
    cache_misses: int = 0


class Simulator(abc.ABC):
    """Something that dry-runs transactions against some view of chain state."""

    name: ClassVar[str] = "Simulator"
    # Layouts known to this simulator, keyed by object id; none by default.
    object_layouts: ClassVar[Mapping[str, Any]] = MappingProxyType({})

    @abc.abstractmethod
    async def simulate(self, tx: Any, ctx: SimulateCtx) -> SimulateResult:
        """Execute tx under ctx and report its effects."""

    @abc.abstractmethod
    async def get_object(self, obj_id: str) -> Optional[Object]:
        """The latest version of an object, or None."""

    def get_object_layout(self, obj_id: str) -> Optional[Any]:
        """The Move struct layout of an object's type, or None when unknown."""
        return self.object_layouts.get(obj_id)