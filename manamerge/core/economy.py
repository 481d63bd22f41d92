"""Economy state: balance, derived production rate, buffs, upgrades, inventory."""

from __future__ import annotations

from dataclasses import dataclass, field

from manamerge.core.enums import ConsumableId
from manamerge.core.shop import MIN_LUCK_LEVEL


def _empty_inventory() -> dict[ConsumableId, int]:
    return {cid: 0 for cid in ConsumableId}


@dataclass(slots=True)
class Upgrades:
    """Permanent upgrades.

    Summon luck is stored as a level; the offline parameters are stored as
    stat values and their level is derived when a price is needed.
    """

    summon_luck: int = MIN_LUCK_LEVEL
    offline_efficiency: float = 0.25
    offline_max_seconds: float = 7200.0

    def copy(self) -> Upgrades:
        return Upgrades(
            summon_luck=self.summon_luck,
            offline_efficiency=self.offline_efficiency,
            offline_max_seconds=self.offline_max_seconds,
        )


@dataclass(slots=True)
class EconomyState:
    """Mana balance and everything that feeds or drains it.

    ``production_rate`` is derived from the boards and may only be written
    through ``recompute_production``.
    """

    mana: float = 0.0
    upgrades: Upgrades = field(default_factory=Upgrades)
    inventory: dict[ConsumableId, int] = field(default_factory=_empty_inventory)
    boost_multiplier: float = 2.0
    boost_expires_at: float | None = None
    barrier_expires_at: float | None = None
    _production_rate: float = 0.0

    def __post_init__(self) -> None:
        if self.mana < 0:
            raise ValueError(f"Mana balance cannot start negative ({self.mana})")
        for cid in ConsumableId:
            self.inventory.setdefault(cid, 0)

    # -- balance --

    def add(self, amount: float) -> None:
        if amount > 0:
            self.mana += amount

    def consume(self, amount: float) -> bool:
        """Spend *amount* if affordable. Returns False and changes nothing otherwise."""
        if amount < 0 or self.mana < amount:
            return False
        self.mana -= amount
        return True

    def drain(self, amount: float) -> float:
        """Remove up to *amount*; returns what was actually taken."""
        taken = min(max(amount, 0.0), self.mana)
        self.mana -= taken
        return taken

    # -- production --

    @property
    def production_rate(self) -> float:
        return self._production_rate

    def recompute_production(self, rate: float) -> None:
        self._production_rate = max(rate, 0.0)

    # -- buffs --

    def boost_active(self, now: float) -> bool:
        return self.boost_expires_at is not None and now < self.boost_expires_at

    def barrier_active(self, now: float) -> bool:
        return self.barrier_expires_at is not None and now < self.barrier_expires_at

    def temporary_multiplier(self, now: float) -> float:
        return self.boost_multiplier if self.boost_active(now) else 1.0

    # -- inventory --

    def add_item(self, item_id: ConsumableId, count: int = 1) -> None:
        if count <= 0:
            return
        self.inventory[item_id] = self.inventory.get(item_id, 0) + count

    def take_item(self, item_id: ConsumableId) -> bool:
        if self.inventory.get(item_id, 0) <= 0:
            return False
        self.inventory[item_id] -= 1
        return True
