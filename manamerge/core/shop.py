"""Shop catalogue — consumables, summon luck table, upgrade limits.

Prices are never stored here as flat numbers: each consumable declares how
many seconds of current production it costs, with a minimum floor, so the
shop scales with the player's economy.
"""

from __future__ import annotations

from dataclasses import dataclass

from manamerge.core.enums import ConsumableId


# ---------------------------------------------------------------------------
# Consumables
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConsumableDef:
    """Immutable blueprint for one inventory item."""

    item_id: ConsumableId
    name: str
    description: str
    seconds: float            # price = max(min_price, seconds * production rate)
    min_price: float
    gated: bool = False       # only sold once summon luck is maxed


CONSUMABLE_DEFS: dict[ConsumableId, ConsumableDef] = {
    ConsumableId.SHUFFLE: ConsumableDef(
        ConsumableId.SHUFFLE, "Shuffle Scroll",
        "Rearranges every movable piece on the current board.",
        seconds=30.0, min_price=300.0,
    ),
    ConsumableId.BOMB: ConsumableDef(
        ConsumableId.BOMB, "Holy Bomb",
        "Defeats every hostile on the current board.",
        seconds=60.0, min_price=500.0,
    ),
    ConsumableId.BARRIER: ConsumableDef(
        ConsumableId.BARRIER, "Barrier Charm",
        "Hostiles are frozen for a while.",
        seconds=90.0, min_price=800.0,
    ),
    ConsumableId.BOOST: ConsumableDef(
        ConsumableId.BOOST, "Mana Boost",
        "Multiplies mana income for a while.",
        seconds=120.0, min_price=1_000.0,
    ),
    ConsumableId.ELIXIR: ConsumableDef(
        ConsumableId.ELIXIR, "Ascension Elixir",
        "Raises every creature on the current board by one tier.",
        seconds=600.0, min_price=5_000.0, gated=True,
    ),
    ConsumableId.ARMAGEDDON: ConsumableDef(
        ConsumableId.ARMAGEDDON, "Armageddon",
        "Defeats every hostile in every region and breaks all seals.",
        seconds=1_200.0, min_price=10_000.0, gated=True,
    ),
}


def consumable_def(item_id: ConsumableId) -> ConsumableDef:
    return CONSUMABLE_DEFS[ConsumableId(item_id)]


# ---------------------------------------------------------------------------
# Summon luck: per-level tier distribution (rows sum to 1)
# ---------------------------------------------------------------------------

SUMMON_LUCK_TABLE: dict[int, tuple[tuple[int, float], ...]] = {
    1: ((1, 0.75), (2, 0.20), (3, 0.05)),
    2: ((1, 0.65), (2, 0.30), (3, 0.05)),
    3: ((1, 0.55), (2, 0.35), (3, 0.10)),
    4: ((1, 0.45), (2, 0.40), (3, 0.15)),
    5: ((1, 0.30), (2, 0.50), (3, 0.20)),
}
MIN_LUCK_LEVEL = 1
MAX_LUCK_LEVEL = max(SUMMON_LUCK_TABLE)
