"""Save, load, legacy migration and offline reconciliation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from manamerge.core.board import Board
from manamerge.core.economy import Upgrades
from manamerge.core.enums import ConsumableId, HostileVariant, RegionId, Severity
from manamerge.core.game_state import GameState
from manamerge.core.models import Vector2, make_creature, make_hostile
from manamerge.core.regions import DEFAULT_REGION, RegionState, fresh_regions
from manamerge.persistence import records as rec
from manamerge.persistence.offline import offline_reward
from manamerge.systems.economy import aggregate_production

if TYPE_CHECKING:
    from manamerge.config import GameConfig
    from manamerge.persistence.store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Timestamps above this are epoch milliseconds (legacy saves), not seconds.
_MILLIS_THRESHOLD = 1e11


@dataclass(slots=True)
class LoadedState:
    """Everything read back from a store, before offline reconciliation."""

    regions: dict[RegionId, RegionState]
    active_region: RegionId = DEFAULT_REGION
    mana: float = 0.0
    upgrades: Upgrades = field(default_factory=Upgrades)
    inventory: dict[ConsumableId, int] = field(default_factory=dict)
    boost_expires_at: float | None = None
    barrier_expires_at: float | None = None
    defeats: int = 0
    tick: int = 0
    action_seq: int = 0
    last_saved: float | None = None
    migrated: bool = False


# ---------------------------------------------------------------------------
# Board <-> record
# ---------------------------------------------------------------------------

def board_to_record(board: Board) -> rec.BoardRecord:
    cells: list[rec.CellRecord] = []
    for cell in board.cells():
        if cell.entity is None and not cell.locked:
            continue
        entity = None
        if cell.entity is not None:
            e = cell.entity
            entity = rec.EntityRecord(
                kind="hostile" if e.is_hostile else "creature",
                tier=e.tier,
                region=e.origin_region,
                variant=e.variant.name.lower() if e.variant is not None else None,
            )
        cells.append(rec.CellRecord(x=cell.x, y=cell.y, entity=entity, locked=cell.locked))
    return rec.BoardRecord(width=board.width, height=board.height, cells=cells)


def board_from_record(record: rec.BoardRecord, max_tier: int) -> Board:
    board = Board(record.width, record.height)
    for c in record.cells:
        pos = Vector2(c.x, c.y)
        board.set_locked(pos, c.locked)
        if c.entity is None:
            continue
        if c.entity.kind == "hostile":
            board.set(pos, make_hostile(c.entity.tier, c.entity.hostile_variant, max_tier, c.entity.region))
        else:
            board.set(pos, make_creature(c.entity.tier, max_tier, c.entity.region))
    return board


def board_from_legacy(rows: list[list[rec.LegacyCell]], width: int, height: int, max_tier: int) -> Board:
    """Convert the old single-board grid; cells outside the current size are dropped."""
    board = Board(width, height)
    for row in rows:
        for c in row:
            pos = Vector2(c.x, c.y)
            if not board.in_bounds(pos):
                logger.warning("Legacy cell %s outside %dx%d board; dropped", pos, width, height)
                continue
            item = c.item
            board.set_locked(pos, c.isLocked or (item is not None and item.isLocked))
            if item is None:
                continue
            if item.type == "enemy":
                board.set(pos, make_hostile(item.tier, HostileVariant.DRAINER, max_tier))
            else:
                board.set(pos, make_creature(item.tier, max_tier))
    return board


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

def _dump(adapter: TypeAdapter, value: Any) -> str:
    return adapter.dump_json(value).decode("utf-8")


def save(state: GameState, store: KeyValueStore, now: float) -> None:
    """Write every record. Never writes the legacy key; removes it if present."""
    econ = state.economy
    with store.batch():
        for rid, region in state.regions.items():
            store.set(rec.board_key(rid), _dump(rec.board_adapter, board_to_record(region.board)))
        store.set(rec.REGIONS_KEY, _dump(rec.regions_adapter, [r.region_id for r in state.unlocked_regions()]))
        store.set(rec.ACTIVE_REGION_KEY, _dump(rec.active_region_adapter, state.active_region))
        store.set(rec.MANA_KEY, _dump(rec.mana_adapter, econ.mana))
        store.set(rec.UPGRADES_KEY, _dump(rec.upgrades_adapter, rec.UpgradesRecord(
            summon_luck=econ.upgrades.summon_luck,
        )))
        store.set(rec.INVENTORY_KEY, _dump(rec.inventory_adapter, econ.inventory))
        store.set(rec.OFFLINE_KEY, _dump(rec.offline_adapter, rec.OfflineRecord(
            efficiency=econ.upgrades.offline_efficiency,
            max_seconds=econ.upgrades.offline_max_seconds,
        )))
        store.set(rec.BUFFS_KEY, _dump(rec.buffs_adapter, rec.BuffsRecord(
            boost_expires_at=econ.boost_expires_at,
            barrier_expires_at=econ.barrier_expires_at,
        )))
        store.set(rec.STATS_KEY, _dump(rec.stats_adapter, rec.StatsRecord(
            defeats=state.defeats, tick=state.tick, action_seq=state.action_seq,
        )))
        store.set(rec.TIME_KEY, _dump(rec.time_adapter, now))
        store.delete(rec.LEGACY_GRID_KEY)
    logger.debug("Saved game at %.0f (mana=%.1f)", now, econ.mana)


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

def _read(store: KeyValueStore, key: str, adapter: TypeAdapter[T], default: T) -> T:
    """Validate one record; anything missing or malformed becomes *default*."""
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return adapter.validate_json(raw)
    except ValidationError as exc:
        logger.warning("Record %s is corrupt (%d error(s)); using default", key, exc.error_count())
        return default


def load(store: KeyValueStore, config: GameConfig) -> LoadedState | None:
    """Read a save back. Returns None when the store holds no game at all.

    When no current-format board exists but the legacy grid does, the grid
    becomes the default region's board and every other region starts empty.
    The next ``save`` removes the legacy key, so this happens once.
    """
    has_boards = any(store.get(rec.board_key(rid)) is not None for rid in RegionId)
    has_legacy = store.get(rec.LEGACY_GRID_KEY) is not None
    if not has_boards and not has_legacy:
        return None

    regions = fresh_regions(config.board_width, config.board_height)
    migrated = False
    if has_boards:
        for rid, region in regions.items():
            record = _read(store, rec.board_key(rid), rec.board_adapter, None)
            if record is not None:
                region.board = board_from_record(record, config.max_tier)
    else:
        rows = _read(store, rec.LEGACY_GRID_KEY, rec.legacy_grid_adapter, [])
        regions[DEFAULT_REGION].board = board_from_legacy(
            rows, config.board_width, config.board_height, config.max_tier,
        )
        migrated = True
        logger.info("Migrated legacy single-board save into %s", DEFAULT_REGION.value)

    for rid in _read(store, rec.REGIONS_KEY, rec.regions_adapter, [DEFAULT_REGION]):
        regions[rid].unlocked = True
    regions[DEFAULT_REGION].unlocked = True

    active = _read(store, rec.ACTIVE_REGION_KEY, rec.active_region_adapter, DEFAULT_REGION)
    if not regions[active].unlocked:
        active = DEFAULT_REGION

    upgrades = _read(store, rec.UPGRADES_KEY, rec.upgrades_adapter, rec.UpgradesRecord())
    offline = _read(store, rec.OFFLINE_KEY, rec.offline_adapter, rec.OfflineRecord(
        efficiency=config.offline_efficiency_base, max_seconds=config.offline_time_base,
    ))
    buffs = _read(store, rec.BUFFS_KEY, rec.buffs_adapter, rec.BuffsRecord())
    stats = _read(store, rec.STATS_KEY, rec.stats_adapter, rec.StatsRecord())

    last_saved = _read(store, rec.TIME_KEY, rec.time_adapter, None)
    if last_saved is not None and last_saved > _MILLIS_THRESHOLD:
        last_saved /= 1000.0

    return LoadedState(
        regions=regions,
        active_region=active,
        mana=_read(store, rec.MANA_KEY, rec.mana_adapter, 0.0),
        upgrades=Upgrades(
            summon_luck=upgrades.summon_luck,
            offline_efficiency=min(offline.efficiency, config.offline_efficiency_max),
            offline_max_seconds=min(offline.max_seconds, config.offline_time_max),
        ),
        inventory=_read(store, rec.INVENTORY_KEY, rec.inventory_adapter, {}),
        boost_expires_at=buffs.boost_expires_at,
        barrier_expires_at=buffs.barrier_expires_at,
        defeats=stats.defeats,
        tick=stats.tick,
        action_seq=stats.action_seq,
        last_saved=last_saved,
        migrated=migrated,
    )


def restore(loaded: LoadedState | None, config: GameConfig, now: float) -> tuple[GameState, int]:
    """Build the live state from a load, paying the offline reward exactly once.

    The reward uses the aggregate production at load time (region and
    time-of-day multipliers included, temporary boosts excluded) and is
    folded into the starting balance.
    """
    if loaded is None:
        state = GameState(config)
        state.log.add("Welcome, summoner. Drag creatures together to merge them.", Severity.INFO, now)
        return state, 0

    reward = 0
    if loaded.last_saved is not None:
        rate = aggregate_production(
            (r for r in loaded.regions.values() if r.unlocked), now, config,
        )
        reward = offline_reward(
            rate,
            now - loaded.last_saved,
            loaded.upgrades.offline_efficiency,
            loaded.upgrades.offline_max_seconds,
        )

    state = GameState(
        config,
        initial_mana=loaded.mana + reward,
        regions=loaded.regions,
        active_region=loaded.active_region,
        upgrades=loaded.upgrades,
        inventory=loaded.inventory,
        boost_expires_at=loaded.boost_expires_at,
        barrier_expires_at=loaded.barrier_expires_at,
        defeats=loaded.defeats,
        tick=loaded.tick,
        action_seq=loaded.action_seq,
    )
    if reward > 0:
        state.log.add(f"While you were away your creatures made {reward} mana.", Severity.SUCCESS, now)
        logger.info("Offline reward: %d mana", reward)
    if loaded.migrated:
        state.log.add("Your old garden was moved to the Plains.", Severity.INFO, now)
    state.economy.recompute_production(aggregate_production(state.regions.values(), now, config))
    return state, reward
