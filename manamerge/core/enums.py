"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class EntityKind(IntEnum):
    """What occupies a board cell."""

    CREATURE = 0
    HOSTILE = 1


@unique
class HostileVariant(IntEnum):
    """Behaviour profile of a hostile entity. Closed set."""

    DRAINER = 0     # steals mana, self-replicates
    SEALER = 1      # locks a neighbouring cell
    PHANTOM = 2     # steals more mana, teleports


@unique
class RegionId(str, Enum):
    """Independently simulated boards."""

    PLAINS = "plains"
    MINE = "mine"
    SKY = "sky"


@unique
class Direction(IntEnum):
    """Cardinal directions (orthogonal adjacency only)."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    HOSTILE_STEAL = 0
    HOSTILE_SPREAD = 1
    HOSTILE_SPREAD_TARGET = 2
    HOSTILE_LOCK = 3
    HOSTILE_LOCK_TARGET = 4
    HOSTILE_WARP = 5
    HOSTILE_WARP_TARGET = 6
    SUMMON_CELL = 7
    SUMMON_TIER = 8
    SUMMON_HOSTILE = 9
    SUMMON_VARIANT = 10
    SHUFFLE = 11


@unique
class Severity(str, Enum):
    """Game log entry severity."""

    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"


@unique
class ActionType(IntEnum):
    """Player intents accepted by the game loop."""

    MOVE = 0
    SUMMON = 1
    PURGE = 2
    PURGE_DROP = 3
    SHUFFLE = 4
    USE_ITEM = 5
    BUY_ITEM = 6
    UNLOCK_REGION = 7
    ACTIVATE_REGION = 8
    UPGRADE = 9
    BEGIN_DRAG = 10
    END_DRAG = 11


@unique
class ConsumableId(str, Enum):
    """Inventory items."""

    SHUFFLE = "shuffle"
    BOMB = "bomb"
    BARRIER = "barrier"
    BOOST = "boost"
    ELIXIR = "elixir"
    ARMAGEDDON = "armageddon"


@unique
class UpgradeKind(str, Enum):
    """Purchasable permanent upgrades."""

    SUMMON_LUCK = "summon_luck"
    OFFLINE_EFFICIENCY = "offline_efficiency"
    OFFLINE_TIME = "offline_time"


@unique
class Cue(str, Enum):
    """Audio/haptic cue names requested from the feedback sink."""

    MERGE = "merge"
    PURGE = "purge"
    BUTTON = "button"
    SUMMON = "summon"
    DEFEAT = "defeat"
    STEAL = "steal"
    ERROR = "error"


@unique
class Rejection(str, Enum):
    """Why an action was refused. Refusals are normal results, not errors."""

    INSUFFICIENT_MANA = "insufficient_mana"
    BOARD_FULL = "board_full"
    INVALID_TARGET = "invalid_target"
    LOCKED = "locked"
    EMPTY = "empty"
    NOT_UNLOCKED = "not_unlocked"
    ALREADY_UNLOCKED = "already_unlocked"
    PREREQUISITE = "prerequisite"
    OUT_OF_STOCK = "out_of_stock"
    MAX_LEVEL = "max_level"
    GATED = "gated"
    BUSY = "busy"
