"""Core data models and game representation."""

from manamerge.core.enums import (
    ActionType,
    ConsumableId,
    Cue,
    Direction,
    Domain,
    EntityKind,
    HostileVariant,
    RegionId,
    Rejection,
    Severity,
    UpgradeKind,
)
from manamerge.core.models import Cell, Entity, Vector2, make_creature, make_hostile
from manamerge.core.board import Board
from manamerge.core.regions import RegionDef, RegionState

__all__ = [
    "ActionType",
    "Board",
    "Cell",
    "ConsumableId",
    "Cue",
    "Direction",
    "Domain",
    "Entity",
    "EntityKind",
    "HostileVariant",
    "RegionDef",
    "RegionId",
    "RegionState",
    "Rejection",
    "Severity",
    "UpgradeKind",
    "Vector2",
    "make_creature",
    "make_hostile",
]
