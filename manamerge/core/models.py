"""Core data models: Vector2, Entity, Cell."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, replace

from manamerge.core.enums import Direction, EntityKind, HostileVariant, RegionId

_entity_ids = itertools.count(1)


def new_entity_id() -> int:
    """Process-unique token for transient UI identity."""
    return next(_entity_ids)


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Offsets in N, E, S, W order; board neighbour order follows it
DIRECTION_OFFSETS: dict[Direction, Vector2] = {
    Direction.NORTH: Vector2(0, -1),
    Direction.EAST: Vector2(1, 0),
    Direction.SOUTH: Vector2(0, 1),
    Direction.WEST: Vector2(-1, 0),
}


@dataclass(frozen=True, slots=True)
class Entity:
    """A tiered piece occupying one board cell.

    Frozen, so boards can share entity objects between copies; any change
    (tier up, relocation) produces a new object or a new board.
    """

    id: int
    kind: EntityKind
    tier: int
    origin_region: RegionId = RegionId.PLAINS
    variant: HostileVariant | None = None

    @property
    def is_hostile(self) -> bool:
        return self.kind == EntityKind.HOSTILE

    def with_tier(self, tier: int, max_tier: int) -> Entity:
        """Copy at *tier*, clamped to ``[1, max_tier]``, with a fresh id."""
        return replace(self, id=new_entity_id(), tier=clamp_tier(tier, max_tier))


@dataclass(frozen=True, slots=True)
class Cell:
    """Read-only view of one board position."""

    x: int
    y: int
    entity: Entity | None
    locked: bool = False

    @property
    def pos(self) -> Vector2:
        return Vector2(self.x, self.y)


def clamp_tier(tier: int, max_tier: int) -> int:
    return max(1, min(int(tier), max_tier))


def make_creature(tier: int, max_tier: int, region: RegionId = RegionId.PLAINS) -> Entity:
    return Entity(
        id=new_entity_id(),
        kind=EntityKind.CREATURE,
        tier=clamp_tier(tier, max_tier),
        origin_region=region,
    )


def make_hostile(
    tier: int,
    variant: HostileVariant,
    max_tier: int,
    region: RegionId = RegionId.PLAINS,
) -> Entity:
    return Entity(
        id=new_entity_id(),
        kind=EntityKind.HOSTILE,
        tier=clamp_tier(tier, max_tier),
        origin_region=region,
        variant=variant,
    )
