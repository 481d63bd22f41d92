"""Board / cell storage."""

from __future__ import annotations

from typing import Iterator

from manamerge.core.enums import Direction
from manamerge.core.models import DIRECTION_OFFSETS, Cell, Entity, Vector2


class Board:
    """2D cell grid backed by flat lists for cache-friendly access.

    Each cell holds at most one entity and a lock flag. Dimensions are fixed
    for the lifetime of the board. Engines treat boards as values: they
    ``copy()`` before mutating and hand back the new board.
    """

    __slots__ = ("width", "height", "_entities", "_locked")

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._entities: list[Entity | None] = [None] * (width * height)
        self._locked: list[bool] = [False] * (width * height)

    # -- access --

    def _idx(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"({x}, {y}) is outside a {self.width}x{self.height} board")
        return y * self.width + x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get(self, pos: Vector2) -> Entity | None:
        return self._entities[self._idx(pos.x, pos.y)]

    def set(self, pos: Vector2, entity: Entity | None) -> None:
        self._entities[self._idx(pos.x, pos.y)] = entity

    def is_locked(self, pos: Vector2) -> bool:
        return self._locked[self._idx(pos.x, pos.y)]

    def set_locked(self, pos: Vector2, locked: bool) -> None:
        self._locked[self._idx(pos.x, pos.y)] = locked

    def is_open(self, pos: Vector2) -> bool:
        """In bounds, empty and unlocked: a legal placement target."""
        if not self.in_bounds(pos):
            return False
        i = pos.y * self.width + pos.x
        return self._entities[i] is None and not self._locked[i]

    # -- iteration (row-major) --

    def cells(self) -> Iterator[Cell]:
        for y in range(self.height):
            for x in range(self.width):
                i = y * self.width + x
                yield Cell(x, y, self._entities[i], self._locked[i])

    def positions(self) -> Iterator[Vector2]:
        for y in range(self.height):
            for x in range(self.width):
                yield Vector2(x, y)

    def occupied(self) -> Iterator[tuple[Vector2, Entity]]:
        for y in range(self.height):
            for x in range(self.width):
                e = self._entities[y * self.width + x]
                if e is not None:
                    yield Vector2(x, y), e

    def entities(self) -> list[Entity]:
        return [e for e in self._entities if e is not None]

    def empty_cells(self) -> list[Vector2]:
        """Empty, unlocked positions in row-major order."""
        return [p for p in self.positions() if self.is_open(p)]

    def neighbors(self, pos: Vector2) -> list[Vector2]:
        """In-bounds orthogonal neighbours in N, E, S, W order."""
        result: list[Vector2] = []
        for direction in Direction:
            n = pos + DIRECTION_OFFSETS[direction]
            if self.in_bounds(n):
                result.append(n)
        return result

    @property
    def occupied_count(self) -> int:
        return sum(1 for e in self._entities if e is not None)

    @property
    def locked_count(self) -> int:
        return sum(self._locked)

    # -- copy --

    def copy(self) -> Board:
        new = Board.__new__(Board)
        new.width = self.width
        new.height = self.height
        new._entities = list(self._entities)
        new._locked = list(self._locked)
        return new

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height}, occupied={self.occupied_count})"
