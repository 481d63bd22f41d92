"""Match detection, merge execution and entity moves.

All three functions treat the board as a value: the input is never mutated,
a changed board is returned as a fresh copy.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from manamerge.core.board import Board
from manamerge.core.models import Entity, Vector2


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of a single merge."""

    board: Board
    produced: tuple[Entity, ...]
    placements: tuple[tuple[Vector2, Entity], ...]
    consumed: int
    input_tier: int

    @property
    def output_tier(self) -> int:
        return self.produced[0].tier


def find_match(board: Board, origin: Vector2) -> list[Vector2]:
    """Connected component of same-kind, same-tier entities containing *origin*.

    Breadth-first over orthogonal neighbours. Locked cells never join a
    component. The result starts with *origin* and holds each position once.
    No size judgment is made here.
    """
    if not board.in_bounds(origin):
        return []
    start = board.get(origin)
    if start is None or board.is_locked(origin):
        return []

    kind, tier = start.kind, start.tier
    visited: set[Vector2] = {origin}
    queue: deque[Vector2] = deque([origin])
    component: list[Vector2] = []

    while queue:
        current = queue.popleft()
        component.append(current)
        for n in board.neighbors(current):
            if n in visited or board.is_locked(n):
                continue
            other = board.get(n)
            if other is not None and other.kind == kind and other.tier == tier:
                visited.add(n)
                queue.append(n)

    return component


def output_count(matched: int, bonus_match: int = 5) -> int:
    """3-4 inputs give one output, *bonus_match* or more give two."""
    return 2 if matched >= bonus_match else 1


def execute_merge(
    board: Board,
    matched: list[Vector2],
    focus: Vector2,
    max_tier: int,
    min_match: int = 3,
    bonus_match: int = 5,
) -> MergeResult | None:
    """Consume *matched* and create the next-tier output(s).

    Returns None when fewer than *min_match* cells are given: the group is
    simply not eligible. The first output lands on *focus*; a bonus output
    lands on the first other matched cell still empty, in the given order,
    and is dropped if there is none.
    """
    if len(matched) < min_match:
        return None
    if focus not in matched:
        raise ValueError(f"Merge focus {focus} is not part of the matched group")

    sample = board.get(matched[0])
    if sample is None:
        raise ValueError(f"Matched cell {matched[0]} is empty")

    new_board = board.copy()
    for pos in matched:
        new_board.set(pos, None)

    produced: list[Entity] = []
    placements: list[tuple[Vector2, Entity]] = []
    for i in range(output_count(len(matched), bonus_match)):
        entity = sample.with_tier(sample.tier + 1, max_tier)
        if i == 0:
            target: Vector2 | None = focus
        else:
            target = next(
                (p for p in matched if p != focus and new_board.get(p) is None),
                None,
            )
        if target is None:
            continue
        new_board.set(target, entity)
        produced.append(entity)
        placements.append((target, entity))

    return MergeResult(
        board=new_board,
        produced=tuple(produced),
        placements=tuple(placements),
        consumed=len(matched),
        input_tier=sample.tier,
    )


def move_entity(board: Board, src: Vector2, dst: Vector2) -> Board:
    """Relocate the creature at *src* to the empty, unlocked cell *dst*.

    Never swaps. Any invalid move (same cell, out of bounds, empty or locked
    source, hostile source, occupied or locked target) returns *board*
    itself, untouched.
    """
    if src == dst or not board.in_bounds(src) or not board.in_bounds(dst):
        return board
    entity = board.get(src)
    if entity is None or entity.is_hostile or board.is_locked(src):
        return board
    if not board.is_open(dst):
        return board

    new_board = board.copy()
    new_board.set(src, None)
    new_board.set(dst, entity)
    return new_board
