"""Domain-separated deterministic RNG using xxhash.

Every random draw in the core is a pure function of
Seed + Domain + Key + Tick, so hostile ticks, summons and shuffles can be
replayed exactly from the same inputs.

Formula: RNG_Value = Hash(Seed, Domain, Key, Tick)
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from manamerge.core.enums import Domain

T = TypeVar("T")


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, tick) —
    no internal mutable state, therefore fully thread-safe.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, tick: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, tick)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, tick: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, tick) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, tick: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, tick)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, key: int, tick: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, key, tick) < probability

    def choice(self, domain: Domain, key: int, tick: int, items: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        return items[self.next_int(domain, key, tick, 0, len(items) - 1)]

    def shuffled(self, domain: Domain, key: int, tick: int, items: Sequence[T]) -> list[T]:
        """Deterministic Fisher-Yates permutation of *items*."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(domain, key * 1_000 + i, tick, 0, i)
            result[i], result[j] = result[j], result[i]
        return result
