"""Pure game systems: matching, combat, hostiles, economy, RNG."""

from manamerge.systems.rng import DeterministicRNG
from manamerge.systems.match import execute_merge, find_match, move_entity
from manamerge.systems.combat import attack_range, defeat_hostiles
from manamerge.systems.chain import iter_chain
from manamerge.systems.hostile import hostile_tick

__all__ = [
    "DeterministicRNG",
    "attack_range",
    "defeat_hostiles",
    "execute_merge",
    "find_match",
    "hostile_tick",
    "iter_chain",
    "move_entity",
]
