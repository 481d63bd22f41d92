"""Player intents and their outcomes — the currency between callers and the GameLoop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from manamerge.core.enums import ActionType, Rejection


@dataclass(frozen=True, slots=True)
class ActionIntent:
    """Something the player asked for.

    ``target`` depends on the verb: a board position for MOVE (source) and
    PURGE, a ConsumableId for USE_ITEM/BUY_ITEM, a RegionId for the region
    verbs, an UpgradeKind for UPGRADE. MOVE carries its destination in
    ``payload``.
    """

    verb: ActionType
    target: Any = None
    payload: Any = None

    def __repr__(self) -> str:
        return f"Intent({self.verb.name}, target={self.target}, payload={self.payload})"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of one intent. A rejection is a normal result, not an error."""

    ok: bool
    reason: Rejection | None = None
    message: str = ""
    combo: int = 0

    @classmethod
    def accept(cls, message: str = "", combo: int = 0) -> ActionResult:
        return cls(ok=True, message=message, combo=combo)

    @classmethod
    def reject(cls, reason: Rejection, message: str = "") -> ActionResult:
        return cls(ok=False, reason=reason, message=message or reason.value.replace("_", " "))


@dataclass(frozen=True, slots=True)
class RewardEvent:
    """Transient on-screen feedback: an amount floating over a cell."""

    id: int
    x: int
    y: int
    amount: float
    label: str
