"""Action system: intents, validation, and execution."""

from manamerge.actions.base import ActionIntent, ActionResult, RewardEvent
from manamerge.actions.move import MoveAction
from manamerge.actions.summon import PurgeAction, ShuffleAction, SummonAction
from manamerge.actions.items import BuyItemAction, UseItemAction
from manamerge.actions.regions import ActivateRegionAction, UnlockRegionAction
from manamerge.actions.upgrade import UpgradeAction

__all__ = [
    "ActionIntent",
    "ActionResult",
    "ActivateRegionAction",
    "BuyItemAction",
    "MoveAction",
    "PurgeAction",
    "RewardEvent",
    "ShuffleAction",
    "SummonAction",
    "UnlockRegionAction",
    "UpgradeAction",
    "UseItemAction",
]
