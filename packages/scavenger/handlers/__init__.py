"""Turn-phase handlers: movement rules and loot resolution."""

from .loot_handler import LootHandler, LootResult, FRAGMENT_COMBO_THRESHOLD
from .movement import MovementHandler

__all__ = ["LootHandler", "LootResult", "FRAGMENT_COMBO_THRESHOLD", "MovementHandler"]
