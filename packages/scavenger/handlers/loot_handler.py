"""
Loot & Economy - reward resolution for the tile the player stands on, and
banking at the end of a successful run.

Resolution Rules:
- loot_gc: gc item worth the tile's pre-rolled value
- loot_material: material item tagged with the tile's rarity
- loot_data: data fragment; once 3+ fragments are held, every further
  fragment pickup also pays a bonus gc item in [gc_max, 2 * gc_max]
- keycard: keycard held
- locked_door: with a keycard, opens the door, consumes the keycard and pays
  a vault gc item in [2 * gc_min, 2 * gc_max]; without one nothing happens
- terminal: terminal bonus in the gc range

A tile's `collected` flag gates every branch, so resolving the same tile
twice pays at most once.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..services.effects import EffectEvent
from ..services.ledger import EnergyLedger
from ..state.run import LootItem, LootType, RunState, TileType

logger = logging.getLogger(__name__)


FRAGMENT_COMBO_THRESHOLD = 3

GC_NAME = "GameCoins"
FRAGMENT_NAME = "Data Fragment"
FRAGMENT_BONUS_NAME = "Fragment Bonus"
VAULT_NAME = "Vault Loot"
TERMINAL_NAME = "Terminal Data"
DEFAULT_RARITY = "common"


@dataclass
class LootResult:
    """What happened when the player's tile was resolved."""
    tile_type: TileType
    items: List[LootItem] = field(default_factory=list)
    collected: bool = False
    effect: Optional[EffectEvent] = None

    @property
    def gc_value(self) -> int:
        return sum(item.value for item in self.items
                   if item.type in (LootType.GC, LootType.TERMINAL_BONUS))


class LootHandler:
    """Static handlers for tile rewards and run banking."""

    @staticmethod
    def collect(run_state: RunState, rng) -> LootResult:
        """
        Resolve the tile under the player.

        Appends any rewards to run_state.collected_loot and returns them.
        """
        tile = run_state.tile_at(run_state.player_pos)
        result = LootResult(tile_type=tile.type)
        if tile.collected:
            return result

        config = run_state.config
        items: List[LootItem] = []

        if tile.type == TileType.LOOT_GC:
            value = tile.loot_value
            if value is None:
                value = rng.random_int_range(*config.gc_range)
            items.append(LootItem(LootType.GC, GC_NAME, value))
            result.effect = EffectEvent.COLLECT

        elif tile.type == TileType.LOOT_MATERIAL:
            rarity = tile.loot_rarity or DEFAULT_RARITY
            items.append(LootItem(LootType.MATERIAL, f"{rarity} component", 1, rarity))
            result.effect = EffectEvent.COLLECT

        elif tile.type == TileType.LOOT_DATA:
            run_state.data_fragments += 1
            items.append(LootItem(LootType.DATA_FRAGMENT, FRAGMENT_NAME, 1))
            if run_state.data_fragments >= FRAGMENT_COMBO_THRESHOLD:
                bonus = rng.random_int_range(*config.fragment_bonus_range)
                items.append(LootItem(LootType.GC, FRAGMENT_BONUS_NAME, bonus))
            result.effect = EffectEvent.COLLECT

        elif tile.type == TileType.KEYCARD:
            run_state.has_keycard = True
            result.effect = EffectEvent.COLLECT

        elif tile.type == TileType.LOCKED_DOOR:
            if not (run_state.has_keycard and tile.locked):
                return result
            tile.locked = False
            run_state.has_keycard = False
            value = tile.loot_value
            if value is None:
                value = rng.random_int_range(*config.vault_range)
            items.append(LootItem(LootType.GC, VAULT_NAME, value))
            result.effect = EffectEvent.REWARD

        elif tile.type == TileType.TERMINAL:
            bonus = rng.random_int_range(*config.gc_range)
            items.append(LootItem(LootType.TERMINAL_BONUS, TERMINAL_NAME, bonus))
            result.effect = EffectEvent.COLLECT

        else:
            # empty, exit: nothing to claim
            return result

        tile.collected = True
        result.collected = True
        result.items = items
        run_state.collected_loot.extend(items)

        if items:
            logger.debug("Collected %s at %s", items, run_state.player_pos)
        return result

    @staticmethod
    def bank(run_state: RunState, ledger: EnergyLedger) -> int:
        """
        Bank a successful run: credit the gc + terminal bonus total.
        Returns the banked total; the caller reports the outcome.
        """
        total = run_state.gc_collected
        ledger.credit_currency(total)
        logger.info("Banked %d GC from %d loot items", total, len(run_state.collected_loot))
        return total
