"""
Scavenger Runner - run lifecycle and turn orchestration.

This module provides the ScavengerRunner class that takes a player from
server selection through one dungeon run to its result. It handles:
- Energy-gated run start and map generation
- One player turn at a time: move, reveal, collect, enemy step, end checks
- Terminal outcomes (success, caught, no_moves, abandoned) and their reports
- Read-only tile projections and legal-move lists for a UI

Phases:
    SELECT --start_run--> PLAYING --(exit | caught | no moves | abandon)--> RESULT
    RESULT --cleanup--> SELECT

Invalid calls never raise; they return False and leave state untouched.

Usage:
    runner = ScavengerRunner(PlayerAccount(energy=100), RunStatsStore(), seed="ABC123")
    runner.start_run("easy")
    while runner.game_active:
        runner.move_player(runner.get_adjacent_moves()[0])
    runner.cleanup()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .content.difficulty import Difficulty, get_config
from .content.enemies_ai import move_enemies
from .generation.grid import GridGenerator, GeneratedGrid, grid_to_string
from .handlers.loot_handler import LootHandler
from .handlers.movement import MovementHandler
from .services.effects import EffectEvent, EffectPlayer, NullEffectPlayer
from .services.ledger import EnergyLedger
from .services.stats import RunStatsRecorder
from .state.rng import Random, SystemRandom, long_to_seed, seed_to_long
from .state.run import (
    GRID_SIZE, GameResult, LootItem, Position, RunState, TileType,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Game Phase Enumeration
# =============================================================================

class GamePhase(Enum):
    """Lifecycle phase of the runner."""
    SELECT = "select"      # Idle, choosing a server
    PLAYING = "playing"    # Run in progress
    RESULT = "result"      # Run over, showing the outcome


# =============================================================================
# Actions and Views
# =============================================================================

@dataclass(frozen=True)
class MoveAction:
    """Step the player onto (x, y)."""
    x: int
    y: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class TileView:
    """Read-only projection of one cell for rendering."""
    type: TileType = TileType.EMPTY
    is_player: bool = False
    is_enemy: bool = False
    visible: bool = False
    revealed: bool = False
    collected: bool = False
    locked: bool = False
    is_adjacent: bool = False
    is_exit: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "isPlayer": self.is_player,
            "isEnemy": self.is_enemy,
            "visible": self.visible,
            "revealed": self.revealed,
            "collected": self.collected,
            "locked": self.locked,
            "isAdjacent": self.is_adjacent,
            "isExit": self.is_exit,
        }


@dataclass
class TurnLogEntry:
    """Record of one accepted move."""
    turn: int
    from_pos: Position
    to_pos: Position
    tile_type: TileType
    loot: List[LootItem] = field(default_factory=list)
    result: Optional[GameResult] = None


PositionLike = Union[Position, Tuple[int, int], MoveAction]


def _to_position(target: PositionLike) -> Optional[Position]:
    if isinstance(target, Position):
        return target
    if isinstance(target, MoveAction):
        return target.position
    try:
        x, y = target
        return Position(int(x), int(y))
    except (TypeError, ValueError):
        return None


# =============================================================================
# Scavenger Runner
# =============================================================================

class ScavengerRunner:
    """
    Main orchestrator for Scavenger runs.

    One runner drives any number of sequential runs for one player. It owns
    the random source so every run it generates is reproducible from the
    runner's seed.
    """

    def __init__(
        self,
        account: EnergyLedger,
        stats: RunStatsRecorder,
        effects: Optional[EffectPlayer] = None,
        seed: Optional[Union[str, int]] = None,
        rng=None,
        verbose: bool = False,
        grid_size: int = GRID_SIZE,
    ):
        """
        Args:
            account: Energy / GameCoin ledger
            stats: Run outcome recorder
            effects: Presentation hook (defaults to a no-op)
            seed: Seed string (e.g., "ABC123") or number; None for system entropy
            rng: Explicit random source, overrides seed
            verbose: Log every turn at INFO instead of DEBUG
            grid_size: Map edge length
        """
        self.account = account
        self.stats = stats
        self.effects = effects or NullEffectPlayer()
        self.verbose = verbose
        self.grid_size = grid_size

        self.seed: Optional[int] = None
        self.seed_string: Optional[str] = None
        if rng is not None:
            self.rng = rng
        elif seed is not None:
            if isinstance(seed, str):
                self.seed_string = seed.upper()
                self.seed = seed_to_long(self.seed_string)
            else:
                self.seed = seed
                self.seed_string = long_to_seed(seed)
            self.rng = Random(self.seed)
        else:
            self.rng = SystemRandom()

        self.phase = GamePhase.SELECT
        self.run_state: Optional[RunState] = None
        self.layout: Optional[GeneratedGrid] = None
        self.turn_log: List[TurnLogEntry] = []
        self._resolving = False

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def result(self) -> Optional[GameResult]:
        return self.run_state.result if self.run_state else None

    @property
    def game_active(self) -> bool:
        return self.run_state is not None and self.run_state.game_active

    @property
    def resolving(self) -> bool:
        return self._resolving

    @property
    def can_move(self) -> bool:
        return (self.phase == GamePhase.PLAYING and self.game_active
                and not self._resolving and self.run_state.moves_remaining > 0)

    @property
    def gc_collected(self) -> int:
        return self.run_state.gc_collected if self.run_state else 0

    @property
    def materials_collected(self) -> List[LootItem]:
        return self.run_state.materials_collected if self.run_state else []

    @property
    def server_name(self) -> str:
        if self.run_state and self.run_state.config:
            return self.run_state.config.name
        return ""

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_run(self, difficulty: Union[str, Difficulty]) -> bool:
        """
        Pay the tier's energy cost, generate a map and enter PLAYING.

        Returns False without changing anything if not in SELECT, the tier is
        unknown, or the ledger refuses the energy debit.
        """
        if self.phase != GamePhase.SELECT:
            return False
        try:
            config = get_config(difficulty)
        except ValueError:
            logger.warning("Refusing run with unknown difficulty %r", difficulty)
            return False

        if not self.account.check_and_deduct_energy(config.energy_cost):
            self._log(f"Not enough energy for {config.name} ({config.energy_cost})")
            return False

        layout = GridGenerator(self.rng, config, self.grid_size).generate()
        self.layout = layout
        self.run_state = RunState(
            grid=layout.grid,
            player_pos=layout.start,
            exit_pos=layout.exit,
            start_pos=layout.start,
            enemies=layout.enemies,
            config=config,
            moves_remaining=config.move_pool,
            move_pool=config.move_pool,
        )
        self.turn_log = []
        self._resolving = False
        self.phase = GamePhase.PLAYING

        logger.info("Run started: %s (%s) seed=%s", config.name,
                    config.difficulty.value, self.seed_string or "system")
        self._emit(EffectEvent.RUN_START)
        return True

    def abandon_run(self) -> bool:
        """Give up the current run. Valid at any point during PLAYING."""
        if self.phase != GamePhase.PLAYING or self.run_state is None:
            return False
        self._finish(GameResult.ABANDONED)
        return True

    def cleanup(self) -> bool:
        """Drop the finished run and return to SELECT."""
        if self.phase != GamePhase.RESULT:
            return False
        self.run_state = None
        self.layout = None
        self.turn_log = []
        self._resolving = False
        self.phase = GamePhase.SELECT
        return True

    def _finish(self, result: GameResult) -> None:
        run_state = self.run_state
        run_state.result = result
        run_state.game_active = False
        self.phase = GamePhase.RESULT

        if result == GameResult.SUCCESS:
            total = LootHandler.bank(run_state, self.account)
            self._report(total, True)
            self._emit(EffectEvent.SUCCESS)
            logger.info("Run finished: success after %d turns, %d GC",
                        run_state.turn_count, total)
        else:
            self._report(0, False)
            self._emit(EffectEvent.FAIL)
            logger.info("Run finished: %s after %d turns",
                        result.value, run_state.turn_count)

    # =========================================================================
    # Turn resolution
    # =========================================================================

    def move_player(self, target: PositionLike) -> bool:
        """
        Resolve one player turn.

        Order: move and spend a move, reveal fog, collect loot, finish on the
        exit (enemies do not act), otherwise step enemies and check capture
        before move exhaustion.

        Returns True if the move was accepted. Rejected moves change nothing.
        """
        target = _to_position(target)
        run_state = self.run_state
        if target is None or run_state is None:
            return False
        if self.phase != GamePhase.PLAYING or self._resolving:
            return False
        if not MovementHandler.is_legal_move(run_state, target):
            return False

        self._resolving = True
        try:
            origin = run_state.player_pos
            MovementHandler.apply_move(run_state, target)

            loot = LootHandler.collect(run_state, self.rng)
            entry = TurnLogEntry(
                turn=run_state.turn_count,
                from_pos=origin,
                to_pos=target,
                tile_type=loot.tile_type,
                loot=list(loot.items),
            )
            self.turn_log.append(entry)
            if loot.effect is not None:
                self._emit(loot.effect)
            if self._interrupted(run_state):
                return True

            if target == run_state.exit_pos:
                self._finish(GameResult.SUCCESS)
                entry.result = GameResult.SUCCESS
                return True

            move_enemies(run_state.grid, run_state.enemies, run_state.player_pos, self.rng)

            outcome = MovementHandler.check_terminal(run_state)
            if outcome is not None:
                self._finish(outcome)
                entry.result = outcome
            else:
                self._emit(EffectEvent.MOVE)

            self._log(f"Turn {run_state.turn_count}: {origin} -> {target} "
                      f"[{loot.tile_type.value}] moves left {run_state.moves_remaining}")
        finally:
            self._resolving = False
        return True

    def _interrupted(self, run_state: RunState) -> bool:
        """Whether the run was abandoned or cleaned up mid-turn."""
        return self.run_state is not run_state or not run_state.game_active

    # =========================================================================
    # Action interface
    # =========================================================================

    def get_adjacent_moves(self) -> List[Position]:
        """Legal one-step destinations from the player's position."""
        if self.phase != GamePhase.PLAYING or self.run_state is None:
            return []
        return MovementHandler.get_adjacent_moves(self.run_state)

    def get_available_actions(self) -> List[MoveAction]:
        return [MoveAction(p.x, p.y) for p in self.get_adjacent_moves()]

    def take_action(self, action: MoveAction) -> bool:
        return self.move_player(action)

    def get_tile_view(self, x: int, y: int) -> TileView:
        """Projection of cell (x, y). Out-of-range cells give an empty view."""
        run_state = self.run_state
        pos = Position(x, y)
        if run_state is None or not run_state.in_bounds(pos):
            return TileView()

        tile = run_state.tile_at(pos)
        return TileView(
            type=tile.type,
            is_player=run_state.player_pos == pos,
            is_enemy=run_state.enemy_at(pos) is not None,
            visible=tile.visible,
            revealed=tile.revealed,
            collected=tile.collected,
            locked=tile.locked,
            is_adjacent=pos in self.get_adjacent_moves(),
            is_exit=run_state.exit_pos == pos,
        )

    def get_tile_views(self) -> List[List[TileView]]:
        if self.run_state is None:
            return []
        size = self.run_state.size
        return [[self.get_tile_view(x, y) for x in range(size)] for y in range(size)]

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_run_statistics(self) -> Dict[str, Any]:
        """Summary of the current (or just finished) run."""
        run_state = self.run_state
        if run_state is None:
            return {"phase": self.phase.value}
        return {
            "phase": self.phase.value,
            "difficulty": run_state.difficulty.value if run_state.difficulty else None,
            "server": self.server_name,
            "seed": self.seed_string,
            "result": run_state.result.value if run_state.result else None,
            "turns": run_state.turn_count,
            "moves_remaining": run_state.moves_remaining,
            "move_pool": run_state.move_pool,
            "gc_collected": run_state.gc_collected,
            "materials": [m.rarity for m in run_state.materials_collected],
            "data_fragments": run_state.data_fragments,
            "has_keycard": run_state.has_keycard,
            "loot_items": len(run_state.collected_loot),
            "enemies": len(run_state.enemies),
            "revealed_tiles": run_state.revealed_count(),
        }

    def render(self, reveal_all: bool = False) -> str:
        if self.run_state is None:
            return ""
        return grid_to_string(self.run_state.grid, self.run_state.player_pos,
                              self.run_state.enemies, reveal_all=reveal_all)

    # =========================================================================
    # Internals
    # =========================================================================

    def _report(self, reward: int, success: bool) -> None:
        try:
            self.stats.record_run_outcome(reward, success)
        except Exception:
            logger.warning("Stats recorder failed on outcome reward=%d success=%s",
                           reward, success, exc_info=True)

    def _emit(self, event: EffectEvent) -> None:
        try:
            self.effects.play_effect(event)
        except Exception:
            logger.warning("Effect player failed on %s", event.value, exc_info=True)

    def _log(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
        else:
            logger.debug(message)
