"""
Movement rules for the player and end-of-turn checks.

The turn itself is orchestrated by ScavengerRunner.move_player; this module
holds the pieces that only read or lightly update RunState.
"""

from typing import List, Optional

from ..calc.fog import reveal_fog
from ..calc.geometry import DIRECTIONS, manhattan
from ..state.run import GameResult, Position, RunState


class MovementHandler:
    """Static movement helpers."""

    @staticmethod
    def can_enter(run_state: RunState, target: Position) -> bool:
        """Whether the player may stand on target (ignores adjacency)."""
        if not run_state.in_bounds(target):
            return False
        tile = run_state.tile_at(target)
        if tile.is_wall():
            return False
        if tile.is_sealed() and not run_state.has_keycard:
            return False
        return True

    @staticmethod
    def is_legal_move(run_state: RunState, target: Position) -> bool:
        """One orthogonal step onto an enterable tile, with moves left."""
        if not run_state.game_active or run_state.moves_remaining <= 0:
            return False
        if manhattan(run_state.player_pos, target) != 1:
            return False
        return MovementHandler.can_enter(run_state, target)

    @staticmethod
    def get_adjacent_moves(run_state: RunState) -> List[Position]:
        """Legal one-step destinations, in up/down/left/right order."""
        if not run_state.game_active:
            return []
        moves = []
        for dx, dy in DIRECTIONS:
            target = run_state.player_pos.offset(dx, dy)
            if MovementHandler.can_enter(run_state, target):
                moves.append(target)
        return moves

    @staticmethod
    def apply_move(run_state: RunState, target: Position) -> None:
        """Step the player, spend one move, advance the turn and refresh fog."""
        run_state.player_pos = target
        run_state.moves_remaining -= 1
        run_state.turn_count += 1
        reveal_fog(run_state.grid, target)

    @staticmethod
    def check_terminal(run_state: RunState) -> Optional[GameResult]:
        """
        End-of-turn outcome after enemies have moved.

        Capture beats move exhaustion.
        """
        if run_state.enemy_at(run_state.player_pos) is not None:
            return GameResult.CAUGHT
        if run_state.moves_remaining <= 0:
            return GameResult.NO_MOVES
        return None
