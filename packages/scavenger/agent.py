"""
Exit-seeking bot used by the simulate command.

Policy, evaluated once per turn:
1. If there is revealed, uncollected loot whose round trip (player -> loot
   -> exit) fits in the remaining moves with a safety margin, head for the
   closest one
2. Otherwise walk the shortest path to the exit
3. Among equally good steps, avoid cells an enemy could reach next turn

The bot reads the full grid for path lengths; it is a balancing tool, not a
fair player.
"""

from collections import deque
from typing import Dict, List, Optional

from .calc.geometry import manhattan, neighbors
from .game import MoveAction, ScavengerRunner
from .state.run import Position, RunState, TileType


LOOT_TILES = (
    TileType.LOOT_GC,
    TileType.LOOT_MATERIAL,
    TileType.LOOT_DATA,
    TileType.KEYCARD,
    TileType.TERMINAL,
)


def distance_map(run_state: RunState, origin: Position) -> Dict[Position, int]:
    """BFS step counts from origin over cells the player could walk."""
    dist = {origin: 0}
    queue = deque([origin])
    while queue:
        current = queue.popleft()
        for nxt in neighbors(current, run_state.size):
            if nxt in dist:
                continue
            tile = run_state.tile_at(nxt)
            if tile.is_wall() or (tile.is_sealed() and not run_state.has_keycard):
                continue
            dist[nxt] = dist[current] + 1
            queue.append(nxt)
    return dist


class ExitSeekingAgent:
    """Greedy loot-then-exit policy."""

    def __init__(self, safety_margin: int = 3):
        self.safety_margin = safety_margin

    def choose_action(self, runner: ScavengerRunner) -> Optional[MoveAction]:
        actions = runner.get_available_actions()
        run_state = runner.run_state
        if not actions or run_state is None:
            return None

        goal = self._pick_goal(run_state)
        to_goal = distance_map(run_state, goal)

        def score(action: MoveAction):
            pos = action.position
            danger = sum(1 for e in run_state.enemies if manhattan(e.pos, pos) <= 1)
            return (danger if pos != run_state.exit_pos else 0,
                    to_goal.get(pos, 10_000))

        return min(actions, key=score)

    def _pick_goal(self, run_state: RunState) -> Position:
        from_exit = distance_map(run_state, run_state.exit_pos)
        from_player = distance_map(run_state, run_state.player_pos)
        budget = run_state.moves_remaining - self.safety_margin

        best: Optional[Position] = None
        best_cost = None
        for pos in self._loot_targets(run_state):
            if pos not in from_player or pos not in from_exit:
                continue
            cost = from_player[pos] + from_exit[pos]
            if cost > budget:
                continue
            if best_cost is None or from_player[pos] < from_player[best]:
                best, best_cost = pos, cost
        return best if best is not None else run_state.exit_pos

    @staticmethod
    def _loot_targets(run_state: RunState) -> List[Position]:
        targets = []
        for y, row in enumerate(run_state.grid):
            for x, tile in enumerate(row):
                if not tile.revealed or tile.collected:
                    continue
                if tile.type in LOOT_TILES:
                    targets.append(Position(x, y))
                elif tile.is_sealed() and run_state.has_keycard:
                    targets.append(Position(x, y))
        return targets


def play_run(runner: ScavengerRunner, agent: Optional[ExitSeekingAgent] = None) -> None:
    """Drive the runner's current run to completion."""
    agent = agent or ExitSeekingAgent()
    while runner.game_active:
        action = agent.choose_action(runner)
        if action is None or not runner.take_action(action):
            runner.abandon_run()
            break
