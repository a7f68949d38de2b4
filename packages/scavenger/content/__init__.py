"""Game content: difficulty tiers and enemy behaviour."""

from .difficulty import (
    Difficulty, DifficultyConfig, SERVER_CONFIGS, get_config, parse_difficulty,
)
from .enemies_ai import candidate_moves, can_enter, move_enemies

__all__ = [
    "Difficulty", "DifficultyConfig", "SERVER_CONFIGS", "get_config", "parse_difficulty",
    "candidate_moves", "can_enter", "move_enemies",
]
