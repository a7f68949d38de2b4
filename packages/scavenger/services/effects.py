"""
Presentation effect hooks (sounds, flashes).

The engine fires these and moves on; it never reads a return value.
"""

from enum import Enum
from typing import List


class EffectEvent(Enum):
    RUN_START = "run_start"
    MOVE = "move"
    COLLECT = "collect"
    REWARD = "reward"
    SUCCESS = "success"
    FAIL = "fail"


class EffectPlayer:
    """Receives effect notifications."""

    def play_effect(self, event: EffectEvent) -> None:
        raise NotImplementedError("Subclass must implement play_effect()")


class NullEffectPlayer(EffectPlayer):
    def play_effect(self, event: EffectEvent) -> None:
        return None


class RecordingEffectPlayer(EffectPlayer):
    """Keeps every event in order. Used by tests and the CLI."""

    def __init__(self):
        self.events: List[EffectEvent] = []

    def play_effect(self, event: EffectEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()
