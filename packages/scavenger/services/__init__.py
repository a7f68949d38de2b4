"""Collaborators outside the engine: account ledger, run statistics, effects."""

from .effects import EffectEvent, EffectPlayer, NullEffectPlayer, RecordingEffectPlayer
from .ledger import EnergyLedger, PlayerAccount
from .stats import RunStats, RunStatsRecorder, RunStatsStore

__all__ = [
    "EffectEvent", "EffectPlayer", "NullEffectPlayer", "RecordingEffectPlayer",
    "EnergyLedger", "PlayerAccount",
    "RunStats", "RunStatsRecorder", "RunStatsStore",
]
