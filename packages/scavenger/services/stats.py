"""
Run statistics - aggregate outcome tracking across runs.

Every terminal transition reports exactly once: a success with its banked
total, every other outcome with zero reward.
"""

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class RunStatsRecorder:
    """Outcome sink the engine reports to."""

    def record_run_outcome(self, reward: int, success: bool) -> None:
        raise NotImplementedError("Subclass must implement record_run_outcome()")


@dataclass
class RunStats:
    """Aggregate statistics."""
    total_runs: int = 0
    successful_runs: int = 0
    total_gc_earned: int = 0
    best_haul: int = 0

    @property
    def success_rate(self) -> float:
        if self.total_runs == 0:
            return 0.0
        return self.successful_runs / self.total_runs

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RunStats':
        return cls(
            total_runs=int(data.get("total_runs", 0)),
            successful_runs=int(data.get("successful_runs", 0)),
            total_gc_earned=int(data.get("total_gc_earned", 0)),
            best_haul=int(data.get("best_haul", 0)),
        )


@dataclass
class RunStatsStore(RunStatsRecorder):
    """
    RunStats with optional JSON persistence.

    With a path, every recorded outcome is written straight back to disk.
    Safe to share between web sessions.
    """
    path: Optional[Path] = None
    stats: RunStats = field(default_factory=RunStats)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_run_outcome(self, reward: int, success: bool) -> None:
        with self._lock:
            self.stats.total_runs += 1
            if success:
                self.stats.successful_runs += 1
                self.stats.total_gc_earned += reward
                if reward > self.stats.best_haul:
                    self.stats.best_haul = reward
            logger.debug("Recorded run outcome: reward=%d success=%s", reward, success)
            if self.path is not None:
                self.save()

    def load(self) -> RunStats:
        """Read stats from path. Missing or unreadable files load as zeros."""
        if self.path is None or not self.path.exists():
            self.stats = RunStats()
            return self.stats
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                self.stats = RunStats.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read run stats from %s: %s", self.path, e)
            self.stats = RunStats()
        return self.stats

    def save(self) -> None:
        """Atomically write stats to path."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(asdict(self.stats), f, indent=2)
        tmp.replace(self.path)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            data = asdict(self.stats)
        data["success_rate"] = round(self.stats.success_rate, 4)
        return data

    @classmethod
    def open(cls, path: Path) -> 'RunStatsStore':
        store = cls(path=Path(path).expanduser())
        store.load()
        return store
