"""
Energy and currency ledger.

The engine only needs two operations from the account system: an atomic
energy check-and-debit when a run starts, and a GameCoin credit when a run
is banked. PlayerAccount is the in-memory account used by the CLI, the web
server and the tests.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

logger = logging.getLogger(__name__)


class EnergyLedger:
    """Account operations the engine calls."""

    def check_and_deduct_energy(self, cost: int) -> bool:
        """Debit `cost` energy if available. Returns False (no debit) otherwise."""
        raise NotImplementedError("Subclass must implement check_and_deduct_energy()")

    def credit_currency(self, amount: int) -> None:
        """Credit banked GameCoins."""
        raise NotImplementedError("Subclass must implement credit_currency()")


@dataclass
class PlayerAccount(EnergyLedger):
    """In-memory player balances."""
    energy: int = 100
    gamecoin_balance: int = 0

    # (operation, amount) in call order
    history: List[Tuple[str, int]] = field(default_factory=list)

    def check_and_deduct_energy(self, cost: int) -> bool:
        if cost < 0 or self.energy < cost:
            logger.debug("Energy check failed: have %d, need %d", self.energy, cost)
            return False
        self.energy -= cost
        self.history.append(("energy", -cost))
        return True

    def credit_currency(self, amount: int) -> None:
        self.gamecoin_balance += amount
        self.history.append(("gamecoin", amount))

    def restore_energy(self, amount: int) -> None:
        """Top up energy (e.g., between CLI sessions)."""
        self.energy += amount
        self.history.append(("energy", amount))
