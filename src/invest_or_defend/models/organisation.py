"""Organisation model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from invest_or_defend.errors import PastBalanceAlreadySetError
from invest_or_defend.models.catalog import ImplementedControl, new_id
from invest_or_defend.models.event import ExperiencedEvent
from invest_or_defend.parameters import DEFAULT_STARTING_BALANCE


class Organisation(BaseModel):
    """An organisation playing a game.

    Attributes:
        name: Display name
        balance: Current balance (the score); may go negative
        past_balances: Balance at the start of each simulated turn, indexed
            by turn - 1. Each slot is written once.
        controls: Implemented controls, in purchase order
        events: Events experienced over the game, in the order applied
    """

    id: str = Field(default_factory=new_id)
    name: str
    balance: float = DEFAULT_STARTING_BALANCE
    past_balances: list[float] = Field(default_factory=list)
    controls: list[ImplementedControl] = Field(default_factory=list)
    events: list[ExperiencedEvent] = Field(default_factory=list)

    def has_past_balance(self, turn: int) -> bool:
        """Check whether the balance for ``turn`` has been recorded."""
        return len(self.past_balances) >= turn

    def record_past_balance(self, turn: int) -> None:
        """Snapshot the current balance as the starting balance of ``turn``.

        Raises:
            PastBalanceAlreadySetError: If the turn was already recorded
        """
        if self.has_past_balance(turn):
            raise PastBalanceAlreadySetError(
                f"Past balance already set for organisation {self.id} on turn {turn}"
            )
        self.past_balances.append(self.balance)

    def has_control(self, control_id: str) -> bool:
        """Check whether a control has been implemented."""
        return any(control.id == control_id for control in self.controls)
