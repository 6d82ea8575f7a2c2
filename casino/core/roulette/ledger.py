"""
Account balance and bet lifecycle for one table.

A bet is Pending from placement until it is settled (Won / Lost) or taken
back (Cancelled). Money only leaves the balance when a bet is placed and
only comes back through settlement, an undo, or a direct funds adjustment.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from casino.config import settings
from casino.core import clock
from casino.core.exceptions import (
    BetAlreadySettled,
    BetNotFound,
    InsufficientFunds,
    InvalidAmount,
)
from casino.core.logger import get_logger
from casino.core.roulette.catalog import BetType

logger = get_logger("ledger")


class BetOutcome(str, Enum):
    PENDING = "Pending"
    WON = "Won"
    LOST = "Lost"
    CANCELLED = "Cancelled"


def _money(value: float) -> float:
    return round(value, 2)


def _check_amount(amount) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmount(amount)
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(amount)
    return float(amount)


@dataclass
class Account:
    balance: float = 0.0
    total_wagered: float = 0.0
    total_won: float = 0.0
    total_lost: float = 0.0


@dataclass(eq=False)
class Bet:
    """A stake on one BetType. Only `outcome` and `payout` change after placement."""

    amount: float
    bet_type: BetType
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=clock.now)
    outcome: BetOutcome = BetOutcome.PENDING
    payout: float = 0.0

    _READ_ONLY = ("amount", "bet_type", "id", "created_at")

    def __setattr__(self, name, value):
        if name in self._READ_ONLY and name in self.__dict__:
            raise AttributeError(f"Bet.{name} cannot be changed after placement")
        super().__setattr__(name, value)

    @property
    def is_pending(self) -> bool:
        return self.outcome == BetOutcome.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bet": str(self.bet_type),
            "kind": self.bet_type.kind.value,
            "numbers": sorted(self.bet_type.numbers),
            "index": self.bet_type.index,
            "amount": self.amount,
            "outcome": self.outcome.value,
            "payout": self.payout,
            "created_at": self.created_at.isoformat(),
        }


class Ledger:
    """
    Balance, running totals and every bet placed at the table.
    Each operation either completes or raises without changing anything.
    """

    def __init__(self, starting_balance: Optional[float] = None, chip_values: Optional[List[float]] = None):
        if starting_balance is None:
            starting_balance = settings.table.starting_balance
        if starting_balance < 0:
            raise InvalidAmount(starting_balance)
        self.account = Account(balance=_money(starting_balance))
        self.chip_values = sorted(chip_values or settings.table.chip_values)
        self.bets: List[Bet] = []
        self._bets_by_id: Dict[str, Bet] = {}

    @property
    def balance(self) -> float:
        return self.account.balance

    # ==================== Placement ====================

    def place_bet(self, bet_type: BetType, amount: float) -> Bet:
        """
        Stake `amount` on `bet_type`.

        Raises:
            InvalidAmount: amount is not a positive number
            InsufficientFunds: amount exceeds the balance
        """
        if not isinstance(bet_type, BetType):
            raise TypeError(f"Expected BetType, got {type(bet_type).__name__}")
        try:
            amount = _check_amount(amount)
        except InvalidAmount:
            logger.warning(f"Rejected bet on {bet_type}: invalid amount {amount!r}")
            raise
        if amount > self.account.balance:
            logger.warning(
                f"Rejected bet on {bet_type}: {amount} exceeds balance {self.account.balance}"
            )
            raise InsufficientFunds(amount, self.account.balance)

        bet = Bet(amount=amount, bet_type=bet_type)
        self.account.balance = _money(self.account.balance - amount)
        self.account.total_wagered = _money(self.account.total_wagered + amount)
        self.bets.append(bet)
        self._bets_by_id[bet.id] = bet

        logger.debug(f"Bet placed: {amount} on {bet_type} (balance {self.account.balance})")
        return bet

    def double_bets(self) -> List[Bet]:
        """
        Place every pending bet again.
        All or nothing: raises InsufficientFunds if the doubled stake won't fit.
        """
        pending = self.pending_bets()
        total = self.pending_total()
        if total > self.account.balance:
            logger.warning(f"Rejected double: {total} exceeds balance {self.account.balance}")
            raise InsufficientFunds(total, self.account.balance)
        return [self.place_bet(bet.bet_type, bet.amount) for bet in pending]

    # ==================== Undo ====================

    def _refund(self, bet: Bet):
        bet.outcome = BetOutcome.CANCELLED
        self.account.balance = _money(self.account.balance + bet.amount)
        self.account.total_wagered = _money(self.account.total_wagered - bet.amount)

    def undo_bet(self, bet_id: str) -> bool:
        """Take back a pending bet. Returns False if there is no pending bet with that id."""
        bet = self._bets_by_id.get(bet_id)
        if bet is None or not bet.is_pending:
            return False
        self._refund(bet)
        logger.debug(f"Bet undone: {bet.amount} on {bet.bet_type}")
        return True

    def undo_last_bet(self) -> bool:
        for bet in reversed(self.bets):
            if bet.is_pending:
                return self.undo_bet(bet.id)
        return False

    def clear_pending_bets(self) -> float:
        """Refund every pending bet. Returns the amount refunded."""
        pending = self.pending_bets()
        for bet in pending:
            self._refund(bet)
        refunded = _money(sum(bet.amount for bet in pending))
        if pending:
            logger.debug(f"Cleared {len(pending)} pending bets, refunded {refunded}")
        return refunded

    # ==================== Settlement ====================

    def get_bet(self, bet_id: str) -> Bet:
        bet = self._bets_by_id.get(bet_id)
        if bet is None:
            raise BetNotFound(bet_id)
        return bet

    def check_pending(self, bet_id: str) -> Bet:
        """Return the bet if it can still be settled, raise otherwise."""
        bet = self.get_bet(bet_id)
        if not bet.is_pending:
            raise BetAlreadySettled(bet_id, bet.outcome.value)
        return bet

    def settle(self, bet_id: str, outcome: BetOutcome, payout: float = 0.0) -> Bet:
        """
        Resolve one pending bet.

        Won credits `payout` to the balance; Lost forfeits the stake and
        forces the payout to 0.

        Raises:
            BetNotFound: no bet with that id
            BetAlreadySettled: the bet is no longer pending
        """
        outcome = BetOutcome(outcome)
        if outcome not in (BetOutcome.WON, BetOutcome.LOST):
            raise ValueError(f"Bets settle as Won or Lost, not {outcome.value}")
        if outcome == BetOutcome.WON and (payout is None or payout < 0):
            raise ValueError(f"Payout must be non-negative, got {payout!r}")

        bet = self.check_pending(bet_id)

        if outcome == BetOutcome.WON:
            payout = _money(payout)
            self.account.balance = _money(self.account.balance + payout)
            self.account.total_won = _money(self.account.total_won + payout)
        else:
            payout = 0.0
            self.account.total_lost = _money(self.account.total_lost + bet.amount)

        bet.outcome = outcome
        bet.payout = payout
        return bet

    # ==================== Funds ====================

    def add_funds(self, amount: float) -> float:
        amount = _check_amount(amount)
        self.account.balance = _money(self.account.balance + amount)
        logger.info(f"Added {amount} (balance {self.account.balance})")
        return self.account.balance

    def withdraw_funds(self, amount: float) -> float:
        amount = _check_amount(amount)
        if amount > self.account.balance:
            logger.warning(f"Rejected withdrawal of {amount}: balance {self.account.balance}")
            raise InsufficientFunds(amount, self.account.balance)
        self.account.balance = _money(self.account.balance - amount)
        logger.info(f"Withdrew {amount} (balance {self.account.balance})")
        return self.account.balance

    # ==================== Queries ====================

    def pending_bets(self) -> List[Bet]:
        return [bet for bet in self.bets if bet.is_pending]

    def pending_total(self) -> float:
        return _money(sum(bet.amount for bet in self.bets if bet.is_pending))

    def pending_total_for(self, bet_type: BetType) -> float:
        """Stake stacked on one spot of the table."""
        return _money(sum(bet.amount for bet in self.bets if bet.is_pending and bet.bet_type == bet_type))

    def round_start_balance(self) -> float:
        """Balance plus everything still on the table."""
        return _money(self.account.balance + self.pending_total())

    def chip_for_amount(self, amount: float) -> float:
        """Largest chip denomination not above `amount` (smallest chip as a floor)."""
        for chip in reversed(self.chip_values):
            if chip <= amount:
                return chip
        return self.chip_values[0]
