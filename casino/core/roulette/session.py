"""
Table sessions.

A Session is one player's table: ledger, rig and round history, guarded by
a single lock. The presentation layer drives it in two phases:

    outcome = session.spin()            # animate toward outcome.slot
    summary = session.settle_all(outcome)  # once the animation has stopped

so the result on screen is always the result that was settled.
"""

import threading
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

import orjson

from casino.config import settings
from casino.core.exceptions import RouletteError
from casino.core.logger import get_logger
from casino.core.rng import make_rng
from casino.core.roulette.catalog import BetType
from casino.core.roulette.ledger import Bet, Ledger
from casino.core.roulette.pockets import Color
from casino.core.roulette.rig import RigController, RigState
from casino.core.roulette.settlement import SettlementEngine, SettlementSummary, settlement_engine
from casino.core.roulette.wheel import Outcome, Wheel

logger = get_logger("session")


@dataclass(frozen=True)
class RoundRecord:
    outcome: Outcome
    summary: SettlementSummary


class Session:
    """One table. Nothing here is shared between sessions."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        starting_balance: Optional[float] = None,
        rng=None,
        history_size: Optional[int] = None,
        clear_rig_after_settle: Optional[bool] = None,
        engine: Optional[SettlementEngine] = None,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.ledger = Ledger(starting_balance=starting_balance)
        self.rig = RigController()
        self.wheel = Wheel(rng or make_rng(settings.rng.seed))
        self.engine = engine or settlement_engine
        self.clear_rig_after_settle = (
            settings.table.clear_rig_after_settle if clear_rig_after_settle is None else clear_rig_after_settle
        )
        self._rounds = deque(maxlen=history_size or settings.table.history_size)
        self._lock = threading.RLock()

    # ==================== Betting ====================

    def place_bet(self, bet_type: BetType, amount: float) -> Bet:
        with self._lock:
            return self.ledger.place_bet(bet_type, amount)

    def undo_bet(self, bet_id: str) -> bool:
        with self._lock:
            return self.ledger.undo_bet(bet_id)

    def undo_last_bet(self) -> bool:
        with self._lock:
            return self.ledger.undo_last_bet()

    def clear_pending_bets(self) -> float:
        with self._lock:
            return self.ledger.clear_pending_bets()

    def double_bets(self) -> List[Bet]:
        with self._lock:
            return self.ledger.double_bets()

    # ==================== Rig ====================

    def set_rig(self, number=None, color: Optional[Color] = None) -> RigState:
        with self._lock:
            return self.rig.set_rig(number=number, color=color)

    def clear_rig(self):
        with self._lock:
            self.rig.clear_rig()

    def is_rig_active(self) -> bool:
        return self.rig.is_active()

    # ==================== Spin & settle ====================

    def spin(self) -> Outcome:
        """Pick the outcome. Does not settle and does not clear the rig."""
        with self._lock:
            return self.wheel.spin(self.rig.state)

    def settle_all(self, outcome: Outcome, pending_bets: Optional[List[Bet]] = None) -> SettlementSummary:
        """
        Settle against an outcome previously returned by spin().

        Args:
            outcome: The outcome the caller displayed
            pending_bets: Bets to settle; defaults to every pending bet
        """
        with self._lock:
            if pending_bets is None:
                pending_bets = self.ledger.pending_bets()
            summary = self.engine.settle_all(outcome, pending_bets, self.ledger)
            self._rounds.append(RoundRecord(outcome=outcome, summary=summary))
            # Only the rig that produced this outcome; a rig set for the next spin stays
            if self.clear_rig_after_settle and outcome.rigged and self.rig.state is outcome.rig:
                self.rig.clear_rig()
            return summary

    # ==================== Funds ====================

    def add_funds(self, amount: float) -> float:
        with self._lock:
            return self.ledger.add_funds(amount)

    def withdraw_funds(self, amount: float) -> float:
        with self._lock:
            return self.ledger.withdraw_funds(amount)

    # ==================== Queries ====================

    def get_balance(self) -> float:
        return self.ledger.account.balance

    def get_total_wagered(self) -> float:
        return self.ledger.account.total_wagered

    def get_total_won(self) -> float:
        return self.ledger.account.total_won

    def get_total_lost(self) -> float:
        return self.ledger.account.total_lost

    def get_pending_bets(self) -> List[Bet]:
        with self._lock:
            return self.ledger.pending_bets()

    def get_history(self, limit: Optional[int] = None) -> List[Outcome]:
        """Settled outcomes, oldest first. `limit` keeps the most recent ones."""
        return [record.outcome for record in self.get_rounds(limit)]

    def get_rounds(self, limit: Optional[int] = None) -> List[RoundRecord]:
        with self._lock:
            rounds = list(self._rounds)
        if limit is not None:
            rounds = rounds[-limit:] if limit > 0 else []
        return rounds

    def last_outcome(self) -> Optional[Outcome]:
        with self._lock:
            return self._rounds[-1].outcome if self._rounds else None

    def snapshot(self) -> dict:
        """Plain-dict view of the table for a presentation layer."""
        with self._lock:
            account = self.ledger.account
            rig = self.rig.state
            return {
                "session_id": self.id,
                "balance": account.balance,
                "total_wagered": account.total_wagered,
                "total_won": account.total_won,
                "total_lost": account.total_lost,
                "pending_total": self.ledger.pending_total(),
                "pending_bets": [bet.to_dict() for bet in self.ledger.pending_bets()],
                "rig_active": rig.active,
                "history": [record.summary.to_dict() for record in self._rounds],
            }

    def to_json(self) -> bytes:
        return orjson.dumps(self.snapshot())


class SessionManager:
    """
    Registry of independent table sessions, keyed by session id.
    """

    def __init__(self):
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self, session_id: Optional[str] = None, **kwargs) -> Session:
        with self._lock:
            if session_id is not None and session_id in self.sessions:
                raise RouletteError(f"Session already exists: {session_id}")
            session = Session(session_id=session_id, **kwargs)
            self.sessions[session.id] = session
        logger.info(f"Session opened: {session.id} (total={len(self.sessions)})")
        return session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self.sessions.get(session_id)

    def get_or_create(self, session_id: str, **kwargs) -> Session:
        with self._lock:
            session = self.sessions.get(session_id)
            if session is None:
                session = Session(session_id=session_id, **kwargs)
                self.sessions[session_id] = session
                logger.info(f"Session opened: {session_id} (total={len(self.sessions)})")
            return session

    def close(self, session_id: str) -> float:
        """
        Drop a session, refunding anything left on its table.
        Returns the final balance (0.0 if there was no such session).
        """
        with self._lock:
            session = self.sessions.pop(session_id, None)
        if session is None:
            return 0.0
        session.clear_pending_bets()
        balance = session.get_balance()
        logger.info(f"Session closed: {session_id} (balance {balance}, total={len(self.sessions)})")
        return balance

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self.sessions)


# Singleton instance
session_manager = SessionManager()
