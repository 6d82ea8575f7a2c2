from dataclasses import dataclass, field
from typing import Iterable, List

from casino.core.logger import get_logger
from casino.core.roulette.catalog import BetCatalog, BetType, bet_catalog
from casino.core.roulette.ledger import Bet, BetOutcome, Ledger
from casino.core.roulette.wheel import Outcome

logger = get_logger("settlement")


@dataclass(frozen=True)
class BetResult:
    bet_id: str
    bet_type: BetType
    amount: float
    outcome: BetOutcome
    payout: float

    @property
    def won(self) -> bool:
        return self.outcome == BetOutcome.WON

    def to_dict(self) -> dict:
        return {
            "bet_id": self.bet_id,
            "bet": str(self.bet_type),
            "amount": self.amount,
            "outcome": self.outcome.value,
            "payout": self.payout,
        }


@dataclass(frozen=True)
class SettlementSummary:
    """What one spin paid out and took."""

    outcome: Outcome
    won_total: float = 0.0
    lost_total: float = 0.0
    results: List[BetResult] = field(default_factory=list)

    @property
    def staked_total(self) -> float:
        return round(sum(r.amount for r in self.results), 2)

    @property
    def net(self) -> float:
        """Change to the player's position for the round (payouts minus stakes)."""
        return round(self.won_total - self.staked_total, 2)

    @property
    def has_winners(self) -> bool:
        return any(r.won for r in self.results)

    def to_dict(self) -> dict:
        return {
            "pocket": self.outcome.label,
            "color": self.outcome.color.value,
            "timestamp": self.outcome.timestamp.isoformat(),
            "rigged": self.outcome.rigged,
            "won_total": self.won_total,
            "lost_total": self.lost_total,
            "net": self.net,
            "results": [r.to_dict() for r in self.results],
        }


class SettlementEngine:
    """
    Resolves pending bets against one outcome.
    Every bet sees the same immutable outcome, so order does not matter.
    """

    def __init__(self, catalog: BetCatalog = None):
        self.catalog = catalog or bet_catalog

    def resolve(self, bet: Bet, outcome: Outcome) -> BetResult:
        """Work out a bet's result without touching the ledger."""
        won = self.catalog.wins_for(bet.bet_type, outcome.pocket)
        payout = round(bet.amount * self.catalog.payout_multiplier(bet.bet_type), 2) if won else 0.0
        return BetResult(
            bet_id=bet.id,
            bet_type=bet.bet_type,
            amount=bet.amount,
            outcome=BetOutcome.WON if won else BetOutcome.LOST,
            payout=payout,
        )

    def settle_all(self, outcome: Outcome, pending_bets: Iterable[Bet], ledger: Ledger) -> SettlementSummary:
        """
        Settle every bet in `pending_bets` against `outcome` and apply the
        results to `ledger`.

        Raises:
            BetNotFound / BetAlreadySettled: a bet is unknown to the ledger or
                already resolved. Checked before anything is applied, so a bad
                batch settles nothing.
        """
        bets = list(pending_bets)
        if len({bet.id for bet in bets}) != len(bets):
            raise ValueError("The same bet was passed twice for settlement")
        for bet in bets:
            ledger.check_pending(bet.id)

        results = [self.resolve(bet, outcome) for bet in bets]
        for result in results:
            ledger.settle(result.bet_id, result.outcome, result.payout)

        summary = SettlementSummary(
            outcome=outcome,
            won_total=round(sum(r.payout for r in results if r.won), 2),
            lost_total=round(sum(r.amount for r in results if not r.won), 2),
            results=results,
        )
        logger.info(
            f"Settled {len(results)} bets on {outcome.label}: "
            f"won {summary.won_total}, lost {summary.lost_total}, balance {ledger.balance}"
        )
        return summary


settlement_engine = SettlementEngine()
