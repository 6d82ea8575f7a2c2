"""American roulette: bets, wheel, ledger and settlement."""

from .pockets import Color, DOUBLE_ZERO, WHEEL_ORDER, get_color, pocket_label
from .catalog import BetCatalog, BetKind, BetType, bet_catalog
from .rig import RigController, RigState
from .wheel import Outcome, Wheel
from .ledger import Account, Bet, BetOutcome, Ledger
from .settlement import BetResult, SettlementEngine, SettlementSummary, settlement_engine
from .session import RoundRecord, Session, SessionManager, session_manager

__all__ = [
    "Color",
    "DOUBLE_ZERO",
    "WHEEL_ORDER",
    "get_color",
    "pocket_label",
    "BetCatalog",
    "BetKind",
    "BetType",
    "bet_catalog",
    "RigController",
    "RigState",
    "Outcome",
    "Wheel",
    "Account",
    "Bet",
    "BetOutcome",
    "Ledger",
    "BetResult",
    "SettlementEngine",
    "SettlementSummary",
    "settlement_engine",
    "RoundRecord",
    "Session",
    "SessionManager",
    "session_manager",
]
