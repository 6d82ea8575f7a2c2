"""
Bet catalog for the American table.
Every bet is a BetType value; shapes are checked against the table
layout when the value is built, so a BetType that exists is always legal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Union

from casino.core.exceptions import InvalidBetShape
from casino.core.roulette.pockets import (
    ALL_POCKETS,
    DOUBLE_ZERO,
    ZERO_POCKETS,
    Color,
    get_color,
    parse_pocket,
    pocket_label,
)


class BetKind(str, Enum):
    STRAIGHT = "straight"
    SPLIT = "split"
    STREET = "street"
    CORNER = "corner"
    FIVE_NUMBER = "five_number"
    LINE = "line"
    RED = "red"
    BLACK = "black"
    EVEN = "even"
    ODD = "odd"
    LOW = "low"
    HIGH = "high"
    DOZEN = "dozen"
    COLUMN = "column"


# Inside bets carry their own numbers
INSIDE_KINDS = frozenset({
    BetKind.STRAIGHT, BetKind.SPLIT, BetKind.STREET,
    BetKind.CORNER, BetKind.FIVE_NUMBER, BetKind.LINE,
})
INDEXED_KINDS = frozenset({BetKind.DOZEN, BetKind.COLUMN})

FIVE_NUMBERS = frozenset({0, DOUBLE_ZERO, 1, 2, 3})


def _table_rows() -> List[FrozenSet[int]]:
    return [frozenset({3 * r + 1, 3 * r + 2, 3 * r + 3}) for r in range(12)]


def _valid_splits() -> FrozenSet[FrozenSet[int]]:
    splits = set()
    for n in range(1, 37):
        if n % 3 != 0:
            splits.add(frozenset({n, n + 1}))
        if n <= 33:
            splits.add(frozenset({n, n + 3}))
    # Splits along the zero pockets
    for pair in ((0, DOUBLE_ZERO), (0, 1), (0, 2), (DOUBLE_ZERO, 2), (DOUBLE_ZERO, 3)):
        splits.add(frozenset(pair))
    return frozenset(splits)


def _valid_streets() -> FrozenSet[FrozenSet[int]]:
    trios = [frozenset({0, 1, 2}), frozenset({0, DOUBLE_ZERO, 2}), frozenset({DOUBLE_ZERO, 2, 3})]
    return frozenset(_table_rows() + trios)


def _valid_corners() -> FrozenSet[FrozenSet[int]]:
    return frozenset(
        frozenset({n, n + 1, n + 3, n + 4})
        for n in range(1, 33)
        if n % 3 != 0
    )


def _valid_lines() -> FrozenSet[FrozenSet[int]]:
    rows = _table_rows()
    return frozenset(rows[r] | rows[r + 1] for r in range(11))


VALID_SHAPES = {
    BetKind.SPLIT: _valid_splits(),
    BetKind.STREET: _valid_streets(),
    BetKind.CORNER: _valid_corners(),
    BetKind.LINE: _valid_lines(),
}

SHAPE_SIZES = {
    BetKind.STRAIGHT: 1,
    BetKind.SPLIT: 2,
    BetKind.STREET: 3,
    BetKind.CORNER: 4,
    BetKind.FIVE_NUMBER: 5,
    BetKind.LINE: 6,
}


def _validate(kind: BetKind, numbers: FrozenSet[int], index: Optional[int]):
    """Raise InvalidBetShape unless the numbers form a legal bet of this kind."""
    if kind in INSIDE_KINDS:
        if index is not None:
            raise InvalidBetShape(kind.value, numbers, "inside bets take no index")
        if len(numbers) != SHAPE_SIZES[kind]:
            raise InvalidBetShape(
                kind.value, numbers, f"expected {SHAPE_SIZES[kind]} numbers"
            )
        if kind == BetKind.FIVE_NUMBER:
            if numbers != FIVE_NUMBERS:
                raise InvalidBetShape(kind.value, numbers, "must be 0, 00, 1, 2, 3")
        elif kind in VALID_SHAPES and numbers not in VALID_SHAPES[kind]:
            raise InvalidBetShape(kind.value, numbers, "not adjacent on the table")
        return

    if numbers:
        raise InvalidBetShape(kind.value, numbers, "outside bets take no numbers")
    if kind in INDEXED_KINDS:
        if index not in (1, 2, 3):
            raise InvalidBetShape(kind.value, numbers, f"index must be 1-3, got {index!r}")
    elif index is not None:
        raise InvalidBetShape(kind.value, numbers, "this bet takes no index")


def _to_pockets(kind: BetKind, numbers: Iterable[Union[int, str]]) -> FrozenSet[int]:
    pockets = []
    for value in numbers:
        pocket = parse_pocket(value)
        if pocket is None:
            raise InvalidBetShape(kind.value, list(numbers), f"{value!r} is not a pocket")
        pockets.append(pocket)
    if len(set(pockets)) != len(pockets):
        raise InvalidBetShape(kind.value, pockets, "duplicate numbers")
    return frozenset(pockets)


@dataclass(frozen=True)
class BetType:
    """
    One bet on the table.

    `numbers` holds the covered pockets for inside bets, `index` the 1-3
    selector for dozens and columns. Build through BetCatalog.
    """

    kind: BetKind
    numbers: FrozenSet[int] = field(default_factory=frozenset)
    index: Optional[int] = None

    def __post_init__(self):
        kind = BetKind(self.kind)
        numbers = _to_pockets(kind, self.numbers)
        _validate(kind, numbers, self.index)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "numbers", numbers)

    @property
    def is_inside(self) -> bool:
        return self.kind in INSIDE_KINDS

    def __str__(self):
        return bet_catalog.describe(self)


class BetCatalog:
    """
    American roulette bets and their payouts.
    Multipliers are total return per unit staked (stake included).
    """

    PAYOUTS = {
        BetKind.STRAIGHT: 36,  # 35:1 + bet
        BetKind.SPLIT: 18,  # 17:1 + bet
        BetKind.STREET: 12,  # 11:1 + bet
        BetKind.CORNER: 9,  # 8:1 + bet
        BetKind.FIVE_NUMBER: 7,  # 6:1 + bet
        BetKind.LINE: 6,  # 5:1 + bet
        BetKind.RED: 2,
        BetKind.BLACK: 2,
        BetKind.EVEN: 2,
        BetKind.ODD: 2,
        BetKind.LOW: 2,
        BetKind.HIGH: 2,
        BetKind.DOZEN: 3,  # 2:1 + bet
        BetKind.COLUMN: 3,  # 2:1 + bet
    }

    ORDINALS = {1: "1st", 2: "2nd", 3: "3rd"}

    # ==================== Factories ====================

    def straight(self, number: Union[int, str]) -> BetType:
        return BetType(BetKind.STRAIGHT, [number])

    def split(self, a, b) -> BetType:
        return BetType(BetKind.SPLIT, [a, b])

    def street(self, *numbers) -> BetType:
        return BetType(BetKind.STREET, numbers)

    def corner(self, *numbers) -> BetType:
        return BetType(BetKind.CORNER, numbers)

    def five_number(self) -> BetType:
        return BetType(BetKind.FIVE_NUMBER, FIVE_NUMBERS)

    def line(self, *numbers) -> BetType:
        return BetType(BetKind.LINE, numbers)

    def red(self) -> BetType:
        return BetType(BetKind.RED)

    def black(self) -> BetType:
        return BetType(BetKind.BLACK)

    def color(self, color: Color) -> BetType:
        if color == Color.RED:
            return self.red()
        if color == Color.BLACK:
            return self.black()
        raise InvalidBetShape("color", [], "only red or black can be backed")

    def even(self) -> BetType:
        return BetType(BetKind.EVEN)

    def odd(self) -> BetType:
        return BetType(BetKind.ODD)

    def low(self) -> BetType:
        return BetType(BetKind.LOW)

    def high(self) -> BetType:
        return BetType(BetKind.HIGH)

    def dozen(self, index: int) -> BetType:
        return BetType(BetKind.DOZEN, index=index)

    def column(self, index: int) -> BetType:
        return BetType(BetKind.COLUMN, index=index)

    # ==================== Rules ====================

    def payout_multiplier(self, bet_type: BetType) -> int:
        return self.PAYOUTS[bet_type.kind]

    def wins_for(self, bet_type: BetType, pocket: int) -> bool:
        """Check if a bet wins when the ball lands in `pocket`."""
        kind = bet_type.kind
        is_zero = pocket in ZERO_POCKETS

        if kind in INSIDE_KINDS:
            return pocket in bet_type.numbers

        elif kind == BetKind.RED:
            return get_color(pocket) == Color.RED

        elif kind == BetKind.BLACK:
            return get_color(pocket) == Color.BLACK

        elif kind == BetKind.EVEN:
            return not is_zero and pocket % 2 == 0

        elif kind == BetKind.ODD:
            return not is_zero and pocket % 2 == 1

        elif kind == BetKind.LOW:
            return 1 <= pocket <= 18

        elif kind == BetKind.HIGH:
            return 19 <= pocket <= 36

        elif kind == BetKind.DOZEN:
            upper = 12 * bet_type.index
            return upper - 11 <= pocket <= upper

        elif kind == BetKind.COLUMN:
            # Column 1: 1,4,7... Column 2: 2,5,8... Column 3: 3,6,9...
            return not is_zero and pocket % 3 == bet_type.index % 3

        return False

    def payout_for(self, bet_type: BetType, amount: float, pocket: int) -> float:
        """Total returned for a stake of `amount`; 0 on a loss."""
        if not self.wins_for(bet_type, pocket):
            return 0.0
        return round(amount * self.payout_multiplier(bet_type), 2)

    # ==================== Display ====================

    def describe(self, bet_type: BetType) -> str:
        kind = bet_type.kind
        labels = "-".join(
            pocket_label(n) for n in sorted(bet_type.numbers, key=lambda n: (n != 0, n != DOUBLE_ZERO, n))
        )

        if kind == BetKind.STRAIGHT:
            (number,) = bet_type.numbers
            return pocket_label(number) if number in ZERO_POCKETS else f"Number {number}"
        if kind == BetKind.FIVE_NUMBER:
            return "Five Number (0-00-1-2-3)"
        if kind in INSIDE_KINDS:
            return f"{kind.value.title()} {labels}"
        if kind == BetKind.LOW:
            return "1-18"
        if kind == BetKind.HIGH:
            return "19-36"
        if kind in INDEXED_KINDS:
            return f"{self.ORDINALS[bet_type.index]} {kind.value.title()}"
        return kind.value.title()

    def all_bets(self) -> List[BetType]:
        """Every legal bet on the table."""
        bets = [self.straight(p) for p in ALL_POCKETS]
        for kind in (BetKind.SPLIT, BetKind.STREET, BetKind.CORNER, BetKind.LINE):
            shapes = sorted(VALID_SHAPES[kind], key=sorted)
            bets.extend(BetType(kind, shape) for shape in shapes)
        bets.append(self.five_number())
        bets.extend([self.red(), self.black(), self.even(), self.odd(), self.low(), self.high()])
        bets.extend(self.dozen(i) for i in (1, 2, 3))
        bets.extend(self.column(i) for i in (1, 2, 3))
        return bets


# Singleton instance
bet_catalog = BetCatalog()
