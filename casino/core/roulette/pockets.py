"""
Pockets of the American (double zero) wheel.

Pockets are plain ints. 0-36 are themselves; the "00" pocket is 37.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

DOUBLE_ZERO = 37

ALL_POCKETS = tuple(range(38))  # 0-36 plus 00
ZERO_POCKETS = frozenset({0, DOUBLE_ZERO})

RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset({2, 4, 6, 8, 10, 11, 13, 15, 17, 20, 22, 24, 26, 28, 29, 31, 33, 35})

# Clockwise, starting at 0
WHEEL_ORDER = (
    0, 28, 9, 26, 30, 11, 7, 20, 32, 17,
    5, 22, 34, 15, 3, 24, 36, 13, 1, DOUBLE_ZERO,
    27, 10, 25, 29, 12, 8, 19, 31, 18, 6,
    21, 33, 16, 4, 23, 35, 14, 2,
)

_WHEEL_INDEX: Dict[int, int] = {pocket: i for i, pocket in enumerate(WHEEL_ORDER)}


class Color(str, Enum):
    RED = "Red"
    BLACK = "Black"
    GREEN = "Green"


def is_pocket(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= DOUBLE_ZERO


def get_color(pocket: int) -> Color:
    """Get the color of a pocket."""
    if pocket in ZERO_POCKETS:
        return Color.GREEN
    if pocket in RED_NUMBERS:
        return Color.RED
    return Color.BLACK


def pockets_of(color: Color) -> List[int]:
    """All pockets of one color, in numeric order."""
    return [p for p in ALL_POCKETS if get_color(p) == color]


def pocket_label(pocket: int) -> str:
    return "00" if pocket == DOUBLE_ZERO else str(pocket)


def parse_pocket(value: Union[int, str]) -> Optional[int]:
    """
    Turn a pocket label or int into a pocket.
    Returns None when the value does not name a pocket.
    """
    if isinstance(value, str):
        text = value.strip()
        if text == "00":
            return DOUBLE_ZERO
        if not text.isdigit():
            return None
        value = int(text)
        # "37" is not a label anyone uses for 00
        return value if 0 <= value <= 36 else None
    return value if is_pocket(value) else None


def wheel_index(pocket: int) -> int:
    """Slot of a pocket in WHEEL_ORDER, for aiming a wheel animation."""
    return _WHEEL_INDEX[pocket]
