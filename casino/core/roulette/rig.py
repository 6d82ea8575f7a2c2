"""
Forced-outcome override for the wheel (debug / demo tables).
"""

from dataclasses import dataclass
from typing import Optional, Union

from casino.core.exceptions import InvalidRigColor, InvalidRigNumber
from casino.core.logger import get_logger
from casino.core.roulette.pockets import Color, parse_pocket, pocket_label

logger = get_logger("rig")


@dataclass(frozen=True)
class RigState:
    rigged_number: Optional[int] = None
    rigged_color: Optional[Color] = None
    active: bool = False


INACTIVE_RIG = RigState()


class RigController:
    """
    Holds the rig for one table.
    The wheel only reads it; clearing is up to the caller, so a rig can
    outlive a spin until the caller's animation and settlement are done.
    """

    def __init__(self):
        self._state = INACTIVE_RIG

    @property
    def state(self) -> RigState:
        return self._state

    def set_rig(self, number: Union[int, str, None] = None, color: Optional[Color] = None) -> RigState:
        """
        Force the next outcome.

        Args:
            number: Pocket to land on (0-36, or "00"/37 for double zero)
            color: Color to land on; ignored by the wheel when a number is also rigged

        Raises:
            InvalidRigNumber: If number is not a pocket. The rig is left unchanged.
            InvalidRigColor: If color is not Red, Black or Green. The rig is left unchanged.
        """
        pocket = None
        if number is not None:
            pocket = parse_pocket(number)
            if pocket is None:
                logger.warning(f"Rejected rig number {number!r}")
                raise InvalidRigNumber(number)

        if color is not None:
            try:
                color = Color(color)
            except ValueError:
                logger.warning(f"Rejected rig color {color!r}")
                raise InvalidRigColor(color)

        if pocket is None and color is None:
            return self._state

        self._state = RigState(rigged_number=pocket, rigged_color=color, active=True)
        logger.warning(
            f"Rig set: number={pocket_label(pocket) if pocket is not None else None}, "
            f"color={color.value if color else None}"
        )
        return self._state

    def clear_rig(self):
        if self._state.active:
            logger.info("Rig cleared")
        self._state = INACTIVE_RIG

    def is_active(self) -> bool:
        return self._state.active
