from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from casino.core import clock
from casino.core.logger import get_logger
from casino.core.rng import rng as default_rng
from casino.core.roulette.pockets import (
    ALL_POCKETS,
    Color,
    get_color,
    pocket_label,
    pockets_of,
    wheel_index,
)
from casino.core.roulette.rig import INACTIVE_RIG, RigState

logger = get_logger("wheel")


@dataclass(frozen=True)
class Outcome:
    """Result of one spin."""

    pocket: int
    color: Color
    timestamp: datetime
    rigged: bool = False
    # The rig that forced this outcome, if any
    rig: Optional[RigState] = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return pocket_label(self.pocket)

    @property
    def slot(self) -> int:
        """Position of the pocket in WHEEL_ORDER."""
        return wheel_index(self.pocket)


class Wheel:
    """
    American roulette wheel (38 pockets: 0, 00, 1-36).
    Produces outcomes; never touches the rig it is given.
    """

    def __init__(self, rng=None):
        self.rng = rng or default_rng

    def spin(self, rig: Optional[RigState] = None) -> Outcome:
        """
        Spin the wheel.

        Args:
            rig: Optional forced outcome. Inactive or missing means a fair spin.

        Returns:
            Outcome with the landed pocket and its color
        """
        rig = rig or INACTIVE_RIG

        if not rig.active:
            pocket = self.rng.random_choice(ALL_POCKETS)
            color = get_color(pocket)
        elif rig.rigged_number is not None:
            pocket = rig.rigged_number
            # The number wins; a rigged color cannot repaint the pocket
            color = get_color(pocket)
        elif rig.rigged_color is not None:
            # Green rig picks between 0 and 00 like any other color
            pocket = self.rng.random_choice(pockets_of(rig.rigged_color))
            color = rig.rigged_color
        else:
            pocket = self.rng.random_choice(ALL_POCKETS)
            color = get_color(pocket)

        outcome = Outcome(
            pocket=pocket,
            color=color,
            timestamp=clock.now(),
            rigged=rig.active,
            rig=rig if rig.active else None,
        )
        logger.info(
            f"Spin: {outcome.label} {outcome.color.value}" + (" (rigged)" if outcome.rigged else "")
        )
        return outcome
