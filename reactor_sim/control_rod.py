"""
Control Rod Actuator Model

This module models a single control rod: its insertion level, the
operational flag that gates movement, and its insertion speed limits.
"""

import logging
import math

from .constants import DEFAULT_ROD
from .exceptions import InvalidArgumentError, InvalidStateError
from .utils import clamp

logger = logging.getLogger(__name__)


class ControlRod:
    """
    Neutron-absorbing control rod.

    Insertion level runs from 0 (fully withdrawn) to 100 (fully inserted).
    Two rods are equal when their ids are equal; level and speed are not
    part of a rod's identity.

    Attributes:
        id: Unique identifier, immutable
        insertion_level: Insertion [%], always in [0, 100]
        operational: Movement operations are rejected when False
        max_insertion_speed: Speed limit [%/s], non-negative
        current_insertion_speed: Signed speed [%/s], positive = inserting
    """

    def __init__(
        self,
        rod_id: str,
        insertion_level: float = DEFAULT_ROD.MAX_INSERTION,
        operational: bool = True,
        max_insertion_speed: float = DEFAULT_ROD.MAX_INSERTION_SPEED,
        current_insertion_speed: float = 0.0,
    ):
        """
        Args:
            rod_id: Unique identifier
            insertion_level: Initial insertion [%], clamped into [0, 100]
            operational: Whether the rod accepts movement commands
            max_insertion_speed: Speed limit [%/s]
            current_insertion_speed: Initial signed speed [%/s]

        Raises:
            InvalidArgumentError: If the level is NaN or the speed limit is
                negative or not finite
        """
        if math.isnan(insertion_level):
            raise InvalidArgumentError("Initial insertion level must be a number, got nan")

        self._id = rod_id
        self.insertion_level = clamp(
            insertion_level,
            DEFAULT_ROD.MIN_INSERTION,
            DEFAULT_ROD.MAX_INSERTION,
        )
        self.operational = operational
        self.max_insertion_speed = max_insertion_speed
        self.current_insertion_speed = float(current_insertion_speed)

    @property
    def id(self) -> str:
        return self._id

    @property
    def insertion_level(self) -> float:
        return self._insertion_level

    @insertion_level.setter
    def insertion_level(self, level: float):
        if not DEFAULT_ROD.MIN_INSERTION <= level <= DEFAULT_ROD.MAX_INSERTION:
            raise InvalidArgumentError(
                f"Insertion level must be between 0 and 100, got {level}"
            )
        self._insertion_level = float(level)

    @property
    def max_insertion_speed(self) -> float:
        return self._max_insertion_speed

    @max_insertion_speed.setter
    def max_insertion_speed(self, speed: float):
        if not math.isfinite(speed) or speed < 0:
            raise InvalidArgumentError(
                f"Max insertion speed must be a non-negative finite number, got {speed}"
            )
        self._max_insertion_speed = float(speed)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, ControlRod):
            return NotImplemented
        return self._id == other._id

    def __hash__(self):
        return hash(self._id)

    def __repr__(self):
        return (
            f"ControlRod(id={self._id!r}, insertion={self._insertion_level:.1f}%, "
            f"operational={self.operational})"
        )

    def _require_operational(self):
        if not self.operational:
            raise InvalidStateError(f"Control rod {self._id} is not operational")

    @staticmethod
    def _check_amount(amount: float, action: str):
        if not math.isfinite(amount) or amount < 0:
            raise InvalidArgumentError(
                f"{action} amount must be a non-negative finite number, got {amount}"
            )

    def insert(self, amount: float):
        """
        Insert the rod further by ``amount`` percent, stopping at 100.

        Raises:
            InvalidStateError: If the rod is not operational
            InvalidArgumentError: If amount is negative or not finite
        """
        self._require_operational()
        self._check_amount(amount, "Insertion")
        self.insertion_level = min(DEFAULT_ROD.MAX_INSERTION, self._insertion_level + amount)

    def withdraw(self, amount: float):
        """
        Withdraw the rod by ``amount`` percent, stopping at 0.

        Raises:
            InvalidStateError: If the rod is not operational
            InvalidArgumentError: If amount is negative or not finite
        """
        self._require_operational()
        self._check_amount(amount, "Withdrawal")
        self.insertion_level = max(DEFAULT_ROD.MIN_INSERTION, self._insertion_level - amount)

    def fully_insert(self):
        self._require_operational()
        self.insertion_level = DEFAULT_ROD.MAX_INSERTION

    def fully_withdraw(self):
        self._require_operational()
        self.insertion_level = DEFAULT_ROD.MIN_INSERTION

    def set_insertion_level(self, level: float):
        """
        Set the insertion level directly.

        Unlike insert/withdraw this does not check the operational flag.

        Raises:
            InvalidArgumentError: If level is outside [0, 100]
        """
        self.insertion_level = level

    def set_insertion_speed(self, speed: float):
        """
        Set the signed insertion speed.

        Raises:
            InvalidArgumentError: If speed is not finite or |speed| exceeds
                the maximum insertion speed
        """
        if not math.isfinite(speed) or abs(speed) > self._max_insertion_speed:
            raise InvalidArgumentError(
                f"Speed {speed} exceeds maximum insertion speed "
                f"{self._max_insertion_speed}"
            )
        self.current_insertion_speed = float(speed)

    def set_max_insertion_speed(self, speed: float):
        self.max_insertion_speed = speed

    def emergency_insert(self):
        """Drive the rod in at maximum speed."""
        self._require_operational()
        self.current_insertion_speed = self._max_insertion_speed
        self.insertion_level = DEFAULT_ROD.MAX_INSERTION
        logger.debug("Control rod %s emergency inserted", self._id)

    def simulate_movement(self, seconds: float):
        """
        Move the rod for ``seconds`` at its current speed.

        No-op for a non-operational or stationary rod.
        """
        if not self.operational or self.current_insertion_speed == 0:
            return

        movement = self.current_insertion_speed * seconds
        if self.current_insertion_speed > 0:
            self.insert(movement)
        else:
            self.withdraw(abs(movement))

    def effectiveness(self) -> float:
        """Fraction of absorbing capacity realized, 0 when not operational."""
        if not self.operational:
            return 0.0
        return self._insertion_level / 100.0

    def is_fully_inserted(self) -> bool:
        return self._insertion_level >= DEFAULT_ROD.MAX_INSERTION

    def is_fully_withdrawn(self) -> bool:
        return self._insertion_level <= DEFAULT_ROD.MIN_INSERTION

    def to_dict(self) -> dict:
        """Return the rod state as a plain dictionary."""
        return {
            "id": self._id,
            "insertion_level": self._insertion_level,
            "operational": self.operational,
            "max_insertion_speed": self._max_insertion_speed,
            "current_insertion_speed": self.current_insertion_speed,
            "effectiveness": self.effectiveness(),
        }
