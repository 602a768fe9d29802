"""
Main Reactor Model

This module provides the reactor aggregate: its scalar operating state,
the status state machine, the power/thermal coupling, fuel consumption,
control-rod feedback and the per-tick simulation step.

The reactor holds no locks. Callers must serialize commands and time
steps against a single instance (see ``reactor_sim.driver``).
"""

import copy
import json
import logging
import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .constants import DEFAULT_LIMITS, DEFAULT_ROD, ReactorLimits, ReactorStatus
from .control_rod import ControlRod
from .exceptions import ControlRodNotFoundError, InvalidArgumentError, InvalidStateError
from .utils import (
    clamp,
    fuel_consumed,
    hours_from_seconds,
    mean_level,
    pressure_from_power,
    rod_power_reduction,
    temperature_from_power,
)

logger = logging.getLogger(__name__)


class Reactor:
    """
    Simulated reactor with a fleet of control rods.

    Attributes:
        id: Unique identifier, immutable
        name: Display name
        temperature: Core temperature [°C]
        pressure: Primary pressure [MPa]
        power_output: Power output [MW]
        fuel_level: Remaining fuel [%]
        status: Current ReactorStatus
        control_rods: Snapshot of the control rods
        last_maintenance: Time of the most recent maintenance
        operational_hours: Whole hours of operation
    """

    def __init__(
        self,
        reactor_id: str,
        name: str,
        limits: ReactorLimits = DEFAULT_LIMITS,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            reactor_id: Unique identifier
            name: Display name
            limits: Operating limits and formula coefficients
            rng: Random generator for environmental fluctuation
            seed: Seed used to build a generator when ``rng`` is not given
            clock: Source of the current time
        """
        self._id = reactor_id
        self.name = name
        self.limits = limits
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._clock = clock

        self._temperature = limits.AMBIENT_TEMPERATURE
        self._pressure = limits.AMBIENT_PRESSURE
        self._power_output = 0.0
        self._fuel_level = 100.0
        self.status = ReactorStatus.SHUTDOWN
        self.last_maintenance = clock()
        self._operational_hours = 0

        self._rods: Dict[str, ControlRod] = {}
        for i in range(limits.NUM_CONTROL_RODS):
            rod = ControlRod(f"CR-{i + 1}", DEFAULT_ROD.MAX_INSERTION)
            self._rods[rod.id] = rod

        # Level each moving rod is heading for
        self._rod_targets: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def temperature(self) -> float:
        return self._temperature

    @temperature.setter
    def temperature(self, value: float):
        if not math.isfinite(value) or value < 0:
            raise InvalidArgumentError(f"Temperature must be a non-negative number, got {value}")
        self._temperature = float(value)

    @property
    def pressure(self) -> float:
        return self._pressure

    @pressure.setter
    def pressure(self, value: float):
        if not math.isfinite(value) or value < 0:
            raise InvalidArgumentError(f"Pressure must be a non-negative number, got {value}")
        self._pressure = float(value)

    @property
    def power_output(self) -> float:
        return self._power_output

    @power_output.setter
    def power_output(self, value: float):
        if not math.isfinite(value) or value < 0:
            raise InvalidArgumentError(f"Power output must be a non-negative number, got {value}")
        self._power_output = float(value)

    @property
    def fuel_level(self) -> float:
        return self._fuel_level

    @fuel_level.setter
    def fuel_level(self, value: float):
        if not 0 <= value <= 100:
            raise InvalidArgumentError(f"Fuel level must be between 0 and 100, got {value}")
        self._fuel_level = float(value)

    @property
    def operational_hours(self) -> int:
        return self._operational_hours

    @operational_hours.setter
    def operational_hours(self, value: int):
        if value < 0:
            raise InvalidArgumentError(f"Operational hours cannot be negative, got {value}")
        self._operational_hours = int(value)

    @property
    def control_rods(self) -> List[ControlRod]:
        """Independent copies of the control rods, in id order."""
        return [copy.copy(rod) for rod in self._rods.values()]

    def get_control_rod(self, rod_id: str) -> ControlRod:
        """
        Return a copy of one control rod.

        Raises:
            ControlRodNotFoundError: If no rod has this id
        """
        return copy.copy(self._find_rod(rod_id))

    def average_rod_insertion(self) -> float:
        """Mean insertion level of all rods [%]."""
        return mean_level(rod.insertion_level for rod in self._rods.values())

    def _find_rod(self, rod_id: str) -> ControlRod:
        try:
            return self._rods[rod_id]
        except KeyError:
            raise ControlRodNotFoundError(rod_id) from None

    # ------------------------------------------------------------------
    # Status state machine
    # ------------------------------------------------------------------

    def _transition(self, new_status: ReactorStatus):
        old_status = self.status
        self.status = new_status
        logger.info("Reactor %s: %s -> %s", self._id, old_status, new_status)

    def start_up(self):
        """
        Begin startup from SHUTDOWN or MAINTENANCE.

        Raises:
            InvalidStateError: If the status does not allow startup or
                fuel is below the startup minimum
        """
        if self.status not in (ReactorStatus.SHUTDOWN, ReactorStatus.MAINTENANCE):
            raise InvalidStateError(
                "Reactor can only be started from SHUTDOWN or MAINTENANCE status, "
                f"current status is {self.status}"
            )
        if self._fuel_level < self.limits.MIN_STARTUP_FUEL:
            raise InvalidStateError(
                f"Insufficient fuel level for startup: {self._fuel_level:.1f}% "
                f"(minimum {self.limits.MIN_STARTUP_FUEL:.0f}%)"
            )
        self._transition(ReactorStatus.STARTING_UP)
        self._temperature = self.limits.STARTUP_TEMPERATURE
        self._pressure = self.limits.STARTUP_PRESSURE

    def reach_operational(self):
        """
        Complete startup and bring the reactor to nominal power.

        Raises:
            InvalidStateError: If the reactor is not STARTING_UP
        """
        if self.status != ReactorStatus.STARTING_UP:
            raise InvalidStateError(
                "Reactor must be in STARTING_UP status to reach operational, "
                f"current status is {self.status}"
            )
        self._transition(ReactorStatus.OPERATIONAL)
        self._temperature = self.limits.OPERATIONAL_TEMPERATURE
        self._pressure = self.limits.OPERATIONAL_PRESSURE
        self._power_output = self.limits.NOMINAL_POWER

    def shutdown(self):
        """
        Perform a normal shutdown.

        Raises:
            InvalidStateError: If the reactor is in emergency shutdown
        """
        if self.status == ReactorStatus.EMERGENCY_SHUTDOWN:
            raise InvalidStateError("Reactor is already in emergency shutdown")
        self._transition(ReactorStatus.SHUTDOWN)
        self._temperature = self.limits.SHUTDOWN_TEMPERATURE
        self._pressure = self.limits.SHUTDOWN_PRESSURE
        self._power_output = 0.0

    def emergency_shutdown(self):
        """Scram: always succeeds and drives every rod fully in."""
        logger.warning("Reactor %s: emergency shutdown from %s", self._id, self.status)
        self._transition(ReactorStatus.EMERGENCY_SHUTDOWN)
        self._temperature = self.limits.AMBIENT_TEMPERATURE
        self._pressure = self.limits.AMBIENT_PRESSURE
        self._power_output = 0.0
        # Direct write, non-operational rods included
        for rod in self._rods.values():
            rod.insertion_level = DEFAULT_ROD.MAX_INSERTION
        self._rod_targets.clear()

    def perform_maintenance(self):
        """
        Refuel and return to SHUTDOWN.

        Raises:
            InvalidStateError: If the reactor is not in MAINTENANCE
        """
        if self.status != ReactorStatus.MAINTENANCE:
            raise InvalidStateError(
                "Maintenance can only be performed when reactor is in MAINTENANCE "
                f"status, current status is {self.status}"
            )
        self._fuel_level = 100.0
        self.last_maintenance = self._clock()
        self._transition(ReactorStatus.SHUTDOWN)

    def is_operational(self) -> bool:
        return self.status == ReactorStatus.OPERATIONAL

    # ------------------------------------------------------------------
    # Power and thermal coupling
    # ------------------------------------------------------------------

    def _apply_power(self, power_mw: float):
        """Set power and derive temperature and pressure from it."""
        self._power_output = power_mw
        self._temperature = temperature_from_power(power_mw, self.limits)
        self._pressure = pressure_from_power(power_mw, self.limits)

    def adjust_power(self, target_power: float):
        """
        Set the power output of an operational reactor.

        Args:
            target_power: Target power [MW], 0 to MAX_POWER

        Raises:
            InvalidStateError: If the reactor is not OPERATIONAL
            InvalidArgumentError: If the target is out of range
        """
        if self.status != ReactorStatus.OPERATIONAL:
            raise InvalidStateError(
                "Power can only be adjusted when reactor is operational, "
                f"current status is {self.status}"
            )
        if not 0 <= target_power <= self.limits.MAX_POWER:
            raise InvalidArgumentError(
                f"Power must be between 0 and {self.limits.MAX_POWER:.0f} MW, "
                f"got {target_power}"
            )
        self._apply_power(float(target_power))
        logger.debug("Reactor %s: power set to %.1f MW", self._id, target_power)

    def get_efficiency(self) -> float:
        """
        Operating efficiency [%].

        η = (P / P_nominal) * (fuel / 100) * 100
        """
        if self._power_output == 0:
            return 0.0
        return (self._power_output / self.limits.NOMINAL_POWER) * (self._fuel_level / 100.0) * 100.0

    def is_in_danger_zone(self) -> bool:
        return (
            self._temperature > self.limits.DANGER_TEMPERATURE
            or self._pressure > self.limits.DANGER_PRESSURE
            or self._fuel_level < self.limits.MIN_OPERATING_FUEL
        )

    def _burn_fuel(self, hours: float):
        fuel_level = max(0.0, self._fuel_level - fuel_consumed(self._power_output, hours, self.limits))
        operational_hours = self._operational_hours + math.floor(hours)
        self._fuel_level = fuel_level
        self._operational_hours = operational_hours

        if self._fuel_level < self.limits.MIN_OPERATING_FUEL and self.status != ReactorStatus.MAINTENANCE:
            logger.warning(
                "Reactor %s: fuel at %.2f%%, forcing maintenance", self._id, self._fuel_level
            )
            self._transition(ReactorStatus.MAINTENANCE)

    def consume_fuel(self, hours: float):
        """
        Burn fuel for ``hours`` of operation at the current power.

        Forces MAINTENANCE when fuel drops below the operating minimum.

        Raises:
            InvalidArgumentError: If hours is negative or not finite
        """
        if not math.isfinite(hours) or hours < 0:
            raise InvalidArgumentError(f"Hours must be a non-negative finite number, got {hours}")
        self._burn_fuel(hours)

    # ------------------------------------------------------------------
    # Control rods
    # ------------------------------------------------------------------

    def insert_control_rod(self, rod_id: str, insertion_level: float):
        """
        Move a control rod to a new insertion level.

        The rod's speed is set to a ramp toward the target, capped at
        ROD_RAMP_SPEED_CAP. While operational the average insertion of all
        rods reduces power by up to MAX_ROD_POWER_REDUCTION, and temperature
        and pressure are re-derived from the new power.

        Args:
            rod_id: Rod identifier, "CR-1" to "CR-10"
            insertion_level: Target insertion [%]

        Raises:
            ControlRodNotFoundError: If the id is unknown
            InvalidArgumentError: If the level is outside [0, 100]
        """
        rod = self._find_rod(rod_id)
        if not DEFAULT_ROD.MIN_INSERTION <= insertion_level <= DEFAULT_ROD.MAX_INSERTION:
            raise InvalidArgumentError(
                f"Insertion level must be between 0 and 100, got {insertion_level}"
            )

        movement = insertion_level - rod.insertion_level
        if abs(movement) > self.limits.ROD_ARRIVAL_TOLERANCE:
            speed = min(self.limits.ROD_RAMP_SPEED_CAP, abs(movement) / self.limits.ROD_RAMP_DIVISOR)
            rod.current_insertion_speed = math.copysign(speed, movement)
            self._rod_targets[rod_id] = float(insertion_level)
        else:
            rod.current_insertion_speed = 0.0
            self._rod_targets.pop(rod_id, None)

        # Direct write, bypasses the rod's operational check
        rod.insertion_level = float(insertion_level)

        if self.status == ReactorStatus.OPERATIONAL:
            reduction = rod_power_reduction(self.average_rod_insertion(), self.limits)
            self._apply_power(max(0.0, self._power_output * (1 - reduction)))
            logger.debug(
                "Reactor %s: rod %s at %.1f%%, power reduced by %.1f%% to %.1f MW",
                self._id, rod_id, insertion_level, reduction * 100, self._power_output,
            )

    def set_control_rod_operational(self, rod_id: str, operational: bool):
        """
        Mark a control rod as failed or repaired.

        Raises:
            ControlRodNotFoundError: If the id is unknown
        """
        rod = self._find_rod(rod_id)
        rod.operational = bool(operational)
        if not operational:
            logger.warning("Reactor %s: control rod %s marked non-operational", self._id, rod_id)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _advance_rods(self, seconds: float):
        tolerance = self.limits.ROD_ARRIVAL_TOLERANCE
        for rod in self._rods.values():
            speed = rod.current_insertion_speed
            if speed == 0:
                continue

            default_target = DEFAULT_ROD.MAX_INSERTION if speed > 0 else DEFAULT_ROD.MIN_INSERTION
            target = self._rod_targets.get(rod.id, default_target)
            if abs(target - rod.insertion_level) < tolerance:
                rod.current_insertion_speed = 0.0
                self._rod_targets.pop(rod.id, None)
                continue

            level = rod.insertion_level + speed * seconds
            # Stop at the target rather than overshoot it
            if (speed > 0 and level > target) or (speed < 0 and level < target):
                level = target
            rod.insertion_level = clamp(level, DEFAULT_ROD.MIN_INSERTION, DEFAULT_ROD.MAX_INSERTION)

            if abs(target - rod.insertion_level) < tolerance:
                rod.current_insertion_speed = 0.0
                self._rod_targets.pop(rod.id, None)

    def _fluctuate(self, seconds: float):
        scale = seconds / 60.0
        limits = self.limits
        self._temperature += self._rng.uniform(-1.0, 1.0) * limits.TEMPERATURE_NOISE * scale
        self._pressure += self._rng.uniform(-1.0, 1.0) * limits.PRESSURE_NOISE * scale
        self._temperature = clamp(self._temperature, limits.AMBIENT_TEMPERATURE, limits.MAX_TEMPERATURE)
        self._pressure = clamp(self._pressure, limits.AMBIENT_PRESSURE, limits.MAX_PRESSURE)

    def simulate_time_step(self, seconds: float):
        """
        Advance the simulation by ``seconds``.

        Only an operational reactor evolves: moving rods advance toward
        their targets, fuel burns for the elapsed time, and temperature and
        pressure fluctuate by a small amount drawn from the injected
        random generator.

        Raises:
            InvalidArgumentError: If seconds is negative or not finite
        """
        if not math.isfinite(seconds) or seconds < 0:
            raise InvalidArgumentError(f"Time step must be a non-negative finite number, got {seconds}")
        if self.status != ReactorStatus.OPERATIONAL:
            return

        self._advance_rods(seconds)
        self._burn_fuel(hours_from_seconds(seconds))
        self._fluctuate(seconds)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_state_summary(self) -> Dict[str, Any]:
        """
        Get the full reactor state.

        Returns dictionary with scalar state, derived indicators and rods.
        """
        return {
            "id": self._id,
            "name": self.name,
            "status": self.status.value,
            "temperature_C": self._temperature,
            "pressure_MPa": self._pressure,
            "power_output_MW": self._power_output,
            "fuel_level_percent": self._fuel_level,
            "efficiency_percent": self.get_efficiency(),
            "in_danger_zone": self.is_in_danger_zone(),
            "operational_hours": self._operational_hours,
            "last_maintenance": self.last_maintenance.isoformat(),
            "average_rod_insertion_percent": self.average_rod_insertion(),
            "control_rods": [rod.to_dict() for rod in self._rods.values()],
        }

    def to_json(self, filepath: Optional[str] = None) -> str:
        """
        Export the reactor state to JSON.

        Args:
            filepath: Optional file path to save JSON

        Returns:
            JSON string
        """
        json_str = json.dumps(self.get_state_summary(), indent=2, default=str)

        if filepath:
            with open(filepath, 'w') as f:
                f.write(json_str)

        return json_str

    def print_summary(self):
        """Print formatted summary of the reactor state."""
        print("=" * 70)
        print(f"{'REACTOR ' + self._id + ' - ' + self.name:^70}")
        print("=" * 70)

        print(f"  Status:                 {self.status.value:>18}")
        print(f"  Temperature:            {self._temperature:>14.1f} °C")
        print(f"  Pressure:               {self._pressure:>14.2f} MPa")
        print(f"  Power Output:           {self._power_output:>14.1f} MW")
        print(f"  Fuel Level:             {self._fuel_level:>14.2f} %")
        print(f"  Efficiency:             {self.get_efficiency():>14.1f} %")
        print(f"  Operational Hours:      {self._operational_hours:>14d}")
        print(f"  Danger Zone:            {'YES' if self.is_in_danger_zone() else 'no':>14}")

        print(f"\n{'CONTROL RODS':^70}")
        print("-" * 70)
        for rod in self._rods.values():
            state = "ok" if rod.operational else "FAILED"
            print(
                f"  {rod.id:<6} {rod.insertion_level:>8.1f} %   "
                f"speed {rod.current_insertion_speed:>6.2f} %/s   {state}"
            )

        print("=" * 70)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Reactor):
            return NotImplemented
        return self._id == other._id

    def __hash__(self):
        return hash(self._id)

    def __repr__(self):
        return (
            f"Reactor(id={self._id!r}, name={self.name!r}, status={self.status.value}, "
            f"power={self._power_output:.1f} MW, temp={self._temperature:.1f}°C)"
        )


def create_reactor(
    reactor_id: str = "R-1",
    name: str = "Reactor",
    seed: Optional[int] = None,
    **kwargs
) -> Reactor:
    """
    Factory function to create a reactor.

    Args:
        reactor_id: Unique identifier
        name: Display name
        seed: Seed for the environmental fluctuation generator
        **kwargs: Additional parameters passed to Reactor

    Returns:
        Configured Reactor instance
    """
    return Reactor(reactor_id, name, seed=seed, **kwargs)
