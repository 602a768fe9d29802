"""
Operating Limits and Defaults for the Reactor Simulator

This module contains the thresholds, formula coefficients and default
values shared by the reactor model, the control rods and the monitoring
service.
"""

from dataclasses import dataclass
from enum import Enum


class ReactorStatus(Enum):
    """Operating status of a reactor."""

    SHUTDOWN = "SHUTDOWN"
    STARTING_UP = "STARTING_UP"
    OPERATIONAL = "OPERATIONAL"
    EMERGENCY_SHUTDOWN = "EMERGENCY_SHUTDOWN"
    MAINTENANCE = "MAINTENANCE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ReactorLimits:
    """Thresholds and coefficients governing reactor behaviour."""

    # Ambient conditions [°C], [MPa]
    AMBIENT_TEMPERATURE: float = 25.0
    AMBIENT_PRESSURE: float = 0.1

    # Power envelope [MW]
    MAX_POWER: float = 1200.0
    NOMINAL_POWER: float = 1000.0

    # Power-derived thermal coupling: T = 25 + (P/MAX)*400, p = 0.1 + (P/MAX)*19.9
    TEMPERATURE_SPAN: float = 400.0
    PRESSURE_SPAN: float = 19.9

    # Fuel [%]
    MIN_STARTUP_FUEL: float = 10.0
    MIN_OPERATING_FUEL: float = 5.0
    FUEL_BURN_RATE: float = 0.1  # % per hour at nominal power

    # Danger zone
    DANGER_TEMPERATURE: float = 500.0
    DANGER_PRESSURE: float = 20.0

    # State-entry setpoints
    STARTUP_TEMPERATURE: float = 100.0
    STARTUP_PRESSURE: float = 1.0
    OPERATIONAL_TEMPERATURE: float = 300.0
    OPERATIONAL_PRESSURE: float = 15.0
    SHUTDOWN_TEMPERATURE: float = 50.0
    SHUTDOWN_PRESSURE: float = 0.5

    # Control rod feedback
    NUM_CONTROL_RODS: int = 10
    MAX_ROD_POWER_REDUCTION: float = 0.3
    ROD_RAMP_SPEED_CAP: float = 5.0  # % per second
    ROD_RAMP_DIVISOR: float = 10.0
    ROD_ARRIVAL_TOLERANCE: float = 0.1

    # Environmental fluctuation per minute of simulated time
    TEMPERATURE_NOISE: float = 1.0
    PRESSURE_NOISE: float = 0.1
    MAX_TEMPERATURE: float = 600.0
    MAX_PRESSURE: float = 25.0


@dataclass(frozen=True)
class ControlRodDefaults:
    """Default properties of a freshly installed control rod."""

    MIN_INSERTION: float = 0.0
    MAX_INSERTION: float = 100.0
    MAX_INSERTION_SPEED: float = 10.0  # % per second


@dataclass(frozen=True)
class MonitorThresholds:
    """Thresholds used by the monitoring service."""

    HIGH_TEMPERATURE: float = 500.0
    LOW_OPERATING_TEMPERATURE: float = 50.0
    HIGH_PRESSURE: float = 20.0
    LOW_FUEL_WARNING: float = 10.0
    LOW_EFFICIENCY: float = 50.0
    MAINTENANCE_INTERVAL_DAYS: int = 365

    # Health score penalties
    TEMPERATURE_PENALTY_START: float = 400.0
    TEMPERATURE_PENALTY: float = 0.5
    PRESSURE_PENALTY_START: float = 15.0
    PRESSURE_PENALTY: float = 2.0
    FUEL_PENALTY: float = 0.3
    ROD_PENALTY: float = 5.0
    EFFICIENCY_PENALTY: float = 0.2

    # Safety verdict
    MIN_OPERATIONAL_RODS: int = 8

    # Maintenance recommendation
    MAINTENANCE_FUEL: float = 15.0
    MAINTENANCE_HOURS: int = 8000
    MAX_FAILED_RODS: int = 2

    # Health report verdicts
    HEALTHY_SCORE: float = 80.0
    CRITICAL_SCORE: float = 50.0


@dataclass(frozen=True)
class PerformanceTargets:
    """Targets used when grading reactor performance."""

    OPTIMAL_POWER_MIN: float = 800.0
    OPTIMAL_POWER_MAX: float = 1100.0
    OPTIMAL_EFFICIENCY: float = 80.0
    FUEL_REFILL_LEVEL: float = 20.0
    OPTIMAL_INSERTION_MIN: float = 20.0
    OPTIMAL_INSERTION_MAX: float = 80.0
    POINTS_PER_CHECK: float = 25.0


# Letter grades as (minimum score, grade), checked in order
GRADE_BOUNDARIES = (
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
)

# Thermal efficiency derating factors
THERMAL_DERATING = {
    "high_temperature": {"threshold": 400.0, "factor": 0.95},
    "high_pressure": {"threshold": 18.0, "factor": 0.98},
}


# Default instances
DEFAULT_LIMITS = ReactorLimits()
DEFAULT_ROD = ControlRodDefaults()
DEFAULT_THRESHOLDS = MonitorThresholds()
DEFAULT_TARGETS = PerformanceTargets()
