"""
Reactor Monitoring and Performance Analysis

This module derives health scores, warnings, a safety verdict and a
performance grade from the state of a reactor. The service reads the
reactor through its public accessors only and holds no mutable state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional
import logging

from .constants import (
    DEFAULT_LIMITS,
    DEFAULT_TARGETS,
    DEFAULT_THRESHOLDS,
    GRADE_BOUNDARIES,
    THERMAL_DERATING,
    MonitorThresholds,
    PerformanceTargets,
)
from .reactor import Reactor
from .utils import days_between, mean_level

logger = logging.getLogger(__name__)


@dataclass
class ReactorHealthReport:
    """
    Health analysis of a reactor at a point in time.

    Attributes:
        reactor_id: Id of the analysed reactor
        analysis_time: When the analysis was made
        health_score: Score in [0, 100]
        thresholds: Thresholds used for the healthy/critical verdicts
    """

    reactor_id: str
    analysis_time: datetime
    health_score: float = 100.0
    thresholds: MonitorThresholds = DEFAULT_THRESHOLDS
    _warnings: List[str] = field(default_factory=list, repr=False)

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    def add_warning(self, warning: str):
        self._warnings.append(warning)

    def has_warnings(self) -> bool:
        return bool(self._warnings)

    @property
    def warning_count(self) -> int:
        return len(self._warnings)

    def is_healthy(self) -> bool:
        return self.health_score >= self.thresholds.HEALTHY_SCORE

    def is_critical(self) -> bool:
        return self.health_score < self.thresholds.CRITICAL_SCORE


@dataclass
class PerformanceReport:
    """
    Performance snapshot of a reactor.

    Attributes:
        reactor_id: Id of the analysed reactor
        report_time: When the report was made
        current_power: Power output [MW]
        current_efficiency: Operating efficiency [%]
        fuel_level: Remaining fuel [%]
        operational_hours: Hours of operation
        average_control_rod_insertion: Mean rod insertion [%]
        power_density: Simplified power density [MW/m³]
    """

    reactor_id: str
    report_time: datetime
    current_power: float = 0.0
    current_efficiency: float = 0.0
    fuel_level: float = 0.0
    operational_hours: int = 0
    average_control_rod_insertion: float = 0.0
    power_density: float = 0.0
    max_power: float = DEFAULT_LIMITS.MAX_POWER
    targets: PerformanceTargets = DEFAULT_TARGETS

    def is_operating_at_optimal_power(self) -> bool:
        return self.targets.OPTIMAL_POWER_MIN <= self.current_power <= self.targets.OPTIMAL_POWER_MAX

    def is_operating_at_optimal_efficiency(self) -> bool:
        return self.current_efficiency >= self.targets.OPTIMAL_EFFICIENCY

    @property
    def power_utilization(self) -> float:
        """Power as a percentage of the maximum theoretical power."""
        return (self.current_power / self.max_power) * 100.0

    def needs_fuel_refill(self) -> bool:
        return self.fuel_level < self.targets.FUEL_REFILL_LEVEL

    def is_control_rod_insertion_optimal(self) -> bool:
        return (
            self.targets.OPTIMAL_INSERTION_MIN
            <= self.average_control_rod_insertion
            <= self.targets.OPTIMAL_INSERTION_MAX
        )

    @property
    def score(self) -> float:
        """Sum of points for each satisfied check, 0 to 100."""
        checks = (
            self.is_operating_at_optimal_power(),
            self.is_operating_at_optimal_efficiency(),
            not self.needs_fuel_refill(),
            self.is_control_rod_insertion_optimal(),
        )
        return sum(self.targets.POINTS_PER_CHECK for passed in checks if passed)

    @property
    def performance_grade(self) -> str:
        score = self.score
        for minimum, grade in GRADE_BOUNDARIES:
            if score >= minimum:
                return grade
        return "F"


class ReactorMonitorService:
    """
    Stateless monitoring service for reactors.

    Every method is a pure function of the reactor state and the current
    time supplied by ``clock``.
    """

    def __init__(
        self,
        thresholds: MonitorThresholds = DEFAULT_THRESHOLDS,
        targets: PerformanceTargets = DEFAULT_TARGETS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.thresholds = thresholds
        self.targets = targets
        self._clock = clock

    def _days_since_maintenance(self, reactor: Reactor, now: Optional[datetime] = None) -> int:
        return days_between(reactor.last_maintenance, now or self._clock())

    @staticmethod
    def _failed_rod_count(reactor: Reactor) -> int:
        return sum(1 for rod in reactor.control_rods if not rod.operational)

    def analyze_health(self, reactor: Reactor) -> ReactorHealthReport:
        """
        Analyze the overall health of a reactor.

        Args:
            reactor: Reactor to analyze

        Returns:
            Health report with warnings and score
        """
        th = self.thresholds
        now = self._clock()
        report = ReactorHealthReport(
            reactor_id=reactor.id,
            analysis_time=now,
            thresholds=th,
        )

        if reactor.temperature > th.HIGH_TEMPERATURE:
            report.add_warning(f"High temperature detected: {reactor.temperature:.1f}°C")
        elif reactor.temperature < th.LOW_OPERATING_TEMPERATURE and reactor.is_operational():
            report.add_warning(
                f"Low temperature for operational reactor: {reactor.temperature:.1f}°C"
            )

        if reactor.pressure > th.HIGH_PRESSURE:
            report.add_warning(f"High pressure detected: {reactor.pressure:.2f} MPa")

        if reactor.fuel_level < th.LOW_FUEL_WARNING:
            report.add_warning(f"Low fuel level: {reactor.fuel_level:.1f}%")

        failed_rods = self._failed_rod_count(reactor)
        if failed_rods > 0:
            report.add_warning(f"{failed_rods} control rods are non-operational")

        efficiency = reactor.get_efficiency()
        if efficiency < th.LOW_EFFICIENCY and reactor.is_operational():
            report.add_warning(f"Low efficiency: {efficiency:.1f}%")

        days = self._days_since_maintenance(reactor, now)
        if days > th.MAINTENANCE_INTERVAL_DAYS:
            report.add_warning(
                f"Maintenance overdue by {days - th.MAINTENANCE_INTERVAL_DAYS} days"
            )

        report.health_score = self.calculate_health_score(reactor)
        if report.has_warnings():
            logger.debug(
                "Reactor %s: %d health warnings, score %.1f",
                reactor.id, report.warning_count, report.health_score,
            )
        return report

    def calculate_health_score(self, reactor: Reactor) -> float:
        """
        Health score for the reactor.

        Starts at 100 and subtracts penalties for high temperature, high
        pressure, burned fuel, failed rods and, while operational, lost
        efficiency.

        Returns:
            Score clamped to [0, 100]
        """
        th = self.thresholds
        score = 100.0

        if reactor.temperature > th.TEMPERATURE_PENALTY_START:
            score -= (reactor.temperature - th.TEMPERATURE_PENALTY_START) * th.TEMPERATURE_PENALTY

        if reactor.pressure > th.PRESSURE_PENALTY_START:
            score -= (reactor.pressure - th.PRESSURE_PENALTY_START) * th.PRESSURE_PENALTY

        score -= (100.0 - reactor.fuel_level) * th.FUEL_PENALTY
        score -= self._failed_rod_count(reactor) * th.ROD_PENALTY

        if reactor.is_operational():
            score -= (100.0 - reactor.get_efficiency()) * th.EFFICIENCY_PENALTY

        return max(0.0, min(100.0, score))

    def is_operating_safely(self, reactor: Reactor) -> bool:
        """
        Check that the reactor is within safe parameters.

        Unsafe when in the danger zone, when too few rods are operational,
        or when operating with any rod fully withdrawn.
        """
        if reactor.is_in_danger_zone():
            return False

        rods = reactor.control_rods
        operational_rods = sum(1 for rod in rods if rod.operational)
        if operational_rods < self.thresholds.MIN_OPERATIONAL_RODS:
            return False

        if reactor.is_operational() and any(rod.is_fully_withdrawn() for rod in rods):
            return False

        return True

    def generate_performance_report(self, reactor: Reactor) -> PerformanceReport:
        """
        Generate a performance report.

        Power density is simplified to P / 1000 [MW/m³].
        """
        return PerformanceReport(
            reactor_id=reactor.id,
            report_time=self._clock(),
            current_power=reactor.power_output,
            current_efficiency=reactor.get_efficiency(),
            fuel_level=reactor.fuel_level,
            operational_hours=reactor.operational_hours,
            average_control_rod_insertion=mean_level(
                rod.insertion_level for rod in reactor.control_rods
            ),
            power_density=reactor.power_output / 1000.0,
            max_power=reactor.limits.MAX_POWER,
            targets=self.targets,
        )

    def analyze_control_rod_effectiveness(self, reactor: Reactor) -> Dict[str, float]:
        """Map of rod id to effectiveness."""
        return {rod.id: rod.effectiveness() for rod in reactor.control_rods}

    def predict_remaining_operational_time(self, reactor: Reactor) -> float:
        """
        Hours of operation left at the current power.

        Returns infinity when the reactor produces no power.
        """
        if reactor.power_output == 0:
            return float('inf')

        limits = reactor.limits
        consumption_rate = reactor.power_output / limits.NOMINAL_POWER * limits.FUEL_BURN_RATE
        return reactor.fuel_level / consumption_rate

    def is_maintenance_recommended(self, reactor: Reactor) -> bool:
        th = self.thresholds
        if reactor.fuel_level < th.MAINTENANCE_FUEL:
            return True
        if self._days_since_maintenance(reactor) > th.MAINTENANCE_INTERVAL_DAYS:
            return True
        if reactor.operational_hours > th.MAINTENANCE_HOURS:
            return True
        return self._failed_rod_count(reactor) > th.MAX_FAILED_RODS

    def calculate_thermal_efficiency(self, reactor: Reactor) -> float:
        """
        Simplified thermal efficiency [%].

        Power as a fraction of the theoretical maximum, derated at high
        temperature and high pressure.
        """
        if reactor.power_output == 0:
            return 0.0

        efficiency = (reactor.power_output / reactor.limits.MAX_POWER) * 100.0

        if reactor.temperature > THERMAL_DERATING["high_temperature"]["threshold"]:
            efficiency *= THERMAL_DERATING["high_temperature"]["factor"]

        if reactor.pressure > THERMAL_DERATING["high_pressure"]["threshold"]:
            efficiency *= THERMAL_DERATING["high_pressure"]["factor"]

        return min(100.0, efficiency)
