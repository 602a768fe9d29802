"""
Simulation Driver

Owns a reactor and serializes every command and simulation tick against
it. This is the model side of an operator console: a UI or script issues
commands through ``execute`` and calls ``tick`` at a fixed cadence.
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

from .exceptions import InvalidArgumentError
from .monitor import ReactorMonitorService
from .reactor import Reactor

logger = logging.getLogger(__name__)


# Commands an operator may issue, by name
COMMANDS = (
    "start_up",
    "reach_operational",
    "shutdown",
    "emergency_shutdown",
    "adjust_power",
    "insert_control_rod",
    "perform_maintenance",
    "consume_fuel",
)


class SimulationDriver:
    """
    Single owner of a reactor.

    Attributes:
        reactor: The driven reactor
        monitor: Monitoring service used for snapshots
        tick_seconds: Default simulated time per tick [s]
        elapsed_seconds: Total simulated time so far [s]
    """

    def __init__(
        self,
        reactor: Reactor,
        monitor: Optional[ReactorMonitorService] = None,
        tick_seconds: float = 1.0,
    ):
        if tick_seconds <= 0:
            raise InvalidArgumentError(f"Tick length must be positive, got {tick_seconds}")
        self.reactor = reactor
        self.monitor = monitor or ReactorMonitorService()
        self.tick_seconds = tick_seconds
        self.elapsed_seconds = 0.0
        self._lock = threading.Lock()

    def execute(self, command: str, *args) -> None:
        """
        Run an operator command against the reactor.

        Args:
            command: One of COMMANDS
            *args: Arguments passed to the reactor method

        Raises:
            InvalidArgumentError: If the command is unknown, or the reactor
                rejects an argument
            InvalidStateError: If the reactor rejects the command in its
                current status
        """
        if command not in COMMANDS:
            raise InvalidArgumentError(f"Unknown command: {command}")

        with self._lock:
            logger.debug("Executing %s%s on reactor %s", command, args, self.reactor.id)
            getattr(self.reactor, command)(*args)

    def tick(self, seconds: Optional[float] = None) -> Dict[str, Any]:
        """
        Advance the simulation by one step.

        Args:
            seconds: Simulated time for this step, defaults to tick_seconds

        Returns:
            Snapshot taken after the step
        """
        step = self.tick_seconds if seconds is None else seconds
        with self._lock:
            self.reactor.simulate_time_step(step)
            self.elapsed_seconds += step
            return self._snapshot()

    def snapshot(self) -> Dict[str, Any]:
        """Reactor state plus monitor verdicts."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> Dict[str, Any]:
        health = self.monitor.analyze_health(self.reactor)
        performance = self.monitor.generate_performance_report(self.reactor)
        state = self.reactor.get_state_summary()
        state.update({
            "elapsed_seconds": self.elapsed_seconds,
            "health_score": health.health_score,
            "warnings": health.warnings,
            "operating_safely": self.monitor.is_operating_safely(self.reactor),
            "performance_grade": performance.performance_grade,
        })
        return state

    def run(self, steps: int, realtime: bool = False) -> List[Dict[str, Any]]:
        """
        Run a number of ticks.

        Args:
            steps: Number of ticks
            realtime: Sleep tick_seconds between ticks

        Returns:
            Snapshot after every tick
        """
        if steps < 0:
            raise InvalidArgumentError(f"Step count cannot be negative, got {steps}")

        snapshots = []
        for i in range(steps):
            snapshots.append(self.tick())
            if realtime and i < steps - 1:
                time.sleep(self.tick_seconds)

        logger.info(
            "Reactor %s: ran %d ticks, %.1f s simulated",
            self.reactor.id, steps, self.elapsed_seconds,
        )
        return snapshots
