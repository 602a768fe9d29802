"""
Reactor Operations Simulator Package

A simplified operational model of a reactor: its thermal, pressure and
power variables, a fleet of control rods, and the status state machine
governing startup, operation, shutdown and maintenance.

Modules:
    - constants: Operating limits, thresholds and the status enum
    - exceptions: Error hierarchy
    - control_rod: Control rod actuator model
    - reactor: Reactor state machine and simulation step
    - monitor: Health, safety and performance analysis
    - driver: Serialized command dispatch and periodic ticks
"""

from .constants import ReactorStatus, ReactorLimits, MonitorThresholds, PerformanceTargets
from .exceptions import (
    ReactorError,
    InvalidArgumentError,
    InvalidStateError,
    ControlRodNotFoundError,
)
from .control_rod import ControlRod
from .reactor import Reactor, create_reactor
from .monitor import ReactorMonitorService, ReactorHealthReport, PerformanceReport
from .driver import SimulationDriver

__version__ = "1.0.0"

__all__ = [
    "ReactorStatus",
    "ReactorLimits",
    "MonitorThresholds",
    "PerformanceTargets",
    "ReactorError",
    "InvalidArgumentError",
    "InvalidStateError",
    "ControlRodNotFoundError",
    "ControlRod",
    "Reactor",
    "create_reactor",
    "ReactorMonitorService",
    "ReactorHealthReport",
    "PerformanceReport",
    "SimulationDriver",
]
