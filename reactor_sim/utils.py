"""
Utility Functions for Reactor Simulation

This module provides the power/thermal coupling formulas, fuel burn
calculation, clamping and formatting helpers shared across the package.
"""

import math
from datetime import datetime
from typing import Iterable

import numpy as np

from .constants import DEFAULT_LIMITS, ReactorLimits


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Clamp a value into the closed interval [lower, upper].

    Args:
        value: Value to clamp
        lower: Lower bound
        upper: Upper bound

    Returns:
        Clamped value as a Python float
    """
    return float(np.clip(value, lower, upper))


def temperature_from_power(
    power_mw: float,
    limits: ReactorLimits = DEFAULT_LIMITS
) -> float:
    """
    Core temperature at a given power output.

    T = T_ambient + (P / P_max) * ΔT

    Args:
        power_mw: Power output [MW]
        limits: Reactor limits providing the coefficients

    Returns:
        Temperature [°C]
    """
    return limits.AMBIENT_TEMPERATURE + (power_mw / limits.MAX_POWER) * limits.TEMPERATURE_SPAN


def pressure_from_power(
    power_mw: float,
    limits: ReactorLimits = DEFAULT_LIMITS
) -> float:
    """
    Primary pressure at a given power output.

    p = p_ambient + (P / P_max) * Δp

    Args:
        power_mw: Power output [MW]
        limits: Reactor limits providing the coefficients

    Returns:
        Pressure [MPa]
    """
    return limits.AMBIENT_PRESSURE + (power_mw / limits.MAX_POWER) * limits.PRESSURE_SPAN


def fuel_consumed(
    power_mw: float,
    hours: float,
    limits: ReactorLimits = DEFAULT_LIMITS
) -> float:
    """
    Fuel burned over a period of operation.

    ΔF = (P / P_nominal) * t * rate

    Args:
        power_mw: Power output [MW]
        hours: Operating time [h]
        limits: Reactor limits providing the burn rate

    Returns:
        Fuel consumed [% of a full load]
    """
    return (power_mw / limits.NOMINAL_POWER) * hours * limits.FUEL_BURN_RATE


def rod_power_reduction(
    average_insertion: float,
    limits: ReactorLimits = DEFAULT_LIMITS
) -> float:
    """
    Fractional power reduction caused by the average rod insertion.

    Args:
        average_insertion: Mean insertion level of all rods [%]
        limits: Reactor limits providing the reduction ceiling

    Returns:
        Reduction fraction in [0, MAX_ROD_POWER_REDUCTION]
    """
    return (average_insertion / 100.0) * limits.MAX_ROD_POWER_REDUCTION


def mean_level(levels: Iterable[float]) -> float:
    """Mean of insertion levels, 0.0 for an empty sequence."""
    values = list(levels)
    if not values:
        return 0.0
    return float(np.mean(values))


def days_between(start: datetime, end: datetime) -> int:
    """
    Whole days elapsed between two timestamps.

    Truncates toward zero, so 364 days and 23 hours counts as 364.
    """
    return math.trunc((end - start).total_seconds() / 86400.0)


def hours_from_seconds(seconds: float) -> float:
    """Convert seconds to hours."""
    return seconds / 3600.0


def format_quantity(value: float, unit: str, precision: int = 1) -> str:
    """
    Format a value with its unit.

    Args:
        value: Number to format
        unit: Unit suffix (e.g. "MW", "%")
        precision: Number of decimal places

    Returns:
        Formatted string
    """
    if math.isinf(value):
        return f"∞ {unit}".rstrip()
    separator = "" if unit in ("%", "°C") else " "
    return f"{value:.{precision}f}{separator}{unit}"
