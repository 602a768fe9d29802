"""
Tests for the utils module.
"""

import unittest
from datetime import datetime, timedelta

from reactor_sim.constants import ReactorLimits
from reactor_sim.utils import (
    clamp,
    days_between,
    format_quantity,
    fuel_consumed,
    hours_from_seconds,
    mean_level,
    pressure_from_power,
    rod_power_reduction,
    temperature_from_power,
)


class TestThermalCoupling(unittest.TestCase):
    """Test power-derived temperature and pressure."""

    def test_zero_power_ambient(self):
        self.assertEqual(temperature_from_power(0.0), 25.0)
        self.assertEqual(pressure_from_power(0.0), 0.1)

    def test_max_power(self):
        self.assertAlmostEqual(temperature_from_power(1200.0), 425.0)
        self.assertAlmostEqual(pressure_from_power(1200.0), 20.0)

    def test_custom_limits(self):
        """Test coefficients come from the limits object."""
        limits = ReactorLimits(MAX_POWER=600.0)
        self.assertAlmostEqual(temperature_from_power(600.0, limits), 425.0)
        self.assertAlmostEqual(pressure_from_power(300.0, limits), 0.1 + 19.9 / 2)


class TestFuelAndRods(unittest.TestCase):
    """Test fuel burn and rod feedback formulas."""

    def test_fuel_consumed(self):
        self.assertAlmostEqual(fuel_consumed(1000.0, 10.0), 1.0)
        self.assertAlmostEqual(fuel_consumed(500.0, 10.0), 0.5)
        self.assertEqual(fuel_consumed(0.0, 10.0), 0.0)

    def test_rod_power_reduction(self):
        self.assertAlmostEqual(rod_power_reduction(100.0), 0.3)
        self.assertAlmostEqual(rod_power_reduction(50.0), 0.15)
        self.assertEqual(rod_power_reduction(0.0), 0.0)

    def test_mean_level(self):
        self.assertEqual(mean_level([10.0, 20.0, 30.0]), 20.0)
        self.assertEqual(mean_level([]), 0.0)
        self.assertEqual(mean_level(x for x in (100.0, 0.0)), 50.0)


class TestHelpers(unittest.TestCase):
    """Test small helpers."""

    def test_clamp(self):
        self.assertEqual(clamp(-5.0, 0.0, 100.0), 0.0)
        self.assertEqual(clamp(150.0, 0.0, 100.0), 100.0)
        self.assertEqual(clamp(42.0, 0.0, 100.0), 42.0)
        self.assertIsInstance(clamp(42.0, 0.0, 100.0), float)

    def test_days_between_truncates(self):
        start = datetime(2024, 1, 1)
        self.assertEqual(days_between(start, start + timedelta(days=364, hours=23)), 364)
        self.assertEqual(days_between(start, start + timedelta(days=366)), 366)
        self.assertEqual(days_between(start, start), 0)

    def test_hours_from_seconds(self):
        self.assertEqual(hours_from_seconds(3600.0), 1.0)
        self.assertEqual(hours_from_seconds(1800.0), 0.5)

    def test_format_quantity(self):
        self.assertEqual(format_quantity(1000.0, "MW"), "1000.0 MW")
        self.assertEqual(format_quantity(99.95, "%", 2), "99.95%")
        self.assertEqual(format_quantity(float('inf'), "h"), "∞ h")


if __name__ == "__main__":
    unittest.main()
