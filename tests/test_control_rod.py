"""
Tests for the control_rod module.
"""

import copy
import unittest

from reactor_sim.control_rod import ControlRod
from reactor_sim.exceptions import InvalidArgumentError, InvalidStateError


class TestControlRodConstruction(unittest.TestCase):
    """Test control rod creation."""

    def test_defaults(self):
        """Test a new rod is operational and stationary."""
        rod = ControlRod("CR-1", 50.0)
        self.assertEqual(rod.id, "CR-1")
        self.assertEqual(rod.insertion_level, 50.0)
        self.assertTrue(rod.operational)
        self.assertEqual(rod.max_insertion_speed, 10.0)
        self.assertEqual(rod.current_insertion_speed, 0.0)

    def test_level_in_range_kept(self):
        """Test initial levels in [0, 100] are stored as given."""
        for level in (0.0, 0.5, 25.0, 50.0, 99.9, 100.0):
            self.assertEqual(ControlRod("CR-1", level).insertion_level, level)

    def test_level_clamped_low(self):
        """Test a negative initial level is clamped to 0."""
        self.assertEqual(ControlRod("CR-1", -10.0).insertion_level, 0.0)

    def test_level_clamped_high(self):
        """Test an initial level above 100 is clamped to 100."""
        self.assertEqual(ControlRod("CR-1", 150.0).insertion_level, 100.0)

    def test_id_immutable(self):
        """Test the id cannot be reassigned."""
        rod = ControlRod("CR-1", 50.0)
        with self.assertRaises(AttributeError):
            rod.id = "CR-2"

    def test_copy_keeps_id(self):
        """Test copying a rod does not trip the id guard."""
        rod = ControlRod("CR-1", 30.0)
        clone = copy.copy(rod)
        self.assertEqual(clone.id, "CR-1")
        self.assertEqual(clone.insertion_level, 30.0)
        self.assertIsNot(clone, rod)

    def test_nan_level_rejected(self):
        """Test a NaN initial level is rejected instead of clamped."""
        with self.assertRaises(InvalidArgumentError):
            ControlRod("CR-1", float("nan"))

    def test_infinite_level_clamped(self):
        self.assertEqual(ControlRod("CR-1", float("inf")).insertion_level, 100.0)
        self.assertEqual(ControlRod("CR-1", float("-inf")).insertion_level, 0.0)

    def test_negative_max_speed_rejected(self):
        """Test the constructor validates the speed limit."""
        for speed in (-1.0, float("nan"), float("inf")):
            with self.assertRaises(InvalidArgumentError):
                ControlRod("CR-1", 50.0, max_insertion_speed=speed)


class TestControlRodIdentity(unittest.TestCase):
    """Test id-based equality."""

    def test_equal_by_id(self):
        """Test rods with the same id are equal regardless of level."""
        self.assertEqual(ControlRod("CR-1", 10.0), ControlRod("CR-1", 90.0))

    def test_not_equal_different_id(self):
        self.assertNotEqual(ControlRod("CR-1", 50.0), ControlRod("CR-2", 50.0))

    def test_hash_by_id(self):
        """Test rods deduplicate by id in a set."""
        rods = {ControlRod("CR-1", 10.0), ControlRod("CR-1", 20.0), ControlRod("CR-2", 10.0)}
        self.assertEqual(len(rods), 2)

    def test_not_equal_other_type(self):
        self.assertNotEqual(ControlRod("CR-1", 50.0), "CR-1")


class TestControlRodMovement(unittest.TestCase):
    """Test insert and withdraw operations."""

    def setUp(self):
        self.rod = ControlRod("CR-1", 50.0)

    def test_insert(self):
        self.rod.insert(20.0)
        self.assertEqual(self.rod.insertion_level, 70.0)

    def test_insert_stops_at_100(self):
        """Test inserting past the top stops at 100."""
        self.rod.insert(80.0)
        self.assertEqual(self.rod.insertion_level, 100.0)

    def test_insert_idempotent_at_boundary(self):
        """Test inserting a fully inserted rod leaves it at 100."""
        self.rod.fully_insert()
        for amount in (0.1, 1.0, 50.0, 1000.0):
            self.rod.insert(amount)
            self.assertEqual(self.rod.insertion_level, 100.0)

    def test_withdraw(self):
        self.rod.withdraw(20.0)
        self.assertEqual(self.rod.insertion_level, 30.0)

    def test_withdraw_idempotent_at_boundary(self):
        """Test withdrawing a fully withdrawn rod leaves it at 0."""
        self.rod.fully_withdraw()
        for amount in (0.1, 1.0, 50.0, 1000.0):
            self.rod.withdraw(amount)
            self.assertEqual(self.rod.insertion_level, 0.0)

    def test_negative_insert_rejected(self):
        """Test negative amounts are rejected without moving the rod."""
        with self.assertRaises(InvalidArgumentError):
            self.rod.insert(-5.0)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_negative_withdraw_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            self.rod.withdraw(-5.0)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_non_finite_amounts_rejected(self):
        """Test NaN and infinite amounts leave the rod where it was."""
        for amount in (float("nan"), float("inf")):
            with self.assertRaises(InvalidArgumentError):
                self.rod.insert(amount)
            with self.assertRaises(InvalidArgumentError):
                self.rod.withdraw(amount)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_fully_insert_and_withdraw(self):
        self.rod.fully_insert()
        self.assertTrue(self.rod.is_fully_inserted())
        self.assertFalse(self.rod.is_fully_withdrawn())
        self.rod.fully_withdraw()
        self.assertTrue(self.rod.is_fully_withdrawn())
        self.assertFalse(self.rod.is_fully_inserted())

    def test_non_operational_rejects_movement(self):
        """Test every movement operation fails on a non-operational rod."""
        self.rod.operational = False
        for operation in (
            lambda: self.rod.insert(10.0),
            lambda: self.rod.withdraw(10.0),
            self.rod.fully_insert,
            self.rod.fully_withdraw,
            self.rod.emergency_insert,
        ):
            with self.assertRaises(InvalidStateError):
                operation()
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_state_checked_before_argument(self):
        """Test a non-operational rod reports the state error first."""
        self.rod.operational = False
        with self.assertRaises(InvalidStateError):
            self.rod.insert(-1.0)


class TestControlRodSetters(unittest.TestCase):
    """Test validated setters."""

    def setUp(self):
        self.rod = ControlRod("CR-1", 50.0)

    def test_set_insertion_level(self):
        self.rod.set_insertion_level(75.0)
        self.assertEqual(self.rod.insertion_level, 75.0)

    def test_set_insertion_level_out_of_range(self):
        for level in (-0.1, 100.1):
            with self.assertRaises(InvalidArgumentError):
                self.rod.set_insertion_level(level)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_direct_level_assignment_validated(self):
        """Test assigning the level attribute is range checked too."""
        for level in (150.0, -1.0, float("nan")):
            with self.assertRaises(InvalidArgumentError):
                self.rod.insertion_level = level
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_set_insertion_level_ignores_operational_flag(self):
        """Test the level setter works on a non-operational rod."""
        self.rod.operational = False
        self.rod.set_insertion_level(20.0)
        self.assertEqual(self.rod.insertion_level, 20.0)

    def test_set_insertion_speed(self):
        """Test signed speeds within the limit are stored verbatim."""
        self.rod.set_insertion_speed(-7.5)
        self.assertEqual(self.rod.current_insertion_speed, -7.5)
        self.rod.set_insertion_speed(10.0)
        self.assertEqual(self.rod.current_insertion_speed, 10.0)

    def test_set_insertion_speed_exceeds_max(self):
        for speed in (10.1, -10.1):
            with self.assertRaises(InvalidArgumentError):
                self.rod.set_insertion_speed(speed)
        self.assertEqual(self.rod.current_insertion_speed, 0.0)

    def test_set_max_insertion_speed(self):
        self.rod.set_max_insertion_speed(20.0)
        self.assertEqual(self.rod.max_insertion_speed, 20.0)
        self.rod.set_insertion_speed(15.0)
        self.assertEqual(self.rod.current_insertion_speed, 15.0)

    def test_set_insertion_speed_nan(self):
        with self.assertRaises(InvalidArgumentError):
            self.rod.set_insertion_speed(float("nan"))
        self.assertEqual(self.rod.current_insertion_speed, 0.0)

    def test_set_max_insertion_speed_negative(self):
        with self.assertRaises(InvalidArgumentError):
            self.rod.set_max_insertion_speed(-1.0)
        self.assertEqual(self.rod.max_insertion_speed, 10.0)

    def test_max_speed_assignment_validated(self):
        with self.assertRaises(InvalidArgumentError):
            self.rod.max_insertion_speed = -1.0
        self.assertEqual(self.rod.max_insertion_speed, 10.0)

    def test_emergency_insert(self):
        """Test emergency insertion drives the rod in at full speed."""
        self.rod.emergency_insert()
        self.assertEqual(self.rod.insertion_level, 100.0)
        self.assertEqual(self.rod.current_insertion_speed, 10.0)


class TestControlRodSimulation(unittest.TestCase):
    """Test movement simulation and effectiveness."""

    def setUp(self):
        self.rod = ControlRod("CR-1", 50.0)

    def test_simulate_inserting(self):
        self.rod.set_insertion_speed(5.0)
        self.rod.simulate_movement(2.0)
        self.assertEqual(self.rod.insertion_level, 60.0)

    def test_simulate_withdrawing(self):
        self.rod.set_insertion_speed(-5.0)
        self.rod.simulate_movement(2.0)
        self.assertEqual(self.rod.insertion_level, 40.0)

    def test_simulate_clamps(self):
        """Test simulated movement stops at the travel limits."""
        self.rod.set_insertion_speed(10.0)
        self.rod.simulate_movement(100.0)
        self.assertEqual(self.rod.insertion_level, 100.0)

    def test_simulate_stationary_noop(self):
        self.rod.simulate_movement(10.0)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_simulate_non_operational_noop(self):
        """Test a failed rod does not move even with a speed set."""
        self.rod.set_insertion_speed(5.0)
        self.rod.operational = False
        self.rod.simulate_movement(2.0)
        self.assertEqual(self.rod.insertion_level, 50.0)

    def test_effectiveness_operational(self):
        """Test effectiveness equals insertion / 100 when operational."""
        for level in (0.0, 25.0, 50.0, 100.0):
            self.rod.set_insertion_level(level)
            self.assertAlmostEqual(self.rod.effectiveness(), level / 100.0)

    def test_effectiveness_non_operational(self):
        """Test a failed rod has zero effectiveness at any level."""
        self.rod.operational = False
        for level in (0.0, 50.0, 100.0):
            self.rod.set_insertion_level(level)
            self.assertEqual(self.rod.effectiveness(), 0.0)

    def test_to_dict(self):
        state = self.rod.to_dict()
        self.assertEqual(state["id"], "CR-1")
        self.assertEqual(state["insertion_level"], 50.0)
        self.assertEqual(state["effectiveness"], 0.5)


if __name__ == "__main__":
    unittest.main()
