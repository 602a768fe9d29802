#!/usr/bin/env python3
"""
Example Reactor Operations Simulation

This script demonstrates how to use the reactor_sim package to bring a
reactor from cold shutdown to power, trim it with control rods and run
the periodic simulation tick.

Usage:
    python run_simulation.py [--steps STEPS] [--power POWER] [--seed SEED]

Example:
    python run_simulation.py --steps 10 --power 900 --seed 42
"""

import argparse
import logging
import sys
import os
from typing import Optional

# Add parent directory to path for importing reactor_sim
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reactor_sim import ReactorError, SimulationDriver, create_reactor
from reactor_sim.utils import format_quantity


def run_basic_simulation(
    name: str = "Unit 1",
    power_mw: float = 1000.0,
    rod_level: float = 60.0,
    steps: int = 10,
    seed: Optional[int] = None,
    realtime: bool = False,
):
    """
    Run a startup-to-power sequence followed by periodic ticks.

    Args:
        name: Reactor display name
        power_mw: Target power in MW
        rod_level: Insertion level for the first rod bank
        steps: Number of one-second ticks
        seed: Seed for environmental fluctuation
        realtime: Sleep one second between ticks
    """
    print("\n" + "="*70)
    print("       REACTOR OPERATIONS SIMULATION")
    print("="*70)

    reactor = create_reactor("R-1", name, seed=seed)
    driver = SimulationDriver(reactor)

    print("\nStarting up...")
    driver.execute("start_up")
    driver.execute("reach_operational")
    driver.execute("adjust_power", power_mw)

    print(f"Moving rods CR-1..CR-5 to {rod_level:.1f}%...")
    for i in range(1, 6):
        driver.execute("insert_control_rod", f"CR-{i}", rod_level)

    print(f"\n{'Tick':>5} {'Power':>12} {'Temp':>10} {'Pressure':>12} {'Fuel':>10} {'Health':>8} {'Grade':>6}")
    print("-" * 70)

    snapshot = driver.snapshot()
    for tick, snapshot in enumerate(driver.run(steps, realtime=realtime), start=1):
        print(
            f"{tick:>5} "
            f"{format_quantity(snapshot['power_output_MW'], 'MW'):>12} "
            f"{format_quantity(snapshot['temperature_C'], '°C'):>10} "
            f"{format_quantity(snapshot['pressure_MPa'], 'MPa', 2):>12} "
            f"{format_quantity(snapshot['fuel_level_percent'], '%', 3):>10} "
            f"{snapshot['health_score']:>8.1f} "
            f"{snapshot['performance_grade']:>6}"
        )

    print()
    reactor.print_summary()

    print(f"\n{'MONITOR':^70}")
    print("-" * 70)
    print(f"  Operating safely:       {'yes' if snapshot['operating_safely'] else 'NO'}")
    remaining = driver.monitor.predict_remaining_operational_time(reactor)
    print(f"  Remaining operation:    {format_quantity(remaining, 'h')}")
    for warning in snapshot["warnings"]:
        print(f"  WARNING: {warning}")

    return reactor


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Reactor Operations Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Run with defaults
  %(prog)s --power 900 --steps 30
  %(prog)s --realtime --steps 5     # Tick once per second
        """
    )

    parser.add_argument("--name", type=str, default="Unit 1", help="Reactor name")
    parser.add_argument(
        "--power",
        type=float,
        default=1000.0,
        help="Target power in MW (default: 1000, range: 0-1200)"
    )
    parser.add_argument(
        "--rod-level",
        type=float,
        default=60.0,
        help="Insertion level %% for rods CR-1..CR-5 (default: 60)"
    )
    parser.add_argument("--steps", type=int, default=10, help="Number of ticks (default: 10)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--realtime", action="store_true", help="Tick at 1 Hz")
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        reactor = run_basic_simulation(
            name=args.name,
            power_mw=args.power,
            rod_level=args.rod_level,
            steps=args.steps,
            seed=args.seed,
            realtime=args.realtime,
        )
    except ReactorError as e:
        print(f"\nError during simulation: {e}")
        sys.exit(1)

    if args.output:
        reactor.to_json(args.output)
        print(f"\nResults exported to: {args.output}")


if __name__ == "__main__":
    main()
