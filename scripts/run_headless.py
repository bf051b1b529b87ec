#!/usr/bin/env python3
"""Drive a race without rendering.

Runs the simulation at a fixed timestep with the pure-pursuit autopilot and
reports laps, collisions and score.

Usage:
    python scripts/run_headless.py --config configs/default.yaml
    python scripts/run_headless.py --override race.laps_total=1 --output telemetry.csv
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from arcade_racer.analysis import setup_logging, TelemetryRecorder
from arcade_racer.config import apply_overrides, load_config
from arcade_racer.sim import Autopilot, Simulation


def run_race(
    simulation: Simulation,
    autopilot: Autopilot,
    recorder: TelemetryRecorder,
    dt: float = 1.0 / 60.0,
    time_limit: float = 180.0,
    verbose: bool = False,
) -> dict:
    """Run until the race finishes or the time limit is hit.

    Returns:
        Telemetry summary
    """
    simulation.reset()
    recorder.on_reset()

    while simulation.running and simulation.time < time_limit:
        controls = autopilot(simulation.vehicle_snapshot(), simulation.obstacle_positions())
        result = simulation.tick(dt, controls)
        recorder.on_tick(simulation, result)

        if verbose and simulation.tick_count % 120 == 0:
            snap = simulation.vehicle_snapshot()
            print(f"  t={simulation.time:6.1f}s: speed={snap.speed:5.1f}, "
                  f"progress={simulation.track_position() * 100:5.1f}%, "
                  f"on_track={result.on_track}")

    return recorder.summary()


def main():
    parser = argparse.ArgumentParser(description="Run a headless autopilot race")
    parser.add_argument("--config", type=Path, default=Path("configs/default.yaml"))
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Config overrides in format key.subkey=value",
    )
    parser.add_argument("--dt", type=float, default=1.0 / 60.0, help="Fixed timestep in seconds")
    parser.add_argument("--time-limit", type=float, default=180.0, help="Simulated seconds before giving up")
    parser.add_argument("--lookahead", type=float, default=8.0, help="Autopilot lookahead distance")
    parser.add_argument("--output", type=Path, default=None, help="Save telemetry to CSV")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--verbose", action="store_true", help="Print periodic status")

    args = parser.parse_args()

    config = load_config(args.config)
    if args.override:
        config = apply_overrides(config, args.override)

    level = config.get("logging", {}).get("level", "INFO")
    setup_logging(level=level, log_file=args.log_file)
    logger = logging.getLogger("arcade_racer")

    try:
        simulation = Simulation.from_config(config)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    autopilot = Autopilot(simulation.geometry, lookahead=args.lookahead)
    recorder = TelemetryRecorder()

    try:
        run_race(
            simulation,
            autopilot,
            recorder,
            dt=args.dt,
            time_limit=args.time_limit,
            verbose=args.verbose,
        )
    except KeyboardInterrupt:
        logger.info("Run interrupted by user")

    recorder.print_summary()

    if not simulation.running:
        logger.info(f"Race finished with score {simulation.progress.score}")
    else:
        logger.warning("Time limit reached before the race finished")

    if args.output:
        recorder.save(args.output)
        print(f"Telemetry saved to {args.output}")


if __name__ == "__main__":
    main()
