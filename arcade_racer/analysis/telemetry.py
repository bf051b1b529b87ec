# Per-tick telemetry recording

import csv
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from ..sim.events import CollisionEvent, LapCompleted


FIELDNAMES = [
    "tick", "time", "x", "z", "heading", "speed",
    "on_track", "lap", "score", "hits",
]


class TelemetryRecorder:
    """Record what the car does each tick of a run.

    Rows are kept in memory; :meth:`save` writes them as CSV.
    """

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.collisions: List[CollisionEvent] = []
        self.laps: List[LapCompleted] = []

    def on_reset(self) -> None:
        self.rows.clear()
        self.collisions.clear()
        self.laps.clear()

    def on_tick(self, simulation, result) -> None:
        """Record state after ``simulation.tick`` returned ``result``."""
        vehicle = simulation.vehicle_snapshot()
        progress = simulation.progress_snapshot()
        self.rows.append({
            "tick": simulation.tick_count,
            "time": simulation.time,
            "x": vehicle.position[0],
            "z": vehicle.position[2],
            "heading": vehicle.heading,
            "speed": vehicle.speed,
            "on_track": result.on_track,
            "lap": progress.lap,
            "score": progress.score,
            "hits": progress.hits,
        })
        self.collisions.extend(result.collisions)
        self.laps.extend(e for e in result.events if isinstance(e, LapCompleted))

    def summary(self) -> Dict[str, Any]:
        """Aggregate statistics over the recorded run."""
        if not self.rows:
            return {}

        speeds = np.array([r["speed"] for r in self.rows])
        on_track = np.array([r["on_track"] for r in self.rows], dtype=bool)
        lap_times = [lap.lap_time for lap in self.laps]

        return {
            "ticks": len(self.rows),
            "duration": self.rows[-1]["time"],
            "mean_speed": float(np.mean(speeds)),
            "max_speed": float(np.max(speeds)),
            "off_track_fraction": float(1.0 - on_track.mean()),
            "collisions": len(self.collisions),
            "laps": len(lap_times),
            "lap_times": lap_times,
            "best_lap": min(lap_times) if lap_times else None,
            "final_score": self.rows[-1]["score"],
        }

    def print_summary(self) -> None:
        stats = self.summary()
        if not stats:
            print("No telemetry recorded")
            return

        print("\n" + "=" * 40)
        print("TELEMETRY SUMMARY")
        print("=" * 40)
        print(f"Duration: {stats['duration']:.1f}s over {stats['ticks']} ticks")
        print(f"Speed:    mean={stats['mean_speed']:.1f}, max={stats['max_speed']:.1f}")
        print(f"Off track: {stats['off_track_fraction'] * 100:.1f}%")
        print(f"Collisions: {stats['collisions']}")
        for i, lap_time in enumerate(stats["lap_times"], start=1):
            print(f"  Lap {i}: {lap_time:.2f}s")
        if stats["best_lap"] is not None:
            print(f"Best lap: {stats['best_lap']:.2f}s")
        print(f"Score: {stats['final_score']}")

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            writer.writeheader()
            writer.writerows(self.rows)
