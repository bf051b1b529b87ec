# Simulation context: owns every piece of mutable race state

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.types import (
    Controls,
    ProgressSnapshot,
    RaceParams,
    TrackParams,
    VehicleParams,
    VehicleSnapshot,
)
from ..track.curve import TrackCurve
from ..track.geometry import TrackGeometry
from ..track.obstacles import ObstacleField
from .events import CollisionEvent
from .integrator import Integrator
from .progress import RaceProgress
from .vehicle import StartPose, VehicleState


logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What happened during one tick."""
    dt: float
    on_track: bool
    collisions: List[CollisionEvent] = field(default_factory=list)
    events: list = field(default_factory=list)


class Simulation:
    """Single-threaded race simulation.

    ``tick`` and ``reset`` are the only mutators. Time is a simulation clock
    advanced by the caller-supplied ``dt``; nothing here reads a wall clock.
    """

    def __init__(
        self,
        track_params: TrackParams = TrackParams(),
        vehicle_params: VehicleParams = VehicleParams(),
        race_params: RaceParams = RaceParams(),
    ):
        self.track_params = track_params
        self.vehicle_params = vehicle_params
        self.race_params = race_params

        self.curve = TrackCurve.from_params(track_params)
        self.geometry = TrackGeometry.from_params(self.curve, track_params)
        self.obstacles = ObstacleField.from_params(self.curve, track_params)

        self.start_pose = StartPose.behind_start_line(self.curve, race_params)
        self.start_point = self.curve.point_at(race_params.start_parameter)
        self.checkpoint_point = self.curve.point_at(race_params.checkpoint_parameter)

        self.vehicle = VehicleState.at(self.start_pose)
        self.integrator = Integrator(self.vehicle, self.geometry, self.obstacles, vehicle_params)
        self.progress = RaceProgress(self.start_point, self.checkpoint_point, race_params)

        self.time = 0.0
        self.tick_count = 0

        logger.info(
            f"Simulation ready: track length={self.geometry.length:.1f}, "
            f"obstacles={len(self.obstacles)}, laps={race_params.laps_total}"
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Simulation":
        """Create simulation from a configuration dict.

        Raises:
            ValueError: If the configuration is invalid
        """
        from ..config import validate_config

        errors = validate_config(config)
        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))

        return cls(
            TrackParams.from_config(config),
            VehicleParams.from_config(config),
            RaceParams.from_config(config),
        )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def tick(self, dt: float, controls: Controls = Controls()) -> TickResult:
        """Advance the race by one step.

        Args:
            dt: Time step in seconds; clamped to ``max_dt``
            controls: Driver input for this step

        Returns:
            TickResult with collisions and race events
        """
        assert np.isfinite(dt) and dt > 0.0, f"dt must be positive, got {dt}"
        dt = min(dt, self.race_params.max_dt)

        self.time += dt
        self.tick_count += 1

        collisions = []
        if self.progress.running or self.race_params.simulate_after_finish:
            collisions = self.integrator.tick(dt, controls)
            for _ in collisions:
                self.progress.register_hit()

        events = self.progress.update(self.vehicle.position, self.time)

        return TickResult(
            dt=dt,
            on_track=self.geometry.is_on_track(self.vehicle.position),
            collisions=collisions,
            events=events,
        )

    def reset(self) -> None:
        """Put the car back on the start line and clear the race."""
        self.time = 0.0
        self.tick_count = 0
        self.vehicle.reset(self.start_pose)
        self.obstacles.reset()
        self.progress.reset(self.time)
        logger.info("Race reset")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.progress.running

    def vehicle_snapshot(self) -> VehicleSnapshot:
        return self.vehicle.snapshot()

    def progress_snapshot(self) -> ProgressSnapshot:
        return self.progress.snapshot(self.time)

    def obstacle_positions(self) -> np.ndarray:
        return self.obstacles.positions()

    def is_on_track(self) -> bool:
        return self.geometry.is_on_track(self.vehicle.position)

    def track_position(self) -> float:
        """Closest curve parameter to the car, in [0, 1)."""
        return self.geometry.closest_parameter(self.vehicle.position)
