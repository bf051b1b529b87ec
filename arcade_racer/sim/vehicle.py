# Vehicle state

import numpy as np
from dataclasses import dataclass, field

from ..core.math_utils import heading_vector, heading_from_direction
from ..core.types import RaceParams, VehicleSnapshot
from ..track.curve import TrackCurve


@dataclass(frozen=True)
class StartPose:
    """Where and which way the car faces on reset."""
    position: tuple
    heading: float

    @classmethod
    def behind_start_line(cls, curve: TrackCurve, params: RaceParams) -> "StartPose":
        """Pose ``start_offset`` units behind the start line, facing along the track."""
        tangent = curve.tangent_at(params.start_parameter)
        line = curve.point_at(params.start_parameter)
        position = line - tangent * params.start_offset
        position[1] = 0.0
        return cls(
            position=tuple(float(v) for v in position),
            heading=heading_from_direction(tangent),
        )


@dataclass
class VehicleState:
    """Kinematic state of the car, mutated once per tick by the Integrator."""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    heading: float = 0.0

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    @property
    def forward(self) -> np.ndarray:
        return heading_vector(self.heading)

    def reset(self, pose: StartPose) -> None:
        self.position = np.array(pose.position, dtype=np.float64)
        self.velocity = np.zeros(3)
        self.heading = float(pose.heading)

    def snapshot(self) -> VehicleSnapshot:
        return VehicleSnapshot(
            position=tuple(float(v) for v in self.position),
            velocity=tuple(float(v) for v in self.velocity),
            heading=float(self.heading),
            speed=self.speed,
        )

    @classmethod
    def at(cls, pose: StartPose) -> "VehicleState":
        state = cls()
        state.reset(pose)
        return state
