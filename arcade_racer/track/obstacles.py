# Circular obstacles placed along the track

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..core.types import TrackParams
from .curve import TrackCurve


@dataclass
class Obstacle:
    """One cone. Position is mutable; radius is fixed."""
    position: np.ndarray
    radius: float


class ObstacleField:
    """Fixed-cardinality set of obstacles, indexed by placement order.

    Obstacles are placed from (parameter, lateral offset) pairs resolved
    through the curve's right vector. Only the integrator's collision
    response moves them, via :meth:`nudge`.
    """

    def __init__(
        self,
        curve: TrackCurve,
        placements: Iterable[Tuple[float, float]],
        radius: float = 0.55,
        height: float = 0.6,
    ):
        assert radius > 0.0
        self._initial: List[np.ndarray] = []
        for t, offset in placements:
            position = curve.offset_point(t, offset)
            position[1] = height
            position.setflags(write=False)
            self._initial.append(position)

        self._obstacles = [Obstacle(position=p.copy(), radius=float(radius)) for p in self._initial]

    @classmethod
    def from_params(cls, curve: TrackCurve, params: TrackParams) -> "ObstacleField":
        return cls(
            curve,
            params.obstacles,
            radius=params.obstacle_radius,
            height=params.obstacle_height,
        )

    def __len__(self) -> int:
        return len(self._obstacles)

    def __iter__(self):
        return iter(self._obstacles)

    def __getitem__(self, index: int) -> Obstacle:
        return self._obstacles[index]

    def positions(self) -> np.ndarray:
        """Copy of current positions, shape (N, 3)."""
        if not self._obstacles:
            return np.zeros((0, 3))
        return np.array([ob.position for ob in self._obstacles])

    def nudge(self, index: int, delta: np.ndarray) -> None:
        """Move one obstacle in the ground plane."""
        assert 0 <= index < len(self._obstacles), f"No obstacle at index {index}"
        ob = self._obstacles[index]
        ob.position[0] += delta[0]
        ob.position[2] += delta[2]

    def reset(self) -> None:
        """Restore every obstacle to its placement position."""
        for ob, initial in zip(self._obstacles, self._initial):
            ob.position = initial.copy()
