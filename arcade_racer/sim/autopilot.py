# Pure-pursuit driver for headless runs

import numpy as np

from ..core.math_utils import clamp, heading_from_direction, normalize_angle
from ..core.types import Controls, VehicleSnapshot
from ..track.geometry import TrackGeometry


class Autopilot:
    """Steer toward a centerline point a fixed distance ahead.

    Reads only snapshots, obstacle positions and the track geometry, the same
    way an input device mapping would sit outside the simulation. When a cone
    sits in the upcoming stretch the pursuit target is shifted sideways so the
    car passes it with ``clearance`` to spare instead of shoving it along.
    """

    def __init__(
        self,
        geometry: TrackGeometry,
        lookahead: float = 8.0,
        steer_gain: float = 2.0,
        cruise_throttle: float = 1.0,
        corner_throttle: float = 0.4,
        corner_error: float = 0.35,
        clearance: float = 1.8,
        avoid_ahead: float = 20.0,
        avoid_behind: float = 2.0,
    ):
        """Initialize autopilot.

        Args:
            geometry: Track to follow
            lookahead: Distance along the centerline to the pursuit target
            steer_gain: Steer per radian of heading error
            cruise_throttle: Throttle when roughly aligned
            corner_throttle: Throttle when heading error exceeds corner_error
            corner_error: Heading error (radians) that triggers lift-off
            clearance: Lateral gap kept from a cone being passed
            avoid_ahead: Track distance ahead at which a cone starts to matter
            avoid_behind: Track distance behind the car a cone is still avoided
        """
        assert lookahead > 0.0
        assert clearance >= 0.0
        self.geometry = geometry
        self.lookahead = lookahead
        self.steer_gain = steer_gain
        self.cruise_throttle = cruise_throttle
        self.corner_throttle = corner_throttle
        self.corner_error = corner_error
        self.clearance = clearance
        self.avoid_ahead = avoid_ahead
        self.avoid_behind = avoid_behind

    def lateral_target(self, position, obstacles=None) -> float:
        """Signed offset from the centerline to aim for.

        Zero unless a cone lies between ``avoid_behind`` behind and
        ``avoid_ahead`` ahead of the car; the nearest such cone is passed on
        the side with more room.
        """
        if obstacles is None or len(obstacles) == 0:
            return 0.0

        nearest = None
        for ob in np.asarray(obstacles, dtype=np.float64):
            along = self.geometry.distance_along(position, ob)
            if -self.avoid_behind <= along <= self.avoid_ahead:
                if nearest is None or along < nearest[0]:
                    nearest = (along, ob)

        if nearest is None:
            return 0.0
        offset = self.geometry.lateral_offset(nearest[1])
        if offset >= 0.0:
            return offset - self.clearance
        return offset + self.clearance

    def target(self, snapshot: VehicleSnapshot, obstacles=None) -> np.ndarray:
        position = np.array(snapshot.position)
        point = self.geometry.point_ahead(position, self.lookahead)
        lateral = self.lateral_target(position, obstacles)
        if lateral != 0.0:
            t = self.geometry.closest_parameter(point)
            point = point + self.geometry.curve.right_at(t) * lateral
        return point

    def heading_error(self, snapshot: VehicleSnapshot, obstacles=None) -> float:
        to_target = self.target(snapshot, obstacles) - np.array(snapshot.position)
        if np.hypot(to_target[0], to_target[2]) == 0.0:
            return 0.0
        desired = heading_from_direction(to_target)
        return normalize_angle(desired - snapshot.heading)

    def __call__(self, snapshot: VehicleSnapshot, obstacles=None) -> Controls:
        """Controls for this tick.

        Args:
            snapshot: Current vehicle view
            obstacles: Optional (N, 3) cone positions to steer around

        Returns:
            Steer and throttle, already within [-1, 1]
        """
        error = self.heading_error(snapshot, obstacles)
        throttle = self.cruise_throttle if abs(error) < self.corner_error else self.corner_throttle
        return Controls(
            steer=clamp(self.steer_gain * error, -1.0, 1.0),
            throttle=throttle,
        )
