# Per-tick vehicle dynamics

import logging
import numpy as np
from typing import List

from ..core.math_utils import clamp, clamp_length, normalize_angle
from ..core.types import Controls, VehicleParams
from ..track.obstacles import ObstacleField
from .events import CollisionEvent
from .vehicle import VehicleState


logger = logging.getLogger(__name__)

# Below this planar separation the push direction is undefined
COINCIDENT_EPS = 1e-9


class Integrator:
    """Advance a VehicleState by one tick.

    Steps run in a fixed order, each consuming the result of the previous:
    longitudinal force, speed-scaled steering, speed cap, surface drag,
    semi-implicit Euler position update, obstacle collisions, world bounds.
    """

    def __init__(
        self,
        vehicle: VehicleState,
        geometry,
        obstacles: ObstacleField,
        params: VehicleParams = VehicleParams(),
    ):
        """Initialize integrator.

        Args:
            vehicle: State to mutate
            geometry: Anything with ``is_on_track(position) -> bool``
            obstacles: Obstacles to collide with (nudged on impact)
            params: Handling parameters
        """
        assert params.brake > 0.0 and params.accel > 0.0
        self.vehicle = vehicle
        self.geometry = geometry
        self.obstacles = obstacles
        self.params = params

    def steering_authority(self, speed: float) -> float:
        """Fraction of full turn rate available at this speed."""
        return clamp(speed / self.params.steer_full_speed, 0.0, 1.0)

    def tick(self, dt: float, controls: Controls) -> List[CollisionEvent]:
        """Apply one simulation step.

        Args:
            dt: Time step in seconds, must be positive
            controls: Driver input, saturated to [-1, 1]

        Returns:
            Collisions resolved during this tick, in obstacle order
        """
        assert np.isfinite(dt) and dt > 0.0, f"dt must be positive, got {dt}"
        controls = controls.clamped()
        p = self.params
        state = self.vehicle

        forward = state.forward

        if controls.throttle > 0.0:
            state.velocity = state.velocity + forward * (p.accel * controls.throttle * dt)
        elif controls.throttle < 0.0:
            state.velocity = state.velocity + forward * (p.brake * controls.throttle * dt)

        authority = self.steering_authority(state.speed)
        state.heading = normalize_angle(state.heading + controls.steer * p.turn_rate * authority * dt)

        state.velocity = clamp_length(state.velocity, p.max_speed)

        drag = p.drag if self.geometry.is_on_track(state.position) else p.off_track_drag
        state.velocity = state.velocity * max(0.0, 1.0 - drag * dt)

        state.position = state.position + state.velocity * dt

        events = self._resolve_collisions(forward)
        if events:
            # Bounces must not lift the car past the cap
            state.velocity = clamp_length(state.velocity, p.max_speed)

        limit = p.world_half_extent
        state.position[0] = clamp(state.position[0], -limit, limit)
        state.position[2] = clamp(state.position[2], -limit, limit)

        return events

    def _resolve_collisions(self, forward: np.ndarray) -> List[CollisionEvent]:
        p = self.params
        state = self.vehicle
        events = []

        for i, ob in enumerate(self.obstacles):
            delta = state.position - ob.position
            delta[1] = 0.0
            distance = float(np.linalg.norm(delta))
            reach = p.car_radius + ob.radius
            if distance >= reach:
                continue

            if distance > COINCIDENT_EPS:
                direction = delta / distance
            else:
                # Dead center: back the car out the way it came
                direction = -forward

            penetration = reach - distance
            push = direction * penetration

            state.position = state.position + push
            state.velocity = state.velocity + push * p.bounce
            self.obstacles.nudge(i, -push * p.obstacle_nudge)

            logger.debug(f"Collision with obstacle {i}: penetration={penetration:.3f}")
            events.append(CollisionEvent(
                obstacle=i,
                penetration=penetration,
                direction=tuple(float(v) for v in direction),
            ))

        return events
