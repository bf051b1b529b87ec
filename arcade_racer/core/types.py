# Core type definitions
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from .math_utils import clamp


def _section(cls, config: Dict[str, Any], name: str):
    """Build a params dataclass from one config section, defaulting missing keys."""
    section = (config or {}).get(name, {}) or {}
    kwargs = {}
    for f in fields(cls):
        if f.name in section:
            value = section[f.name]
            if isinstance(value, list):
                value = tuple(tuple(v) if isinstance(v, list) else v for v in value)
            kwargs[f.name] = value
    return cls(**kwargs)


def _axis(value) -> float:
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return clamp(value, -1.0, 1.0)


@dataclass(frozen=True)
class Controls:
    """Abstract driver input for one tick.

    steer > 0 turns towards increasing heading, throttle < 0 brakes/reverses.
    """
    steer: float = 0.0
    throttle: float = 0.0

    def clamped(self) -> "Controls":
        """Saturate both axes to [-1, 1]; NaN or infinite input reads as neutral."""
        return Controls(steer=_axis(self.steer), throttle=_axis(self.throttle))

    @classmethod
    def idle(cls) -> "Controls":
        return cls(0.0, 0.0)


# Cone layout of the default circuit: (parameter, lateral offset)
DEFAULT_OBSTACLES: Tuple[Tuple[float, float], ...] = (
    (0.08, 0.0), (0.14, 1.6), (0.20, -1.9), (0.31, 1.3), (0.38, -1.2),
    (0.52, 0.0), (0.61, 1.8), (0.69, -1.6), (0.77, 0.0), (0.87, -1.8),
)


@dataclass(frozen=True)
class TrackParams:
    """Immutable track construction parameters."""
    half_w: float = 36.0
    half_h: float = 24.0
    corner_radius: float = 11.0
    segments_per_corner: int = 18
    tension: float = 0.08
    width: float = 7.5
    samples: int = 320
    on_track_factor: float = 0.55
    tangent_epsilon: float = 1e-3
    index: str = "brute"
    obstacles: Tuple[Tuple[float, float], ...] = DEFAULT_OBSTACLES
    obstacle_radius: float = 0.55
    obstacle_height: float = 0.6

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TrackParams":
        return _section(cls, config, "track")


@dataclass(frozen=True)
class VehicleParams:
    """Immutable vehicle handling parameters."""
    max_speed: float = 26.0
    accel: float = 28.0
    brake: float = 36.0
    turn_rate: float = 2.4
    drag: float = 2.2
    off_track_drag: float = 5.2
    steer_full_speed: float = 10.0  # speed at which steering authority saturates
    car_radius: float = 0.95
    bounce: float = 8.0
    obstacle_nudge: float = 0.3
    world_half_extent: float = 180.0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "VehicleParams":
        return _section(cls, config, "vehicle")


@dataclass(frozen=True)
class RaceParams:
    """Immutable race rules: lap count, line placement, scoring."""
    laps_total: int = 3
    start_parameter: float = 0.2434  # middle of the top straight
    start_offset: float = 2.6
    checkpoint_offset: float = 0.5
    start_radius: float = 4.0
    checkpoint_radius: float = 4.2
    hit_penalty: int = 25
    lap_base_score: int = 250
    lap_bonus_scale: float = 2400.0
    lap_bonus_min_time: float = 8.0
    max_dt: float = 0.033
    simulate_after_finish: bool = False

    @property
    def checkpoint_parameter(self) -> float:
        return (self.start_parameter + self.checkpoint_offset) % 1.0

    def lap_score(self, lap_time: float) -> int:
        """Points for a completed lap; faster laps never score less."""
        bonus = max(0, round(self.lap_bonus_scale / max(self.lap_bonus_min_time, lap_time)))
        return int(self.lap_base_score + bonus)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RaceParams":
        return _section(cls, config, "race")


@dataclass(frozen=True)
class VehicleSnapshot:
    """Read-only vehicle view for rendering and camera framing."""
    position: Tuple[float, float, float]
    velocity: Tuple[float, float, float]
    heading: float
    speed: float


@dataclass(frozen=True)
class ProgressSnapshot:
    """Read-only race view for UI display."""
    lap: int
    laps_total: int
    hits: int
    score: int
    elapsed: float
    current_lap_time: float
    best_lap: Optional[float]
    lap_times: Tuple[float, ...]
    checkpoint_passed: bool
    running: bool

    @property
    def finished(self) -> bool:
        return not self.running
