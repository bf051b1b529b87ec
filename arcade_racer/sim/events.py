# Events emitted by a tick for audio/UI collaborators

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CollisionEvent:
    obstacle: int
    penetration: float
    direction: Tuple[float, float, float]


@dataclass(frozen=True)
class CheckpointPassed:
    time: float


@dataclass(frozen=True)
class LapCompleted:
    lap: int
    lap_time: float
    score_delta: int
    best_lap: Optional[float]


@dataclass(frozen=True)
class RaceFinished:
    score: int
    total_time: float
