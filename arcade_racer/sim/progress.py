# Lap and checkpoint state machine

import logging
import numpy as np
from enum import Enum
from typing import List, Optional

from ..core.math_utils import planar_distance
from ..core.types import ProgressSnapshot, RaceParams
from .events import CheckpointPassed, LapCompleted, RaceFinished


logger = logging.getLogger(__name__)


class RaceStatus(Enum):
    RACING = "racing"
    FINISHED = "finished"


class RaceProgress:
    """Track checkpoint and start-line crossings, laps, timing and score.

    A start-line hit only counts as a lap once the checkpoint on the far side
    of the circuit has been reached since the previous lap. FINISHED is
    terminal until :meth:`reset`.
    """

    def __init__(
        self,
        start_point: np.ndarray,
        checkpoint_point: np.ndarray,
        params: RaceParams = RaceParams(),
    ):
        assert params.laps_total >= 1
        self.start_point = np.asarray(start_point, dtype=np.float64)
        self.checkpoint_point = np.asarray(checkpoint_point, dtype=np.float64)
        self.params = params
        self.reset(0.0)

    @property
    def laps_total(self) -> int:
        return self.params.laps_total

    @property
    def running(self) -> bool:
        return self.status is RaceStatus.RACING

    def reset(self, now: float) -> None:
        self.status = RaceStatus.RACING
        self.lap = 0
        self.hits = 0
        self.score = 0
        self.best_lap: Optional[float] = None
        self.lap_times: List[float] = []
        self.checkpoint_passed = False
        self.start_time = now
        self.lap_start_time = now

    def register_hit(self, penalty: Optional[int] = None) -> None:
        """Count an obstacle hit and take the penalty off the score."""
        if penalty is None:
            penalty = self.params.hit_penalty
        self.hits += 1
        self.score = max(0, self.score - penalty)

    def update(self, position: np.ndarray, now: float) -> list:
        """Advance the state machine with the car's position after a tick.

        Args:
            position: Car position
            now: Current time in seconds, on the same clock as reset()

        Returns:
            Events produced by this update
        """
        if not self.running:
            return []

        events = []
        p = self.params

        if (
            not self.checkpoint_passed
            and planar_distance(position, self.checkpoint_point) < p.checkpoint_radius
        ):
            self.checkpoint_passed = True
            events.append(CheckpointPassed(time=now))

        if (
            self.checkpoint_passed
            and planar_distance(position, self.start_point) < p.start_radius
        ):
            self.checkpoint_passed = False
            lap_time = now - self.lap_start_time
            self.lap_start_time = now
            self.lap += 1
            self.lap_times.append(lap_time)

            if self.best_lap is None or lap_time < self.best_lap:
                self.best_lap = lap_time

            delta = p.lap_score(lap_time)
            self.score += delta
            logger.info(f"Lap {self.lap}/{self.laps_total}: {lap_time:.2f}s (+{delta})")
            events.append(LapCompleted(
                lap=self.lap,
                lap_time=lap_time,
                score_delta=delta,
                best_lap=self.best_lap,
            ))

            if self.lap >= self.laps_total:
                self.status = RaceStatus.FINISHED
                logger.info(f"Finished! Score {self.score}")
                events.append(RaceFinished(score=self.score, total_time=now - self.start_time))

        return events

    def snapshot(self, now: float) -> ProgressSnapshot:
        return ProgressSnapshot(
            lap=self.lap,
            laps_total=self.laps_total,
            hits=self.hits,
            score=self.score,
            elapsed=now - self.start_time,
            current_lap_time=now - self.lap_start_time,
            best_lap=self.best_lap,
            lap_times=tuple(self.lap_times),
            checkpoint_passed=self.checkpoint_passed,
            running=self.running,
        )
