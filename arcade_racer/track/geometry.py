# Drivable surface derived from the centerline

import logging
import numpy as np
from typing import Tuple

from ..core.types import TrackParams
from .curve import TrackCurve
from .spatial import make_index


logger = logging.getLogger(__name__)


class TrackGeometry:
    """Ribbon and nearest-sample table built once from a TrackCurve.

    Samples are spaced uniformly in arc length rather than in curve
    parameter, so long straights get as many samples per metre as tight
    corners. Nearest-sample distance then overestimates the true distance to
    the centerline by at most :attr:`tolerance`.
    """

    # Fine subdivisions per sample when inverting arc length
    ARC_LENGTH_OVERSAMPLE = 32

    def __init__(
        self,
        curve: TrackCurve,
        width: float = 7.5,
        samples: int = 320,
        on_track_factor: float = 0.55,
        index: str = "brute",
    ):
        assert width > 0.0
        assert samples >= 8
        assert 0.0 < on_track_factor <= 1.0, "on_track_factor must be in (0, 1]"

        self.curve = curve
        self.width = float(width)
        self.half_width = self.width / 2.0
        self.on_track_factor = float(on_track_factor)

        self._parameters, self._points, self.length = self._build_samples(samples)
        self._parameters.setflags(write=False)
        self._points.setflags(write=False)

        spacing = np.linalg.norm(
            np.roll(self._points, -1, axis=0) - self._points, axis=1
        )
        self.tolerance = float(spacing.max() / 2.0)

        self._index = make_index(index, self._points[:, [0, 2]])

        logger.debug(
            f"Track geometry: length={self.length:.1f}, samples={samples}, "
            f"tolerance={self.tolerance:.3f}, index={index}"
        )

    @classmethod
    def from_params(cls, curve: TrackCurve, params: TrackParams) -> "TrackGeometry":
        return cls(
            curve,
            width=params.width,
            samples=params.samples,
            on_track_factor=params.on_track_factor,
            index=params.index,
        )

    def _build_samples(self, samples: int) -> Tuple[np.ndarray, np.ndarray, float]:
        fine = samples * self.ARC_LENGTH_OVERSAMPLE
        ts = np.linspace(0.0, 1.0, fine + 1)
        pts = self.curve.points_at(ts)

        seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        cumulative = np.concatenate([[0.0], np.cumsum(seg)])
        length = float(cumulative[-1])

        targets = np.arange(samples) * (length / samples)
        parameters = np.interp(targets, cumulative, ts)
        return parameters, self.curve.points_at(parameters), length

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def sample_parameters(self) -> np.ndarray:
        return self._parameters

    @property
    def sample_points(self) -> np.ndarray:
        return self._points

    @property
    def on_track_threshold(self) -> float:
        return self.half_width * self.on_track_factor

    def _nearest(self, p) -> Tuple[float, int]:
        x, z = float(p[0]), float(p[2])
        if not (np.isfinite(x) and np.isfinite(z)):
            return float("inf"), 0
        return self._index.query(x, z)

    def nearest_distance(self, p) -> float:
        """Planar distance from ``p`` to the nearest sample (inf if non-finite)."""
        return self._nearest(p)[0]

    def is_on_track(self, p) -> bool:
        return self._nearest(p)[0] < self.on_track_threshold

    def closest_parameter(self, p) -> float:
        return float(self._parameters[self._nearest(p)[1]])

    def point_ahead(self, p, distance: float) -> np.ndarray:
        """Centerline sample roughly ``distance`` along the track from ``p``'s nearest sample."""
        _, i = self._nearest(p)
        n = len(self._points)
        step = int(round(distance / (self.length / n)))
        return self._points[(i + step) % n].copy()

    def distance_along(self, p, q) -> float:
        """Signed track distance from ``p`` to ``q``, measured between their nearest samples.

        Wraps at the lap seam, so the result lies in (-length / 2, length / 2].
        """
        _, i = self._nearest(p)
        _, j = self._nearest(q)
        n = len(self._points)
        steps = (j - i) % n
        if steps > n // 2:
            steps -= n
        return steps * (self.length / n)

    def lateral_offset(self, p) -> float:
        """Signed offset of ``p`` from the nearest sample along the right vector."""
        distance, i = self._nearest(p)
        if not np.isfinite(distance):
            return distance
        right = self.curve.right_at(self._parameters[i])
        delta = np.asarray(p, dtype=np.float64) - self._points[i]
        return float(delta[0] * right[0] + delta[2] * right[2])

    # ------------------------------------------------------------------
    # Render exports
    # ------------------------------------------------------------------

    def ribbon(self, steps: int = 900) -> Tuple[np.ndarray, np.ndarray]:
        """Left and right edges of the drivable band.

        Args:
            steps: Number of strips; ``steps + 1`` edge pairs are returned so
                the last pair closes onto the first

        Returns:
            (left, right) arrays of shape (steps + 1, 3)
        """
        left = np.empty((steps + 1, 3))
        right = np.empty((steps + 1, 3))
        for i in range(steps + 1):
            t = i / steps
            p = self.curve.point_at(t)
            r = self.curve.right_at(t)
            left[i] = p - r * self.half_width
            right[i] = p + r * self.half_width
        return left, right

    def edge_posts(self, count: int = 90, margin: float = 0.7) -> np.ndarray:
        """Marker posts just outside both edges, shape (count * 2, 3)."""
        posts = []
        for i in range(count):
            t = i / count
            for side in (-1.0, 1.0):
                posts.append(self.curve.offset_point(t, (self.half_width + margin) * side))
        return np.array(posts)
