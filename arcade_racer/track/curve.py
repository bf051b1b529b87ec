# Closed centerline curve

import numpy as np
from typing import Sequence

from ..core.math_utils import right_vector
from ..core.types import TrackParams


def rounded_rect_points(
    half_w: float,
    half_h: float,
    radius: float,
    segments_per_corner: int = 24,
) -> np.ndarray:
    """Control points of a rounded rectangle centered on the origin.

    Four quarter-circle corners, each sampled with ``segments_per_corner + 1``
    points, traversed counter-clockwise in the X/Z plane starting at +X.
    Straights are implied by the gap between consecutive corners.

    Args:
        half_w: Half extent along X
        half_h: Half extent along Z
        radius: Corner radius
        segments_per_corner: Arc subdivisions per corner

    Returns:
        Array of shape (4 * (segments_per_corner + 1), 3), Y = 0
    """
    corners = [
        (half_w - radius, half_h - radius, 0.0, np.pi / 2),
        (-half_w + radius, half_h - radius, np.pi / 2, np.pi),
        (-half_w + radius, -half_h + radius, np.pi, 3 * np.pi / 2),
        (half_w - radius, -half_h + radius, 3 * np.pi / 2, 2 * np.pi),
    ]

    pts = []
    for cx, cz, a0, a1 in corners:
        angles = np.linspace(a0, a1, segments_per_corner + 1)
        for a in angles:
            pts.append((cx + np.cos(a) * radius, 0.0, cz + np.sin(a) * radius))

    return np.array(pts, dtype=np.float64)


class TrackCurve:
    """Closed, smooth parametric curve through a ring of control points.

    Uniform Catmull-Rom in cubic Hermite form: the tangent at control point
    ``i`` is ``tension * (p[i+1] - p[i-1])``. The parameter ``t`` covers one
    full loop over [0, 1) and is taken modulo 1, so the curve is periodic.

    Tangents are estimated by a forward chord of width ``tangent_epsilon``;
    every lateral offset in the package goes through :meth:`right_at` so
    ribbon edges, obstacles and the start pose agree with each other.
    """

    def __init__(
        self,
        control_points: Sequence[Sequence[float]],
        tension: float = 0.5,
        tangent_epsilon: float = 1e-3,
    ):
        points = np.array(control_points, dtype=np.float64)
        assert points.ndim == 2 and points.shape[1] == 3, f"Expected (N, 3) points, got {points.shape}"
        assert len(points) >= 4, "A closed curve needs at least 4 control points"
        assert 0.0 < tangent_epsilon < 0.5

        points[:, 1] = 0.0
        points.setflags(write=False)

        self._points = points
        self.tension = float(tension)
        self.tangent_epsilon = float(tangent_epsilon)

    @classmethod
    def from_params(cls, params: TrackParams) -> "TrackCurve":
        points = rounded_rect_points(
            params.half_w,
            params.half_h,
            params.corner_radius,
            params.segments_per_corner,
        )
        return cls(points, tension=params.tension, tangent_epsilon=params.tangent_epsilon)

    @property
    def control_points(self) -> np.ndarray:
        return self._points

    @property
    def n_points(self) -> int:
        return len(self._points)

    def points_at(self, ts) -> np.ndarray:
        """Evaluate the curve at many parameters.

        Args:
            ts: Array-like of parameters (any real, wrapped modulo 1)

        Returns:
            Array of shape (len(ts), 3)
        """
        ts = np.mod(np.atleast_1d(np.asarray(ts, dtype=np.float64)), 1.0)
        n = self.n_points

        scaled = ts * n
        segment = np.floor(scaled)
        w = (scaled - segment)[:, None]
        i1 = segment.astype(np.int64) % n

        p0 = self._points[(i1 - 1) % n]
        p1 = self._points[i1]
        p2 = self._points[(i1 + 1) % n]
        p3 = self._points[(i1 + 2) % n]

        m1 = self.tension * (p2 - p0)
        m2 = self.tension * (p3 - p1)

        c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * m1 - m2
        c3 = 2.0 * p1 - 2.0 * p2 + m1 + m2

        return p1 + m1 * w + c2 * w ** 2 + c3 * w ** 3

    def point_at(self, t: float) -> np.ndarray:
        return self.points_at(t)[0]

    def tangent_at(self, t: float) -> np.ndarray:
        """Unit planar tangent from the chord to ``t + tangent_epsilon``."""
        p, p2 = self.points_at([t, t + self.tangent_epsilon])
        chord = p2 - p
        chord[1] = 0.0
        norm = np.linalg.norm(chord)
        if norm == 0.0:
            # Coincident control points; look backwards instead
            chord = p - self.point_at(t - self.tangent_epsilon)
            chord[1] = 0.0
            norm = np.linalg.norm(chord)
        return chord / norm

    def right_at(self, t: float) -> np.ndarray:
        return right_vector(self.tangent_at(t))

    def offset_point(self, t: float, lateral: float) -> np.ndarray:
        """Point displaced ``lateral`` units along the right vector at ``t``."""
        return self.point_at(t) + self.right_at(t) * lateral
