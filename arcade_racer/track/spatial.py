# Nearest-sample lookup over a fixed planar point table

import numpy as np
from typing import Tuple


class BruteForceIndex:
    """Linear scan over every sample.

    Cheap enough for a few hundred samples per tick.
    """

    def __init__(self, points_xz: np.ndarray):
        assert points_xz.ndim == 2 and points_xz.shape[1] == 2
        self._points = points_xz

    def query(self, x: float, z: float) -> Tuple[float, int]:
        """Return (distance, sample index) of the nearest sample."""
        d2 = (self._points[:, 0] - x) ** 2 + (self._points[:, 1] - z) ** 2
        i = int(np.argmin(d2))
        return float(np.sqrt(d2[i])), i


class KDTreeIndex:
    """k-d tree over the same samples; identical answers, sub-linear queries."""

    def __init__(self, points_xz: np.ndarray):
        from scipy.spatial import cKDTree

        assert points_xz.ndim == 2 and points_xz.shape[1] == 2
        self._tree = cKDTree(points_xz)

    def query(self, x: float, z: float) -> Tuple[float, int]:
        distance, i = self._tree.query((x, z))
        return float(distance), int(i)


INDEX_TYPES = {
    "brute": BruteForceIndex,
    "kdtree": KDTreeIndex,
}


def make_index(kind: str, points_xz: np.ndarray):
    if kind not in INDEX_TYPES:
        raise ValueError(f"Unknown index type: {kind}")
    return INDEX_TYPES[kind](points_xz)
