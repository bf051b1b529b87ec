# Track module - Centerline, drivable surface, obstacles

from .curve import TrackCurve, rounded_rect_points
from .geometry import TrackGeometry
from .obstacles import Obstacle, ObstacleField
from .spatial import BruteForceIndex, KDTreeIndex, make_index
