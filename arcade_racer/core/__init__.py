# Core module - Pure functions, no side effects
# FORBIDDEN: logging, any I/O

from .types import Controls, TrackParams, VehicleParams, RaceParams, VehicleSnapshot, ProgressSnapshot
from .math_utils import normalize_angle, clamp, planar_distance, heading_vector
