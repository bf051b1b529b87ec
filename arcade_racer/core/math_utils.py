# Mathematical utilities
# FORBIDDEN: logging, any I/O

import numpy as np


UP = np.array([0.0, 1.0, 0.0])


def normalize_angle(angle: float) -> float:
    """Normalize angle to [-pi, pi] range.

    Args:
        angle: Angle in radians

    Returns:
        Normalized angle in [-pi, pi]
    """
    while angle > np.pi:
        angle -= 2 * np.pi
    while angle < -np.pi:
        angle += 2 * np.pi
    return angle


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range.

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def planar_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Distance between two points in the ground (X, Z) plane."""
    dx = a[0] - b[0]
    dz = a[2] - b[2]
    return float(np.hypot(dx, dz))


def heading_vector(heading: float) -> np.ndarray:
    """Unit forward vector for a heading angle.

    Heading 0 faces +Z, heading pi/2 faces +X.
    """
    return np.array([np.sin(heading), 0.0, np.cos(heading)])


def heading_from_direction(direction: np.ndarray) -> float:
    """Inverse of heading_vector for any planar direction."""
    return float(np.arctan2(direction[0], direction[2]))


def right_vector(tangent: np.ndarray) -> np.ndarray:
    """Lateral direction for a planar tangent: up x tangent, normalized."""
    right = np.cross(UP, tangent)
    norm = np.linalg.norm(right)
    if norm == 0.0:
        return right
    return right / norm


def clamp_length(vector: np.ndarray, max_length: float) -> np.ndarray:
    """Scale vector down so its magnitude does not exceed max_length.

    Args:
        vector: Input vector
        max_length: Hard cap on magnitude

    Returns:
        The original vector if within the cap, otherwise a rescaled copy
    """
    length = np.linalg.norm(vector)
    if length > max_length:
        return vector * (max_length / length)
    return vector
