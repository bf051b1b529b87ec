# Configuration loading and validation

from pathlib import Path
from typing import Any, Dict, List

import yaml

from .track.spatial import INDEX_TYPES


REQUIRED_SECTIONS = ["track", "vehicle", "race"]


def load_config(config_path: Path) -> dict:
    """Load a race configuration from YAML.

    An empty file yields an empty dict so every parameter falls back to its
    default; anything other than a mapping at the top level is rejected.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary keyed by section
    """
    with open(config_path) as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a mapping of sections, got {type(config).__name__}")
    return config


def _parse_scalar(value: str) -> Any:
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def apply_overrides(config: dict, overrides: list) -> dict:
    """Apply ``section.key=value`` overrides in place.

    Values are read as int, then float, then true/false, else kept as
    strings; :func:`validate_config` reports any that end up the wrong type.
    """
    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Invalid override format: {override}. Expected key=value")

        key, value = override.split("=", 1)
        *sections, leaf = key.split(".")

        d = config
        for k in sections:
            d = d.setdefault(k, {})
        d[leaf] = _parse_scalar(value)

    return config


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(section: Dict[str, Any], name: str, key: str, default: float, errors: List[str]):
    """Read a numeric key, recording an error and returning None if it is not a number."""
    value = section.get(key, default)
    if not _is_number(value):
        errors.append(f"{name}.{key} must be a number, got {value!r}")
        return None
    return value


def _check_track(track: Dict[str, Any], errors: List[str]) -> None:
    for key in ("half_w", "half_h", "corner_radius", "width", "tension",
                "tangent_epsilon", "obstacle_radius"):
        value = _number(track, "track", key, 1.0, errors)
        if value is not None and not value > 0:
            errors.append(f"track.{key} must be positive, got {value}")

    samples = _number(track, "track", "samples", 320, errors)
    if samples is not None and samples < 8:
        errors.append(f"track.samples must be at least 8, got {samples}")

    segments = _number(track, "track", "segments_per_corner", 18, errors)
    if segments is not None and segments < 1:
        errors.append("track.segments_per_corner must be at least 1")

    factor = _number(track, "track", "on_track_factor", 0.55, errors)
    if factor is not None and not 0.0 < factor <= 1.0:
        errors.append(f"track.on_track_factor must be in (0, 1], got {factor}")

    index = track.get("index", "brute")
    if index not in INDEX_TYPES:
        errors.append(f"track.index must be one of {sorted(INDEX_TYPES)}, got '{index}'")

    corner = track.get("corner_radius", 11.0)
    half_w = track.get("half_w", 36.0)
    half_h = track.get("half_h", 24.0)
    if all(_is_number(v) for v in (corner, half_w, half_h)) and corner >= min(half_w, half_h):
        errors.append("track.corner_radius must be smaller than both half extents")


def _check_vehicle(vehicle: Dict[str, Any], errors: List[str]) -> None:
    for key in ("max_speed", "accel", "brake", "turn_rate", "steer_full_speed",
                "car_radius", "world_half_extent"):
        value = _number(vehicle, "vehicle", key, 1.0, errors)
        if value is not None and not value > 0:
            errors.append(f"vehicle.{key} must be positive, got {value}")

    for key in ("drag", "off_track_drag", "bounce", "obstacle_nudge"):
        value = _number(vehicle, "vehicle", key, 0.0, errors)
        if value is not None and value < 0:
            errors.append(f"vehicle.{key} must be non-negative, got {value}")

    brake = vehicle.get("brake", 36.0)
    accel = vehicle.get("accel", 28.0)
    if _is_number(brake) and _is_number(accel) and brake <= accel:
        errors.append("vehicle.brake must be greater than vehicle.accel")

    off_track = vehicle.get("off_track_drag", 5.2)
    drag = vehicle.get("drag", 2.2)
    if _is_number(off_track) and _is_number(drag) and off_track < drag:
        errors.append("vehicle.off_track_drag must not be below vehicle.drag")


def _check_race(race: Dict[str, Any], errors: List[str]) -> None:
    laps = race.get("laps_total", 3)
    if not isinstance(laps, int) or isinstance(laps, bool):
        errors.append(f"race.laps_total must be an integer, got {laps!r}")
    elif laps < 1:
        errors.append(f"race.laps_total must be at least 1, got {laps}")

    for key in ("start_radius", "checkpoint_radius", "max_dt"):
        value = _number(race, "race", key, 1.0, errors)
        if value is not None and not value > 0:
            errors.append(f"race.{key} must be positive, got {value}")

    for key in ("hit_penalty", "lap_base_score", "lap_bonus_scale", "start_offset"):
        value = _number(race, "race", key, 0, errors)
        if value is not None and value < 0:
            errors.append(f"race.{key} must be non-negative, got {value}")

    start = _number(race, "race", "start_parameter", 0.0, errors)
    if start is not None and not 0.0 <= start < 1.0:
        errors.append(f"race.start_parameter must be in [0, 1), got {start}")

    if not isinstance(race.get("simulate_after_finish", False), bool):
        errors.append("race.simulate_after_finish must be true or false")


def validate_config(config: dict) -> list:
    """Validate configuration.

    Args:
        config: Configuration dictionary

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for section in REQUIRED_SECTIONS:
        if section not in config:
            errors.append(f"Missing required section: {section}")

    if "track" in config:
        _check_track(config["track"] or {}, errors)
    if "vehicle" in config:
        _check_vehicle(config["vehicle"] or {}, errors)
    if "race" in config:
        _check_race(config["race"] or {}, errors)

    return errors
