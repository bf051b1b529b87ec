# Pytest configuration and fixtures

import pytest
import numpy as np
from pathlib import Path
import tempfile
import yaml

from arcade_racer.core.types import TrackParams, VehicleParams, RaceParams
from arcade_racer.track.curve import TrackCurve
from arcade_racer.track.geometry import TrackGeometry
from arcade_racer.track.obstacles import ObstacleField
from arcade_racer.sim.simulation import Simulation


class FixedSurface:
    """Geometry stand-in with the same answer everywhere (idealized straight)."""

    def __init__(self, on_track: bool = True):
        self.on_track = on_track

    def is_on_track(self, p) -> bool:
        return self.on_track


@pytest.fixture
def on_track_surface():
    return FixedSurface(on_track=True)


@pytest.fixture
def off_track_surface():
    return FixedSurface(on_track=False)


@pytest.fixture
def seed():
    """Fixed seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed):
    return np.random.default_rng(seed)


@pytest.fixture
def dt():
    """Standard 60 Hz step."""
    return 1.0 / 60.0


@pytest.fixture
def track_params():
    return TrackParams()


@pytest.fixture
def vehicle_params():
    return VehicleParams()


@pytest.fixture
def race_params():
    return RaceParams()


@pytest.fixture
def curve(track_params):
    return TrackCurve.from_params(track_params)


@pytest.fixture
def geometry(curve, track_params):
    return TrackGeometry.from_params(curve, track_params)


@pytest.fixture
def no_obstacles(curve):
    return ObstacleField(curve, [])


@pytest.fixture
def simulation():
    return Simulation()


@pytest.fixture
def empty_simulation():
    """Default circuit with every cone removed."""
    return Simulation(track_params=TrackParams(obstacles=()))


@pytest.fixture
def config():
    """Standard test configuration."""
    return {
        "track": {
            "half_w": 36.0,
            "half_h": 24.0,
            "corner_radius": 11.0,
            "segments_per_corner": 18,
            "tension": 0.08,
            "width": 7.5,
            "samples": 320,
            "on_track_factor": 0.55,
            "index": "brute",
            "obstacles": [[0.08, 0.0], [0.52, 0.0]],
        },
        "vehicle": {
            "max_speed": 26.0,
            "accel": 28.0,
            "brake": 36.0,
            "drag": 2.2,
            "off_track_drag": 5.2,
        },
        "race": {
            "laps_total": 2,
            "start_radius": 4.0,
            "checkpoint_radius": 4.2,
            "max_dt": 0.033,
        },
        "logging": {
            "level": "WARNING",
        },
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(config, temp_dir):
    """Create temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path
