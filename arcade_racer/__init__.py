# Arcade racer simulation core

from .core.types import Controls, TrackParams, VehicleParams, RaceParams
from .sim.simulation import Simulation, TickResult

__version__ = "0.1.0"
