# Simulation module - Vehicle dynamics, race progress, simulation context
# Owns all mutable state; mutated only through Simulation.tick / reset

from .vehicle import VehicleState, StartPose
from .integrator import Integrator
from .progress import RaceProgress, RaceStatus
from .events import CollisionEvent, CheckpointPassed, LapCompleted, RaceFinished
from .simulation import Simulation, TickResult
from .autopilot import Autopilot
