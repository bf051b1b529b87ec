# Analysis module - Logging, telemetry
# IMPURE - Has side effects (file I/O, logging)

from .logger import setup_logging
from .telemetry import TelemetryRecorder
