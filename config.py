"""
Projectile-Demo: Configuration and Constants
============================================
Dataclasses for launch parameters, simulation phases, view margins
and physical constants.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Tuple
import math


# Physical constants
GRAVITY = 9.8  # m/s^2

# Fixed physics step, one per animation frame
FIXED_TIMESTEP = 1.0 / 60.0  # s
FRAME_INTERVAL_MS = 1000.0 / 60.0

# Launch defaults and control surface bounds
DEFAULT_SPEED = 25.0   # m/s
DEFAULT_ANGLE = 45.0   # deg
SPEED_LIMITS: Tuple[float, float] = (5.0, 80.0)
ANGLE_LIMITS: Tuple[float, float] = (5.0, 85.0)

# View scaling
MIN_VISIBLE_RANGE = 10.0   # Smallest horizontal span kept on screen [m]
SCALE_PADDING = 2.0        # Extra meters added to range/height before scaling
MIN_USABLE_PIXELS = 100.0  # Lower bound for usable canvas extent [px]

# Safety cap for run_to_completion (80 m/s straight up lands in ~16.3 s)
DEFAULT_MAX_STEPS = 100000


class Phase(Enum):
    """Simulation clock mode."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class WorldPoint(NamedTuple):
    """Point in the world frame [m], origin at the launch point, y up."""
    x: float
    y: float


@dataclass(frozen=True)
class LaunchConfig:
    """Launch parameters for a single shot."""

    speed: float = DEFAULT_SPEED          # Initial speed [m/s]
    angle_deg: float = DEFAULT_ANGLE      # Launch angle above horizontal [deg]
    gravity: float = GRAVITY              # Gravitational acceleration [m/s^2]

    def __post_init__(self):
        for name in ('speed', 'angle_deg', 'gravity'):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
        if self.speed <= 0:
            raise ValueError(f"speed must be positive, got {self.speed}")
        if not 0.0 < self.angle_deg < 90.0:
            raise ValueError(f"angle_deg must be in (0, 90), got {self.angle_deg}")
        if self.gravity <= 0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")

    def with_speed(self, speed: float) -> 'LaunchConfig':
        """Copy of this config with a new launch speed."""
        return replace(self, speed=float(speed))

    def with_angle(self, angle_deg: float) -> 'LaunchConfig':
        """Copy of this config with a new launch angle."""
        return replace(self, angle_deg=float(angle_deg))


@dataclass(frozen=True)
class ViewMargins:
    """
    Pixel margins around the drawing area.

    outer is applied on every side when computing the usable extent,
    inner_left places the launch origin, bottom places the ground line.
    """

    outer: float = 20.0
    inner_left: float = 8.0
    bottom: float = 8.0
