"""
Projectile-Demo: Simulation Clock
=================================
Fixed-step simulation of a single projectile shot with a
launch / pause / resume / reset state machine.

The core never schedules itself. The host calls advance() once per
animation frame and every call is exactly one FIXED_TIMESTEP of
simulated time, whatever the wall-clock delay between frames.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from config import (
    LaunchConfig, Phase, WorldPoint,
    FIXED_TIMESTEP, DEFAULT_MAX_STEPS
)
from kinematics import (
    FlightStats, flight_stats, impact_point, position_at,
    time_of_flight, flight_range, max_height
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationSnapshot:
    """Consistent, immutable view of the simulation at one instant."""
    phase: Phase
    elapsed_time: float
    trajectory: Tuple[WorldPoint, ...]
    config: LaunchConfig
    revision: int


class SimulationCore:
    """
    Owns simulated time and the sampled trajectory of the current shot.

    Phases:
    1. Idle: initial state, after ground impact and after reset
    2. Running: advance() steps the shot
    3. Paused: time frozen until pause_resume()

    Commands that are not valid in the current phase are ignored and
    return False, so rapid input can never desynchronize the UI.
    """

    def __init__(self, config: LaunchConfig = None, timestep: float = FIXED_TIMESTEP):
        """
        Initialize the simulation clock.

        Parameters
        ----------
        config : LaunchConfig, optional
            Initial launch parameters
        timestep : float
            Simulated seconds per advance() call
        """
        if timestep <= 0:
            raise ValueError(f"timestep must be positive, got {timestep}")

        self._config = config if config is not None else LaunchConfig()
        self.timestep = timestep

        self._phase = Phase.IDLE
        self._steps = 0
        self._trajectory: List[WorldPoint] = []

        # Bumped on every state change, used by hosts as a dirty flag
        self.revision = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def config(self) -> LaunchConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def elapsed_time(self) -> float:
        return self._steps * self.timestep

    @property
    def trajectory(self) -> Tuple[WorldPoint, ...]:
        """Read-only copy of the sampled points."""
        return tuple(self._trajectory)

    @property
    def is_finished(self) -> bool:
        """True once a shot has landed and not been reset."""
        return self._phase is Phase.IDLE and len(self._trajectory) > 0

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            phase=self._phase,
            elapsed_time=self.elapsed_time,
            trajectory=tuple(self._trajectory),
            config=self._config,
            revision=self.revision,
        )

    def time_of_flight(self) -> float:
        cfg = self._config
        return time_of_flight(cfg.speed, cfg.angle_deg, cfg.gravity)

    def flight_range(self) -> float:
        cfg = self._config
        return flight_range(cfg.speed, cfg.angle_deg, cfg.gravity)

    def max_height(self) -> float:
        cfg = self._config
        return max_height(cfg.speed, cfg.angle_deg, cfg.gravity)

    def flight_stats(self) -> FlightStats:
        return flight_stats(self._config)

    # ------------------------------------------------------------------
    # Configuration (only while idle)
    # ------------------------------------------------------------------

    def set_speed(self, speed: float) -> bool:
        """Set launch speed [m/s]. Ignored unless idle."""
        if self._phase is not Phase.IDLE:
            logger.debug("Ignoring speed change while %s", self._phase.value)
            return False
        self._config = self._config.with_speed(speed)
        self._touch()
        return True

    def set_angle(self, angle_deg: float) -> bool:
        """Set launch angle [deg]. Ignored unless idle."""
        if self._phase is not Phase.IDLE:
            logger.debug("Ignoring angle change while %s", self._phase.value)
            return False
        self._config = self._config.with_angle(angle_deg)
        self._touch()
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def launch(self) -> bool:
        """Start a fresh shot. Ignored while already running."""
        if self._phase is Phase.RUNNING:
            logger.debug("Launch ignored, shot already running")
            return False

        self._trajectory = []
        self._steps = 0
        self._phase = Phase.RUNNING
        self._touch()
        logger.debug("Launched: v0=%.2f m/s, angle=%.2f deg",
                     self._config.speed, self._config.angle_deg)
        return True

    def pause_resume(self) -> bool:
        """Toggle between running and paused. Ignored while idle."""
        if self._phase is Phase.RUNNING:
            self._phase = Phase.PAUSED
        elif self._phase is Phase.PAUSED:
            self._phase = Phase.RUNNING
        else:
            logger.debug("Pause/resume ignored while idle")
            return False

        self._touch()
        logger.debug("Phase -> %s at t=%.3f s", self._phase.value, self.elapsed_time)
        return True

    def reset(self) -> None:
        """Stop any shot and clear all simulation state."""
        self._phase = Phase.IDLE
        self._steps = 0
        self._trajectory = []
        self._touch()

    def advance(self) -> bool:
        """
        Advance one fixed timestep.

        Returns
        -------
        bool : True if the state changed
        """
        if self._phase is not Phase.RUNNING:
            return False

        cfg = self._config
        self._steps += 1
        t = self.elapsed_time
        point = position_at(cfg.speed, cfg.angle_deg, cfg.gravity, t)

        if point.y < 0.0 or t >= self.time_of_flight():
            # Crossed the ground since the last sample: snap to the exact impact
            landing = impact_point(cfg)
            self._trajectory.append(landing)
            self._phase = Phase.IDLE
            logger.debug("Impact at x=%.3f m after %d steps", landing.x, self._steps)
        else:
            self._trajectory.append(point)

        self._touch()
        return True

    # Frame-callback name used by hosts
    tick = advance

    def run_to_completion(self, max_steps: Optional[int] = None) -> Tuple[WorldPoint, ...]:
        """
        Launch (if needed) and advance until the projectile lands.

        Parameters
        ----------
        max_steps : int, optional
            Upper bound on advance() calls

        Returns
        -------
        tuple of WorldPoint : the completed trajectory
        """
        limit = max_steps if max_steps is not None else DEFAULT_MAX_STEPS

        if self._phase is Phase.IDLE:
            self.launch()
        elif self._phase is Phase.PAUSED:
            self.pause_resume()

        steps = 0
        while self._phase is Phase.RUNNING:
            if steps >= limit:
                raise RuntimeError(f"Shot did not land within {limit} steps")
            self.advance()
            steps += 1

        return self.trajectory

    def _touch(self):
        self.revision += 1
