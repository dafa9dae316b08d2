"""
Projectile-Demo: Kinematics
===========================
Closed-form projectile motion under constant gravity, no drag.

All functions are pure. Angles are given in degrees, everything else
in SI units. Derived flight statistics are clamped to [0, inf) so that
floating noise near degenerate angles never reaches a readout.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import LaunchConfig, WorldPoint


def clamp_non_negative(value: float) -> float:
    """Clamp to [0, inf). NaN maps to 0."""
    value = float(value)
    if np.isnan(value) or value < 0.0:
        return 0.0
    return value


def position_at(v0: float, angle_deg: float, g: float, t: float) -> WorldPoint:
    """Position of the projectile at time t after launch."""
    theta = np.deg2rad(angle_deg)
    x = v0 * np.cos(theta) * t
    y = v0 * np.sin(theta) * t - 0.5 * g * t * t
    return WorldPoint(float(x), float(y))


def velocity_at(v0: float, angle_deg: float, g: float, t: float) -> Tuple[float, float]:
    """Velocity components (vx, vy) at time t after launch."""
    theta = np.deg2rad(angle_deg)
    return float(v0 * np.cos(theta)), float(v0 * np.sin(theta) - g * t)


def time_of_flight(v0: float, angle_deg: float, g: float) -> float:
    """Time until the projectile returns to launch height."""
    theta = np.deg2rad(angle_deg)
    return clamp_non_negative(2.0 * v0 * np.sin(theta) / g)


def flight_range(v0: float, angle_deg: float, g: float) -> float:
    """Horizontal distance travelled on level ground."""
    theta = np.deg2rad(angle_deg)
    return clamp_non_negative(v0**2 * np.sin(2.0 * theta) / g)


def max_height(v0: float, angle_deg: float, g: float) -> float:
    """Apex height above the launch point."""
    theta = np.deg2rad(angle_deg)
    return clamp_non_negative(v0**2 * np.sin(theta)**2 / (2.0 * g))


def impact_point(config: LaunchConfig) -> WorldPoint:
    """
    Exact ground-impact point of a shot.

    The horizontal coordinate comes from the analytic time of flight,
    and y is exactly 0.0 rather than the (slightly negative) value a
    stepped time would give.
    """
    t_flight = time_of_flight(config.speed, config.angle_deg, config.gravity)
    theta = np.deg2rad(config.angle_deg)
    return WorldPoint(float(config.speed * np.cos(theta) * t_flight), 0.0)


@dataclass(frozen=True)
class FlightStats:
    """Derived statistics of a shot, all non-negative."""
    time_of_flight: float = 0.0   # [s]
    range_distance: float = 0.0   # [m]
    max_height: float = 0.0       # [m]


def flight_stats(config: LaunchConfig) -> FlightStats:
    """Compute the readout statistics for a launch configuration."""
    v0, angle, g = config.speed, config.angle_deg, config.gravity
    return FlightStats(
        time_of_flight=time_of_flight(v0, angle, g),
        range_distance=flight_range(v0, angle, g),
        max_height=max_height(v0, angle, g),
    )


def analytic_path(config: LaunchConfig, n_points: int = 200) -> np.ndarray:
    """
    Sample the closed-form parabola from launch to impact.

    Parameters
    ----------
    config : LaunchConfig
        Launch parameters
    n_points : int
        Number of samples, including both end points

    Returns
    -------
    ndarray : (n_points, 2) array of world coordinates [m]. The last
        row is the exact impact point.
    """
    if n_points < 2:
        raise ValueError(f"n_points must be at least 2, got {n_points}")

    t_flight = time_of_flight(config.speed, config.angle_deg, config.gravity)
    theta = np.deg2rad(config.angle_deg)
    t = np.linspace(0.0, t_flight, n_points)

    x = config.speed * np.cos(theta) * t
    y = config.speed * np.sin(theta) * t - 0.5 * config.gravity * t**2

    path = np.column_stack([x, np.maximum(y, 0.0)])
    path[-1] = impact_point(config)
    return path
