"""
Projectile-Demo: Coordinate Mapping
===================================
World meters to screen pixels.

The scale is derived from the analytic range and apex height of the
current shot, not from the sampled points, so it stays constant while
the projectile is in flight. It is cheap and recomputed every frame.
A canvas resize mid-flight therefore changes the scale immediately.
"""

from dataclasses import dataclass
import math

import numpy as np

from config import (
    ViewMargins, WorldPoint,
    MIN_VISIBLE_RANGE, SCALE_PADDING, MIN_USABLE_PIXELS
)


def grid_spacing(range_m: float) -> float:
    """Vertical grid spacing [m]: about ten lines across the range."""
    return max(1.0, float(math.ceil(range_m / 10.0)))


@dataclass(frozen=True)
class ViewScale:
    """Uniform scale for one frame, with the canvas it was computed for."""
    meters_per_pixel: float
    canvas_width: float
    canvas_height: float
    origin_x: float
    origin_y: float


def compute_view_scale(
    canvas_width: float,
    canvas_height: float,
    range_m: float,
    max_height_m: float,
    margins: ViewMargins = None
) -> ViewScale:
    """
    Compute a scale that fits the whole predicted trajectory on the canvas.

    Parameters
    ----------
    canvas_width, canvas_height : float
        Drawing surface size [px]
    range_m : float
        Analytic range of the shot [m]
    max_height_m : float
        Analytic apex height of the shot [m]
    margins : ViewMargins, optional
        Pixel margins

    Returns
    -------
    ViewScale : scale and screen origin
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"Canvas size must be positive, got {canvas_width}x{canvas_height}")

    m = margins if margins is not None else ViewMargins()

    usable_width = max(MIN_USABLE_PIXELS, canvas_width - 2 * m.outer)
    target_range = max(range_m, MIN_VISIBLE_RANGE)
    scale_x = (target_range + SCALE_PADDING) / usable_width

    usable_height = max(MIN_USABLE_PIXELS, canvas_height - 2 * m.outer)
    scale_y = (max_height_m + SCALE_PADDING) / usable_height

    return ViewScale(
        meters_per_pixel=max(scale_x, scale_y),
        canvas_width=float(canvas_width),
        canvas_height=float(canvas_height),
        origin_x=m.inner_left,
        origin_y=canvas_height - m.bottom,
    )


class CoordinateMapper:
    """
    Maps between the world frame (meters, y up) and the screen frame
    (pixels, origin top-left, y down).
    """

    def __init__(self, scale: ViewScale):
        self.scale = scale

    @classmethod
    def for_shot(cls, canvas_width: float, canvas_height: float,
                 range_m: float, max_height_m: float,
                 margins: ViewMargins = None) -> 'CoordinateMapper':
        return cls(compute_view_scale(canvas_width, canvas_height,
                                      range_m, max_height_m, margins))

    @property
    def meters_per_pixel(self) -> float:
        return self.scale.meters_per_pixel

    def world_to_screen(self, x: float, y: float):
        s = self.scale
        return (s.origin_x + x / s.meters_per_pixel,
                s.origin_y - y / s.meters_per_pixel)

    def screen_to_world(self, sx: float, sy: float) -> WorldPoint:
        s = self.scale
        return WorldPoint((sx - s.origin_x) * s.meters_per_pixel,
                          (s.origin_y - sy) * s.meters_per_pixel)

    def world_to_screen_array(self, points) -> np.ndarray:
        """Vectorized world_to_screen for an (N, 2) array of points."""
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        s = self.scale
        screen = np.empty_like(pts)
        screen[:, 0] = s.origin_x + pts[:, 0] / s.meters_per_pixel
        screen[:, 1] = s.origin_y - pts[:, 1] / s.meters_per_pixel
        return screen

    def meters_to_pixels(self, length_m: float) -> float:
        return length_m / self.scale.meters_per_pixel
