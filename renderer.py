"""
Projectile-Demo: Trajectory Renderer
====================================
Draws a shot onto a matplotlib Axes used as a pixel canvas:
- Ground line
- Optional vertical grid
- Trajectory polyline and predicted path
- Projectile marker with glow halo
- Origin and scale annotations
"""

from typing import Optional, Sequence

import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle

from config import WorldPoint
from view_mapping import CoordinateMapper, ViewScale, grid_spacing


BACKGROUND_COLOR = '#10141f'
GROUND_COLOR = '#8b5a2b'
GRID_COLOR = '#3a4257'
PATH_COLOR = '#ffb347'
PREDICTION_COLOR = '#6c7a99'
MARKER_COLOR = '#ffd27f'
TEXT_COLOR = '#d0d6e6'

# (radius [px], alpha) from outermost halo to core
GLOW_LAYERS = ((16.0, 0.06), (11.0, 0.12), (7.5, 0.25), (4.5, 1.0))


class TrajectoryRenderer:
    """
    Renders trajectories in screen (pixel) coordinates.

    The Axes limits are set to the canvas size with the y axis inverted,
    so one data unit is one pixel and the origin is top-left.
    """

    def __init__(self, ax, show_grid: bool = True, show_prediction: bool = True):
        """
        Initialize renderer.

        Parameters
        ----------
        ax : matplotlib.axes.Axes
            Axes used as the drawing surface
        show_grid : bool
            Draw the vertical distance grid
        show_prediction : bool
            Draw the analytic path as a dashed line behind the samples
        """
        self.ax = ax
        self.show_grid = show_grid
        self.show_prediction = show_prediction

        self._plot_elements = {}
        self._last_key = None

        self._init_plot_elements()

    def _init_plot_elements(self):
        """Create the artists once, updated in place on every render."""
        ax = self.ax
        ax.set_facecolor(BACKGROUND_COLOR)
        ax.set_xticks([])
        ax.set_yticks([])
        for spine in ax.spines.values():
            spine.set_visible(False)

        self._plot_elements['grid'] = LineCollection([], colors=GRID_COLOR,
                                                     linewidths=0.8, zorder=1)
        ax.add_collection(self._plot_elements['grid'])

        self._plot_elements['ground'], = ax.plot([], [], color=GROUND_COLOR,
                                                 linewidth=2, zorder=2)

        self._plot_elements['prediction'], = ax.plot([], [], color=PREDICTION_COLOR,
                                                     linewidth=1, linestyle='--',
                                                     alpha=0.7, zorder=3)

        self._plot_elements['path'], = ax.plot([], [], color=PATH_COLOR,
                                               linewidth=2, zorder=4)

        glow = []
        for radius, alpha in GLOW_LAYERS:
            circle = Circle((0, 0), radius, color=MARKER_COLOR, alpha=alpha,
                            zorder=5, visible=False)
            ax.add_patch(circle)
            glow.append(circle)
        self._plot_elements['marker'] = glow

        self._plot_elements['origin_text'] = ax.text(0, 0, '', color=TEXT_COLOR,
                                                     fontsize=8, verticalalignment='bottom')
        self._plot_elements['scale_text'] = ax.text(0.01, 0.98, '', transform=ax.transAxes,
                                                    color=TEXT_COLOR, fontsize=9,
                                                    verticalalignment='top',
                                                    family='monospace')

    def needs_redraw(self, trajectory: Sequence[WorldPoint], scale: ViewScale,
                     range_m: float, max_height_m: float) -> bool:
        return self._frame_key(trajectory, scale, range_m, max_height_m) != self._last_key

    def render(
        self,
        trajectory: Sequence[WorldPoint],
        scale: ViewScale,
        range_m: float,
        max_height_m: float,
        predicted: Optional[np.ndarray] = None
    ) -> bool:
        """
        Draw one frame if anything visible has changed.

        Parameters
        ----------
        trajectory : sequence of WorldPoint
            Sampled points of the current shot [m]
        scale : ViewScale
            Scale and origin for this frame
        range_m, max_height_m : float
            Analytic range and apex height [m]
        predicted : ndarray, optional
            (N, 2) analytic path in world coordinates [m]

        Returns
        -------
        bool : True if the artists were updated
        """
        key = self._frame_key(trajectory, scale, range_m, max_height_m)
        if key == self._last_key:
            return False

        mapper = CoordinateMapper(scale)
        width, height = scale.canvas_width, scale.canvas_height

        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

        self._plot_elements['ground'].set_data([0, width], [scale.origin_y, scale.origin_y])
        self._draw_grid(mapper, range_m)
        self._draw_prediction(mapper, predicted)
        self._draw_path(mapper, trajectory)
        self._draw_annotations(scale)

        self._last_key = key
        return True

    def _draw_grid(self, mapper: CoordinateMapper, range_m: float):
        grid = self._plot_elements['grid']
        if not self.show_grid:
            grid.set_segments([])
            return

        s = mapper.scale
        step_px = mapper.meters_to_pixels(grid_spacing(range_m))
        xs = np.arange(s.origin_x, s.canvas_width, step_px)
        grid.set_segments([[(x, 0.0), (x, s.origin_y)] for x in xs])

    def _draw_prediction(self, mapper: CoordinateMapper, predicted: Optional[np.ndarray]):
        line = self._plot_elements['prediction']
        if not self.show_prediction or predicted is None or len(predicted) == 0:
            line.set_data([], [])
            return
        screen = mapper.world_to_screen_array(predicted)
        line.set_data(screen[:, 0], screen[:, 1])

    def _draw_path(self, mapper: CoordinateMapper, trajectory: Sequence[WorldPoint]):
        glow = self._plot_elements['marker']
        if len(trajectory) == 0:
            self._plot_elements['path'].set_data([], [])
            for circle in glow:
                circle.set_visible(False)
            return

        # Polyline starts at the launch point
        points = np.vstack([[0.0, 0.0], np.asarray(trajectory, dtype=float)])
        screen = mapper.world_to_screen_array(points)
        self._plot_elements['path'].set_data(screen[:, 0], screen[:, 1])

        head = (float(screen[-1, 0]), float(screen[-1, 1]))
        for circle in glow:
            circle.center = head
            circle.set_visible(True)

    def _draw_annotations(self, scale: ViewScale):
        origin_text = self._plot_elements['origin_text']
        origin_text.set_position((scale.origin_x + 2, scale.origin_y - 2))
        origin_text.set_text('(0, 0)')
        self._plot_elements['scale_text'].set_text(
            f'scale: 1 px = {scale.meters_per_pixel:.3f} m')

    def artists(self) -> list:
        """Flat list of every artist owned by the renderer."""
        result = []
        for element in self._plot_elements.values():
            if isinstance(element, list):
                result.extend(element)
            else:
                result.append(element)
        return result

    def _frame_key(self, trajectory, scale, range_m, max_height_m):
        return (tuple(trajectory), scale, float(range_m), float(max_height_m),
                self.show_grid, self.show_prediction)
