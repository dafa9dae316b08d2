"""
Projectile-Demo: Visualization and Animation
============================================
Interactive GUI for the projectile demonstrator with:
- Fixed-step animation of the shot
- Speed and angle sliders (locked while a shot is in flight)
- Launch, pause/resume and reset buttons
- Flight statistics readout
"""

import argparse
import logging

import matplotlib.pyplot as plt
from matplotlib.widgets import Slider, Button
from typing import Callable, Optional

from config import (
    LaunchConfig, Phase,
    FRAME_INTERVAL_MS, SPEED_LIMITS, ANGLE_LIMITS, DEFAULT_SPEED, DEFAULT_ANGLE
)
from kinematics import analytic_path, velocity_at
from logging_config import setup_logging
from renderer import TrajectoryRenderer, BACKGROUND_COLOR
from simulation import SimulationCore
from view_mapping import ViewScale, compute_view_scale

logger = logging.getLogger(__name__)


class FrameDriver:
    """
    Per-frame callback subscription backed by a matplotlib canvas timer.

    start() registers the callback with the display loop and stop()
    cancels it. Both are idempotent.
    """

    def __init__(self, canvas, callback: Callable[[], None],
                 interval_ms: float = FRAME_INTERVAL_MS):
        self._timer = canvas.new_timer(interval=max(1, int(round(interval_ms))))
        self._timer.add_callback(callback)
        self.active = False

    def start(self):
        if not self.active:
            self._timer.start()
            self.active = True

    def stop(self):
        if self.active:
            self._timer.stop()
            self.active = False


class ProjectileVisualizer:
    """
    Interactive visualization for a single projectile shot.
    """

    def __init__(self, config: LaunchConfig = None):
        """
        Initialize visualizer.

        Parameters
        ----------
        config : LaunchConfig, optional
            Initial launch parameters
        """
        self.simulation = SimulationCore(config)
        self.driver = None
        self.renderer = None

        # Figure and axes
        self.fig = None
        self.ax_canvas = None
        self.ax_info = None

        # Widgets
        self.slider_speed = None
        self.slider_angle = None
        self.btn_launch = None
        self.btn_pause = None
        self.btn_reset = None
        self._info_text = None

        # Set while widgets are updated from simulation state
        self._syncing = False
        self._last_scale: Optional[ViewScale] = None

    def create_figure(self):
        """Create the main figure, canvas, readout and controls."""
        self.fig = plt.figure(figsize=(13, 7))
        self.fig.suptitle('Projectile Motion Demonstrator', fontsize=14, fontweight='bold')

        gs = self.fig.add_gridspec(1, 3, left=0.04, right=0.98, top=0.92, bottom=0.24,
                                   wspace=0.08)

        self.ax_canvas = self.fig.add_subplot(gs[0, :2])
        self.ax_canvas.set_facecolor(BACKGROUND_COLOR)

        self.ax_info = self.fig.add_subplot(gs[0, 2])
        self.ax_info.axis('off')
        self._info_text = self.ax_info.text(0.05, 0.95, '', transform=self.ax_info.transAxes,
                                            verticalalignment='top', fontsize=10,
                                            family='monospace')

        cfg = self.simulation.config

        ax_speed = self.fig.add_axes([0.10, 0.13, 0.45, 0.03])
        self.slider_speed = Slider(ax_speed, 'Speed [m/s]', SPEED_LIMITS[0], SPEED_LIMITS[1],
                                   valinit=cfg.speed, valstep=0.5)

        ax_angle = self.fig.add_axes([0.10, 0.07, 0.45, 0.03])
        self.slider_angle = Slider(ax_angle, 'Angle [deg]', ANGLE_LIMITS[0], ANGLE_LIMITS[1],
                                   valinit=cfg.angle_deg, valstep=0.5)

        ax_launch = self.fig.add_axes([0.64, 0.07, 0.10, 0.08])
        self.btn_launch = Button(ax_launch, 'Launch')

        ax_pause = self.fig.add_axes([0.76, 0.07, 0.10, 0.08])
        self.btn_pause = Button(ax_pause, 'Pause')

        ax_reset = self.fig.add_axes([0.88, 0.07, 0.10, 0.08])
        self.btn_reset = Button(ax_reset, 'Reset')

        # Hook events
        self.slider_speed.on_changed(self._on_speed_changed)
        self.slider_angle.on_changed(self._on_angle_changed)
        self.btn_launch.on_clicked(self._on_launch)
        self.btn_pause.on_clicked(self._on_pause_resume)
        self.btn_reset.on_clicked(self._on_reset)
        self.fig.canvas.mpl_connect('resize_event', lambda _event: self.redraw())

        self.renderer = TrajectoryRenderer(self.ax_canvas)
        self.driver = FrameDriver(self.fig.canvas, self._on_frame)

        self._sync_controls()
        self.redraw()
        return self.fig

    # ------------------------------------------------------------------
    # Commands from the control surface
    # ------------------------------------------------------------------

    def launch(self):
        if self.simulation.launch():
            self.driver.start()
        self._after_command()

    def pause_resume(self):
        if self.simulation.pause_resume():
            if self.simulation.phase is Phase.RUNNING:
                self.driver.start()
            else:
                self.driver.stop()
        self._after_command()

    def reset(self):
        self.simulation.reset()
        self.driver.stop()
        self._after_command()

    def _after_command(self):
        self._sync_controls()
        self.redraw()

    def _on_launch(self, _event):
        self.launch()

    def _on_pause_resume(self, _event):
        self.pause_resume()

    def _on_reset(self, _event):
        self.reset()

    def _on_speed_changed(self, value):
        if self._syncing:
            return
        if not self.simulation.set_speed(value):
            self._sync_controls()
        self.redraw()

    def _on_angle_changed(self, value):
        if self._syncing:
            return
        if not self.simulation.set_angle(value):
            self._sync_controls()
        self.redraw()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _on_frame(self):
        """Timer callback: one physics step, then repaint."""
        self.simulation.advance()
        if self.simulation.phase is not Phase.RUNNING:
            # Landed: cancel the subscription until the next launch
            self.driver.stop()
            self._sync_controls()
        self.redraw()

    def canvas_size(self):
        """Current drawing surface size in pixels."""
        bbox = self.ax_canvas.get_window_extent()
        return max(1.0, bbox.width), max(1.0, bbox.height)

    def redraw(self):
        """Recompute the scale from the current canvas and repaint if needed."""
        if self.fig is None:
            return

        sim = self.simulation
        snapshot = sim.snapshot()
        stats = sim.flight_stats()

        width, height = self.canvas_size()
        scale = compute_view_scale(width, height, stats.range_distance, stats.max_height)
        if self._last_scale is not None and scale.meters_per_pixel != self._last_scale.meters_per_pixel:
            logger.debug("Scale changed to %.4f m/px", scale.meters_per_pixel)
        self._last_scale = scale

        self.renderer.render(snapshot.trajectory, scale, stats.range_distance,
                             stats.max_height, predicted=analytic_path(snapshot.config))
        self._update_info_panel(scale)
        self.fig.canvas.draw_idle()

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    def _sync_controls(self):
        """Push simulation state into the widgets."""
        sim = self.simulation
        idle = sim.phase is Phase.IDLE

        self._syncing = True
        try:
            if self.slider_speed.val != sim.config.speed:
                self.slider_speed.set_val(sim.config.speed)
            if self.slider_angle.val != sim.config.angle_deg:
                self.slider_angle.set_val(sim.config.angle_deg)
        finally:
            self._syncing = False

        for slider in (self.slider_speed, self.slider_angle):
            slider.set_active(idle)
            slider.ax.set_alpha(1.0 if idle else 0.4)
            slider.poly.set_alpha(1.0 if idle else 0.4)

        self.btn_pause.label.set_text('Resume' if sim.phase is Phase.PAUSED else 'Pause')

    def info_lines(self, scale: ViewScale = None) -> list:
        """Text lines for the statistics panel."""
        snapshot = self.simulation.snapshot()
        cfg = snapshot.config
        stats = self.simulation.flight_stats()

        if snapshot.trajectory:
            x, y = snapshot.trajectory[-1]
        else:
            x, y = 0.0, 0.0
        vx, vy = velocity_at(cfg.speed, cfg.angle_deg, cfg.gravity, snapshot.elapsed_time)

        lines = [
            "LAUNCH",
            f"Speed: {cfg.speed:.1f} m/s",
            f"Angle: {cfg.angle_deg:.1f} deg",
            f"Gravity: {cfg.gravity:.2f} m/s^2",
            "",
            "STATE",
            f"Phase: {snapshot.phase.value}",
            f"t: {snapshot.elapsed_time:.3f} s",
            f"x: {x:.2f} m",
            f"y: {y:.2f} m",
            f"vx: {vx:.2f} m/s",
            f"vy: {vy:.2f} m/s",
            "",
            "PREDICTED",
            f"Time of flight: {stats.time_of_flight:.3f} s",
            f"Range: {stats.range_distance:.2f} m",
            f"Max height: {stats.max_height:.2f} m",
        ]
        if scale is not None:
            lines += ["", f"Scale: {scale.meters_per_pixel:.4f} m/px"]
        return lines

    def _update_info_panel(self, scale: ViewScale = None):
        self._info_text.set_text('\n'.join(self.info_lines(scale)))

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def show(self):
        """Create the figure (if needed) and run the interactive loop."""
        if self.fig is None:
            self.create_figure()
        plt.show()

    def plot_trajectory(self):
        """Plot a completed shot in world coordinates (no animation)."""
        sim = SimulationCore(self.simulation.config)
        points = sim.run_to_completion()
        stats = sim.flight_stats()

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.set_title(f'Projectile Trajectory (v0 = {sim.config.speed:.1f} m/s, '
                     f'angle = {sim.config.angle_deg:.1f} deg)')
        ax.set_xlabel('X [m]')
        ax.set_ylabel('Y [m]')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)

        # Ground
        ax.axhline(y=0, color='brown', linewidth=2)

        predicted = analytic_path(sim.config)
        ax.plot(predicted[:, 0], predicted[:, 1], 'gray', linewidth=1,
                linestyle='--', label='Analytic')

        xs = [0.0] + [p.x for p in points]
        ys = [0.0] + [p.y for p in points]
        ax.plot(xs, ys, 'orange', linewidth=2, label=f'Fixed step ({len(points)} samples)')

        ax.plot(stats.range_distance, 0, 'rx', markersize=15, markeredgewidth=3,
                label=f'Landing: {stats.range_distance:.1f} m')

        ax.legend()
        plt.tight_layout()
        plt.show()
        return fig


def print_report(config: LaunchConfig):
    """Run a shot to completion and print its statistics."""
    print("=" * 60)
    print("Projectile Shot Report")
    print("=" * 60)

    print(f"\nConfiguration:")
    print(f"  Speed: {config.speed} m/s")
    print(f"  Angle: {config.angle_deg} deg")
    print(f"  Gravity: {config.gravity} m/s^2")

    sim = SimulationCore(config)
    print("\nRunning simulation...")
    points = sim.run_to_completion()
    stats = sim.flight_stats()

    print(f"\nResults:")
    print(f"  Time of flight: {stats.time_of_flight:.3f} s")
    print(f"  Range: {stats.range_distance:.2f} m")
    print(f"  Max height: {stats.max_height:.2f} m")
    print(f"  Samples: {len(points)} (stepped time {sim.elapsed_time:.3f} s)")
    print(f"  Landing point: ({points[-1].x:.3f}, {points[-1].y:.3f}) m")

    return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive projectile motion demonstrator.")
    parser.add_argument(
        "--speed",
        type=float,
        default=DEFAULT_SPEED,
        help=f"launch speed in m/s ({SPEED_LIMITS[0]:g}-{SPEED_LIMITS[1]:g})",
    )
    parser.add_argument(
        "--angle",
        type=float,
        default=DEFAULT_ANGLE,
        help=f"launch angle in degrees ({ANGLE_LIMITS[0]:g}-{ANGLE_LIMITS[1]:g})",
    )
    parser.add_argument(
        "--trajectory",
        action="store_true",
        help="show a static plot of the completed shot",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="print flight statistics and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    speed = min(max(args.speed, SPEED_LIMITS[0]), SPEED_LIMITS[1])
    angle = min(max(args.angle, ANGLE_LIMITS[0]), ANGLE_LIMITS[1])
    if (speed, angle) != (args.speed, args.angle):
        logger.warning("Launch parameters clamped to speed=%.1f m/s, angle=%.1f deg",
                       speed, angle)
    config = LaunchConfig(speed=speed, angle_deg=angle)

    if args.report:
        print_report(config)
        return 0

    viz = ProjectileVisualizer(config)
    if args.trajectory:
        viz.plot_trajectory()
    else:
        print("Starting interactive demo...")
        viz.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
