import math

import pytest

from config import FIXED_TIMESTEP, LaunchConfig, Phase
from kinematics import time_of_flight
from simulation import SimulationCore


def _advance(core, n):
    for _ in range(n):
        core.advance()


def test_initial_state(core):
    assert core.phase is Phase.IDLE
    assert core.elapsed_time == 0.0
    assert core.trajectory == ()
    assert not core.is_finished


def test_default_config():
    core = SimulationCore()
    assert core.config.speed == 25.0
    assert core.config.angle_deg == 45.0
    assert core.config.gravity == 9.8


def test_launch_starts_fresh_shot(core):
    core.run_to_completion()
    assert core.is_finished

    assert core.launch()
    assert core.phase is Phase.RUNNING
    assert core.elapsed_time == 0.0
    assert core.trajectory == ()


def test_launch_while_running_is_ignored(core):
    core.launch()
    _advance(core, 5)

    assert not core.launch()
    assert core.phase is Phase.RUNNING
    assert len(core.trajectory) == 5
    assert core.elapsed_time == pytest.approx(5 * FIXED_TIMESTEP)


def test_launch_from_paused_restarts(core):
    core.launch()
    _advance(core, 10)
    core.pause_resume()

    assert core.launch()
    assert core.phase is Phase.RUNNING
    assert core.trajectory == ()
    assert core.elapsed_time == 0.0


def test_each_tick_adds_one_fixed_step(core):
    core.launch()
    previous = core.elapsed_time
    for i in range(1, 61):
        assert core.tick()
        assert core.elapsed_time > previous
        assert core.elapsed_time - previous == pytest.approx(1.0 / 60.0)
        assert len(core.trajectory) == i
        previous = core.elapsed_time
    assert core.elapsed_time == pytest.approx(1.0)


def test_tick_samples_closed_form_position(core):
    core.launch()
    _advance(core, 30)
    x, y = core.trajectory[-1]
    t = 0.5
    v = 25.0 / math.sqrt(2.0)
    assert x == pytest.approx(v * t)
    assert y == pytest.approx(v * t - 0.5 * 9.8 * t * t)


def test_completed_shot_ends_exactly_on_ground(core):
    points = core.run_to_completion()
    tof = core.time_of_flight()

    assert core.phase is Phase.IDLE
    assert core.is_finished
    assert points[-1].y == 0.0
    assert points[-1].x == pytest.approx(25.0 * math.cos(math.radians(45.0)) * tof)
    assert all(p.y >= 0.0 for p in points)
    assert len(points) == math.floor(tof / FIXED_TIMESTEP) + 1


@pytest.mark.parametrize("speed, angle", [(5.0, 5.0), (12.0, 30.0), (80.0, 85.0), (63.5, 62.0)])
def test_landing_for_various_shots(speed, angle):
    core = SimulationCore(LaunchConfig(speed=speed, angle_deg=angle))
    points = core.run_to_completion()
    tof = time_of_flight(speed, angle, 9.8)

    assert points[-1].y == 0.0
    assert points[-1].x == pytest.approx(speed * math.cos(math.radians(angle)) * tof)
    assert all(p.y >= 0.0 for p in points)
    xs = [p.x for p in points]
    assert xs == sorted(xs)


def test_advance_after_landing_is_noop(core):
    core.run_to_completion()
    revision = core.revision
    before = core.trajectory

    assert not core.advance()
    assert core.trajectory == before
    assert core.revision == revision


def test_pause_freezes_time(core):
    core.launch()
    _advance(core, 12)
    assert core.pause_resume()
    assert core.phase is Phase.PAUSED

    frozen = core.snapshot()
    _advance(core, 20)
    assert core.elapsed_time == frozen.elapsed_time
    assert core.trajectory == frozen.trajectory

    assert core.pause_resume()
    assert core.phase is Phase.RUNNING
    core.advance()
    assert core.elapsed_time == pytest.approx(13 * FIXED_TIMESTEP)
    assert len(core.trajectory) == 13


def test_pause_resume_while_idle_is_noop(core):
    assert not core.pause_resume()
    assert core.phase is Phase.IDLE
    assert core.trajectory == ()

    core.run_to_completion()
    before = core.trajectory
    assert not core.pause_resume()
    assert core.phase is Phase.IDLE
    assert core.trajectory == before


def _prepare(core, phase_name):
    if phase_name == "running":
        core.launch()
        _advance(core, 7)
    elif phase_name == "paused":
        core.launch()
        _advance(core, 7)
        core.pause_resume()
    elif phase_name == "finished":
        core.run_to_completion()


@pytest.mark.parametrize("phase_name", ["idle", "running", "paused", "finished"])
def test_reset_from_any_phase(core, phase_name):
    _prepare(core, phase_name)
    core.reset()

    assert core.phase is Phase.IDLE
    assert core.elapsed_time == 0.0
    assert core.trajectory == ()


def test_reset_is_idempotent(core):
    core.launch()
    _advance(core, 3)
    core.reset()
    once = core.snapshot()
    core.reset()
    twice = core.snapshot()

    assert (once.phase, once.elapsed_time, once.trajectory, once.config) == \
        (twice.phase, twice.elapsed_time, twice.trajectory, twice.config)


def test_configuration_only_changes_while_idle(core):
    assert core.set_speed(40.0)
    assert core.set_angle(30.0)
    assert core.config == LaunchConfig(speed=40.0, angle_deg=30.0)

    core.launch()
    assert not core.set_speed(10.0)
    assert not core.set_angle(70.0)
    core.pause_resume()
    assert not core.set_speed(10.0)
    assert core.config == LaunchConfig(speed=40.0, angle_deg=30.0)

    core.reset()
    assert core.set_speed(10.0)
    assert core.config.speed == 10.0


def test_config_setters_accepted_after_landing(core):
    core.run_to_completion()
    assert core.set_angle(60.0)
    assert core.config.angle_deg == 60.0


@pytest.mark.parametrize("kwargs", [
    {"speed": 0.0},
    {"speed": -3.0},
    {"angle_deg": 0.0},
    {"angle_deg": 90.0},
    {"gravity": 0.0},
    {"speed": float("nan")},
])
def test_invalid_launch_config_rejected(kwargs):
    with pytest.raises(ValueError):
        LaunchConfig(**kwargs)


def test_invalid_speed_setter_raises(core):
    with pytest.raises(ValueError):
        core.set_speed(0.0)
    assert core.config.speed == 25.0


def test_trajectory_view_is_a_copy(core):
    core.launch()
    _advance(core, 4)
    view = core.trajectory
    snapshot = core.snapshot()
    _advance(core, 4)

    assert len(view) == 4
    assert len(snapshot.trajectory) == 4
    assert len(core.trajectory) == 8


def test_revision_tracks_changes(core):
    start = core.revision
    core.pause_resume()
    assert core.revision == start

    core.launch()
    after_launch = core.revision
    assert after_launch > start

    core.advance()
    assert core.revision == after_launch + 1


def test_run_to_completion_resumes_paused_shot(core):
    core.launch()
    _advance(core, 10)
    core.pause_resume()

    points = core.run_to_completion()
    assert points[-1].y == 0.0
    assert len(points) == math.floor(core.time_of_flight() / FIXED_TIMESTEP) + 1


def test_run_to_completion_step_limit(core):
    with pytest.raises(RuntimeError):
        core.run_to_completion(max_steps=10)


def test_stats_reflect_current_config(core):
    core.set_speed(30.0)
    stats = core.flight_stats()
    assert stats.range_distance == pytest.approx(900.0 / 9.8)
    assert stats.max_height == pytest.approx(900.0 * 0.5 / (2 * 9.8))
    assert core.flight_range() == stats.range_distance
    assert core.max_height() == stats.max_height
    assert core.time_of_flight() == stats.time_of_flight


def test_timestep_must_be_positive():
    with pytest.raises(ValueError):
        SimulationCore(timestep=0.0)
