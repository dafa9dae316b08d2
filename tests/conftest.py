import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from config import LaunchConfig
from simulation import SimulationCore


@pytest.fixture
def default_config():
    return LaunchConfig(speed=25.0, angle_deg=45.0, gravity=9.8)


@pytest.fixture
def core(default_config):
    return SimulationCore(default_config)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
