import random

import pytest

from swarm_siege.config import GameConfig
from swarm_siege.ecs import World
from swarm_siege.player import create_player
from swarm_siege.simulation import Simulation
from swarm_siege.spawner import SpawnPolicy


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def quiet_config():
    """No ordinary spawns within any test's time range."""
    return GameConfig(enemy_spawn_interval_ms=1e9)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world():
    return World()


@pytest.fixture
def player(world, config):
    return create_player(world, config)


@pytest.fixture
def policy(config, rng):
    return SpawnPolicy(config, rng)


@pytest.fixture
def sim(quiet_config, rng):
    return Simulation(quiet_config, rng=rng, start_time=0.0)
