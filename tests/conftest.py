"""Pytest configuration and shared fixtures."""

import pytest

from evoneat            import rng
from evoneat.run.config import Config


@pytest.fixture(autouse=True)
def seed_rng():
    """Seed the engine's random number generator before every test."""
    rng.seed(42)
    yield
    rng.seed(None)


@pytest.fixture
def config():
    """Default config with 2 inputs and 1 output."""
    config = Config()
    config.num_inputs  = 2
    config.num_outputs = 1
    return config


@pytest.fixture
def quiet_config(config):
    """Config where mutation never changes anything (unless forced by an empty genome)."""
    config.activation_mutate_rate = 0.0
    config.conn_add_prob          = 0.0
    config.conn_delete_prob       = 0.0
    config.enabled_mutate_rate    = 0.0
    config.node_add_prob          = 0.0
    config.node_delete_prob       = 0.0
    config.weight_mutate_rate     = 0.0
    config.weight_replace_rate    = 0.0
    return config
