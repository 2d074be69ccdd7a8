"""
Unit tests for ConnectionGene class.
"""

import pytest

from evoneat.genotype.connection_gene import ConnectionGene


@pytest.fixture
def mutation_config(quiet_config):
    """Config with weights bounded to [-1, 1] and no mutation enabled."""
    quiet_config.weight_min_value = -1.0
    quiet_config.weight_max_value = 1.0
    return quiet_config


class TestConnectionGeneInit:
    """Test ConnectionGene initialization."""

    def test_basic_initialization(self):
        conn = ConnectionGene(1, 4, 0.25, 9)

        assert conn.node_in == 1
        assert conn.node_out == 4
        assert conn.weight == 0.25
        assert conn.innovation == 9
        assert conn.enabled is True

    def test_disabled_initialization(self):
        assert ConnectionGene(1, 4, 0.25, 9, enabled=False).enabled is False


class TestConnectionGeneMutate:
    """Test ConnectionGene.mutate()."""

    def test_no_mutation(self, mutation_config):
        conn = ConnectionGene(0, 1, 0.3, 1)
        for _ in range(20):
            conn.mutate(mutation_config)
        assert conn.weight == 0.3
        assert conn.enabled is True

    def test_replace_stays_in_range(self, mutation_config):
        mutation_config.weight_replace_rate = 1.0
        conn = ConnectionGene(0, 1, 0.3, 1)
        for _ in range(50):
            conn.mutate(mutation_config)
            assert -1.0 <= conn.weight <= 1.0

    def test_perturbation_is_small(self, mutation_config):
        """Test that a perturbation moves the weight by normal(mean, stdev) / 50."""
        mutation_config.weight_mutate_rate = 1.0
        conn = ConnectionGene(0, 1, 0.0, 1)
        conn.mutate(mutation_config)

        assert conn.weight != 0.0
        assert abs(conn.weight) < 0.2

    def test_perturbation_is_clipped(self, mutation_config):
        mutation_config.weight_mutate_rate = 1.0
        mutation_config.weight_init_mean   = 100.0
        conn = ConnectionGene(0, 1, 0.5, 1)
        conn.mutate(mutation_config)

        assert conn.weight == 1.0

    def test_enabled_flag_toggles(self, mutation_config):
        mutation_config.enabled_mutate_rate = 1.0
        conn = ConnectionGene(0, 1, 0.5, 1)

        conn.mutate(mutation_config)
        assert conn.enabled is False
        conn.mutate(mutation_config)
        assert conn.enabled is True


class TestConnectionGeneCopy:
    """Test clone(), is_equal() and to_dict()."""

    def test_clone(self):
        conn  = ConnectionGene(2, 5, -0.75, 3, enabled=False)
        clone = conn.clone()

        assert clone is not conn
        assert clone.is_equal(conn)

    def test_is_equal_detects_differences(self):
        conn = ConnectionGene(2, 5, -0.75, 3)
        assert not conn.is_equal(ConnectionGene(2, 5, -0.70, 3))
        assert not conn.is_equal(ConnectionGene(2, 5, -0.75, 4))
        assert not conn.is_equal(ConnectionGene(2, 6, -0.75, 3))
        assert not conn.is_equal(ConnectionGene(2, 5, -0.75, 3, enabled=False))

    def test_to_dict(self):
        assert ConnectionGene(2, 5, -0.75, 3).to_dict() == {
            "innovation": 3, "from": 2, "to": 5, "enabled": True, "weight": -0.75
        }
