"""
Unit tests for NodeGene class.
"""

import pytest

from evoneat.errors                   import NumericalError
from evoneat.genotype.connection_gene import ConnectionGene
from evoneat.genotype.node_gene       import NodeGene


# ============================================================================
# Test: Initialization
# ============================================================================

class TestNodeGeneInit:
    """Test NodeGene initialization."""

    def test_basic_initialization(self):
        node = NodeGene(3, 'relu', 1)

        assert node.id == 3
        assert node.layer == 1
        assert node.activation_name == 'relu'
        assert node.input_sum == 0.0
        assert node.output_value == 0.0
        assert node.output_connections == []

    def test_activation_property(self):
        """Test that the activation property resolves the function by name."""
        node = NodeGene(0, 'relu', 1)
        assert node.activation(-1.0) == 0.0
        assert node.activation(2.0) == 2.0


# ============================================================================
# Test: Inference
# ============================================================================

class TestNodeGeneActivate:
    """Test NodeGene.activate()."""

    def test_input_nodes_are_not_activated(self):
        """Test that a node on layer 0 keeps its output as is."""
        node = NodeGene(0, 'sigmoid', 0)
        node.output_value = 0.75
        node.input_sum    = 5.0
        node.activate()
        assert node.output_value == 0.75

    def test_activation_applied_to_input_sum(self):
        node = NodeGene(2, 'sigmoid', 1)
        node.activate()
        assert node.output_value == pytest.approx(0.5)

        node.input_sum = 3.0
        node.activate()
        assert node.output_value == pytest.approx(1.0 / (1.0 + 2.718281828459045 ** -3.0))

    def test_nan_raises_numerical_error(self):
        """Test that a NaN output is reported with the node ID."""
        node = NodeGene(7, 'linear', 1)
        node.input_sum = float('nan')
        with pytest.raises(NumericalError, match="Node 7"):
            node.activate()


class TestNodeGenePropagate:
    """Test NodeGene.propagate() and reset()."""

    def test_propagate_along_enabled_connections(self):
        source = NodeGene(0, 'linear', 0)
        target = NodeGene(1, 'linear', 1)
        source.output_value = 1.5
        source.output_connections = [ConnectionGene(0, 1, 2.0, 1)]

        source.propagate({0: source, 1: target})

        assert target.input_sum == pytest.approx(3.0)

    def test_disabled_connections_are_ignored(self):
        source = NodeGene(0, 'linear', 0)
        target = NodeGene(1, 'linear', 1)
        source.output_value = 1.5
        source.output_connections = [ConnectionGene(0, 1, 2.0, 1, enabled=False)]

        source.propagate({0: source, 1: target})

        assert target.input_sum == 0.0

    def test_inputs_accumulate(self):
        sources = [NodeGene(i, 'linear', 0) for i in range(3)]
        target  = NodeGene(3, 'linear', 1)
        nodes   = {n.id: n for n in sources + [target]}
        for i, source in enumerate(sources):
            source.output_value = 1.0
            source.output_connections = [ConnectionGene(i, 3, 0.5, i + 1)]
            source.propagate(nodes)

        assert target.input_sum == pytest.approx(1.5)

    def test_reset_clears_input_sum_only(self):
        node = NodeGene(1, 'linear', 1)
        node.input_sum    = 4.0
        node.output_value = 2.0
        node.reset()
        assert node.input_sum == 0.0
        assert node.output_value == 2.0


# ============================================================================
# Test: Mutation
# ============================================================================

class TestNodeGeneMutate:
    """Test NodeGene.mutate()."""

    def test_mutation_always_changes_activation(self, config):
        config.activation_mutate_rate = 1.0
        node = NodeGene(1, 'sigmoid', 1)
        for _ in range(20):
            previous = node.activation_name
            node.mutate(config)
            assert node.activation_name != previous

    def test_no_mutation_with_zero_rate(self, config):
        config.activation_mutate_rate = 0.0
        node = NodeGene(1, 'sigmoid', 1)
        for _ in range(20):
            node.mutate(config)
        assert node.activation_name == 'sigmoid'


# ============================================================================
# Test: Copy and comparison
# ============================================================================

class TestNodeGeneCopy:
    """Test clone(), is_equal() and to_dict()."""

    def test_clone_is_equal_but_distinct(self):
        node = NodeGene(4, 'tanh', 2)
        node.output_connections = [ConnectionGene(4, 5, 1.0, 1)]
        clone = node.clone()

        assert clone is not node
        assert clone.is_equal(node)
        assert clone.output_connections == []

    def test_is_equal_detects_differences(self):
        node = NodeGene(4, 'tanh', 2)
        assert not node.is_equal(NodeGene(5, 'tanh', 2))
        assert not node.is_equal(NodeGene(4, 'relu', 2))
        assert not node.is_equal(NodeGene(4, 'tanh', 3))

    def test_to_dict(self):
        assert NodeGene(4, 'tanh', 2).to_dict() == {"id": 4, "layer": 2, "activation": "tanh"}

    def test_str(self):
        assert str(NodeGene(4, 'tanh', 2)) == "[4,L2,TNH]"
