"""
Unit tests for basic activation functions.

Tests all 10 activation functions in src/evoneat/activations/basic_activations.py
"""

import math
import pytest
from evoneat.activations.basic_activations import (
    step_activation,
    sigmoid_activation,
    tanh_activation,
    relu_activation,
    leaky_relu_activation,
    prelu_activation,
    elu_activation,
    softmax_activation,
    linear_activation,
    swish_activation,
    activations,
    activation_codes,
)


class TestActivationsDictionary:
    """Test that all activations are accessible via the activations dictionary."""

    def test_all_ten_functions_in_dictionary(self):
        """Test that all 10 activation functions are in the dictionary."""
        expected_names = [
            'step', 'sigmoid', 'tanh', 'relu', 'leaky_relu',
            'prelu', 'elu', 'softmax', 'linear', 'swish'
        ]
        for name in expected_names:
            assert name in activations, f"{name} not found in activations dictionary"
        assert len(activations) == 10

    def test_every_activation_has_a_code(self):
        """Test that the display codes cover exactly the registered functions."""
        assert set(activation_codes) == set(activations)
        for code in activation_codes.values():
            assert len(code) == 3

    def test_dictionary_functions_callable(self):
        """Test that all functions in dictionary are callable."""
        for name, func in activations.items():
            assert callable(func), f"{name} is not callable"


class TestValuesAtZero:
    """Test the output of each activation for a zero input."""

    @pytest.mark.parametrize("func, expected", [
        (step_activation,       0.0),
        (sigmoid_activation,    0.5),
        (tanh_activation,       0.0),
        (relu_activation,       0.0),
        (leaky_relu_activation, 0.0),
        (prelu_activation,      0.0),
        (elu_activation,        0.0),
        (softmax_activation,    0.5),
        (linear_activation,     0.0),
        (swish_activation,      0.0),
    ])
    def test_value_at_zero(self, func, expected):
        """Test f(0)."""
        assert func(0.0) == pytest.approx(expected)


class TestActivationShapes:
    """Test the defining behavior of each activation."""

    def test_step(self):
        assert step_activation(0.3) == 1.0
        assert step_activation(-0.3) == 0.0

    def test_sigmoid_is_symmetric(self):
        assert sigmoid_activation(2.0) + sigmoid_activation(-2.0) == pytest.approx(1.0)

    def test_tanh(self):
        assert tanh_activation(1.0) == pytest.approx(math.tanh(1.0))

    def test_relu(self):
        assert relu_activation(2.5) == 2.5
        assert relu_activation(-2.5) == 0.0

    def test_leaky_relu_slope(self):
        assert leaky_relu_activation(3.0) == 3.0
        assert leaky_relu_activation(-1.0) == pytest.approx(-0.01)

    def test_prelu_slope(self):
        assert prelu_activation(3.0) == 3.0
        assert prelu_activation(-1.0) == pytest.approx(-0.1)

    def test_elu(self):
        assert elu_activation(2.0) == 2.0
        assert elu_activation(-1.0) == pytest.approx(math.exp(-1.0) - 1.0)

    def test_softmax_matches_sigmoid(self):
        """Single-value softmax exp(x)/(1+exp(x)) is the logistic function."""
        for x in (-3.0, -0.5, 0.7, 4.0):
            assert softmax_activation(x) == pytest.approx(sigmoid_activation(x))

    def test_linear_is_identity(self):
        assert linear_activation(-7.25) == -7.25

    def test_swish(self):
        assert swish_activation(2.0) == pytest.approx(2.0 * sigmoid_activation(2.0))


class TestNumericalStability:
    """Test that large inputs never overflow."""

    @pytest.mark.parametrize("name", sorted(activations))
    @pytest.mark.parametrize("x", [-1e6, -1000.0, 1000.0, 1e6])
    def test_large_inputs_stay_finite(self, name, x):
        """Test that every activation returns a finite number for large inputs."""
        assert math.isfinite(activations[name](x))

    def test_saturation(self):
        assert sigmoid_activation(1e6) == pytest.approx(1.0)
        assert sigmoid_activation(-1e6) == pytest.approx(0.0)
        assert softmax_activation(1e6) == pytest.approx(1.0)
        assert elu_activation(-1e6) == pytest.approx(-1.0)
