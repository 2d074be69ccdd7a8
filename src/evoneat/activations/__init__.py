"""
Activations Package

This package provides the closed set of scalar activation functions
that a NEAT node can be tagged with.

Exported:
    activations:      Dictionary mapping activation function names to functions
    activation_codes: Dictionary mapping activation function names to 3-letter codes
    Individual activation functions: step_activation, sigmoid_activation,
                                     tanh_activation, relu_activation,
                                     leaky_relu_activation, prelu_activation,
                                     elu_activation, softmax_activation,
                                     linear_activation, swish_activation
"""

from evoneat.activations.basic_activations import (
    activations,
    activation_codes,
    step_activation,
    sigmoid_activation,
    tanh_activation,
    relu_activation,
    leaky_relu_activation,
    prelu_activation,
    elu_activation,
    softmax_activation,
    linear_activation,
    swish_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'step_activation',
    'sigmoid_activation',
    'tanh_activation',
    'relu_activation',
    'leaky_relu_activation',
    'prelu_activation',
    'elu_activation',
    'softmax_activation',
    'linear_activation',
    'swish_activation'
]
