import numpy as np

# Bound on the argument of 'exp', to prevent overflow (exp(100) ≈ 2.7e43)
_EXP_CLIP = 100.0

def step_activation(z):
    return 1.0 if z > 0 else 0.0

def sigmoid_activation(z):
    z = np.clip(z, -_EXP_CLIP, _EXP_CLIP)
    return float(1.0 / (1.0 + np.exp(-z)))

def tanh_activation(z):
    return float(np.tanh(z))

def relu_activation(z):
    return max(0.0, z)

def leaky_relu_activation(z):
    alpha = 0.01
    return z if z > 0 else alpha * z

def prelu_activation(z):
    alpha = 0.1
    return z if z > 0 else alpha * z

def elu_activation(z):
    alpha = 1.0
    if z > 0:
        return z
    return float(alpha * (np.exp(max(z, -_EXP_CLIP)) - 1.0))

def softmax_activation(z):
    # Single-value softmax: exp(z) / (1 + exp(z))
    e = np.exp(np.clip(z, -_EXP_CLIP, _EXP_CLIP))
    return float(e / (1.0 + e))

def linear_activation(z):
    return z

def swish_activation(z):
    beta = 1.0
    return float(z / (1.0 + np.exp(np.clip(-beta * z, -_EXP_CLIP, _EXP_CLIP))))

activations = {
    "step"      : step_activation,
    "sigmoid"   : sigmoid_activation,
    "tanh"      : tanh_activation,
    "relu"      : relu_activation,
    "leaky_relu": leaky_relu_activation,
    "prelu"     : prelu_activation,
    "elu"       : elu_activation,
    "softmax"   : softmax_activation,
    "linear"    : linear_activation,
    "swish"     : swish_activation
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "step"      : "STP",
    "sigmoid"   : "SIG",
    "tanh"      : "TNH",
    "relu"      : "RLU",
    "leaky_relu": "LRL",
    "prelu"     : "PRL",
    "elu"       : "ELU",
    "softmax"   : "SMX",
    "linear"    : "LIN",
    "swish"     : "SWS"
    }
