"""
NEAT Node Gene Module.

This module implements the NodeGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeGene: Gene encoding a single network node, which is also the
              compute unit used during feed-forward inference
"""

import math
from typing import Callable, TYPE_CHECKING

from evoneat             import rng
from evoneat.activations import activations, activation_codes
from evoneat.errors      import NumericalError
if TYPE_CHECKING:
    from evoneat.genotype.connection_gene import ConnectionGene
    from evoneat.run.config               import Config

class NodeGene:
    """
    A gene describing a node in a layered feed-forward Neural Network.

    Each node gene sits on a layer: layer 0 holds the input nodes, the last
    layer holds the output nodes, and everything in between is hidden.
    Connections always go from a lower layer to a strictly higher one, which
    is what makes a single pass over the nodes, in layer order, enough to
    evaluate the whole network.

    Besides its genetic information (id, layer, activation), the node carries
    the transient state used during inference: the weighted sum of its inputs
    and its last output. The genome owns the nodes; the node only keeps the
    list of connection genes that leave it.

    Public Attributes:
        id:                 Unique identifier for this node (within its genome)
        layer:              Index of the layer the node belongs to
        activation_name:    Name of the activation function (e.g., 'sigmoid')
        input_sum:          Accumulated weighted input for the current pass
        output_value:       Output computed during the last pass
        output_connections: Connection genes starting at this node

    Public Properties:
        activation: The activation function itself (callable)

    Public Methods:
        activate():        Compute the output from the accumulated input
        propagate(nodes):  Push the output along all enabled outgoing connections
        reset():           Zero the accumulated input
        mutate(config):    Stochastically change the activation function
        is_equal(other):   Structural and parametric equality
        clone():           Copy of the genetic information (no connections)
    """

    def __init__(self, node_id: int, activation_name: str, layer: int):
        """
        Parameters:
            node_id:         Unique identifier for this node
            activation_name: Name of the activation function
            layer:           Index of the layer the node belongs to
        """
        self.id             : int   = node_id
        self.layer          : int   = layer
        self.activation_name: str   = activation_name
        self.input_sum      : float = 0.0
        self.output_value   : float = 0.0

        self.output_connections: list['ConnectionGene'] = []

    @property
    def activation(self) -> Callable[[float], float]:
        return activations[self.activation_name]

    def activate(self) -> None:
        """
        Set the output of the node to: activation(input_sum).
        Input nodes (layer 0) are skipped, their output is the network input.

        Raises:
            NumericalError: if the activation produces NaN
        """
        if self.layer == 0:
            return

        self.output_value = self.activation(self.input_sum)
        if math.isnan(self.output_value):
            raise NumericalError(f"Node {self.id} ({self.activation_name}) produced NaN "
                                 f"from input {self.input_sum}")

    def propagate(self, nodes: dict[int, 'NodeGene']) -> None:
        """
        Add the weighted output of this node to the input of every node
        it feeds through an enabled connection.

        Parameters:
            nodes: the genome's nodes, by ID
        """
        for conn in self.output_connections:
            if conn.enabled:
                nodes[conn.node_out].input_sum += conn.weight * self.output_value

    def reset(self) -> None:
        # 'output_value' is kept: for input nodes it is the last network input
        self.input_sum = 0.0

    def mutate(self, config: 'Config') -> None:
        """
        With probability 'activation_mutate_rate', switch the
        node to a different, randomly chosen, activation function.
        """
        if rng.randrange() < config.activation_mutate_rate:
            available_activations = [name for name in activations if name != self.activation_name]
            self.activation_name  = rng.choice(available_activations)

    def is_equal(self, other: 'NodeGene') -> bool:
        return (self.id              == other.id    and
                self.layer           == other.layer and
                self.activation_name == other.activation_name)

    def clone(self) -> 'NodeGene':
        return NodeGene(self.id, self.activation_name, self.layer)

    def to_dict(self) -> dict:
        return {"id": self.id, "layer": self.layer, "activation": self.activation_name}

    def __repr__(self):
        return (f"NodeGene(node_id={self.id:03d}, activation_name='{self.activation_name}', "
                f"layer={self.layer})")

    def __str__(self):
        act_code = activation_codes.get(self.activation_name, "???")
        return f"[{self.id},L{self.layer},{act_code}]"
