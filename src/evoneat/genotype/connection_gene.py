"""
NEAT Connection Gene Module

This module implements the ConnectionGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    ConnectionGene: Gene encoding a weighted connection between nodes
"""

from typing import TYPE_CHECKING

from evoneat import rng
if TYPE_CHECKING:
    from evoneat.run.config import Config

class ConnectionGene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each connection gene represents a directed edge in the neural network graph,
    connecting a source node to a destination node on a strictly higher layer.
    Connection genes are uniquely identified by their innovation number, which
    serves as a historical marker enabling proper gene alignment during crossover.

    Endpoints are referenced by node ID, never by node object, so that a gene
    can be copied between genomes without rewiring.

    Public Attributes:
        node_in:    ID of the source node
        node_out:   ID of the destination node
        weight:     Weight of the connection
        enabled:    Whether this connection is active in the network
        innovation: Global innovation number uniquely identifying this connection

    Public Methods:
        mutate(config):  Stochastically mutate the weight and the enabled flag
        is_equal(other): Structural and parametric equality
        clone():         Independent copy of this gene
    """

    def __init__(self,
                 node_in   : int,
                 node_out  : int,
                 weight    : float,
                 innovation: int,
                 enabled   : bool = True):
        """
        Initialize a connection gene.

        Parameters:
            node_in:    ID of the source node
            node_out:   ID of the destination node
            weight:     Weight of the connection
            innovation: Number uniquely and globally identifying this connection
            enabled:    Whether this connection is active in the network
        """
        self.node_in   : int   = node_in
        self.node_out  : int   = node_out
        self.weight    : float = weight
        self.innovation: int   = innovation
        self.enabled   : bool  = enabled

    def mutate(self, config: 'Config') -> None:
        """
        Stochastically mutate the (gene describing the) connection.

        The weight is either replaced by a new value drawn uniformly from the
        allowed range, or (when not replaced) perturbed by a small Gaussian
        amount and clipped. Independently, the enabled flag may be toggled.
        """
        if rng.randrange() < config.weight_replace_rate:
            self.weight = rng.uniform(config.weight_min_value, config.weight_max_value)

        elif rng.randrange() < config.weight_mutate_rate:
            chg_weight  = rng.normal(config.weight_init_mean, config.weight_init_stdev) / 50
            new_weight  = self.weight + chg_weight
            self.weight = min(max(new_weight, config.weight_min_value), config.weight_max_value)  # Clip it

        if rng.randrange() < config.enabled_mutate_rate:
            self.enabled = not self.enabled

    def is_equal(self, other: 'ConnectionGene') -> bool:
        return (self.node_in    == other.node_in    and
                self.node_out   == other.node_out   and
                self.weight     == other.weight     and
                self.innovation == other.innovation and
                self.enabled    == other.enabled)

    def clone(self) -> 'ConnectionGene':
        return ConnectionGene(self.node_in, self.node_out, self.weight, self.innovation, self.enabled)

    def to_dict(self) -> dict:
        return {
            "innovation": self.innovation,
            "from"      : self.node_in,
            "to"        : self.node_out,
            "enabled"   : self.enabled,
            "weight"    : self.weight
        }

    def __repr__(self):
        return (f"ConnectionGene(node_in={self.node_in:03d}, node_out={self.node_out:03d},"
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation={self.innovation:03d})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.node_in:02d}=>{self.node_out:02d},{self.weight:+.02f}]"
        return s
