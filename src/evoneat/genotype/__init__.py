"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm. A genome is directly executable: its node genes
double as the compute units of the layered feed-forward network it encodes.

The NEAT genotype consists of two types of genes:
- Node genes:       Encode individual neurons with their layer and activation function
- Connection genes: Encode weighted connections between neurons with innovation numbers

Modules:
    node_gene:          NodeGene class
    connection_gene:    ConnectionGene class
    genome:             Genome class
    innovation_tracker: InnovationTracker class

Exported Classes:
    NodeGene:          Gene encoding a single network node
    ConnectionGene:    Gene encoding a weighted connection between nodes
    Genome:            Complete genome representing a neural network
    InnovationTracker: Ledger of innovation numbers
"""

from evoneat.genotype.connection_gene    import ConnectionGene
from evoneat.genotype.genome             import Genome
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.node_gene          import NodeGene

__all__ = ['ConnectionGene',
           'Genome',
           'InnovationTracker',
           'NodeGene']
