"""
evoneat - NEAT (NeuroEvolution of Augmenting Topologies) in Python.

This package evolves layered feed-forward neural networks with the NEAT
algorithm: genomes grow new nodes and connections through mutation, are
grouped into species by genetic distance, and reproduce in proportion to
the shared fitness of their species.

Main components:
- genotype: Genetic encoding (genomes, genes, innovation tracking)
- pool: Population and speciation management
- run: Configuration and trial execution
- activations: Activation functions for neural networks

Example:
    >>> from evoneat import Config, Population
    >>> config = Config("config.txt")
    >>> def evaluate(genome, generation):
    ...     genome.fitness = ...
    >>> population = Population(config)
    >>> best = population.run(evaluate, nb_generations=100)
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evoneat.run.config                  import Config
from evoneat.run.trial                   import Trial
from evoneat.genotype.genome             import Genome
from evoneat.genotype.node_gene          import NodeGene
from evoneat.genotype.connection_gene    import ConnectionGene
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.pool.species                import Species
from evoneat.pool.population             import Population
from evoneat.errors                      import (NeatError, InvalidConfig, ShapeMismatch,
                                                 CorruptSnapshot, EmptyPopulation, NumericalError)

__all__ = [
    "Config",
    "Trial",
    "Genome",
    "NodeGene",
    "ConnectionGene",
    "InnovationTracker",
    "Species",
    "Population",
    "NeatError",
    "InvalidConfig",
    "ShapeMismatch",
    "CorruptSnapshot",
    "EmptyPopulation",
    "NumericalError",
]
