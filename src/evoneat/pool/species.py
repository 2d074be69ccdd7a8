"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Functions:
    compatibility_distance: Genetic distance between two genomes

Classes:
    Species: Represents a single species with members and fitness tracking
"""

import math
from typing import TYPE_CHECKING

from evoneat                 import rng
from evoneat.errors          import CorruptSnapshot
from evoneat.genotype.genome import Genome
from evoneat.run.config      import Config
if TYPE_CHECKING:
    from evoneat.genotype.innovation_tracker import InnovationTracker

def compatibility_distance(genome1: Genome, genome2: Genome, config: Config, species_size: int = 0) -> float:
    """
    Calculate the genetic distance between two genomes.

    The distance combines:
    - the number of excess and disjoint connection genes (present in only one
      of the two genomes), divided by a normalizer based on the species size:
      max(1, species_size - 20)
    - the average absolute weight difference of the matching connection genes
      (0 if either genome has no connections, 100 if they share no gene)

    Parameters:
        genome1:      first genome
        genome2:      second genome
        config:       provides the two weighting coefficients
        species_size: number of members of the species the distance is computed for

    Returns:
        c_disjoint * (E+D) / N + c_weight * W
    """
    conns1 = genome1.connections
    conns2 = genome2.connections

    matching    = 0
    weight_diff = 0.0
    for innovation, conn1 in conns1.items():
        conn2 = conns2.get(innovation)
        if conn2 is not None:
            matching    += 1
            weight_diff += abs(conn1.weight - conn2.weight)

    excess_and_disjoint = len(conns1) + len(conns2) - 2 * matching

    if not conns1 or not conns2:
        avg_weight_diff = 0.0
    elif matching == 0:
        avg_weight_diff = 100.0
    else:
        avg_weight_diff = weight_diff / matching

    normalizer = max(1, species_size - 20)

    return (config.compatibility_disjoint_coefficient * excess_and_disjoint / normalizer +
            config.compatibility_weight_coefficient   * avg_weight_diff)

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for resources within their own species.

    Each species keeps a champion: a copy of the best genome it ever produced.
    The champion is used for distance calculations during speciation: a genome
    joins the first species whose champion is close enough (below the
    compatibility threshold). A species whose best fitness does not improve
    for too long is considered stagnant.

    Public Attributes:
        champion:        Copy of the best genome ever found in this species
        best_fitness:    Best fitness ever achieved by this species
        average_fitness: Average (shared) fitness of the current members
        stagnation:      Number of generations without improvement of 'best_fitness'
        genomes:         The genomes that are currently part of this species

    Public Methods:
        same_species(genome, config): Check whether a genome belongs to this species
        add_to_species(genome):       Add a member
        sort_genomes():               Sort the members, update champion and stagnation
        kill_genomes(config):         Keep only the top members
        fitness_sharing():            Divide member fitness by the species size
        set_average_fitness():        Recompute the average member fitness
        select_genome():              Pick a member by fitness-proportional selection
        give_me_baby(tracker):        Produce one offspring
        clone():                      Deep copy
        is_equal(other):              Same members

    Life Cycle:
    1. Created when a genome doesn't fit into any existing species
    2. Members are cleared and re-assigned at each speciation
    3. Members are sorted, culled and their fitness shared
    4. Produces offspring proportional to its average fitness
    5. Removed if stagnant, weak, or if it has no members after speciation
    """

    def __init__(self, genome: Genome | None = None):
        """
        Initialize a new species.

        Parameters:
            genome: the genome that founds the species; a copy of it becomes
                    the champion. If None, an empty species is created (used
                    when loading from JSON).
        """
        self.champion       : Genome | None = None
        self.best_fitness   : float         = 0.0
        self.average_fitness: float         = 0.0
        self.stagnation     : int           = 0
        self.genomes        : list[Genome]  = []

        if genome is not None:
            self.champion     = genome.clone()
            self.best_fitness = genome.fitness
            self.genomes.append(genome)

    def same_species(self, genome: Genome, config: Config) -> bool:
        if self.champion is None:
            return False
        distance = compatibility_distance(genome, self.champion, config, len(self.genomes))
        return distance < config.compatibility_threshold

    def add_to_species(self, genome: Genome) -> None:
        self.genomes.append(genome)

    def sort_genomes(self) -> None:
        """
        Sort the members by fitness (highest first).

        If the best member beats the best fitness ever achieved by the species,
        it becomes the new champion and the stagnation counter is reset;
        otherwise the species stagnates for one more generation.
        """
        self.genomes.sort(key=lambda g: g.fitness, reverse=True)

        if self.genomes and self.genomes[0].fitness > self.best_fitness:
            self.stagnation   = 0
            self.best_fitness = self.genomes[0].fitness
            self.champion     = self.genomes[0].clone()
        else:
            self.stagnation += 1

    def set_average_fitness(self) -> None:
        if not self.genomes:
            self.average_fitness = 0.0
            return
        self.average_fitness = sum(g.fitness for g in self.genomes) / len(self.genomes)

    def fitness_sharing(self) -> None:
        """
        Explicit fitness sharing: divide the fitness of every member by the
        number of members, so that large species do not take over the population.
        """
        size = len(self.genomes)
        for genome in self.genomes:
            genome.fitness /= size

    def kill_genomes(self, config: Config) -> None:
        """
        Keep only the top 'survival_threshold' fraction of the (sorted) members,
        but never less than 'min_species_size' of them.
        """
        survivors = max(math.floor(len(self.genomes) * config.survival_threshold), config.min_species_size)
        if survivors < len(self.genomes):
            del self.genomes[survivors:]

    def select_genome(self) -> Genome:
        """
        Roulette-wheel selection: pick a member with probability
        proportional to its fitness. If all fitness values are zero, the
        first (best) member is returned.
        """
        fitness_sum = sum(g.fitness for g in self.genomes)

        running_sum = 0.0
        for genome in self.genomes:
            running_sum += genome.fitness
            if running_sum > rng.randrange() * fitness_sum:
                return genome

        return self.genomes[0]

    def give_me_baby(self, tracker: 'InnovationTracker') -> Genome:
        """
        Produce one offspring.

        25% of the time the offspring is a copy of a selected member; otherwise
        it is the result of crossover between two selected members, the fitter
        one acting as the primary parent. The offspring is then mutated.

        Parameters:
            tracker: the innovation ledger, for structural mutations

        Returns:
            The new genome
        """
        if rng.randrange() < 0.25:
            baby = self.select_genome().clone()
        else:
            parent1 = self.select_genome()
            parent2 = self.select_genome()

            # The fitter parent drives the crossover
            if parent1.fitness < parent2.fitness:
                baby = parent2.crossover(parent1)
            else:
                baby = parent1.crossover(parent2)

        baby.mutate(tracker)
        return baby

    def clone(self) -> 'Species':
        clone = Species()
        clone.champion        = self.champion.clone() if self.champion is not None else None
        clone.best_fitness    = self.best_fitness
        clone.average_fitness = self.average_fitness
        clone.stagnation      = self.stagnation
        clone.genomes         = [genome.clone() for genome in self.genomes]
        return clone

    def is_equal(self, other: 'Species') -> bool:
        """
        Whether both species have the same members (in any order).
        """
        if len(self.genomes) != len(other.genomes):
            return False
        return all(any(genome.is_equal(other_genome) for other_genome in other.genomes)
                   for genome in self.genomes)

    def to_dict(self) -> dict:
        return {
            "best_fitness"   : self.best_fitness,
            "average_fitness": self.average_fitness,
            "stagnation"     : self.stagnation,
            "champion"       : self.champion.to_dict() if self.champion is not None else None,
            "genomes"        : [genome.to_dict() for genome in self.genomes]
        }

    @classmethod
    def from_dict(cls, species_dict: dict, config: Config | None = None) -> 'Species':
        """
        Create a Species from its dictionary representation (see 'to_dict()').

        Raises:
            CorruptSnapshot: if a field is missing or a genome is invalid
        """
        species = cls()
        try:
            species.best_fitness    = float(species_dict["best_fitness"])
            species.average_fitness = float(species_dict["average_fitness"])
            species.stagnation      = int(species_dict["stagnation"])
            champion_dict           = species_dict["champion"]
            genome_dicts            = species_dict["genomes"]
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptSnapshot(f"Bad species description: {e!r}") from e

        if champion_dict is not None:
            species.champion = Genome.from_dict(champion_dict, config)
        species.genomes = [Genome.from_dict(genome_dict, config) for genome_dict in genome_dicts]
        return species

    def __str__(self):
        return (f"Species(members={len(self.genomes)}, best_fitness={self.best_fitness:.4f}, "
                f"average_fitness={self.average_fitness:.4f}, stagnation={self.stagnation})")
