"""
NEAT Population Module

This module implements the Population class, the top-level orchestrator for the NEAT
evolutionary algorithm. The population manages the complete lifecycle of evolution,
from initialization through convergence.

Classes:
    Population: Top-level evolutionary coordinator managing genomes, species and generations
"""

import json
import logging
import math
from joblib  import Parallel, delayed
from pathlib import Path
from typing  import Callable

from evoneat.errors                      import CorruptSnapshot, EmptyPopulation, ShapeMismatch
from evoneat.genotype.genome             import Genome
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.pool.species                import Species
from evoneat.run.config                  import Config

logger = logging.getLogger(__name__)

Evaluator = Callable[[Genome, int], None]
Callback  = Callable[['Population', int], bool | None]

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    The Population class represents the top-level container for the evolutionary
    process, managing a collection of genomes and coordinating their evolution
    through generations. It handles initialization, fitness evaluation, speciation,
    reproduction, and keeps track of the best genome found so far.

    Each generation goes through the following phases:
        1. evaluate:              fitness of every genome (in parallel)
        2. speciate:              assign each genome to a species
        3. sort_species:          sort members, update champions and stagnation
        4. update_species:        cull, share fitness, recompute species averages
        5. set_best_genome:       keep a copy of the best champion
        6. set_average_fitness:   mean of the species averages
        7. kill_stagnant_species: remove species that stopped improving
        8. kill_bad_species:      remove species far below average
        9. reproduce_species:     produce the next generation
       10. reset_on_extinction:   start over if every species died

    Public Attributes:
        genomes:         List of all genomes in the current generation
        species:         List of species, best first after sorting
        tracker:         Innovation ledger shared by all genomes of the population
        best_genome:     Copy of the best genome found so far (None before the first generation)
        best_fitness:    Fitness of 'best_genome'
        average_fitness: Mean of the species average fitness
        generation:      Number of generations produced so far

    Public Methods:
        run(evaluate, nb_generations, callback): Run the evolution loop
        clone():                                 Deep copy
        to_dict() / to_json() / save(path):      Serialize
    """

    def __init__(self,
                 config      : Config,
                 tracker     : InnovationTracker | None = None,
                 num_jobs    : int = -1,
                 init_genomes: bool = True):
        """
        Initialize the population with 'population_size' genomes.

        Every genome starts minimal, gets one round of mutation and, if
        'initial_connections' is 'full', is fully connected.

        Parameters:
            config:       Stores configuration parameters
            tracker:      Innovation ledger to use; a new one if None
            num_jobs:     Number of threads used for fitness evaluation
                           1 = serial evaluation
                          -1 = use all available CPU cores
                          >1 = use specified number of threads
            init_genomes: If False, start with no genomes (used when loading from JSON)

        Raises:
            InvalidConfig: if the configuration values are inconsistent
        """
        config.validate()

        self._config  : Config = config
        self._num_jobs: int    = num_jobs

        self.tracker        : InnovationTracker = tracker if tracker is not None else InnovationTracker()
        self.genomes        : list[Genome]      = []
        self.species        : list[Species]     = []
        self.best_genome    : Genome | None     = None
        self.best_fitness   : float             = -math.inf
        self.average_fitness: float             = 0.0
        self.generation     : int               = 0

        if init_genomes:
            self.genomes = [self._new_genome() for _ in range(config.population_size)]

    def _new_genome(self) -> Genome:
        genome = Genome(self._config)
        genome.mutate(self.tracker)
        if self._config.initial_connections == "full":
            genome.fully_connect(self.tracker)
        return genome

    def run(self, evaluate: Evaluator, nb_generations: int, callback: Callback | None = None) -> Genome | None:
        """
        Run the evolution loop.

        The loop stops when the generation budget is exhausted, when the best
        fitness reaches 'fitness_threshold' (unless 'no_fitness_termination'),
        when the best fitness is +inf, or when the callback returns True.

        Parameters:
            evaluate:       Function called as 'evaluate(genome, generation)' once per
                            genome and generation; it must set 'genome.fitness'
            nb_generations: Maximum number of generations
            callback:       Optional function called as 'callback(population, generation)'
                            after each generation

        Returns:
            The best genome found
        """
        for i in range(nb_generations):
            self.evaluate(evaluate, i)
            self.speciate()
            self.sort_species()
            self.update_species()
            self.set_best_genome()
            self.set_average_fitness()
            self.kill_stagnant_species()
            self.kill_bad_species()
            self.reproduce_species()
            self.reset_on_extinction()

            logger.debug("Generation %d: %d species, %d genomes, best fitness %s",
                         i, len(self.species), len(self.genomes), self.best_fitness)

            if callback is not None and callback(self, i):
                logger.debug("Evolution stopped by callback after generation %d", i)
                break

            if not self._config.no_fitness_termination and self.best_fitness >= self._config.fitness_threshold:
                logger.debug("Fitness threshold reached after generation %d", i)
                break

            if self.best_fitness == math.inf:
                break

        return self.best_genome

    def evaluate(self, evaluate: Evaluator, generation: int) -> None:
        """
        Evaluate the fitness of every genome.

        Evaluations run on threads (joblib 'threading' backend): each one only
        writes the fitness of its own genome. An evaluation failing with
        ShapeMismatch is logged and the genome keeps its previous fitness.
        """
        def evaluate_one(genome: Genome) -> None:
            try:
                evaluate(genome, generation)
            except ShapeMismatch as e:
                logger.error("Evaluation of genome %s failed: %s", genome.id, e)

        if self._num_jobs == 1:
            for genome in self.genomes:
                evaluate_one(genome)
        else:
            Parallel(n_jobs=self._num_jobs, backend="threading")(delayed(evaluate_one)(g) for g in self.genomes)

    def speciate(self) -> None:
        """
        Split the population into species.

        Members of existing species are cleared; each genome then joins the first
        species whose champion is close enough, or founds a new species.
        Species left without members are removed.
        """
        for species in self.species:
            species.genomes = []

        for genome in self.genomes:
            for species in self.species:
                if species.same_species(genome, self._config):
                    species.add_to_species(genome)
                    break
            else:
                self.species.append(Species(genome))

        self.species = [species for species in self.species if species.genomes]

    def sort_species(self) -> None:
        for species in self.species:
            species.sort_genomes()
        self.species.sort(key=lambda s: s.best_fitness, reverse=True)

    def update_species(self) -> None:
        for species in self.species:
            species.kill_genomes(self._config)
            species.fitness_sharing()
            species.set_average_fitness()

    def set_best_genome(self) -> None:
        """
        Keep a copy of the best species champion, if it is at least as good
        as the best genome found so far.
        """
        for species in self.species:
            champion = species.champion
            if champion is not None and champion.fitness >= self.best_fitness:
                self.best_genome  = champion.clone()
                self.best_fitness = champion.fitness

    def get_average_fitness_sum(self) -> float:
        return sum(species.average_fitness for species in self.species)

    def set_average_fitness(self) -> None:
        if not self.species:
            self.average_fitness = 0.0
            return
        self.average_fitness = self.get_average_fitness_sum() / len(self.species)

    def _remove_species(self, removed: list[Species]) -> None:
        removed_genomes = {id(genome) for species in removed for genome in species.genomes}
        self.genomes = [genome for genome in self.genomes if id(genome) not in removed_genomes]
        self.species = [species for species in self.species if all(species is not r for r in removed)]

    def kill_stagnant_species(self) -> None:
        """
        Remove the species that did not improve for 'max_stagnation' generations,
        along with their genomes. The top 'species_elitism' species are protected.
        """
        elitism  = min(self._config.species_elitism, len(self.species))
        stagnant = [species for species in self.species[elitism:]
                    if species.stagnation >= self._config.max_stagnation]
        if stagnant:
            logger.debug("Removing %d stagnant species", len(stagnant))
            self._remove_species(stagnant)

    def kill_bad_species(self) -> None:
        """
        Remove the species whose average fitness is below 'bad_species_threshold'
        times the mean of all species averages, along with their genomes.
        The best species is never removed.
        """
        if not self.species:
            return

        limit = self._config.bad_species_threshold * self.get_average_fitness_sum() / len(self.species)
        bad   = [species for species in self.species[1:] if species.average_fitness < limit]
        if bad:
            logger.debug("Removing %d bad species", len(bad))
            self._remove_species(bad)

    def reproduce_species(self) -> None:
        """
        Produce the next generation.

        Each species contributes a copy of its champion plus a number of
        offspring proportional to its share of the total average fitness.
        Any remaining room is filled with a copy of the best genome found so far,
        then with offspring of the best species.

        Raises:
            EmptyPopulation: if there is no species left and 'reset_on_extinction' is off
        """
        if not self.species:
            if not self._config.reset_on_extinction:
                raise EmptyPopulation(f"All species went extinct in generation {self.generation}")
            self.generation += 1
            return

        average_fitness_sum = self.get_average_fitness_sum()
        population_size     = self._config.population_size

        children = []
        for species in self.species:
            children.append(species.champion.clone())

            if average_fitness_sum == 0 or not math.isfinite(average_fitness_sum):
                nb_children = 0
            else:
                nb_children = math.floor(species.average_fitness / average_fitness_sum * population_size) - 1

            for _ in range(nb_children):
                children.append(species.give_me_baby(self.tracker))

        if len(children) < population_size and self.best_genome is not None:
            children.append(self.best_genome.clone())

        while len(children) < population_size:
            children.append(self.species[0].give_me_baby(self.tracker))

        self.genomes     = children
        self.generation += 1

    def reset_on_extinction(self) -> None:
        if not self.species and self._config.reset_on_extinction:
            logger.debug("All species extinct, resetting the population")
            self.genomes = [self._new_genome() for _ in range(self._config.population_size)]

    def clone(self) -> 'Population':
        clone = Population(self._config, InnovationTracker.from_dict(self.tracker.to_dict()),
                           self._num_jobs, init_genomes=False)
        clone.genomes         = [genome.clone() for genome in self.genomes]
        clone.species         = [species.clone() for species in self.species]
        clone.best_genome     = self.best_genome.clone() if self.best_genome is not None else None
        clone.best_fitness    = self.best_fitness
        clone.average_fitness = self.average_fitness
        clone.generation      = self.generation
        return clone

    def to_dict(self) -> dict:
        return {
            "generation"     : self.generation,
            "average_fitness": self.average_fitness,
            "best_fitness"   : self.best_fitness,
            "best_genome"    : self.best_genome.to_dict() if self.best_genome is not None else None,
            "species"        : [species.to_dict() for species in self.species],
            "genomes"        : [genome.to_dict() for genome in self.genomes],
            "innovations"    : self.tracker.to_dict()
        }

    @classmethod
    def from_dict(cls, population_dict: dict, config: Config | None = None, num_jobs: int = -1) -> 'Population':
        """
        Create a Population from its dictionary representation (see 'to_dict()').

        Raises:
            CorruptSnapshot: if a field is missing or a genome/species is invalid
        """
        if config is None:
            config = Config()

        try:
            tracker    = InnovationTracker.from_dict(population_dict.get("innovations", []))
            population = cls(config, tracker, num_jobs, init_genomes=False)
            population.generation      = int(population_dict["generation"])
            population.average_fitness = float(population_dict["average_fitness"])
            population.best_fitness    = float(population_dict["best_fitness"])
            best_genome_dict           = population_dict.get("best_genome")
            species_dicts              = population_dict["species"]
            genome_dicts               = population_dict["genomes"]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CorruptSnapshot(f"Bad population description: {e!r}") from e

        if best_genome_dict is not None:
            population.best_genome = Genome.from_dict(best_genome_dict, config)
        population.species = [Species.from_dict(species_dict, config) for species_dict in species_dicts]
        population.genomes = [Genome.from_dict(genome_dict, config) for genome_dict in genome_dicts]
        return population

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str, config: Config | None = None, num_jobs: int = -1) -> 'Population':
        try:
            population_dict = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSnapshot(f"Invalid JSON: {e}") from e
        return cls.from_dict(population_dict, config, num_jobs)

    def save(self, file_path: str | Path) -> Path:
        """
        Save the population to a JSON file.
        Missing directories are created; '.json' is appended if the path has no extension.
        """
        path = Path(file_path)
        if not path.suffix:
            path = path.with_suffix(".json")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(indent=4), encoding="utf-8")
        return path

    @classmethod
    def load(cls, file_path: str | Path, config: Config | None = None, num_jobs: int = -1) -> 'Population':
        return cls.from_json(Path(file_path).read_text(encoding="utf-8"), config, num_jobs)

    def __str__(self):
        s  = f"Population (generation {self.generation}, {len(self.genomes)} genomes, "
        s += f"{len(self.species)} species, best fitness {self.best_fitness})\n"
        s += '\n'.join(str(species) for species in self.species)
        return s
