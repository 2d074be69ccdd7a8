"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials.

A trial is one complete execution of the NEAT algorithm on a specific
problem: a population is created, evolved until a stopping condition is
met, and the best genome is returned.

Classes:
    Trial: Abstract base class for a single NEAT run
"""

import logging
from abc import ABC, abstractmethod

from evoneat                       import rng
from evoneat.genotype.genome       import Genome
from evoneat.pool.population       import Population
from evoneat.run.config            import Config

logger = logging.getLogger(__name__)

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    Subclasses must implement:
    - _evaluate_fitness(genome, generation): Return the fitness of a genome
    - _report_progress():                    Report on the generation just produced
    - _final_report():                       Report on the whole trial

    Subclasses inherit:
    - run(nb_generations): Execute the trial and return the best genome

    Reports are skipped when 'suppress_output' is set, which is what we
    want when running many trials in a row.

    Public Methods:
        run(nb_generations): Execute a complete NEAT trial
    """

    def __init__(self,
                 config         : Config,
                 suppress_output: bool = False,
                 num_jobs       : int = -1,
                 seed           : int | None = None):
        """
        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
            num_jobs:        Number of threads used for fitness evaluation
                              1 = serial evaluation
                             -1 = use all available CPU cores
                             >1 = use specified number of threads
            seed:            If not None, seed the random number generator
                             at the start of each run
        """
        self._config         : Config = config
        self._suppress_output: bool   = suppress_output
        self._num_jobs       : int    = num_jobs
        self._seed           : int | None = seed

        self._population        : Population | None = None
        self._generation_counter: int               = 0

    def _reset(self):
        """
        Reset trial state before starting a new run.
        """
        if self._seed is not None:
            rng.seed(self._seed)
        self._population         = Population(self._config, num_jobs=self._num_jobs)
        self._generation_counter = 0

    @abstractmethod
    def _evaluate_fitness(self, genome: Genome, generation: int) -> float:
        """
        Evaluate the fitness of a genome.
        May be called from several threads at once: it must only read the genome.

        Parameters:
            genome:     The genome to evaluate
            generation: Index of the current generation

        Returns:
            Fitness score (higher is better)
        """
        pass

    @abstractmethod
    def _report_progress(self):
        """
        Report on the generation that was just produced.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Report on the complete trial.
        """
        pass

    def _set_fitness(self, genome: Genome, generation: int) -> None:
        genome.fitness = self._evaluate_fitness(genome, generation)

    def _on_generation(self, population: Population, generation: int) -> None:
        self._generation_counter = generation + 1
        if not self._suppress_output:
            self._report_progress()

    def run(self, nb_generations: int) -> Genome | None:
        """
        Run the trial.

        Parameters:
            nb_generations: Maximum number of generations

        Returns:
            The best genome found
        """
        self._reset()

        best_genome = self._population.run(self._set_fitness, nb_generations, self._on_generation)
        logger.debug("Trial finished after %d generations, best fitness %s",
                     self._generation_counter, self._population.best_fitness)

        if not self._suppress_output:
            self._final_report()

        return best_genome
