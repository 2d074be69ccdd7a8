"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. The XOR problem is a fundamental test case in neural
network research, demonstrating the necessity of hidden layers for solving
non-linearly separable problems.

The XOR Problem:
    XOR is a two-input, one-output boolean function where the output is True
    only when the inputs differ:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

    Nodes have no bias, so a third input, always 1, is fed to the network.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.
    The trial stops when fitness reaches 'fitness_threshold' (3.9 in config_xor.txt).

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    python trial_XOR.py
"""

import logging
from pathlib import Path

from evoneat             import Genome
from evoneat.run.config  import Config
from evoneat.run.trial   import Trial

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Problem Definition:
        Inputs: 2 binary values (0 or 1), plus a constant bias input
        Output: 1 value, close to the XOR of the inputs

    Implemented Methods:
        _evaluate_fitness(genome, generation): Test network on all 4 XOR cases
        _report_progress(): Display generation statistics and XOR truth table
        _final_report():    Save the best genome to JSON
    """

    xor_inputs  = [[0.0, 0.0, 1.0], [0.0, 1.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 1.0]]
    xor_outputs = [0.0, 1.0, 1.0, 0.0]

    def _evaluate_fitness(self, genome: Genome, generation: int) -> float:
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = genome.feed_forward(inputs)    # forward pass through network
            error    = output[0] - expected_output    # calculate error
            fitness -= error ** 2                     # errors cause the fitness to decrease
        return fitness

    def _report_progress(self):
        """
        Print a report describing the current generation.
        """
        population = self._population
        best       = population.best_genome

        s  = f"===============\n"
        s += f"GENERATION {self._generation_counter:04d}\n"
        s += f"population size = {len(population.genomes)}\n"
        s += f"number species  = {len(population.species)}\n"
        s += f"maximum fitness = {population.best_fitness:.4f}\n"
        s += '\n'
        s += str(best)
        s += '\n\n'

        s += "input         output   target  error\n"
        s += "------------------------------------\n"
        for inputs, target in zip(self.xor_inputs, self.xor_outputs):
            output = best.feed_forward(inputs)[0]
            s += f"{inputs[:2]} -> {output:.4f}    {target}   {abs(output - target):.4f}\n"

        print(s)

    def _final_report(self):
        path = self._population.best_genome.save(Path(__file__).parent / "results" / "xor_best")
        print(f"Best genome saved as '{path}'")

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)

    config = Config(str(Path(__file__).parent / "config_xor.txt"))
    trial  = Trial_XOR(config, seed=1)
    trial.run(nb_generations=300)
