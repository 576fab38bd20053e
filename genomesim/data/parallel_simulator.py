"""
Parallel Genome Simulator for genomesim

Generates batches of genomes across worker processes. Every genome is
built by a fresh simulator in its worker, seeded from the batch entropy
and the genome index, so no generator is ever shared between processes.
"""

import logging
import multiprocessing as mp
import time
from multiprocessing import Pool
from typing import Any, Callable, Dict, List, Optional

from genomesim.config import GenomeSimConfig
from genomesim.utils.logging_utils import set_package_level
from genomesim.data.simulator import (
    GenomeSimulator,
    SimulatedGenome,
    genome_seed,
)

logger = logging.getLogger(__name__)


def configure_worker_logging():
    """Configure minimal logging for worker processes to prevent console spam."""
    logging.getLogger().setLevel(logging.WARNING)
    set_package_level("WARNING")


class ParallelGenomeSimulator(GenomeSimulator):
    """
    Parallel version of GenomeSimulator with multiprocessing support.

    ``generate_batch`` returns exactly what the sequential simulator returns
    for the same seed, whatever the number of workers.
    """

    def __init__(self, config=None, config_file=None, seed=None, n_workers=None):
        """
        Initialize parallel simulator.

        Args:
            config: GenomeSimConfig or configuration dictionary
            config_file: Path to YAML/JSON configuration file
            seed: Overrides ``simulation.random_seed`` when given
            n_workers: Number of worker processes (None = auto-detect)
        """
        super().__init__(config, config_file, seed)

        if n_workers is None:
            # Use 80% of available CPUs, minimum 1, maximum 32
            n_cpus = mp.cpu_count()
            self.n_workers = min(32, max(1, int(n_cpus * 0.8)))
        else:
            self.n_workers = max(1, n_workers)

        # Plain dicts pickle cleanly into worker processes
        self._serialized_config = self.config._to_dict()
        logger.info(f"Initialized ParallelGenomeSimulator with {self.n_workers} workers")

    def generate_batch(
        self,
        n: int,
        target_length: Optional[int] = None,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> List[SimulatedGenome]:
        """
        Generate ``n`` genomes in parallel.

        Args:
            n: Number of genomes to generate
            target_length: Bases per genome (defaults to the configured length)
            progress_callback: Called with the number of genomes finished so far

        Returns:
            List of SimulatedGenome objects, ordered by genome index
        """
        if self.n_workers == 1 or n <= 1:
            return super().generate_batch(n, target_length, progress_callback)

        start_time = time.time()
        tasks = [
            {
                'index': i,
                'entropy': self.seed_sequence.entropy,
                'config': self._serialized_config,
                'target_length': target_length,
            }
            for i in range(n)
        ]

        logger.info(f"Generating {n} genomes using {self.n_workers} workers")

        genomes: List[SimulatedGenome] = []
        with Pool(processes=self.n_workers, initializer=configure_worker_logging) as pool:
            # imap keeps submission order, so results line up with genome indices
            for genome in pool.imap(_generate_genome_worker, tasks):
                genomes.append(genome)
                if progress_callback:
                    progress_callback(len(genomes))

        elapsed = time.time() - start_time
        logger.info(f"Generated {n} genomes in {elapsed:.2f}s")
        return genomes


def _generate_genome_worker(task: Dict[str, Any]) -> SimulatedGenome:
    """
    Worker function for parallel genome generation.

    Runs in a separate process and builds its own simulator and generators.
    """
    logging.getLogger().setLevel(logging.WARNING)
    simulator = GenomeSimulator(
        config=task['config'],
        seed=genome_seed(task['entropy'], task['index']),
    )
    return simulator.generate(task['target_length'])


def create_parallel_simulator_from_config(
    config_source,
    seed=None,
    n_workers: Optional[int] = None,
) -> ParallelGenomeSimulator:
    """
    Factory for ParallelGenomeSimulator from file, dict, or GenomeSimConfig.
    """
    if isinstance(config_source, (GenomeSimConfig, dict)):
        return ParallelGenomeSimulator(config=config_source, seed=seed, n_workers=n_workers)
    return ParallelGenomeSimulator(config_file=str(config_source), seed=seed, n_workers=n_workers)
