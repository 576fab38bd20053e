"""
Data module for genomesim.

Contains genome simulation and batch generation.
"""

from .simulator import (
    SimulatedGenome,
    GenomeSimulator,
    create_simulator_from_config,
    region_summary,
    genome_seed,
    )

from .parallel_simulator import (
    ParallelGenomeSimulator,
    create_parallel_simulator_from_config,
    configure_worker_logging
    )

__all__ = [
    'SimulatedGenome',
    'GenomeSimulator',
    'create_simulator_from_config',
    'region_summary',
    'genome_seed',
    'ParallelGenomeSimulator',
    'create_parallel_simulator_from_config',
    'configure_worker_logging'
]
