"""
genomesim: Region-aware synthetic genome generation

Generates random DNA sequences laid out as coding and non-coding regions,
each with its own GC target, together with the complementary strand and
colour-coded exports.
"""

__version__ = "0.1.0"
__author__ = "Ben Johnson"
__email__ = "ben.johnson@vai.org"

from . import core
from . import utils
from . import data
from . import visualization

# Core generation
from .core import (
    RegionKind,
    Region,
    RegionPlanner,
    AnnotatedBase,
    SequenceSampler,
    complement,
)

from .config import GenomeSimConfig, ConfigurationError, load_config
from .data import GenomeSimulator, SimulatedGenome, create_simulator_from_config

__all__ = [
    'core',
    'data',
    'visualization',
    'utils',
    'RegionKind',
    'Region',
    'RegionPlanner',
    'AnnotatedBase',
    'SequenceSampler',
    'complement',
    'GenomeSimConfig',
    'ConfigurationError',
    'load_config',
    'GenomeSimulator',
    'SimulatedGenome',
    'create_simulator_from_config'
]
