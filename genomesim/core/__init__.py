"""
Core generation module for genomesim.

Contains region planning and composition-aware base sampling.
"""

from .regions import (
    RegionKind,
    Region,
    RegionPlanner,
    as_generator,
)

from .sampler import (
    BASES,
    UNKNOWN_BASE,
    AnnotatedBase,
    SequenceSampler,
    base_probabilities,
    weighted_draw,
    complement,
    sequence_to_string,
    gc_content,
)

__all__ = [
    'RegionKind',
    'Region',
    'RegionPlanner',
    'as_generator',
    'BASES',
    'UNKNOWN_BASE',
    'AnnotatedBase',
    'SequenceSampler',
    'base_probabilities',
    'weighted_draw',
    'complement',
    'sequence_to_string',
    'gc_content',
]
