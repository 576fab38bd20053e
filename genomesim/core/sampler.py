"""
Composition-aware base sampling.

The SequenceSampler asks the RegionPlanner for one region at a time and
fills it base by base. With the ``dynamic`` policy the G/C probability is
nudged towards the region target whenever the realised composition drifts,
so long regions converge on their target.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

import numpy as np

from genomesim.config import PlannerConfig, SamplerConfig
from genomesim.core.regions import Region, RegionPlanner, SeedLike, as_generator

logger = logging.getLogger(__name__)

# Draw order doubles as the tie-break order at interval boundaries
BASES = ('A', 'T', 'G', 'C')
UNKNOWN_BASE = 'N'
_COMPLEMENT = {'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G'}


@dataclass(frozen=True)
class AnnotatedBase:
    """One emitted nucleotide plus metadata reserved for mutation modelling."""
    base: str
    coding_region: bool = False
    repair_efficiency: float = 1.0
    methylation: float = 0.0
    chromatin_access: float = 0.0


def base_probabilities(
    region: Region,
    policy: str = 'dynamic',
    correction_strength: float = 1.0,
) -> np.ndarray:
    """
    Probabilities for A, T, G, C given the region's target and progress.

    Args:
        region: Region being filled
        policy: 'static' holds P(G or C) at the target, 'dynamic' corrects it
            by ``correction_strength`` times the current shortfall
        correction_strength: Gain applied to the GC deficit

    Returns:
        Array of four probabilities in (A, T, G, C) order
    """
    p_gc = region.target_gc
    if policy == 'dynamic' and region.emitted > 0:
        deficit = region.target_gc - region.current_gc
        p_gc = min(1.0, max(0.0, region.target_gc + correction_strength * deficit))

    p_at = 1.0 - p_gc
    return np.array([p_at / 2, p_at / 2, p_gc / 2, p_gc / 2])


def weighted_draw(probabilities: Sequence[float], u: float) -> str:
    """Pick the base whose cumulative interval contains ``u`` in [0, 1)."""
    cumulative = 0.0
    for base, p in zip(BASES, probabilities):
        cumulative += p
        if u < cumulative:
            return base
    # Rounding can leave the last interval a hair short of 1.0
    return BASES[-1]


class SequenceSampler:
    """
    Builds annotated sequences region by region.

    The planner and the sampler draw from independent generators spawned
    from a single seed, so one seed pins the whole run.
    """

    def __init__(
        self,
        planner: Optional[RegionPlanner] = None,
        config: Optional[SamplerConfig] = None,
        planner_config: Optional[PlannerConfig] = None,
        seed: SeedLike = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or SamplerConfig()
        self.config.validate()

        if planner is None or rng is None:
            seed_seq = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
            planner_seq, sampler_seq = seed_seq.spawn(2)
            if planner is None:
                planner = RegionPlanner(planner_config, seed=planner_seq)
            rng = as_generator(sampler_seq, rng)

        self.planner = planner
        self.rng = rng

    def generate(
        self,
        target_length: int,
        region_callback: Optional[Callable[[Region], None]] = None,
    ) -> List[AnnotatedBase]:
        """
        Generate exactly ``target_length`` annotated bases.

        Args:
            target_length: Number of bases to emit
            region_callback: Called with each region once it has been filled

        Returns:
            List of AnnotatedBase in 5' to 3' order

        Raises:
            ConfigurationError: If ``target_length`` is below the planner minimum
        """
        self.planner.check_target(target_length)

        sequence: List[AnnotatedBase] = []
        while len(sequence) < target_length:
            region = self.planner.next_region(len(sequence), target_length)
            self._fill_region(region, sequence, target_length)
            if region_callback is not None:
                region_callback(region)

        logger.debug(f"Generated {len(sequence)} bases")
        return sequence

    def _fill_region(self, region: Region, sequence: List[AnnotatedBase], target_length: int) -> None:
        coding = region.kind.is_coding
        if logger.isEnabledFor(logging.DEBUG):
            a, t, g, c = base_probabilities(region, self.config.gc_policy, self.config.correction_strength)
            logger.debug(f"Base probabilities: A={a:.3f} T={t:.3f} G={g:.3f} C={c:.3f}")
        draws = self.rng.random(region.length)
        for u in draws:
            if len(sequence) >= target_length:
                break
            probs = base_probabilities(region, self.config.gc_policy, self.config.correction_strength)
            base = weighted_draw(probs, float(u))
            region.record(base)
            sequence.append(AnnotatedBase(base=base, coding_region=coding))

        logger.debug(
            f"Filled {region.kind.value} region at {region.start}: "
            f"target GC {region.target_gc:.3f}, realised {region.current_gc:.3f}"
        )


def complement(sequence: Sequence[AnnotatedBase]) -> List[AnnotatedBase]:
    """
    Complementary strand under A<->T, G<->C.

    Symbols outside the four canonical bases become 'N'. Metadata is copied
    unchanged and the input is left untouched.
    """
    return [replace(b, base=_COMPLEMENT.get(b.base, UNKNOWN_BASE)) for b in sequence]


def sequence_to_string(sequence: Sequence[AnnotatedBase]) -> str:
    """Concatenate the base symbols of a sequence."""
    return ''.join(b.base for b in sequence)


def gc_content(sequence: Sequence[AnnotatedBase]) -> float:
    """Fraction of G/C bases; 0.0 for an empty sequence."""
    if not sequence:
        return 0.0
    return sum(1 for b in sequence if b.base in ('G', 'C')) / len(sequence)
