"""
Region planning for synthetic genomes.

A genome is laid out as a run of contiguous regions. Each region carries a
kind and a target GC fraction drawn from a kind-specific range; bases are
sampled against that target by the SequenceSampler.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np
from scipy.stats import truncnorm

from genomesim.config import ConfigurationError, PlannerConfig

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.SeedSequence]


def as_generator(seed: SeedLike = None, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` if given, else a fresh Generator built from ``seed``."""
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


class RegionKind(str, Enum):
    """Kinds of genomic region the planner can lay out."""
    CODING = 'coding'
    NON_CODING = 'non_coding'
    REGULATORY = 'regulatory'
    REPEAT = 'repeat'

    @property
    def is_coding(self) -> bool:
        return self is RegionKind.CODING


@dataclass
class Region:
    """
    A contiguous span of the genome being generated.

    ``gc_count`` and ``emitted`` track what the sampler has produced so far;
    once ``emitted`` reaches ``length`` the region is closed.
    """
    start: int
    length: int
    kind: RegionKind
    target_gc: float
    gc_count: int = 0
    emitted: int = 0

    def __post_init__(self):
        if self.length <= 0:
            raise ValueError(f"Region length must be positive, got {self.length}")
        if not 0.0 <= self.target_gc <= 1.0:
            raise ValueError(f"target_gc must lie in [0, 1], got {self.target_gc}")

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.start + self.length

    @property
    def remaining(self) -> int:
        return self.length - self.emitted

    @property
    def closed(self) -> bool:
        return self.emitted >= self.length

    @property
    def current_gc(self) -> float:
        """Realised GC fraction over the bases emitted so far."""
        if self.emitted == 0:
            return 0.0
        return self.gc_count / self.emitted

    def record(self, base: str) -> None:
        """Account for one emitted base."""
        if self.closed:
            raise ValueError(f"Region starting at {self.start} is closed")
        if base in ('G', 'C'):
            self.gc_count += 1
        self.emitted += 1


class RegionPlanner:
    """
    Decides the kind, length and GC target of the next region.

    The planner owns its random generator; pass ``seed`` for a reproducible
    stream or ``rng`` to inject a generator directly.
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        seed: SeedLike = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or PlannerConfig()
        self.config.validate()
        self.rng = as_generator(seed, rng)

        # Enum order keeps draws independent of dict ordering in the config
        self._kinds = [k for k in RegionKind if self.config.kind_weights.get(k.value, 0.0) > 0]
        weights = np.array([self.config.kind_weights[k.value] for k in self._kinds], dtype=float)
        self._kind_probs = weights / weights.sum()

    def check_target(self, target_total: int) -> None:
        """Raise ConfigurationError if ``target_total`` is below the viable minimum."""
        if target_total < self.config.min_genome_length:
            raise ConfigurationError(
                f"Genome length {target_total} is below the minimum of "
                f"{self.config.min_genome_length} bases"
            )

    def next_region(self, total_generated: int, target_total: int) -> Region:
        """
        Plan the region that starts at ``total_generated``.

        Args:
            total_generated: Number of bases already emitted
            target_total: Requested genome length

        Returns:
            A fresh Region whose end never passes ``target_total``
        """
        self.check_target(target_total)
        if total_generated < 0 or total_generated >= target_total:
            raise ValueError(
                f"total_generated must lie in [0, {target_total}), got {total_generated}"
            )

        kind = self._draw_kind()
        length = min(self._draw_length(), target_total - total_generated)
        low, high = self.config.gc_ranges[kind.value]
        target_gc = float(self.rng.uniform(low, high)) if high > low else float(low)

        region = Region(start=total_generated, length=length, kind=kind, target_gc=target_gc)
        logger.debug(
            f"Region info: type {kind.value} | Target GC Content: {target_gc:.3f} | "
            f"Target AT Content: {1.0 - target_gc:.3f} | Length: {length}"
        )
        return region

    def _draw_kind(self) -> RegionKind:
        idx = self.rng.choice(len(self._kinds), p=self._kind_probs)
        return self._kinds[int(idx)]

    def _draw_length(self) -> int:
        lo = self.config.min_region_length
        hi = self.config.max_region_length
        if self.config.length_distribution == 'truncated_normal':
            mean = self.config.mean_region_length
            std = self.config.std_region_length
            a, b = (lo - mean) / std, (hi - mean) / std
            value = truncnorm.rvs(a, b, loc=mean, scale=std, random_state=self.rng)
            return int(min(hi, max(lo, round(float(value)))))
        return int(self.rng.integers(lo, hi, endpoint=True))
