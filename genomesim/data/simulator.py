"""
Genome Simulator for genomesim
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from genomesim.config import GenomeSimConfig
from genomesim.core.regions import Region
from genomesim.core.sampler import (
    AnnotatedBase,
    SequenceSampler,
    complement,
    gc_content,
    sequence_to_string,
)
from genomesim.utils import io

logger = logging.getLogger(__name__)


@dataclass
class SimulatedGenome:
    """Container for a generated genome, its complement and region layout."""
    sequence: List[AnnotatedBase]
    complement: List[AnnotatedBase]
    regions: List[Dict[str, Any]]  # One summary per planned region
    metadata: Dict = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.sequence)

    @property
    def gc_content(self) -> float:
        return gc_content(self.sequence)

    def strand_strings(self) -> Tuple[str, str]:
        """Forward and complementary strands as plain strings."""
        return sequence_to_string(self.sequence), sequence_to_string(self.complement)


def region_summary(region: Region) -> Dict[str, Any]:
    """Plain-dict view of a filled region."""
    return {
        'start': region.start,
        'end': region.end,
        'length': region.length,
        'kind': region.kind.value,
        'target_gc': region.target_gc,
        'realised_gc': region.current_gc,
    }


def genome_seed(entropy: int, index: int) -> np.random.SeedSequence:
    """Seed for the ``index``-th genome of a batch, independent of worker layout."""
    return np.random.SeedSequence(entropy, spawn_key=(index,))


class GenomeSimulator:
    """
    Generates annotated genomes from a GenomeSimConfig.

    Key features:
    - Region planning with kind-specific GC targets
    - Composition-aware base sampling
    - Complementary strand derivation
    - Export to RTF, FASTA, TSV and JSON

    One seed pins every genome the simulator produces. Without a configured
    seed, fresh entropy is drawn and recorded in each genome's metadata.
    """

    def __init__(
        self,
        config: Union[GenomeSimConfig, Dict, None] = None,
        config_file: Optional[str] = None,
        seed: Union[None, int, np.random.SeedSequence] = None,
    ):
        """
        Initialize the genome simulator.

        Args:
            config: GenomeSimConfig or configuration dictionary
            config_file: Path to YAML/JSON configuration file
            seed: Overrides ``simulation.random_seed`` when given
        """
        if config_file:
            from genomesim.config import load_config
            self.config = load_config(config_file)
        elif isinstance(config, dict):
            self.config = GenomeSimConfig.from_dict(config)
        else:
            self.config = config or GenomeSimConfig()
        self.config.validate()

        self.sim_config = self.config.simulation
        if seed is None:
            seed = self.sim_config.random_seed
        if isinstance(seed, np.random.SeedSequence):
            self.seed_sequence = seed
        else:
            self.seed_sequence = np.random.SeedSequence(seed)

        self.sampler = SequenceSampler(
            config=self.config.sampler,
            planner_config=self.config.planner,
            seed=self.seed_sequence,
        )

        if seed is None:
            logger.info(f"No random seed configured; using entropy {self.seed_sequence.entropy}")
        logger.debug("Initialized genome simulator")

    def generate(self, target_length: Optional[int] = None) -> SimulatedGenome:
        """
        Generate one genome and its complementary strand.

        Args:
            target_length: Number of bases (defaults to ``simulation.target_length``)

        Returns:
            SimulatedGenome
        """
        if target_length is None:
            target_length = self.sim_config.target_length

        start_time = time.time()
        regions: List[Dict[str, Any]] = []
        sequence = self.sampler.generate(
            target_length,
            region_callback=lambda region: regions.append(region_summary(region)),
        )
        genome = SimulatedGenome(
            sequence=sequence,
            complement=complement(sequence),
            regions=regions,
            metadata={
                'target_length': target_length,
                'seed_entropy': self.seed_sequence.entropy,
                'spawn_key': list(self.seed_sequence.spawn_key),
                'gc_policy': self.config.sampler.gc_policy,
                'num_regions': len(regions),
                'gc_content': gc_content(sequence),
                'elapsed_seconds': time.time() - start_time,
            },
        )

        self._log_generation_stats(genome)
        return genome

    def generate_batch(
        self,
        n: int,
        target_length: Optional[int] = None,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> List[SimulatedGenome]:
        """
        Generate ``n`` genomes, each from its own child seed.

        Genome ``i`` depends only on the simulator's entropy and ``i``, so the
        parallel simulator reproduces this output exactly.
        """
        genomes = []
        config_dict = self.config._to_dict()
        for i in range(n):
            child = GenomeSimulator(config=config_dict, seed=genome_seed(self.seed_sequence.entropy, i))
            genomes.append(child.generate(target_length))
            if progress_callback:
                progress_callback(i + 1)
        return genomes

    def _log_generation_stats(self, genome: SimulatedGenome):
        """Log statistics about a generated genome."""
        if not (self.config.logging or {}).get("log_generation_stats", True):
            return

        kinds: Dict[str, int] = {}
        for region in genome.regions:
            kinds[region['kind']] = kinds.get(region['kind'], 0) + 1
        coding = sum(1 for b in genome.sequence if b.coding_region)

        logger.info("Generation Statistics:")
        logger.info(f"  Total bases: {len(genome):,}")
        logger.info(f"  GC content: {genome.gc_content:.3f}")
        logger.info(f"  Regions: {len(genome.regions)} {kinds}")
        logger.info(f"  Coding fraction: {coding / max(1, len(genome)):.3f}")

    def save_genome(
        self,
        genome: SimulatedGenome,
        output_dir: Union[str, Path],
        name: str = "genome",
    ) -> Dict[str, Path]:
        """
        Write the configured outputs for ``genome`` into ``output_dir``.

        A failed RTF export is logged and skipped; the genome itself is
        never modified.

        Returns:
            Mapping of output kind to written path
        """
        export = self.config.export
        output_path = Path(output_dir)
        io.ensure_dir(str(output_path))
        written: Dict[str, Path] = {}

        if export.rtf:
            rtf_name = export.rtf_filename if name == "genome" else f"{name}.rtf"
            rtf_path = output_path / rtf_name
            if io.export_rtf(genome.sequence, str(rtf_path), line_width=export.line_width):
                written['rtf'] = rtf_path

        if export.fasta:
            forward, reverse = genome.strand_strings()
            fasta_path = output_path / f"{name}.fasta"
            io.save_fasta(
                {f"{name}_forward": forward, f"{name}_complement": reverse},
                str(fasta_path),
                description=f"length={len(genome)} gc={genome.gc_content:.4f}",
            )
            written['fasta'] = fasta_path

        if export.regions:
            regions_path = output_path / f"{name}_regions.tsv"
            io.save_regions_tsv(genome.regions, str(regions_path))
            written['regions'] = regions_path

        if export.annotations:
            annotations_path = output_path / f"{name}_annotations.tsv"
            io.save_annotations_tsv(genome.sequence, str(annotations_path))
            written['annotations'] = annotations_path

        if export.figure:
            from genomesim.visualization import render_sequence_figure
            figure_path = output_path / f"{name}_figure.pdf"
            render_sequence_figure(genome.sequence, str(figure_path), title=name)
            written['figure'] = figure_path

        metadata_path = output_path / f"{name}_metadata.json"
        io.save_metadata_json(genome.metadata, str(metadata_path))
        written['metadata'] = metadata_path

        logger.info(f"Saved {len(written)} output file(s) for {name} to {output_path}")
        return written


def create_simulator_from_config(config_source, seed=None) -> GenomeSimulator:
    """
    Convenience factory for GenomeSimulator from file, dict, or GenomeSimConfig.
    """
    if isinstance(config_source, GenomeSimConfig):
        return GenomeSimulator(config=config_source, seed=seed)

    elif isinstance(config_source, (str, Path)):
        return GenomeSimulator(config_file=str(config_source), seed=seed)

    elif isinstance(config_source, dict):
        return GenomeSimulator(config=config_source, seed=seed)

    else:
        raise TypeError(
            f"Unsupported config source type: {type(config_source)}. "
            "Expected GenomeSimConfig, dict, or path string."
        )
