"""
Tests for genome simulation orchestration and batch generation.
"""

import json
import pytest
import pandas as pd
from io import StringIO
from rich.console import Console

from genomesim.config import ConfigurationError, GenomeSimConfig
from genomesim.data import (
    GenomeSimulator,
    ParallelGenomeSimulator,
    create_simulator_from_config,
    create_parallel_simulator_from_config,
)
from genomesim.core.sampler import AnnotatedBase, complement
from genomesim.utils.io import ResourceError
from genomesim.visualization import print_double_helix, print_sequence, render_sequence_figure


class TestGenomeSimulator:

    @pytest.mark.unit
    def test_generate_from_sample_config(self, sample_config):
        genome = GenomeSimulator(config=sample_config).generate()
        assert len(genome) == 1000
        assert genome.complement == complement(genome.sequence)
        assert sum(r['length'] for r in genome.regions) == 1000
        assert genome.metadata['seed_entropy'] == 42
        assert genome.metadata['num_regions'] == len(genome.regions)

    @pytest.mark.unit
    def test_seed_argument_overrides_config(self, sample_config):
        a = GenomeSimulator(config=sample_config, seed=7).generate()
        b = GenomeSimulator(config=sample_config, seed=7).generate()
        c = GenomeSimulator(config=sample_config).generate()
        assert a.sequence == b.sequence
        assert a.sequence != c.sequence

    @pytest.mark.unit
    def test_unseeded_run_records_entropy(self):
        simulator = GenomeSimulator()
        genome = simulator.generate(200)
        entropy = genome.metadata['seed_entropy']
        assert isinstance(entropy, int)

        replay = GenomeSimulator(seed=entropy).generate(200)
        assert replay.sequence == genome.sequence

    @pytest.mark.unit
    def test_short_genome_rejected(self):
        with pytest.raises(ConfigurationError):
            GenomeSimulator(seed=1).generate(50)

    @pytest.mark.unit
    def test_default_length(self):
        genome = GenomeSimulator(seed=1).generate()
        assert len(genome) == 10000

    @pytest.mark.unit
    def test_factory_sources(self, sample_config, sample_config_file):
        from_dict = create_simulator_from_config(sample_config).generate()
        from_file = create_simulator_from_config(sample_config_file).generate()
        from_obj = create_simulator_from_config(GenomeSimConfig.from_dict(sample_config)).generate()
        assert from_dict.sequence == from_file.sequence == from_obj.sequence

        with pytest.raises(TypeError):
            create_simulator_from_config(42)

    @pytest.mark.unit
    def test_save_genome_outputs(self, sample_config, temp_dir):
        simulator = GenomeSimulator(config=sample_config)
        genome = simulator.generate()
        written = simulator.save_genome(genome, temp_dir)

        assert set(written) == {'rtf', 'fasta', 'regions', 'annotations', 'metadata'}
        assert written['rtf'] == temp_dir / "genome.rtf"
        assert written['rtf'].read_text().startswith("{\\rtf1")

        forward, reverse = genome.strand_strings()
        fasta = written['fasta'].read_text()
        assert ">genome_forward" in fasta
        assert ">genome_complement" in fasta

        regions = pd.read_csv(written['regions'], sep='\t')
        assert regions['length'].sum() == len(genome)

        metadata = json.loads(written['metadata'].read_text())
        assert metadata['target_length'] == 1000

    @pytest.mark.unit
    def test_save_genome_survives_rtf_failure(self, sample_config, temp_dir):
        sample_config['export']['rtf_filename'] = "missing/genome.rtf"
        simulator = GenomeSimulator(config=sample_config)
        genome = simulator.generate()
        before = list(genome.sequence)

        written = simulator.save_genome(genome, temp_dir)
        assert 'rtf' not in written
        assert 'fasta' in written
        assert genome.sequence == before

    @pytest.mark.unit
    def test_save_genome_survives_write_error(self, sample_config, temp_dir, mocker):
        write_rtf = mocker.patch(
            "genomesim.utils.io.write_rtf", side_effect=ResourceError("disk full")
        )
        simulator = GenomeSimulator(config=sample_config)
        genome = simulator.generate()

        written = simulator.save_genome(genome, temp_dir)
        write_rtf.assert_called_once()
        assert 'rtf' not in written
        assert written['fasta'].exists()

    @pytest.mark.unit
    def test_named_outputs(self, sample_config, temp_dir):
        simulator = GenomeSimulator(config=sample_config)
        written = simulator.save_genome(simulator.generate(), temp_dir, name="genome_2")
        assert written['rtf'].name == "genome_2.rtf"
        assert written['fasta'].name == "genome_2.fasta"


class TestBatchGeneration:

    @pytest.mark.unit
    def test_batch_is_reproducible(self):
        a = GenomeSimulator(seed=3).generate_batch(3, target_length=300)
        b = GenomeSimulator(seed=3).generate_batch(3, target_length=300)
        assert [g.sequence for g in a] == [g.sequence for g in b]
        assert a[0].sequence != a[1].sequence

    @pytest.mark.unit
    def test_progress_callback(self):
        seen = []
        GenomeSimulator(seed=3).generate_batch(4, target_length=150, progress_callback=seen.append)
        assert seen == [1, 2, 3, 4]

    @pytest.mark.slow
    @pytest.mark.integration
    def test_parallel_matches_sequential(self):
        sequential = GenomeSimulator(seed=99).generate_batch(4, target_length=400)
        parallel = ParallelGenomeSimulator(seed=99, n_workers=2).generate_batch(4, target_length=400)
        assert [g.sequence for g in parallel] == [g.sequence for g in sequential]
        assert [g.metadata['spawn_key'] for g in parallel] == [[0], [1], [2], [3]]

    @pytest.mark.unit
    def test_parallel_factory(self, sample_config):
        simulator = create_parallel_simulator_from_config(sample_config, n_workers=1)
        assert isinstance(simulator, ParallelGenomeSimulator)
        assert simulator.n_workers == 1
        genomes = simulator.generate_batch(2, target_length=200)
        assert [len(g) for g in genomes] == [200, 200]


class TestDisplay:

    @pytest.mark.unit
    def test_print_sequence(self):
        buffer = StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        print_sequence([AnnotatedBase(b) for b in "GATTACA"], console=console)
        assert "GATTACA" in buffer.getvalue()

    @pytest.mark.unit
    def test_double_helix(self):
        buffer = StringIO()
        console = Console(file=buffer, width=80, color_system=None)
        strand = [AnnotatedBase(b) for b in "ATGC"]
        print_double_helix(strand, complement(strand), console=console)

        lines = buffer.getvalue().strip().splitlines()
        assert lines[0] == "=== Double Helix Representation ==="
        assert lines[1:] == ["A - T", "T - A", "G - C", "C - G"]

    @pytest.mark.unit
    def test_double_helix_length_mismatch(self):
        with pytest.raises(ValueError):
            print_double_helix([AnnotatedBase('A')], [], console=Console(file=StringIO()))

    @pytest.mark.slow
    def test_render_figure(self, temp_dir):
        sequence = GenomeSimulator(seed=2).generate(250).sequence
        path = temp_dir / "genome.pdf"
        pages = render_sequence_figure(sequence, str(path), chars_per_line=100)
        assert pages == 1
        assert path.exists() and path.stat().st_size > 0
