"""
Test suite for the simulate subcommand and top-level CLI.

Tests cover:
- Genome generation with CLI overrides and config files
- Export toggles and batch naming
- Seed reproducibility through the CLI
- FASTA composition statistics
- Project initialization
"""

import pytest
from typer.testing import CliRunner

from genomesim import __version__
from genomesim.cli import app
from genomesim.config import load_config
from genomesim.simulate import run_simulation, sequence_gc_profile
from genomesim.config import GenomeSimConfig
from genomesim.utils.io import load_fasta

runner = CliRunner()


class TestGenerateCommand:
    """Test suite for `genomesim simulate generate`."""

    @pytest.mark.unit
    def test_basic_generation(self, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-l", "500", "-s", "42", "-o", str(temp_dir),
        ])
        assert result.exit_code == 0, result.output
        assert (temp_dir / "genome.rtf").exists()
        assert (temp_dir / "genome.fasta").exists()
        assert (temp_dir / "genome_regions.tsv").exists()
        assert (temp_dir / "genome_metadata.json").exists()

        records = list(load_fasta(str(temp_dir / "genome.fasta")))
        assert len(records[0].seq) == 500

    @pytest.mark.unit
    def test_no_rtf(self, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-l", "200", "-s", "1", "-o", str(temp_dir), "--no-rtf",
        ])
        assert result.exit_code == 0, result.output
        assert not (temp_dir / "genome.rtf").exists()

    @pytest.mark.unit
    def test_config_file(self, sample_config_file, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-c", str(sample_config_file), "-o", str(temp_dir),
        ])
        assert result.exit_code == 0, result.output
        assert (temp_dir / "genome_annotations.tsv").exists()
        records = list(load_fasta(str(temp_dir / "genome.fasta")))
        assert len(records[0].seq) == 1000

    @pytest.mark.unit
    def test_seed_reproducible(self, temp_dir):
        for sub in ("a", "b"):
            result = runner.invoke(app, [
                "simulate", "generate", "-l", "300", "-s", "5", "-o", str(temp_dir / sub), "--no-rtf",
            ])
            assert result.exit_code == 0, result.output
        a = (temp_dir / "a" / "genome.fasta").read_text()
        b = (temp_dir / "b" / "genome.fasta").read_text()
        assert a == b

    @pytest.mark.unit
    def test_batch_naming(self, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-l", "150", "-s", "3", "-n", "2", "-w", "1", "-o", str(temp_dir),
        ])
        assert result.exit_code == 0, result.output
        assert (temp_dir / "genome_1.fasta").exists()
        assert (temp_dir / "genome_2.rtf").exists()

    @pytest.mark.unit
    def test_show_and_helix(self, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-l", "100", "-s", "8", "-o", str(temp_dir), "--show", "--helix",
        ])
        assert result.exit_code == 0, result.output
        assert "Double Helix Representation" in result.output

    @pytest.mark.unit
    def test_too_short_genome_fails(self, temp_dir):
        result = runner.invoke(app, [
            "simulate", "generate", "-l", "50", "-o", str(temp_dir),
        ])
        assert result.exit_code == 1
        assert "Error" in result.output

    @pytest.mark.unit
    def test_run_simulation_overrides(self, temp_dir):
        result = run_simulation(
            GenomeSimConfig(),
            output_dir=temp_dir,
            target_length=250,
            seed=11,
            rtf=False,
        )
        assert len(result['genomes']) == 1
        assert len(result['genomes'][0]) == 250
        assert result['seed_entropy'] == 11
        assert 'rtf' not in result['files'][0]


class TestStatsCommand:
    """Test suite for `genomesim simulate stats`."""

    @pytest.mark.unit
    def test_stats_on_generated_fasta(self, temp_dir):
        runner.invoke(app, ["simulate", "generate", "-l", "400", "-s", "2", "-o", str(temp_dir)])
        result = runner.invoke(app, [
            "simulate", "stats", str(temp_dir / "genome.fasta"), "--window", "100",
        ])
        assert result.exit_code == 0, result.output
        assert "Records:" in result.output

    @pytest.mark.unit
    def test_gc_profile(self):
        profile = sequence_gc_profile("GGGG" + "AAAA", window=4)
        assert profile['length'] == 8
        assert profile['gc_content'] == pytest.approx(0.5)
        assert profile['n_windows'] == 2
        assert profile['window_gc_min'] == 0.0
        assert profile['window_gc_max'] == 1.0

    @pytest.mark.unit
    def test_gc_profile_short_sequence(self):
        profile = sequence_gc_profile("GCA", window=100)
        assert profile['n_windows'] == 1
        assert profile['window_gc_mean'] == pytest.approx(2 / 3)


class TestTopLevelCommands:

    @pytest.mark.unit
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.unit
    def test_info(self):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "System Information" in result.output

    @pytest.mark.unit
    def test_init_with_examples(self, temp_dir):
        project = temp_dir / "project"
        result = runner.invoke(app, ["init", str(project), "--with-examples"])
        assert result.exit_code == 0, result.output
        assert (project / "results").is_dir()
        assert (project / "run_workflow.sh").exists()

        config = load_config(str(project / "configs" / "config.yaml"))
        config.validate()
        assert config.simulation.random_seed == 42
