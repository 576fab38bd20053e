"""
genomesim simulation commands
"""

import os
import logging
import typer
from pathlib import Path
from typing import Optional, Dict, Any, List
import numpy as np
from rich import box
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn, TimeRemainingColumn
from rich.table import Table
from genomesim.utils.logging_utils import setup_rich_logging, console

# Determine log level dynamically
log_level = os.getenv("GENOMESIM_LOG_LEVEL", "INFO").upper()
setup_rich_logging(log_level)

logger = logging.getLogger(__name__)
logger.setLevel(getattr(logging, log_level, logging.INFO))

from genomesim.config import GenomeSimConfig, load_config
from genomesim.data import (
    SimulatedGenome,
    create_simulator_from_config,
    create_parallel_simulator_from_config,
)
from genomesim.utils.io import load_fasta
from genomesim.visualization import print_sequence, print_double_helix, print_region_table

simulate_app = typer.Typer(
    help="Generate synthetic genomes and inspect their composition",
    rich_markup_mode="rich",
)

DEFAULT_OUTPUT_DIR = "results"


def run_simulation(
    config: GenomeSimConfig,
    output_dir: Optional[Path] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Generate the configured genomes and write their outputs.

    Keyword overrides (``None`` leaves the configured value alone):
        target_length, seed, num_genomes, rtf, figure, n_workers,
        progress_callback

    Returns:
        Dictionary with the generated genomes, the files written per genome
        and the output directory.
    """
    sim_config = config.simulation

    # Apply configuration overrides
    if kwargs.get('target_length') is not None:
        sim_config.target_length = kwargs['target_length']

    if kwargs.get('seed') is not None:
        sim_config.random_seed = kwargs['seed']

    if kwargs.get('num_genomes') is not None:
        sim_config.num_genomes = kwargs['num_genomes']

    if kwargs.get('rtf') is not None:
        config.export.rtf = kwargs['rtf']

    if kwargs.get('figure'):
        config.export.figure = True

    n_workers = kwargs.get('n_workers')
    progress_callback = kwargs.get('progress_callback')

    if output_dir is None:
        output_dir = (config.output or {}).get('save_dir', DEFAULT_OUTPUT_DIR)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    n_genomes = sim_config.num_genomes
    if n_genomes == 1:
        simulator = create_simulator_from_config(config)
        genomes = [simulator.generate()]
        if progress_callback:
            progress_callback(1)
        names = ["genome"]
    else:
        logger.info(f"Generating {n_genomes} genomes with {n_workers or 'auto'} workers")
        simulator = create_parallel_simulator_from_config(config, n_workers=n_workers)
        genomes = simulator.generate_batch(n_genomes, progress_callback=progress_callback)
        width = len(str(n_genomes))
        names = [f"genome_{i + 1:0{width}d}" for i in range(n_genomes)]

    files: List[Dict[str, Path]] = []
    for name, genome in zip(names, genomes):
        files.append(simulator.save_genome(genome, output_path, name=name))

    return {
        'genomes': genomes,
        'names': names,
        'files': files,
        'output_dir': output_path,
        'seed_entropy': simulator.seed_sequence.entropy,
    }


def sequence_gc_profile(sequence: str, window: int = 100) -> Dict[str, float]:
    """
    GC statistics for a plain sequence string.

    The sequence is cut into consecutive non-overlapping windows; a trailing
    partial window is dropped unless the sequence is shorter than one window.
    """
    if window < 1:
        raise ValueError("window must be positive")

    bases = np.frombuffer(sequence.upper().encode('ascii'), dtype=np.uint8)
    is_gc = (bases == ord('G')) | (bases == ord('C'))
    length = len(bases)

    n_windows = length // window
    if n_windows == 0:
        window_gc = np.array([is_gc.mean()]) if length else np.array([0.0])
    else:
        window_gc = is_gc[:n_windows * window].reshape(n_windows, window).mean(axis=1)

    return {
        'length': length,
        'gc_content': float(is_gc.mean()) if length else 0.0,
        'n_windows': len(window_gc),
        'window_gc_mean': float(window_gc.mean()),
        'window_gc_std': float(window_gc.std()),
        'window_gc_min': float(window_gc.min()),
        'window_gc_max': float(window_gc.max()),
    }


@simulate_app.command("generate")
def generate_command(
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Configuration YAML or JSON file"),
    length: Optional[int] = typer.Option(
        None,
        "--length", "-l",
        help="Number of bases per genome"),
    seed: Optional[int] = typer.Option(
        None,
        "--seed", "-s",
        help="Random seed"),
    num_genomes: Optional[int] = typer.Option(
        None,
        "--num-genomes", "-n",
        help="Number of genomes to generate"),
    n_workers: Optional[int] = typer.Option(
        None,
        "--workers", "-w",
        help="Number of parallel workers (auto-detect if not specified)"),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir", "-o",
        help="Output directory (default: results/)"),
    rtf: Optional[bool] = typer.Option(
        None,
        "--rtf/--no-rtf",
        help="Write the colour-coded RTF export"),
    show: bool = typer.Option(
        False,
        "--show",
        help="Print the generated strand and its regions"),
    helix: bool = typer.Option(
        False,
        "--helix",
        help="Print the double helix representation"),
    figure: bool = typer.Option(
        False,
        "--figure",
        help="Render a PDF figure of each genome"),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Verbose output"),
):
    """
    Generate synthetic genomes with region-dependent GC content.

    Examples:
        # Default run: 10,000 bases, RTF export to results/genome.rtf
        genomesim simulate generate

        # Reproducible run printed to the console
        genomesim simulate generate -l 500 -s 42 --show --helix

        # Batch of genomes across 8 workers
        genomesim simulate generate -c config.yaml -n 20 -w 8 -o data/
    """
    try:
        config_obj = load_config(str(config)) if config else GenomeSimConfig()

        effective_length = length if length is not None else config_obj.simulation.target_length
        effective_genomes = num_genomes if num_genomes is not None else config_obj.simulation.num_genomes
        effective_seed = seed if seed is not None else config_obj.simulation.random_seed

        panel_content = f"""[cyan]Configuration:[/cyan] {config or 'defaults'}
[cyan]Length:[/cyan] {effective_length:,} bases
[cyan]Genomes:[/cyan] {effective_genomes:,}
[cyan]Seed:[/cyan] {effective_seed if effective_seed is not None else 'fresh entropy'}
[cyan]GC policy:[/cyan] {config_obj.sampler.gc_policy}
[cyan]Output:[/cyan] {output_dir or (config_obj.output or {}).get('save_dir', DEFAULT_OUTPUT_DIR)}"""
        if effective_genomes > 1:
            panel_content += f"\n[cyan]Workers:[/cyan] {n_workers if n_workers else 'auto-detect'}"

        console.print(Panel(panel_content, title="[bold]Genome Generation[/bold]", box=box.ROUNDED))

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=False
        ) as progress:
            task = progress.add_task("[cyan]Generating genomes...", total=effective_genomes)

            def progress_callback(n_generated):
                progress.update(task, completed=n_generated)

            result = run_simulation(
                config_obj,
                output_dir=output_dir,
                target_length=length,
                seed=seed,
                num_genomes=num_genomes,
                rtf=rtf,
                figure=figure,
                n_workers=n_workers,
                progress_callback=progress_callback,
            )

        first: SimulatedGenome = result['genomes'][0]
        if show:
            console.print("\n[bold]Generated sequence:[/bold]")
            print_sequence(first.sequence)
            print_region_table(first.regions)
        if helix:
            print_double_helix(first.sequence, first.complement)

        # Show results
        results_table = Table(title="Generation Results", show_header=True)
        results_table.add_column("Metric", style="cyan")
        results_table.add_column("Value", style="green")

        results_table.add_row("Output directory", str(result['output_dir']))
        results_table.add_row("Genomes", f"{len(result['genomes']):,}")
        results_table.add_row("Bases per genome", f"{len(first):,}")
        results_table.add_row("Seed entropy", str(result['seed_entropy']))
        gc_values = [g.gc_content for g in result['genomes']]
        results_table.add_row("Mean GC content", f"{np.mean(gc_values):.4f}")
        results_table.add_row("Regions (first genome)", f"{len(first.regions):,}")
        for kind, path in result['files'][0].items():
            results_table.add_row(f"{kind.upper()} file", str(path))
        if config_obj.export.rtf and 'rtf' not in result['files'][0]:
            results_table.add_row("RTF file", "[red]export failed (see log)[/red]")

        console.print("\n")
        console.print(results_table)
        console.print("\n[bold green]✓ Generation completed successfully![/bold green]")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(1)


@simulate_app.command("stats")
def stats_command(
    input_file: Path = typer.Argument(
        ...,
        help="FASTA file of generated sequences",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True
    ),
    window: int = typer.Option(
        100,
        "--window", "-w",
        help="Window size for GC statistics"
    ),
    max_records: Optional[int] = typer.Option(
        None,
        "--max-records",
        help="Only analyse the first N records"
    ),
):
    """
    Report length and GC composition for each record of a FASTA file.

    Examples:
        genomesim simulate stats results/genome.fasta
        genomesim simulate stats results/genome.fasta --window 500
    """
    try:
        console.print(f"[cyan]Analyzing sequences from {input_file}...[/cyan]")

        profiles = []
        for record in load_fasta(str(input_file), max_reads=max_records):
            profile = sequence_gc_profile(str(record.seq), window=window)
            profile['id'] = record.id
            profiles.append(profile)

        if not profiles:
            console.print("[red]No sequences found in file![/red]")
            raise typer.Exit(1)

        table = Table(title=f"GC statistics (window={window})", box=box.SIMPLE)
        table.add_column("Record", style="cyan")
        table.add_column("Length", justify="right")
        table.add_column("GC", justify="right", style="green")
        table.add_column("Windows", justify="right")
        table.add_column("Window GC mean", justify="right")
        table.add_column("Window GC std", justify="right")
        table.add_column("Min", justify="right")
        table.add_column("Max", justify="right")

        for p in profiles:
            table.add_row(
                p['id'],
                f"{p['length']:,}",
                f"{p['gc_content']:.4f}",
                str(p['n_windows']),
                f"{p['window_gc_mean']:.4f}",
                f"{p['window_gc_std']:.4f}",
                f"{p['window_gc_min']:.3f}",
                f"{p['window_gc_max']:.3f}",
            )

        console.print()
        console.print(table)

        lengths = [p['length'] for p in profiles]
        console.print(f"\n[cyan]Records:[/cyan] {len(profiles):,}")
        console.print(f"[cyan]Total bases:[/cyan] {int(np.sum(lengths)):,}")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
