#!/usr/bin/env python3
"""
genomesim CLI

Provides subcommands for genome simulation and composition statistics
using the Typer framework.
"""
import os
import sys

# Set default environment variables BEFORE any imports
# This ensures subcommands see these values when they import
if "GENOMESIM_LOG_LEVEL" not in os.environ:
    os.environ["GENOMESIM_LOG_LEVEL"] = "INFO"

from genomesim.utils.logging_utils import setup_rich_logging, console, status
setup_rich_logging(os.getenv("GENOMESIM_LOG_LEVEL", "INFO"))

import typer
from pathlib import Path
from typing import Optional
from textwrap import dedent
from rich.table import Table

from genomesim import __version__
from genomesim.config import GenomeSimConfig

# Main application
app = typer.Typer(
    name="genomesim",
    help="genomesim: region-aware synthetic genome generation",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

# Import sub-applications AFTER setting default environment
from genomesim.simulate import simulate_app

# Register subcommands
app.add_typer(simulate_app, name="simulate", help="Generate synthetic genomes and inspect them")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure logging for the genomesim CLI with Rich integration.

    Global options like --debug propagate to every genomesim logger,
    including those created when the subcommands were imported.
    """
    setup_rich_logging(level, log_file=log_file)


def _version_callback(value: bool):
    if value:
        console.print(f"[bold blue]genomesim[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with verbose output"
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Save logs to a file"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True
    ),
):
    """
    genomesim: synthetic genomes with region-dependent composition

    Genomes are laid out as consecutive coding and non-coding regions, each
    with its own GC target. Bases are sampled against that target, the
    complementary strand is derived, and the result is exported as a
    colour-coded RTF document alongside FASTA and tabular summaries.
    """
    resolved_level = "DEBUG" if debug else log_level.upper()

    # Update environment variable so any late imports see the correct level
    os.environ["GENOMESIM_LOG_LEVEL"] = resolved_level

    if debug:
        os.environ["GENOMESIM_DEBUG"] = "1"

    setup_logging(
        level=resolved_level,
        log_file=str(log_file) if log_file else None,
    )

    if debug:
        console.print(f"[bold yellow]Debug mode active[/bold yellow] (GENOMESIM_LOG_LEVEL={resolved_level})")


@app.command()
def info():
    """Display system and environment information."""
    import platform
    import importlib

    console.print("\n[bold blue]System Information[/bold blue]")
    console.print("=" * 60)
    console.print(f"[cyan]Python:[/cyan] {sys.version.split()[0]}")
    console.print(f"[cyan]Platform:[/cyan] {platform.platform()}")
    console.print(f"[cyan]genomesim Version:[/cyan] {__version__}")

    libraries = [
        ("NumPy", "numpy"),
        ("SciPy", "scipy"),
        ("pandas", "pandas"),
        ("Biopython", "Bio"),
        ("matplotlib", "matplotlib"),
        ("PyYAML", "yaml"),
    ]
    versions = {}
    with status("Checking environment..."):
        for label, module_name in libraries:
            try:
                module = importlib.import_module(module_name)
                versions[label] = getattr(module, "__version__", "unknown")
            except ImportError:
                versions[label] = None

    for label, version in versions.items():
        if version:
            console.print(f"[cyan]{label}:[/cyan] {version}")
        else:
            console.print(f"[red]{label} not installed[/red]")

    console.print(f"[cyan]CPUs:[/cyan] {os.cpu_count()}")
    console.print("")


@app.command()
def init(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Directory to initialize the genomesim project"
    ),
    with_examples: bool = typer.Option(
        False,
        "--with-examples",
        help="Include an example configuration and workflow script"
    ),
):
    """
    Initialize a new genomesim project directory.

    Creates directories for configs, results and logs. With --with-examples
    also writes an example configuration and workflow script.
    """
    console.print(f"\n[bold blue]Initializing genomesim project in {project_dir}[/bold blue]")

    dirs = [
        project_dir / "configs",
        project_dir / "results",
        project_dir / "logs",
    ]

    with status("Creating directories..."):
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    console.log(f"[green]Created {len(dirs)} directories successfully[/green]")

    if with_examples:
        example_config = GenomeSimConfig()
        example_config.simulation.random_seed = 42
        example_config.export.figure = True
        example_config.output = {"save_dir": "results"}
        example_config.logging = {"log_generation_stats": True}

        config_path = project_dir / "configs" / "config.yaml"
        example_config.to_yaml(str(config_path))
        console.print(f"[green]Created example configuration:[/green] {config_path}")

        workflow_script = project_dir / "run_workflow.sh"
        workflow_content = dedent("""\
            #!/bin/bash
            # genomesim workflow example

            echo "Step 1: Generate a genome"
            genomesim simulate generate \\
                --config configs/config.yaml \\
                --output-dir results

            echo "Step 2: Inspect its composition"
            genomesim simulate stats results/genome.fasta --window 200

            echo "Workflow complete!"
        """)
        workflow_script.write_text(workflow_content)
        workflow_script.chmod(0o755)
        console.print("[green]Created example workflow script[/green]")

    readme = project_dir / "README.md"
    readme_content = dedent(f"""\
        # genomesim project - {project_dir.resolve().name}

        ## Project Structure
        ```
        configs/    # Configuration files
        results/    # Generated genomes and exports
        logs/       # Run logs
        ```

        ## Quick Start

        ```bash
        genomesim simulate generate --config configs/config.yaml --output-dir results
        genomesim simulate stats results/genome.fasta
        ```
    """)
    readme.write_text(readme_content)
    console.print("[green]Created README.md[/green]")

    table = Table(title="Project Initialized", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    table.add_row("Project Directory", str(project_dir))
    table.add_row("Directories", "Created")
    table.add_row("Configuration", "Created" if with_examples else "Ready for creation")
    if with_examples:
        table.add_row("Workflow Script", "Generated")

    console.print("\n", table)
    console.print("\n[bold green]Project initialized successfully![/bold green]")


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        if os.getenv("GENOMESIM_DEBUG", "0") == "1":
            console.print_exception()
        else:
            console.print(f"[red]Error:[/red] {e}")
            console.print("[dim]Run with --debug for full traceback[/dim]")
        sys.exit(1)


if __name__ == "__main__":
    main()
