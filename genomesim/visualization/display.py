"""
Display helpers for generated genomes.

Console rendering goes through the shared rich console; the figure
renderer lays bases out chunk by chunk with matplotlib, one coloured
glyph per base and the coding/non-coding track underneath.
"""

import logging
from typing import Dict, List, Optional, Sequence, Any

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from rich.console import Console
from rich.table import Table
from rich.text import Text

from genomesim.core.sampler import AnnotatedBase
from genomesim.utils.logging_utils import console as shared_console

logger = logging.getLogger(__name__)

# Same palette as the RTF export
BASE_COLORS = {
    'A': '#ff0000',
    'T': '#0000ff',
    'G': '#00c800',
    'C': '#ffa500',
}
RICH_BASE_STYLES = {
    'A': 'bold red',
    'T': 'bold blue',
    'G': 'bold green',
    'C': 'bold dark_orange',
}


def colored_bases(sequence: Sequence[AnnotatedBase]) -> Text:
    """Rich Text with one styled glyph per base."""
    text = Text()
    for b in sequence:
        text.append(b.base, style=RICH_BASE_STYLES.get(b.base, 'white'))
    return text


def print_sequence(sequence: Sequence[AnnotatedBase], console: Optional[Console] = None) -> None:
    """Print the bases of a sequence on a single line."""
    console = console or shared_console
    console.print(colored_bases(sequence), soft_wrap=True)


def print_double_helix(
    strand1: Sequence[AnnotatedBase],
    strand2: Sequence[AnnotatedBase],
    console: Optional[Console] = None,
) -> None:
    """
    Print both strands base by base as ``X - Y`` pairs.

    Args:
        strand1: Primary strand (5' to 3')
        strand2: Complementary strand (3' to 5')
        console: Console to print to (defaults to the shared console)
    """
    console = console or shared_console
    if len(strand1) != len(strand2):
        raise ValueError(
            f"Strand lengths differ: {len(strand1)} vs {len(strand2)}"
        )

    console.print("\n=== Double Helix Representation ===")
    for top, bottom in zip(strand1, strand2):
        line = Text()
        line.append(top.base, style=RICH_BASE_STYLES.get(top.base, 'white'))
        line.append(" - ")
        line.append(bottom.base, style=RICH_BASE_STYLES.get(bottom.base, 'white'))
        console.print(line)


def print_region_table(
    regions: List[Dict[str, Any]],
    console: Optional[Console] = None,
    max_rows: int = 20,
) -> None:
    """Print a rich table summarising planned regions."""
    console = console or shared_console

    table = Table(title="Planned Regions", show_header=True, header_style="bold magenta")
    table.add_column("Start", style="cyan", justify="right")
    table.add_column("Length", style="green", justify="right")
    table.add_column("Kind", style="yellow")
    table.add_column("Target GC", justify="right")
    table.add_column("Realised GC", justify="right")

    for region in regions[:max_rows]:
        table.add_row(
            f"{region['start']:,}",
            f"{region['length']:,}",
            region['kind'],
            f"{region['target_gc']:.3f}",
            f"{region['realised_gc']:.3f}",
        )

    console.print(table)
    if len(regions) > max_rows:
        console.print(f"[dim]... {len(regions) - max_rows} more regions not shown[/dim]")


def visualize_sequence(
    sequence: Sequence[AnnotatedBase],
    title: str,
    chars_per_line: int = 100,
    max_chunks_per_page: int = 40,
) -> List[plt.Figure]:
    """
    Draw a sequence as pages of coloured bases.

    Args:
        sequence: Annotated bases to draw
        title: Header text for every page
        chars_per_line: Number of bases per row
        max_chunks_per_page: Rows per page

    Returns:
        List of matplotlib figure objects
    """
    if not sequence:
        logger.warning(f"Empty sequence for {title}. Skipping.")
        return []

    num_chunks = int(np.ceil(len(sequence) / chars_per_line))
    chunks = [sequence[i * chars_per_line: (i + 1) * chars_per_line] for i in range(num_chunks)]

    figures = []
    for page_start in range(0, num_chunks, max_chunks_per_page):
        page_chunks = chunks[page_start:page_start + max_chunks_per_page]
        header_height = 1.0
        fig_height = header_height + len(page_chunks) * 0.6

        fig, axs = plt.subplots(
            len(page_chunks) + 1, 1,
            figsize=(15, fig_height),
            gridspec_kw={'height_ratios': [header_height] + [1] * len(page_chunks)},
        )
        axs = np.atleast_1d(axs)
        for ax in axs:
            ax.axis('off')

        axs[0].text(
            0.5, 0.5, title,
            ha='center', va='center',
            fontsize=14, fontweight='bold',
            transform=axs[0].transAxes
        )

        for ax, chunk in zip(axs[1:], page_chunks):
            for idx, b in enumerate(chunk):
                x = idx / chars_per_line
                ax.text(
                    x, 1, b.base,
                    ha='center', va='center',
                    color=BASE_COLORS.get(b.base, 'black'),
                    fontsize=8, family='monospace'
                )
                # Coding track
                if b.coding_region:
                    ax.plot([x - 0.5 / chars_per_line, x + 0.5 / chars_per_line], [0.3, 0.3],
                            color='black', linewidth=2)
            ax.set_xlim(-0.01, 1.0)
            ax.set_ylim(0, 1.3)

        plt.subplots_adjust(hspace=0.1)
        figures.append(fig)

    return figures


def render_sequence_figure(
    sequence: Sequence[AnnotatedBase],
    filename: str,
    title: str = "Synthetic genome",
    chars_per_line: int = 100,
) -> int:
    """
    Save the coloured sequence rendering to a PDF file.

    Returns:
        Number of pages written
    """
    figures = visualize_sequence(sequence, title, chars_per_line=chars_per_line)
    with PdfPages(filename) as pdf:
        for fig in figures:
            pdf.savefig(fig)
            plt.close(fig)
    logger.info(f"Saved {len(figures)} page(s) to {filename}")
    return len(figures)
