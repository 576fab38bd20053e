"""
I/O utilities for genomesim.

Handles reading and writing the file formats produced after a genome has
been generated. Nothing here touches the in-memory sequence it is given.
"""

import pandas as pd
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Iterator, Sequence, Any
from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord
import json
import logging

from genomesim.core.sampler import AnnotatedBase

logger = logging.getLogger(__name__)

# RTF colour table indices: A red, T blue, G green, C orange
RTF_COLOR_INDEX = {'A': 1, 'T': 2, 'G': 3, 'C': 4}
RTF_COLORS = {
    'A': (255, 0, 0),
    'T': (0, 0, 255),
    'G': (0, 200, 0),
    'C': (255, 165, 0),
}


class ResourceError(OSError):
    """Raised when an output destination cannot be opened or written."""


def render_rtf(sequence: Sequence[AnnotatedBase], line_width: int = 80) -> str:
    """
    Render a sequence as a colour-coded RTF document.

    Args:
        sequence: Annotated bases to render
        line_width: Number of bases per line

    Returns:
        RTF document text
    """
    if line_width < 1:
        raise ValueError(f"line_width must be positive, got {line_width}")

    parts = [
        "{\\rtf1\\ansi\\deff0\n",
        "{\\fonttbl{\\f0 Courier New;}}\n",
        "{\\colortbl;"
        + "".join(f"\\red{r}\\green{g}\\blue{b};" for r, g, b in RTF_COLORS.values())
        + "}\n",
        "\\f0\\fs20\n",
        "Colored DNA Sequence:\\line\n",
    ]

    for i, b in enumerate(sequence):
        color = RTF_COLOR_INDEX.get(b.base)
        if color is None:
            parts.append(b.base)
        else:
            parts.append(f"\\cf{color} {b.base}")
        if (i + 1) % line_width == 0:
            parts.append("\\line\n")

    parts.append("\\cf0\\line\n}\n")
    return "".join(parts)


def write_rtf(sequence: Sequence[AnnotatedBase], filename: str, line_width: int = 80) -> Path:
    """
    Write the coloured RTF rendering of ``sequence`` to ``filename``.

    Raises:
        ResourceError: If the destination cannot be opened or written
        ValueError: If ``line_width`` is not positive
    """
    path = Path(filename)
    document = render_rtf(sequence, line_width=line_width)
    try:
        with open(path, 'w') as f:
            f.write(document)
    except OSError as e:
        raise ResourceError(f"Error opening file: {filename} ({e})") from e
    return path


def export_rtf(sequence: Sequence[AnnotatedBase], filename: str, line_width: int = 80) -> bool:
    """
    Export a sequence to RTF, reporting failures instead of raising.

    Returns:
        True if the file was written, False otherwise
    """
    try:
        path = write_rtf(sequence, filename, line_width=line_width)
    except (ResourceError, ValueError) as e:
        logger.error(f"Could not export RTF to {filename}: {e}")
        return False
    logger.info(f"Colored DNA sequence successfully written to {path}")
    return True


def save_fasta(records: Dict[str, str], output_file: str, description: str = "") -> int:
    """
    Save named sequences to a FASTA file.

    Args:
        records: Mapping of record id to sequence string
        output_file: Output file path
        description: Description written after each record id

    Returns:
        Number of records written
    """
    seq_records = [
        SeqRecord(Seq(seq), id=name, description=description)
        for name, seq in records.items()
    ]
    return SeqIO.write(seq_records, output_file, 'fasta')


def load_fasta(fasta_file: str, max_reads: Optional[int] = None) -> Iterator[SeqRecord]:
    """
    Load sequences from FASTA file.

    Args:
        fasta_file: Path to FASTA file
        max_reads: Maximum number of records to load (None for all)

    Yields:
        SeqRecord objects
    """
    count = 0
    for record in SeqIO.parse(fasta_file, 'fasta'):
        yield record
        count += 1
        if max_reads is not None and count >= max_reads:
            break


def annotations_to_frame(sequence: Sequence[AnnotatedBase]) -> pd.DataFrame:
    """Per-base annotation table, one row per position."""
    return pd.DataFrame({
        'position': np.arange(len(sequence)),
        'base': [b.base for b in sequence],
        'coding_region': [b.coding_region for b in sequence],
        'repair_efficiency': [b.repair_efficiency for b in sequence],
        'methylation': [b.methylation for b in sequence],
        'chromatin_access': [b.chromatin_access for b in sequence],
    })


def save_annotations_tsv(sequence: Sequence[AnnotatedBase], output_file: str):
    """
    Save per-base annotations to TSV file.

    Args:
        sequence: Annotated bases
        output_file: Output file path
    """
    annotations_to_frame(sequence).to_csv(output_file, sep='\t', index=False)


def save_regions_tsv(regions: List[Dict[str, Any]], output_file: str):
    """
    Save region summaries to TSV file.

    Args:
        regions: List of region summary dictionaries
        output_file: Output file path
    """
    columns = ['start', 'end', 'length', 'kind', 'target_gc', 'realised_gc']
    df = pd.DataFrame(regions, columns=columns)
    df.to_csv(output_file, sep='\t', index=False)


def save_metadata_json(metadata: Dict[str, Any], output_file: str):
    """
    Save run metadata to JSON file.

    Args:
        metadata: Metadata dictionary
        output_file: Output file path
    """
    with open(output_file, 'w') as f:
        json.dump(metadata, f, indent=2)


def ensure_dir(directory: str):
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Directory path
    """
    Path(directory).mkdir(parents=True, exist_ok=True)
