"""
Utilities module for genomesim.
"""

# Import config from the main config module for convenience
from genomesim.config import (
    GenomeSimConfig,
    SimulationConfig,
    PlannerConfig,
    SamplerConfig,
    ExportConfig,
    ConfigurationError,
    load_config
)

from .io import (
    ResourceError,
    render_rtf,
    write_rtf,
    export_rtf,
    save_fasta,
    load_fasta,
    annotations_to_frame,
    save_annotations_tsv,
    save_regions_tsv,
    save_metadata_json,
    ensure_dir
)

__all__ = [
    # Config
    'GenomeSimConfig',
    'SimulationConfig',
    'PlannerConfig',
    'SamplerConfig',
    'ExportConfig',
    'ConfigurationError',
    'load_config',
    # I/O
    'ResourceError',
    'render_rtf',
    'write_rtf',
    'export_rtf',
    'save_fasta',
    'load_fasta',
    'annotations_to_frame',
    'save_annotations_tsv',
    'save_regions_tsv',
    'save_metadata_json',
    'ensure_dir'
]
