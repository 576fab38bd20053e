"""
genomesim visualization module for generated sequences.
"""

from .display import (
    BASE_COLORS,
    colored_bases,
    print_sequence,
    print_double_helix,
    print_region_table,
    visualize_sequence,
    render_sequence_figure,
)

__all__ = [
    'BASE_COLORS',
    'colored_bases',
    'print_sequence',
    'print_double_helix',
    'print_region_table',
    'visualize_sequence',
    'render_sequence_figure',
]
