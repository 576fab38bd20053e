"""
Pytest configuration for genomesim tests.

This module provides shared fixtures and marker registration for all test
modules in the genomesim test suite.
"""

import pytest
import os
import sys
import logging
import tempfile
from pathlib import Path
import yaml
from typing import Dict, Any

# Add genomesim to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Create a sample configuration dictionary."""
    return {
        'simulation': {
            'target_length': 1000,
            'random_seed': 42,
            'num_genomes': 1,
        },
        'planner': {
            'min_genome_length': 100,
            'kind_weights': {'coding': 0.5, 'non_coding': 0.5},
            'length_distribution': 'uniform',
            'min_region_length': 50,
            'max_region_length': 500,
            'gc_ranges': {
                'coding': [0.55, 0.65],
                'non_coding': [0.35, 0.45],
            },
        },
        'sampler': {
            'gc_policy': 'dynamic',
            'correction_strength': 1.0,
        },
        'export': {
            'rtf': True,
            'fasta': True,
            'regions': True,
            'annotations': True,
            'figure': False,
        },
        'logging': {
            'log_generation_stats': False,
        },
    }


@pytest.fixture
def sample_config_file(sample_config, temp_dir):
    """Create a temporary config file."""
    config_path = temp_dir / "test_config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config, f)
    return config_path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
