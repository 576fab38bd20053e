#!/usr/bin/env python
"""
Setup script for genomesim.
"""

from setuptools import setup, find_packages
from pathlib import Path

# ---------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------
this_directory = Path(__file__).parent
long_description = (
    (this_directory / "README.md").read_text(encoding="utf-8")
    if (this_directory / "README.md").exists()
    else ""
)

# ---------------------------------------------------------------------
# Core runtime dependencies
# ---------------------------------------------------------------------
install_requires = [
    # Scientific computing
    "numpy>=1.21.0",
    "pandas>=2.0.0",
    "scipy>=1.9.0",

    # Bioinformatics
    "biopython>=1.80",

    # Visualization
    "matplotlib>=3.5.0",

    # CLI framework (Typer-based)
    "typer>=0.9.0",
    "rich>=13.0.0",

    # Configuration & data
    "pyyaml>=6.0",
]

# ---------------------------------------------------------------------
# Optional dependency groups
# ---------------------------------------------------------------------
extras_require = {
    "dev": [
        "pytest>=7.0",
        "pytest-cov>=4.0",
        "pytest-mock>=3.10.0",
        "black>=22.0",
        "flake8>=5.0",
        "isort>=5.12.0",
    ],
}

# Combined convenience group
extras_require["all"] = sorted({pkg for group in extras_require.values() for pkg in group})

# ---------------------------------------------------------------------
# Setup configuration
# ---------------------------------------------------------------------
setup(
    name="genomesim",
    version="0.1.0",
    author="Ben Johnson",
    author_email="ben.johnson@vai.org",
    description="Region-aware synthetic genome generation with GC-targeted sampling",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "examples*", "docs*"]),
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "genomesim=genomesim.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords=[
        "bioinformatics",
        "genomics",
        "simulation",
        "GC content",
        "synthetic data",
        "CLI",
    ],
)
