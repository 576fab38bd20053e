#!/usr/bin/env python3
"""
Unified configuration module for genomesim.

This module consolidates and sets dataclass objects.
"""

import yaml
import json
import numbers
from dataclasses import dataclass, field
from typing import Optional, Dict, Tuple, Any
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a genome cannot be planned with the supplied parameters."""


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _default_kind_weights() -> Dict[str, float]:
    return {'coding': 0.5, 'non_coding': 0.5, 'regulatory': 0.0, 'repeat': 0.0}


def _default_gc_ranges() -> Dict[str, Tuple[float, float]]:
    return {
        'coding': (0.55, 0.65),
        'non_coding': (0.35, 0.45),
        'regulatory': (0.45, 0.60),
        'repeat': (0.30, 0.40),
    }


@dataclass
class PlannerConfig:
    """Region planning configuration."""
    min_genome_length: int = 100
    kind_weights: Dict[str, float] = field(default_factory=_default_kind_weights)
    length_distribution: str = 'uniform'  # 'uniform' or 'truncated_normal'
    min_region_length: int = 50
    max_region_length: int = 500
    mean_region_length: float = 200.0
    std_region_length: float = 100.0
    gc_ranges: Dict[str, Tuple[float, float]] = field(default_factory=_default_gc_ranges)

    @classmethod
    def from_dict(cls, config: dict):
        config = dict(config)
        for key in ('gc_ranges', 'kind_weights'):
            if config.get(key) is not None and not isinstance(config[key], dict):
                raise ConfigurationError(f"planner.{key} must be a mapping of region kind to value")
        # YAML gives lists; partial overrides keep the remaining defaults
        if 'gc_ranges' in config and config['gc_ranges'] is not None:
            ranges = _default_gc_ranges()
            ranges.update({
                k: tuple(v) if isinstance(v, (list, tuple)) else v
                for k, v in config['gc_ranges'].items()
            })
            config['gc_ranges'] = ranges
        if 'kind_weights' in config and config['kind_weights'] is not None:
            weights = _default_kind_weights()
            weights.update(config['kind_weights'])
            config['kind_weights'] = weights
        return cls(**{k: v for k, v in config.items() if k in cls.__annotations__})

    def validate(self) -> None:
        """Check planner parameters, raising ConfigurationError on the first problem."""
        from genomesim.core.regions import RegionKind

        known = {kind.value for kind in RegionKind}
        if self.min_genome_length < 1:
            raise ConfigurationError("min_genome_length must be positive")
        if self.min_region_length < 1:
            raise ConfigurationError("min_region_length must be positive")
        if self.max_region_length < self.min_region_length:
            raise ConfigurationError("max_region_length must be >= min_region_length")
        if self.length_distribution not in ('uniform', 'truncated_normal'):
            raise ConfigurationError(
                "length_distribution must be 'uniform' or 'truncated_normal'"
            )
        if self.length_distribution == 'truncated_normal' and self.std_region_length <= 0:
            raise ConfigurationError("std_region_length must be positive")

        unknown = set(self.kind_weights) - known
        if unknown:
            raise ConfigurationError(f"Unknown region kinds in kind_weights: {sorted(unknown)}")
        for kind, weight in self.kind_weights.items():
            if not _is_number(weight):
                raise ConfigurationError(f"kind_weights entry for '{kind}' must be a number, got {weight!r}")
        if any(w < 0 for w in self.kind_weights.values()):
            raise ConfigurationError("kind_weights must be non-negative")
        if sum(self.kind_weights.values()) <= 0:
            raise ConfigurationError("kind_weights must sum to a positive value")

        for kind, weight in self.kind_weights.items():
            if weight <= 0:
                continue
            if kind not in self.gc_ranges:
                raise ConfigurationError(f"No gc_range configured for region kind '{kind}'")
            gc_range = self.gc_ranges[kind]
            if (not isinstance(gc_range, (list, tuple)) or len(gc_range) != 2
                    or not all(_is_number(v) for v in gc_range)):
                raise ConfigurationError(
                    f"gc_range for '{kind}' must be a pair of numbers, got {gc_range!r}"
                )
            low, high = gc_range
            if not 0.0 <= low <= high <= 1.0:
                raise ConfigurationError(
                    f"gc_range for '{kind}' must satisfy 0 <= low <= high <= 1, got ({low}, {high})"
                )


@dataclass
class SamplerConfig:
    """Base sampling configuration."""
    gc_policy: str = 'dynamic'  # 'dynamic' or 'static'
    correction_strength: float = 1.0

    @classmethod
    def from_dict(cls, config: dict):
        return cls(**{k: v for k, v in config.items() if k in cls.__annotations__})

    def validate(self) -> None:
        if self.gc_policy not in ('dynamic', 'static'):
            raise ConfigurationError("gc_policy must be 'dynamic' or 'static'")
        if self.correction_strength < 0:
            raise ConfigurationError("correction_strength must be non-negative")


@dataclass
class SimulationConfig:
    """Genome simulation configuration."""
    target_length: int = 10000
    random_seed: Optional[int] = None
    num_genomes: int = 1

    @classmethod
    def from_dict(cls, config: dict):
        return cls(**{k: v for k, v in config.items() if k in cls.__annotations__})


@dataclass
class ExportConfig:
    """Output files written after a genome is generated."""
    rtf: bool = True
    rtf_filename: str = 'genome.rtf'
    line_width: int = 80
    fasta: bool = True
    annotations: bool = False
    regions: bool = True
    figure: bool = False

    @classmethod
    def from_dict(cls, config: dict):
        return cls(**{k: v for k, v in config.items() if k in cls.__annotations__})


@dataclass
class GenomeSimConfig:
    """Master configuration for genomesim."""
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Additional top-level configs from YAML
    logging: Optional[Dict[str, Any]] = None
    output: Optional[Dict[str, Any]] = None

    @classmethod
    def from_yaml(cls, yaml_path: str):
        """Load configuration from YAML file."""
        with open(yaml_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        return cls.from_dict(config)

    @classmethod
    def from_json(cls, json_path: str):
        """Load configuration from JSON file."""
        with open(json_path, 'r') as f:
            config = json.load(f) or {}
        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: dict):
        """Load configuration from dictionary."""
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(config).__name__}"
            )
        return cls(
            simulation=SimulationConfig.from_dict(config.get('simulation') or {}),
            planner=PlannerConfig.from_dict(config.get('planner') or {}),
            sampler=SamplerConfig.from_dict(config.get('sampler') or {}),
            export=ExportConfig.from_dict(config.get('export') or {}),
            logging=config.get('logging'),
            output=config.get('output'),
        )

    def validate(self) -> None:
        self.planner.validate()
        self.sampler.validate()
        if self.simulation.num_genomes < 1:
            raise ConfigurationError("num_genomes must be positive")
        if self.export.line_width < 1:
            raise ConfigurationError("line_width must be positive")

    def to_yaml(self, output_path: str):
        """Save configuration to YAML file."""
        config_dict = self._to_dict()
        with open(output_path, 'w') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def to_json(self, output_path: str):
        """Save configuration to JSON file."""
        config_dict = self._to_dict()
        with open(output_path, 'w') as f:
            json.dump(config_dict, f, indent=2)

    def _to_dict(self) -> Dict[str, Any]:
        """
        Recursive conversion into plain Python containers, safe for
        YAML/JSON and for shipping to worker processes.

        Tuples become lists so that safe_dump can write them.
        """
        from dataclasses import is_dataclass

        def convert(obj):
            if obj is None or isinstance(obj, (bool, int, float, str)):
                return obj
            if isinstance(obj, (list, tuple)):
                return [convert(x) for x in obj]
            if isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            if is_dataclass(obj):
                return {name: convert(getattr(obj, name))
                        for name in obj.__dataclass_fields__}
            # Path, enum and other custom objects
            return str(obj)

        return convert(self)


def load_config(config_path: str) -> GenomeSimConfig:
    """
    Load configuration from file (YAML or JSON).

    Args:
        config_path: Path to configuration file

    Returns:
        GenomeSimConfig instance
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if path.suffix in ['.yaml', '.yml']:
        return GenomeSimConfig.from_yaml(config_path)
    elif path.suffix == '.json':
        return GenomeSimConfig.from_json(config_path)
    else:
        raise ValueError(f"Unsupported configuration format: {path.suffix}")
