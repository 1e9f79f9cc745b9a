"""
Configuration file support for the graphpermtest CLI.

Supports YAML and JSON config files with CLI argument override.

Example (``graph_test.yaml``)::

    distance: results/jaccard.csv
    metadata: data/samples.csv
    sampletype: SeqTech
    grouping: SubjectID
    graph:
      type: knn
      knn: 2
      keep_isolates: true
    permutation:
      nperm: 999
      seed: 7
      n_jobs: 4
"""

import json
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from graphpermtest.errors import ConfigurationError
from graphpermtest.graph.builder import ConnectivityRule


@dataclass
class GraphConfig:
    """Proximity graph configuration."""
    type: str = "mst"
    knn: int = 1
    max_dist: float = 0.4
    nedges: Optional[int] = None
    keep_isolates: bool = True


@dataclass
class PermutationConfig:
    """Permutation configuration."""
    nperm: int = 499
    seed: Optional[int] = None
    n_jobs: int = 1


@dataclass
class ConfigSchema:
    """
    Complete configuration schema for ``graphpermtest run``.

    Mirrors the CLI argument structure for consistency.
    """
    distance: Optional[Path] = None
    abundance: Optional[Path] = None
    distance_method: str = "jaccard"
    metadata: Optional[Path] = None
    output: Optional[Path] = None
    sampletype: Optional[str] = None
    grouping: Optional[str] = None
    graph: GraphConfig = field(default_factory=GraphConfig)
    permutation: PermutationConfig = field(default_factory=PermutationConfig)


# (section or None, config key) -> argparse dest
_ARG_MAPPINGS = {
    (None, "distance"): "distance",
    (None, "abundance"): "abundance",
    (None, "distance_method"): "distance_method",
    (None, "metadata"): "metadata",
    (None, "output"): "output",
    (None, "sampletype"): "sampletype",
    (None, "grouping"): "grouping",
    ("graph", "type"): "connectivity",
    ("graph", "knn"): "knn",
    ("graph", "max_dist"): "max_dist",
    ("graph", "nedges"): "nedges",
    ("graph", "keep_isolates"): "keep_isolates",
    ("permutation", "nperm"): "nperm",
    ("permutation", "seed"): "seed",
    ("permutation", "n_jobs"): "n_jobs",
}

_PATH_ARGS = ("distance", "abundance", "metadata", "output")

# Short flags that can be given on the command line
_SHORT_TO_LONG = {
    "d": "distance",
    "m": "metadata",
    "o": "output",
    "s": "sampletype",
    "g": "grouping",
    "t": "connectivity",
    "k": "knn",
    "n": "nperm",
}

# Long flags whose dest differs from the flag name
_FLAG_TO_DEST = {
    "type": "connectivity",
    "drop_isolates": "keep_isolates",
}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If file format is unsupported or invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    try:
        with open(config_path, 'r') as f:
            if suffix in ('.yaml', '.yml'):
                config = yaml.safe_load(f)
            elif suffix == '.json':
                config = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config format: {suffix}. "
                    f"Use .yaml, .yml, or .json"
                )
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file: {e}")

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ConfigurationError("Config file must contain a dictionary/mapping at top level")

    return config


def _explicit_dests(cli_args: Optional[List[str]]) -> set:
    """Argparse dests that were given explicitly on the command line."""
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            name = arg[2:].split('=', 1)[0].replace('-', '_')
            explicit.add(_FLAG_TO_DEST.get(name, name))
        elif arg.startswith('-') and len(arg) >= 2 and arg[1] in _SHORT_TO_LONG:
            # -k 2 and -k2 alike
            explicit.add(_SHORT_TO_LONG[arg[1]])
    return explicit


def merge_config_with_args(
    config: Dict[str, Any],
    args: Namespace,
    cli_args: Optional[List[str]] = None,
) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values).
                  If None, no argument counts as explicit.

    Returns:
        New Namespace with merged values
    """
    explicit = _explicit_dests(cli_args)
    merged = Namespace(**vars(args))

    for (section, key), dest in _ARG_MAPPINGS.items():
        source = config if section is None else config.get(section) or {}
        if key not in source or dest in explicit:
            continue
        value = source[key]
        if value is not None and dest in _PATH_ARGS:
            value = Path(value)
        setattr(merged, dest, value)

    return merged


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    unknown = set(config) - {key for section, key in _ARG_MAPPINGS if section is None}
    unknown -= {"graph", "permutation"}
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {sorted(unknown)}")

    graph = config.get('graph') or {}
    if 'type' in graph:
        ConnectivityRule.parse(graph['type'])

    if 'knn' in graph:
        knn = graph['knn']
        if isinstance(knn, bool) or not isinstance(knn, int) or knn < 1:
            raise ConfigurationError(f"graph.knn must be a positive integer, got: {knn}")

    if 'max_dist' in graph:
        max_dist = graph['max_dist']
        if isinstance(max_dist, bool) or not isinstance(max_dist, (int, float)) or max_dist < 0:
            raise ConfigurationError(
                f"graph.max_dist must be a non-negative number, got: {max_dist}"
            )

    permutation = config.get('permutation') or {}
    for key in ('nperm', 'n_jobs'):
        if key in permutation:
            value = permutation[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"permutation.{key} must be a positive integer, got: {value}"
                )
