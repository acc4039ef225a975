#!/usr/bin/env python3
"""
Junction Reads Configuration Parser

Parses YAML run configuration files for reconcile_junction_reads.py.

Usage:
    # Get single value
    python config_parser.py config.yaml --get insert.name

    # Validate configuration
    python config_parser.py config.yaml --validate

    # As Python module
    from utils.config_parser import load_config, get_nested
    config = load_config("config.yaml")
    insert_name = get_nested(config, "insert.name")

Example configuration:
    libraries:
      fwd_bam: alignments/FWD.bam
      rev_bam: alignments/REV.bam
    insert:
      name: PiggyBac
      fasta: reference/transposon.fa
    centre:
      mode: default        # auto | default | <integer position>
    run:
      dedup: true
      jobs: 2
      outdir: results
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

from junctionreads.boundary import FixedCentre, parse_centre_mode
from junctionreads.errors import InvalidMode

# Values used when neither the config file nor the command line sets them
DEFAULTS: Dict[str, Any] = {
    "centre": {"mode": "default"},
    "run": {"dedup": True, "jobs": 2, "outdir": "junction_reads"},
}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}

    return config


def get_nested(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested value from config using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "insert.name")
        default: Default value if key not found

    Returns:
        Value at the specified path, or default if not found

    Examples:
        >>> config = {"insert": {"name": "PiggyBac"}}
        >>> get_nested(config, "insert.name")
        'PiggyBac'
        >>> get_nested(config, "insert.fasta", "none")
        'none'
    """
    keys = key_path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def flatten_config(config: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested config into flat dictionary with dot-notation keys.

    Examples:
        >>> flatten_config({"run": {"dedup": True}})
        {'run.dedup': 'true'}
    """
    flat = {}

    for key, value in config.items():
        full_key = f"{prefix}.{key}" if prefix else key

        if isinstance(value, dict):
            flat.update(flatten_config(value, full_key))
        elif value is None:
            flat[full_key] = ""
        elif isinstance(value, bool):
            flat[full_key] = "true" if value else "false"
        else:
            flat[full_key] = str(value)

    return flat


def with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill in DEFAULTS for sections or keys missing from `config`.

    Examples:
        >>> with_defaults({"run": {"jobs": 4}})["run"]
        {'dedup': True, 'jobs': 4, 'outdir': 'junction_reads'}
    """
    merged: Dict[str, Any] = {}
    for section, values in DEFAULTS.items():
        merged[section] = dict(values)
    for section, values in config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate configuration for required fields.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    if not get_nested(config, "insert.name"):
        errors.append("Missing insert name (insert.name)")

    # Centre mode: accepted exactly as the command line accepts it
    mode = get_nested(config, "centre.mode", "default")
    try:
        centre = parse_centre_mode(mode)
    except InvalidMode:
        errors.append(f"centre.mode must be auto, default or a position, got {mode}")
    else:
        if isinstance(centre, FixedCentre):
            position = centre.position
            if position < 1 or (isinstance(position, float) and not position.is_integer()):
                errors.append(f"centre.mode position must be an integer >= 1, got {mode}")

    dedup = get_nested(config, "run.dedup", True)
    if not isinstance(dedup, bool):
        errors.append(f"run.dedup must be true or false, got {dedup}")

    jobs = get_nested(config, "run.jobs", 1)
    try:
        if int(jobs) < 1:
            errors.append(f"run.jobs must be >= 1, got {jobs}")
    except (ValueError, TypeError):
        errors.append(f"run.jobs must be an integer, got {jobs}")

    # Input files, when configured, must exist
    for key_path in ("libraries.fwd_bam", "libraries.rev_bam", "insert.fasta"):
        path = get_nested(config, key_path)
        if path and not Path(path).exists():
            errors.append(f"File not found: {path} ({key_path})")

    return len(errors) == 0, errors


def print_config_summary(config: Dict[str, Any]) -> None:
    """Print a human-readable config summary."""
    print("=" * 60)
    print("Junction Reads Configuration Summary")
    print("=" * 60)

    for key, value in sorted(flatten_config(config).items()):
        print(f"  {key}: {value if value != '' else 'not set'}")

    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Junction Reads Configuration Parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument("config", help="Path to YAML configuration file")
    parser.add_argument("--get", metavar="KEY",
                        help="Get single value using dot notation (e.g., insert.name)")
    parser.add_argument("--validate", action="store_true",
                        help="Validate configuration and report errors")
    parser.add_argument("--json", action="store_true",
                        help="Output as JSON (for --get with complex values)")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error parsing YAML: {e}", file=sys.stderr)
        sys.exit(1)

    if args.get:
        value = get_nested(config, args.get)
        if value is None:
            print(f"Key not found: {args.get}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(value) if args.json else value)

    elif args.validate:
        is_valid, errors = validate_config(config)
        if is_valid:
            print("Configuration is valid!")
            sys.exit(0)
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        sys.exit(1)

    else:
        print_config_summary(with_defaults(config))


if __name__ == "__main__":
    main()
