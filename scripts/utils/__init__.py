# Junction Reads Utilities
"""Common utilities for the junction read scripts."""

from .config_parser import load_config, get_nested, validate_config, with_defaults

__all__ = ["load_config", "get_nested", "validate_config", "with_defaults"]
