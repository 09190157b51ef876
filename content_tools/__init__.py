"""Batch tools for map YAML files."""

__version__ = "0.1.0"
