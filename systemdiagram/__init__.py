"""Dependency diagrams for software catalog systems."""

__version__ = "0.1.0"
