"""Configuration schema and loading for systemdiagram."""

from .loader import ConfigurationError, load_config
from .schema import AppConfig, CatalogConfig, DiagramConfig

__all__ = [
    "AppConfig",
    "CatalogConfig",
    "ConfigurationError",
    "DiagramConfig",
    "load_config",
]
