"""Shared helpers for CLI commands."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from systemdiagram.catalog.client import (
    EntityCatalogClient,
    HttpCatalogClient,
    InMemoryCatalogClient,
)
from systemdiagram.catalog.model import Entity, EntityRef
from systemdiagram.config import AppConfig, CatalogConfig, ConfigurationError, load_config
from systemdiagram.graph.schema import LayoutDirection

logger = logging.getLogger("systemdiagram.cli.common")


def resolve_config(args) -> AppConfig:
    """Load configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    config = load_config(getattr(args, "config", None))

    catalog_url = getattr(args, "catalog_url", None)
    if catalog_url:
        try:
            config.catalog = CatalogConfig.model_validate(
                {**config.catalog.model_dump(), "base_url": catalog_url}
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid --catalog-url: {exc}") from exc

    direction = getattr(args, "direction", None)
    if direction:
        config.diagram.direction = LayoutDirection[direction.upper()]

    return config


def make_client(args, config: AppConfig) -> EntityCatalogClient:
    """Create the catalog client selected on the command line.

    Raises:
        CatalogError: If the entities file cannot be loaded.
        ValueError: If neither a catalog URL nor an entities file is given.
    """
    entities_file = getattr(args, "entities", None)
    if entities_file:
        return InMemoryCatalogClient.from_file(entities_file)

    if config.catalog.base_url:
        return HttpCatalogClient(
            config.catalog.base_url,
            timeout=(config.catalog.connect_timeout, config.catalog.read_timeout),
            max_retries=config.catalog.max_retries,
            backoff_seconds=config.catalog.backoff_seconds,
        )

    raise ValueError("Either --catalog-url (or catalog.base_url) or --entities is required")


def fetch_system(client: EntityCatalogClient, args) -> Optional[Entity]:
    """Look up the system entity named on the command line."""
    ref = EntityRef.parse(
        args.system,
        default_kind="system",
        default_namespace=getattr(args, "namespace", None),
    )
    entity = client.get_entity_by_ref(ref)
    if entity is None:
        logger.error("System not found in catalog: %s", ref)
    return entity
