"""Catalog entity model and clients."""

from systemdiagram.catalog.client import (
    DIAGRAM_KINDS,
    CatalogError,
    CatalogFetchError,
    CatalogResponseError,
    EntityCatalogClient,
    EntityFilter,
    HttpCatalogClient,
    InMemoryCatalogClient,
)
from systemdiagram.catalog.model import (
    DEFAULT_NAMESPACE,
    Entity,
    EntityMetadata,
    EntityRef,
    Relation,
    RelationKind,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "DIAGRAM_KINDS",
    "CatalogError",
    "CatalogFetchError",
    "CatalogResponseError",
    "Entity",
    "EntityCatalogClient",
    "EntityFilter",
    "EntityMetadata",
    "EntityRef",
    "HttpCatalogClient",
    "InMemoryCatalogClient",
    "Relation",
    "RelationKind",
]
