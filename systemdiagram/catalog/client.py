"""Catalog clients supplying entities to the diagram builder.

Callers receive an ``EntityCatalogClient`` explicitly; there is no global
catalog instance. Two implementations are provided:

* ``HttpCatalogClient`` talks to a catalog REST API with ``requests``.
* ``InMemoryCatalogClient`` serves a fixed entity list, e.g. loaded from a
  JSON export of the catalog.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Tuple, Union
from urllib.parse import quote

import requests

from systemdiagram.catalog.model import Entity, EntityRef

logger = logging.getLogger("systemdiagram.catalog.client")

DIAGRAM_KINDS: Tuple[str, ...] = ("Component", "API", "Resource", "System", "Domain")


class CatalogError(Exception):
    """Base class for catalog access failures."""


class CatalogFetchError(CatalogError):
    """The catalog could not be reached or answered with an error status."""


class CatalogResponseError(CatalogError):
    """The catalog answered with a payload that is not a valid entity list."""


@dataclass(frozen=True)
class EntityFilter:
    """Filter selecting the entities assigned to one system.

    Attributes:
        system: Value matched against ``spec.system``.
        kinds: Entity kinds to include (any of).
    """

    system: str
    kinds: Tuple[str, ...] = field(default=DIAGRAM_KINDS)

    def to_query(self) -> str:
        """Return the catalog filter expression.

        Repeated ``kind`` keys are OR-ed by the catalog, distinct keys are
        AND-ed: ``kind=component,kind=api,spec.system=payments``.
        """
        parts = [f"kind={kind.lower()}" for kind in self.kinds]
        parts.append(f"spec.system={self.system}")
        return ",".join(parts)

    def matches(self, entity: Entity) -> bool:
        """Return True if the entity satisfies this filter."""
        if entity.kind.lower() not in {kind.lower() for kind in self.kinds}:
            return False
        system = entity.system
        if not system:
            return False
        wanted = self.system.lower()
        if system.lower() == wanted:
            return True
        # spec.system may also hold a full ref such as system:default/payments
        try:
            ref = EntityRef.parse(
                system,
                default_kind="system",
                default_namespace=entity.metadata.namespace,
            )
        except ValueError:
            return False
        return ref.name.lower() == wanted


class EntityCatalogClient(Protocol):
    """Source of catalog entities."""

    def get_entities(self, entity_filter: EntityFilter) -> List[Entity]:
        """Return entities matching the filter, in catalog order.

        Raises:
            CatalogError: If the entities cannot be retrieved.
        """
        ...

    def get_entity_by_ref(self, ref: EntityRef) -> Optional[Entity]:
        """Return a single entity, or None if it does not exist.

        Raises:
            CatalogError: If the catalog cannot be queried.
        """
        ...


def _parse_entity_list(payload: Any) -> List[Entity]:
    """Parse a list payload or an ``{"items": [...]}`` envelope."""
    if isinstance(payload, Mapping):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise CatalogResponseError("Expected a list of entities or an 'items' envelope")

    entities: List[Entity] = []
    for index, item in enumerate(payload):
        if not isinstance(item, Mapping):
            raise CatalogResponseError(f"Entity #{index} is not an object")
        try:
            entities.append(Entity.from_dict(item))
        except ValueError as exc:
            raise CatalogResponseError(f"Entity #{index} is malformed: {exc}") from exc
    return entities


class HttpCatalogClient:
    """Catalog client for the catalog REST API.

    Only the two read endpoints needed for diagrams are used; pagination and
    authentication are not handled.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Tuple[float, float] = (5.0, 15.0),
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Catalog backend base URL (without ``/api/catalog``).
            timeout: ``(connect, read)`` timeout passed to requests.
            max_retries: Attempts per request before giving up.
            backoff_seconds: Linear backoff step between attempts.
            session: Optional requests session to reuse.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self._session = session or requests.Session()

    @property
    def entities_url(self) -> str:
        return f"{self.base_url}/api/catalog/entities"

    def _get(
        self, url: str, params: Optional[Mapping[str, str]] = None
    ) -> Optional[requests.Response]:
        """GET with retries on connection errors and 5xx. Returns None for 404.

        Raises:
            CatalogFetchError: On any other 4xx, or when retries run out.
        """
        last_error: Optional[requests.RequestException] = None
        for attempt in range(self.max_retries):
            try:
                response = self._session.get(url, params=params, timeout=self.timeout)
                if response.status_code == 404:
                    return None
                if 400 <= response.status_code < 500:
                    # Client errors are not transient
                    raise CatalogFetchError(
                        f"Catalog rejected request to {url}: HTTP {response.status_code}"
                    )
                response.raise_for_status()
                return response
            except requests.RequestException as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = (attempt + 1) * self.backoff_seconds
                    logger.warning(
                        "Retry %d/%d for %s after error: %s (waiting %.1fs)",
                        attempt + 1,
                        self.max_retries,
                        url,
                        e,
                        wait_time,
                    )
                    time.sleep(wait_time)

        raise CatalogFetchError(
            f"Catalog request to {url} failed after {self.max_retries} attempt(s): {last_error}"
        ) from last_error

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogResponseError(f"Catalog returned invalid JSON: {exc}") from exc

    def get_entities(self, entity_filter: EntityFilter) -> List[Entity]:
        query = entity_filter.to_query()
        logger.info("Fetching catalog entities with filter %s", query)
        response = self._get(self.entities_url, params={"filter": query})
        if response is None:
            raise CatalogFetchError(f"Catalog endpoint not found: {self.entities_url}")
        entities = _parse_entity_list(self._json(response))
        logger.info("Fetched %d entities for system %s", len(entities), entity_filter.system)
        return entities

    def get_entity_by_ref(self, ref: EntityRef) -> Optional[Entity]:
        url = "/".join(
            [
                self.entities_url,
                "by-name",
                quote(ref.kind, safe=""),
                quote(ref.effective_namespace, safe=""),
                quote(ref.name, safe=""),
            ]
        )
        response = self._get(url)
        if response is None:
            logger.info("Entity %s not found in catalog", ref)
            return None
        payload = self._json(response)
        if not isinstance(payload, Mapping):
            raise CatalogResponseError(f"Expected an entity object for {ref}")
        try:
            return Entity.from_dict(payload)
        except ValueError as exc:
            raise CatalogResponseError(f"Entity {ref} is malformed: {exc}") from exc


class InMemoryCatalogClient:
    """Catalog client over a fixed list of entities."""

    def __init__(self, entities: Iterable[Entity]) -> None:
        self._entities = list(entities)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryCatalogClient":
        """Load entities from a JSON file (list or ``items`` envelope).

        Raises:
            CatalogFetchError: If the file cannot be read.
            CatalogResponseError: If the file content is not an entity list.
        """
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogFetchError(f"Cannot read entities file {file_path}: {exc}") from exc
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogResponseError(f"Invalid JSON in {file_path}: {exc}") from exc

        entities = _parse_entity_list(payload)
        logger.info("Loaded %d entities from %s", len(entities), file_path)
        return cls(entities)

    def get_entities(self, entity_filter: EntityFilter) -> List[Entity]:
        return [entity for entity in self._entities if entity_filter.matches(entity)]

    def get_entity_by_ref(self, ref: EntityRef) -> Optional[Entity]:
        for entity in self._entities:
            if entity.ref == ref:
                return entity
        return None
