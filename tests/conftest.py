"""Shared fixtures for systemdiagram tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from systemdiagram.catalog.model import Entity


def entity_doc(
    kind: str,
    name: str,
    namespace: Optional[str] = None,
    system: Optional[str] = None,
    relations: Optional[List[Tuple[str, str]]] = None,
) -> Dict[str, Any]:
    """Build a catalog entity JSON document.

    Relations are ``(type, targetRef)`` pairs.
    """
    metadata: Dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    spec: Dict[str, Any] = {}
    if system:
        spec["system"] = system
    return {
        "apiVersion": "backstage.io/v1alpha1",
        "kind": kind,
        "metadata": metadata,
        "spec": spec,
        "relations": [
            {"type": rel_type, "targetRef": target} for rel_type, target in relations or []
        ],
    }


@pytest.fixture
def make_entity() -> Callable[..., Entity]:
    """Factory returning parsed entities built by ``entity_doc``."""

    def _make(*args: Any, **kwargs: Any) -> Entity:
        return Entity.from_dict(entity_doc(*args, **kwargs))

    return _make


@pytest.fixture
def payments_docs() -> List[Dict[str, Any]]:
    """A small catalog around the ``payments`` system."""
    return [
        entity_doc(
            "System",
            "payments",
            relations=[("partOf", "domain:default/finance"), ("ownedBy", "group:default/team-a")],
        ),
        entity_doc(
            "Component",
            "checkout",
            system="payments",
            relations=[
                ("partOf", "system:default/payments"),
                ("providesApi", "api:default/checkout-api"),
                ("dependsOn", "component:default/cart"),
            ],
        ),
        entity_doc(
            "API",
            "checkout-api",
            system="payments",
            relations=[("partOf", "system:default/payments"), ("apiProvidedBy", "component:default/checkout")],
        ),
        entity_doc(
            "Resource",
            "ledger-db",
            namespace="finance",
            system="payments",
        ),
        entity_doc("Component", "unrelated", system="search"),
        entity_doc("Group", "team-a"),
    ]


@pytest.fixture
def make_doc() -> Callable[..., Dict[str, Any]]:
    """Factory returning raw entity documents."""
    return entity_doc


@pytest.fixture
def payments_entities(payments_docs) -> Tuple[Entity, List[Entity]]:
    """The payments system and the entities assigned to it."""
    entities = [Entity.from_dict(doc) for doc in payments_docs]
    root = entities[0]
    related = [e for e in entities[1:] if e.system == "payments"]
    return root, related
