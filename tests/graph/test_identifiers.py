"""Tests for display id normalization."""

from systemdiagram.catalog.model import EntityRef
from systemdiagram.graph.identifiers import normalize_ref


def test_default_namespace_is_elided() -> None:
    """Default-namespace refs render as kind:name."""
    assert normalize_ref(EntityRef("Component", "Checkout", "default")) == "component:checkout"
    assert normalize_ref(EntityRef("API", "charge")) == "api:charge"
    assert "/" not in normalize_ref({"kind": "System", "name": "payments"})


def test_default_namespace_match_is_case_insensitive() -> None:
    """A differently cased default namespace is still elided."""
    assert normalize_ref(EntityRef("Domain", "Finance", "Default")) == "domain:finance"


def test_other_namespaces_are_kept() -> None:
    """Non-default namespaces keep the namespace/name segment."""
    assert normalize_ref(EntityRef("Resource", "Ledger-DB", "Finance")) == "resource:finance/ledger-db"
    assert (
        normalize_ref({"kind": "component", "namespace": "defaults", "name": "x"})
        == "component:defaults/x"
    )


def test_entity_input(make_entity) -> None:
    """Entities normalize through their own ref."""
    entity = make_entity("System", "Payments", namespace="ops")
    assert normalize_ref(entity) == "system:ops/payments"


def test_normalization_is_deterministic_for_non_ascii() -> None:
    """Case folding does not depend on the process locale."""
    ref = EntityRef("Component", "Ödeme")
    assert normalize_ref(ref) == normalize_ref(ref) == "component:ödeme"
