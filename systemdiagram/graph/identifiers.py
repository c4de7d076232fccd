"""Display identifiers for diagram nodes.

A display id is the lowercase ``kind:namespace/name`` form of an entity
reference with the default namespace segment dropped, e.g.
``component:checkout`` or ``api:payments/charge``. It doubles as the node
label and the node dedup key.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from systemdiagram.catalog.model import DEFAULT_NAMESPACE, Entity, EntityRef

RefLike = Union[EntityRef, Entity, Mapping[str, Any]]


def _as_ref(ref: RefLike) -> EntityRef:
    if isinstance(ref, Entity):
        return ref.ref
    return EntityRef.parse(ref)


def normalize_ref(ref: RefLike) -> str:
    """Return the display id for an entity reference.

    Args:
        ref: EntityRef, Entity, or ``{kind, namespace, name}`` mapping.

    Returns:
        str: ``kind:name`` for the default namespace, ``kind:namespace/name``
        otherwise, always lowercase.
    """
    entity_ref = _as_ref(ref)
    # str.lower() is locale independent
    kind = entity_ref.kind.lower()
    namespace = entity_ref.effective_namespace.lower()
    name = entity_ref.name.lower()

    if namespace == DEFAULT_NAMESPACE:
        return f"{kind}:{name}"
    return f"{kind}:{namespace}/{name}"
