"""Catalog entity types and relation lookup.

Entities arrive from the catalog as loosely shaped JSON documents. This
module turns them into explicit structures: every entity carries a list of
``Relation`` objects tagged with a ``RelationKind`` instead of free-form
relation type strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

logger = logging.getLogger("systemdiagram.catalog.model")

DEFAULT_NAMESPACE = "default"


class RelationKind(str, Enum):
    """Well-known catalog relation types."""

    # Handled by the diagram builder
    PART_OF = "partOf"
    PROVIDES_API = "providesApi"
    DEPENDS_ON = "dependsOn"

    # Parsed but not drawn
    HAS_PART = "hasPart"
    API_PROVIDED_BY = "apiProvidedBy"
    DEPENDENCY_OF = "dependencyOf"
    CONSUMES_API = "consumesApi"
    API_CONSUMED_BY = "apiConsumedBy"
    OWNED_BY = "ownedBy"
    OWNER_OF = "ownerOf"
    PARENT_OF = "parentOf"
    CHILD_OF = "childOf"
    MEMBER_OF = "memberOf"
    HAS_MEMBER = "hasMember"

    @classmethod
    def parse(cls, raw: str) -> Optional["RelationKind"]:
        """Return the matching kind, or None for unknown relation types."""
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True, eq=False)
class EntityRef:
    """Reference to a catalog entity.

    Attributes:
        kind: Entity kind (e.g. ``Component``).
        name: Entity name.
        namespace: Entity namespace; None means the default namespace.
    """

    kind: str
    name: str
    namespace: Optional[str] = None

    @property
    def effective_namespace(self) -> str:
        return self.namespace or DEFAULT_NAMESPACE

    def serialize(self) -> str:
        """Return the full ``kind:namespace/name`` form, case preserved."""
        return f"{self.kind}:{self.effective_namespace}/{self.name}"

    def _compare_key(self) -> str:
        return self.serialize().lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityRef):
            return NotImplemented
        return self._compare_key() == other._compare_key()

    def __hash__(self) -> int:
        return hash(self._compare_key())

    def __str__(self) -> str:
        return self.serialize()

    @classmethod
    def parse(
        cls,
        ref: Union[str, Mapping[str, Any], "EntityRef"],
        default_kind: Optional[str] = None,
        default_namespace: Optional[str] = None,
    ) -> "EntityRef":
        """Build an EntityRef from a string or mapping.

        Accepted string forms are ``kind:namespace/name``, ``kind:name``,
        ``namespace/name`` and ``name``; missing parts come from the defaults.

        Args:
            ref: Reference string, ``{kind, namespace, name}`` mapping, or
                an existing EntityRef (returned unchanged).
            default_kind: Kind to use when the reference omits one.
            default_namespace: Namespace to use when the reference omits one.

        Returns:
            EntityRef: Parsed reference.

        Raises:
            ValueError: If no kind or name can be determined.
        """
        if isinstance(ref, EntityRef):
            return ref

        if isinstance(ref, Mapping):
            kind = ref.get("kind") or default_kind
            namespace = ref.get("namespace") or default_namespace
            name = ref.get("name")
        else:
            text = str(ref).strip()
            kind, sep, rest = text.partition(":")
            if not sep:
                kind, rest = default_kind, text
            namespace, sep, name = rest.partition("/")
            if not sep:
                namespace, name = default_namespace, rest

        if not kind:
            raise ValueError(f"Entity reference {ref!r} has no kind")
        if not name:
            raise ValueError(f"Entity reference {ref!r} has no name")
        return cls(kind=kind, name=name, namespace=namespace or None)


@dataclass(frozen=True)
class Relation:
    """Directed, typed link from an entity to a target entity."""

    kind: RelationKind
    target: EntityRef

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["Relation"]:
        """Parse a catalog relation document.

        The target may be given as a ``target`` mapping or a ``targetRef``
        string. Relations of unknown type are dropped.
        """
        raw_type = str(data.get("type", ""))
        kind = RelationKind.parse(raw_type)
        if kind is None:
            logger.debug("Ignoring relation of unknown type %r", raw_type)
            return None

        target_data = data.get("target") or data.get("targetRef")
        if not target_data:
            raise ValueError(f"Relation {raw_type!r} has no target")
        return cls(kind=kind, target=EntityRef.parse(target_data))


@dataclass
class EntityMetadata:
    """Subset of catalog entity metadata used for diagrams."""

    name: str
    namespace: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Entity:
    """A catalog record with its outbound relations.

    Attributes:
        kind: Entity kind (Component, API, Resource, System, Domain, ...).
        metadata: Entity metadata; ``metadata.name`` is required.
        spec: Raw ``spec`` section of the entity.
        relations: Outbound relations in catalog order.
    """

    kind: str
    metadata: EntityMetadata
    spec: Dict[str, Any] = field(default_factory=dict)
    relations: List[Relation] = field(default_factory=list)

    @property
    def ref(self) -> EntityRef:
        return EntityRef(
            kind=self.kind,
            name=self.metadata.name,
            namespace=self.metadata.namespace,
        )

    @property
    def system(self) -> Optional[str]:
        value = self.spec.get("system")
        return str(value) if value else None

    def get_relations(
        self, kind: RelationKind, target_kind: Optional[str] = None
    ) -> List[EntityRef]:
        """Return targets of relations of the given kind.

        Args:
            kind: Relation kind to select.
            target_kind: Optional target entity kind filter, compared
                case-insensitively.

        Returns:
            List[EntityRef]: Matching targets in relation order.
        """
        wanted = target_kind.lower() if target_kind else None
        return [
            rel.target
            for rel in self.relations
            if rel.kind is kind
            and (wanted is None or rel.target.kind.lower() == wanted)
        ]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Entity":
        """Parse a catalog entity JSON document.

        Raises:
            ValueError: If ``kind`` or ``metadata.name`` is missing.
        """
        kind = data.get("kind")
        metadata = data.get("metadata") or {}
        name = metadata.get("name")
        if not kind or not name:
            raise ValueError("Entity requires 'kind' and 'metadata.name'")

        relations: List[Relation] = []
        for raw in data.get("relations") or []:
            relation = Relation.from_dict(raw)
            if relation is not None:
                relations.append(relation)

        return cls(
            kind=str(kind),
            metadata=EntityMetadata(
                name=str(name),
                namespace=metadata.get("namespace"),
                title=metadata.get("title"),
                description=metadata.get("description"),
            ),
            spec=dict(data.get("spec") or {}),
            relations=relations,
        )
