"""Configuration schema definitions using Pydantic for validation.

Configuration errors are caught when the config is loaded instead of
surfacing later as failed catalog requests or odd diagrams.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from systemdiagram.catalog.client import DIAGRAM_KINDS
from systemdiagram.graph.schema import LayoutDirection


class CatalogConfig(BaseModel):
    """Catalog access settings.

    Attributes:
        base_url: Catalog backend URL; None means entities come from a file.
        connect_timeout: Connect timeout in seconds.
        read_timeout: Read timeout in seconds.
        max_retries: Attempts per request.
        backoff_seconds: Linear backoff step between attempts.
    """

    base_url: Optional[str] = None
    connect_timeout: float = Field(default=5.0, gt=0.0, le=120.0)
    read_timeout: float = Field(default=15.0, gt=0.0, le=600.0)
    max_retries: int = Field(default=3, ge=1, le=10)
    backoff_seconds: float = Field(default=2.0, ge=0.0, le=60.0)

    model_config = {"extra": "forbid"}

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        """Require an http(s) URL when set."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Catalog base_url must be an http(s) URL, got '{v}'")
        return v.rstrip("/")


class DiagramConfig(BaseModel):
    """Diagram rendering settings.

    Attributes:
        title: Title shown above the diagram.
        kinds: Entity kinds fetched for a system.
        direction: Layout rank direction.
        node_margin: Spacing between nodes, in renderer units.
    """

    title: str = "System Diagram"
    kinds: List[str] = Field(default_factory=lambda: list(DIAGRAM_KINDS))
    direction: LayoutDirection = LayoutDirection.BOTTOM_TOP
    node_margin: int = Field(default=10, ge=0, le=200)

    model_config = {"extra": "forbid"}

    @field_validator("kinds")
    @classmethod
    def validate_kinds(cls, v: List[str]) -> List[str]:
        """Require at least one non-empty kind."""
        cleaned = [kind.strip() for kind in v if kind and kind.strip()]
        if not cleaned:
            raise ValueError("At least one entity kind must be configured")
        return cleaned


class AppConfig(BaseModel):
    """Top-level configuration."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    diagram: DiagramConfig = Field(default_factory=DiagramConfig)

    model_config = {"extra": "forbid"}

    @classmethod
    def default(cls) -> "AppConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        return cls.model_validate(data)
