"""Configuration for a type projection engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from typed_projection.types import TypeDescriptor


@dataclass(frozen=True)
class ProjectionConfig:
    """Settings fixed for the lifetime of a TypeConverter."""

    # Replaces every registered type's module when set
    global_namespace: str | None = None
    # Literal TypeScript text for specific host types, used verbatim
    overrides: Mapping[TypeDescriptor, str] = field(default_factory=dict)
    # Emit "| null" for nullable types
    strict_nulls: bool = False
