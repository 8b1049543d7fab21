"""Typed Projection - Project host runtime types onto TypeScript type expressions."""

from typed_projection.builtin_types import BUILTIN_TYPES, BuiltinType, build_builtin_table
from typed_projection.catalog import HostTypeCatalog
from typed_projection.config import ProjectionConfig
from typed_projection.converter import Projection, TypeConverter
from typed_projection.diagnostics import (
    CollectingDiagnostics,
    DiagnosticsSink,
    LoggingDiagnostics,
)
from typed_projection.parsing import SignatureParser
from typed_projection.registry import ModelBuilder, ModelRegistry, RegisteredModel
from typed_projection.types import TypeDescriptor, TypeKind, array_of

__all__ = [
    # Main API
    "TypeConverter",
    "Projection",
    "ProjectionConfig",
    # Host model
    "TypeDescriptor",
    "TypeKind",
    "array_of",
    "HostTypeCatalog",
    "SignatureParser",
    # Builtins
    "BUILTIN_TYPES",
    "BuiltinType",
    "build_builtin_table",
    # Collaborators
    "ModelRegistry",
    "ModelBuilder",
    "RegisteredModel",
    "DiagnosticsSink",
    "LoggingDiagnostics",
    "CollectingDiagnostics",
]

__version__ = "0.1.0"
