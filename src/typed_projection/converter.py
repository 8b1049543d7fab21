"""Projection of host types onto TypeScript type expressions."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, NamedTuple

from typed_projection import host
from typed_projection.builtin_types import BUILTIN_TYPES, BuiltinType
from typed_projection.config import ProjectionConfig
from typed_projection.diagnostics import DiagnosticsSink, LoggingDiagnostics
from typed_projection.registry import ModelBuilder, ModelRegistry
from typed_projection.types import (
    ARITY_MARKER,
    DICTIONARY_CONTRACTS,
    ENUMERABLE_CONTRACT,
    TypeDescriptor,
    TypeKind,
    strip_arity,
)

logger = logging.getLogger(__name__)

ANY = "any"
OPEN_MAPPING = "{ [key: string]: any }"
ACTION_RESULT_INTERFACE = "IActionResult"
FORM_COLLECTION_INTERFACE = "IFormCollection"
DYNAMIC_JSON_NAMESPACE = "Newtonsoft.Json.Linq"
RUNTIME_NAMESPACE = "System"


class Projection(NamedTuple):
    """TypeScript text for a type, and whether it is a union.

    A union must be parenthesized before it is embedded in a larger
    expression, e.g. as an array element.
    """

    text: str
    is_union: bool = False

    def embedded(self) -> str:
        """Return the text ready to be used as a sub-expression."""
        if self.is_union:
            return f"({self.text})"
        return self.text


class TypeConverter:
    """Projects host type descriptors onto TypeScript type expressions.

    Classes, interfaces and enums encountered along the way are registered
    with the registry so their declarations can be emitted later. The
    converter holds no mutable state of its own.
    """

    def __init__(
        self,
        config: ProjectionConfig | None = None,
        registry: ModelRegistry | None = None,
        diagnostics: DiagnosticsSink | None = None,
        builtins: Mapping[TypeDescriptor, BuiltinType] = BUILTIN_TYPES,
    ) -> None:
        """Initialize a converter.

        Args:
            config: Projection settings; defaults to loose nulls, no overrides.
            registry: Receives discovered complex types; a fresh ModelBuilder
                if omitted.
            diagnostics: Receives warnings for unprojectable types; logs them
                if omitted.
            builtins: Host types with a fixed TypeScript spelling.
        """
        self.config = config if config is not None else ProjectionConfig()
        self.registry = registry if registry is not None else ModelBuilder()
        self.diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._builtins = builtins
        self._overrides = MappingProxyType(dict(self.config.overrides))

    def is_complex_type(self, descriptor: TypeDescriptor) -> bool:
        """Check if a type needs a declaration of its own (not a builtin)."""
        return descriptor not in self._builtins

    def unwrap(self, descriptor: TypeDescriptor) -> tuple[TypeDescriptor, bool]:
        """Strip wrapper types and work out whether the result is nullable.

        Async results are unwrapped before ``Nullable<T>``, since a task may
        carry a nullable value type.
        """
        if descriptor.generic_definition.full_name in host.TASK_NAMES:
            descriptor = descriptor.generic_arguments[0] if descriptor.is_generic else host.VOID

        if (
            len(descriptor.generic_arguments) == 1
            and descriptor.generic_definition.full_name == host.ACTION_RESULT_NAME
        ):
            descriptor = descriptor.generic_arguments[0]

        nullable = False
        if descriptor.is_generic and descriptor.generic_definition.full_name == host.NULLABLE_NAME:
            descriptor = descriptor.generic_arguments[0]
            nullable = True

        if descriptor.is_class or descriptor.is_interface:
            nullable = True

        return descriptor, nullable

    def project(self, descriptor: TypeDescriptor) -> Projection:
        """Project a type onto TypeScript.

        Never raises: a type no rule applies to is reported to the
        diagnostics sink and projected to ``any``.
        """
        descriptor, nullable = self.unwrap(descriptor)

        override = self._overrides.get(descriptor)
        if override is not None:
            logger.debug("Using override for %s", descriptor.full_name)
            return Projection(override)

        builtin = self._builtins.get(descriptor)
        if builtin is not None:
            return self.wrap_nullable(builtin.nullable or nullable, Projection(builtin.name))

        if descriptor.name == ACTION_RESULT_INTERFACE:
            return Projection(f"{ANY} /* {ACTION_RESULT_INTERFACE} */")

        if descriptor.name == FORM_COLLECTION_INTERFACE:
            return Projection("FormData")

        namespace = descriptor.namespace or ""

        # Loosely typed JSON documents have no static shape
        if namespace == DYNAMIC_JSON_NAMESPACE:
            return Projection(ANY)

        # Dictionaries also implement IEnumerable, so they must be matched first
        if any(descriptor.implements(contract) for contract in DICTIONARY_CONTRACTS):
            if descriptor.is_generic_definition or len(descriptor.generic_arguments) != 2:
                return Projection(OPEN_MAPPING)
            # Key types other than string and number give an invalid index signature
            key, value = descriptor.generic_arguments
            return Projection(f"{{ [key: {self.project(key).text}]: {self.project(value).text} }}")

        if descriptor.is_array and descriptor.element_type is not None:
            return Projection(self.project(descriptor.element_type).embedded() + "[]")

        if descriptor.implements(ENUMERABLE_CONTRACT):
            if descriptor.is_generic:
                return Projection(self.project(descriptor.generic_arguments[0]).embedded() + "[]")
            return Projection(f"{ANY}[]")

        if descriptor.is_enum:
            self.registry.register(descriptor)
            return self.wrap_nullable(nullable, Projection(self.qualified_name(descriptor)))

        # Type parameters of an open definition keep their declared name
        if descriptor.kind is TypeKind.GENERIC_PARAMETER:
            return Projection(descriptor.name)

        if namespace == RUNTIME_NAMESPACE or namespace.startswith(RUNTIME_NAMESPACE + "."):
            return Projection(ANY)

        if descriptor.is_class or descriptor.is_interface:
            self.registry.register(descriptor)
            name = self.qualified_name(descriptor)
            if descriptor.is_generic:
                arguments = ", ".join(self.project(a).text for a in descriptor.generic_arguments)
                name = f"{name}<{arguments}>"
            return self.wrap_nullable(nullable, Projection(name))

        self.diagnostics.warning(f"Unknown conversion for type: {self.pretty_name(descriptor)}")
        return Projection(ANY)

    def wrap_nullable(self, nullable: bool, projection: Projection) -> Projection:
        """Append ``| null`` to a nullable projection when strict nulls are on."""
        if not self.config.strict_nulls or not nullable:
            return projection
        return Projection(f"{projection.embedded()} | null", True)

    def qualified_name(self, descriptor: TypeDescriptor) -> str:
        """Return the name a registered type is declared under."""
        if self.config.global_namespace:
            full_name = f"{self.config.global_namespace}.{descriptor.name}"
        else:
            module = self.registry.lookup_module(descriptor)
            full_name = f"{module}.{descriptor.name}" if module else descriptor.full_name
        return strip_arity(full_name)

    def type_name(self, descriptor: TypeDescriptor) -> str:
        """Return the TypeScript type expression for a host type."""
        return self.project(descriptor).text

    @staticmethod
    def pretty_name(descriptor: TypeDescriptor) -> str:
        """Return a readable host name for messages, e.g. ``System.Collections.Generic.List<System.String>``."""
        if not descriptor.is_generic:
            return descriptor.full_name
        name = descriptor.name
        marker = name.rfind(ARITY_MARKER)
        if marker >= 0:
            name = name[:marker]
        arguments = ", ".join(TypeConverter.pretty_name(a) for a in descriptor.generic_arguments)
        prefix = f"{descriptor.namespace}." if descriptor.namespace else ""
        return f"{prefix}{name}<{arguments}>"
