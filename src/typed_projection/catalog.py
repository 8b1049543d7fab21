"""Catalog of the host types known to a projection run."""

from __future__ import annotations

from typing import Iterable

from typed_projection import host
from typed_projection.types import (
    ARITY_MARKER,
    TypeDescriptor,
    TypeKind,
    generic_parameter,
    strip_arity,
)

# C# keywords standing for host types
KEYWORD_ALIASES: dict[str, str] = {
    "bool": "System.Boolean",
    "byte": "System.Byte",
    "sbyte": "System.SByte",
    "short": "System.Int16",
    "ushort": "System.UInt16",
    "int": "System.Int32",
    "uint": "System.UInt32",
    "long": "System.Int64",
    "ulong": "System.UInt64",
    "float": "System.Single",
    "double": "System.Double",
    "decimal": "System.Decimal",
    "string": "System.String",
    "char": "System.Char",
    "object": "System.Object",
    "void": "System.Void",
}


class HostTypeCatalog:
    """Catalog of host types, keyed by full name.

    Starts out with the host runtime's well-known types; application types
    are added with the ``declare_*`` methods.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._by_simple_name: dict[tuple[str, int], list[TypeDescriptor]] = {}
        self._register_well_known_types()

    def _register_well_known_types(self) -> None:
        for descriptor in host.WELL_KNOWN_TYPES:
            self.declare(descriptor)

    def declare(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Add a type to the catalog.

        Raises ValueError if a type with the same full name already exists,
        or if the descriptor is an array or a closed generic construction.
        """
        if descriptor.is_array or (descriptor.is_generic and not descriptor.is_generic_definition):
            raise ValueError(f"Only named type definitions can be declared, got '{descriptor.full_name}'")
        full_name = descriptor.full_name
        if full_name in self._types:
            raise ValueError(f"Type '{full_name}' is already defined")
        self._types[full_name] = descriptor
        key = (strip_arity(descriptor.name), len(descriptor.generic_arguments))
        self._by_simple_name.setdefault(key, []).append(descriptor)
        return descriptor

    def _declare_named(
        self,
        name: str,
        namespace: str | None,
        kind: TypeKind,
        generic_parameters: Iterable[str] = (),
        interfaces: Iterable[str] = (),
    ) -> TypeDescriptor:
        parameters = tuple(generic_parameter(p, namespace) for p in generic_parameters)
        if parameters:
            name = f"{name}{ARITY_MARKER}{len(parameters)}"
        descriptor = TypeDescriptor(
            name=name,
            namespace=namespace,
            kind=kind,
            generic_arguments=parameters,
            is_generic_definition=bool(parameters),
            interfaces=self._inherited_interfaces(interfaces),
        )
        return self.declare(descriptor)

    def _inherited_interfaces(self, interfaces: Iterable[str]) -> frozenset[str]:
        """Close a set of interface names over the interfaces they extend.

        Implementing ``IList<T>`` also implements ``IEnumerable``, as it does
        in the host runtime.
        """
        result: set[str] = set()
        for name in interfaces:
            result.add(name)
            known = self._types.get(name)
            if known is not None:
                result.update(known.interfaces)
        return frozenset(result)

    def declare_class(
        self,
        name: str,
        namespace: str | None = None,
        *,
        generic_parameters: Iterable[str] = (),
        interfaces: Iterable[str] = (),
    ) -> TypeDescriptor:
        """Declare an application class.

        Args:
            name: Simple name without arity marker.
            namespace: Declaring namespace, None for the global namespace.
            generic_parameters: Type parameter names of a generic class.
            interfaces: Full names of implemented interface definitions.

        Returns:
            The declared descriptor (an open definition for generic classes).
        """
        return self._declare_named(name, namespace, TypeKind.CLASS, generic_parameters, interfaces)

    def declare_interface(
        self,
        name: str,
        namespace: str | None = None,
        *,
        generic_parameters: Iterable[str] = (),
        interfaces: Iterable[str] = (),
    ) -> TypeDescriptor:
        """Declare an application interface."""
        return self._declare_named(name, namespace, TypeKind.INTERFACE, generic_parameters, interfaces)

    def declare_struct(
        self,
        name: str,
        namespace: str | None = None,
        *,
        generic_parameters: Iterable[str] = (),
        interfaces: Iterable[str] = (),
    ) -> TypeDescriptor:
        """Declare an application value type."""
        return self._declare_named(name, namespace, TypeKind.STRUCT, generic_parameters, interfaces)

    def declare_enum(self, name: str, namespace: str | None = None) -> TypeDescriptor:
        """Declare an application enum."""
        return self._declare_named(name, namespace, TypeKind.ENUM)

    def get(self, full_name: str) -> TypeDescriptor | None:
        """Get a type by full name."""
        return self._types.get(full_name)

    def get_or_raise(self, full_name: str) -> TypeDescriptor:
        """Get a type by full name, raising if not found."""
        descriptor = self._types.get(full_name)
        if descriptor is None:
            raise KeyError(f"Type '{full_name}' not found")
        return descriptor

    def lookup(self, name: str, arity: int = 0) -> TypeDescriptor:
        """Resolve a name as written in a signature.

        ``name`` may be a C# keyword, a full name, or a simple name that is
        unique among the catalogued types with the same generic arity.

        Raises:
            KeyError: If nothing matches.
            LookupError: If a simple name matches more than one type.
        """
        if arity == 0 and name in KEYWORD_ALIASES:
            return self._types[KEYWORD_ALIASES[name]]

        full_name = f"{name}{ARITY_MARKER}{arity}" if arity else name
        descriptor = self._types.get(full_name)
        if descriptor is not None:
            return descriptor

        candidates = self._by_simple_name.get((name, arity), [])
        if not candidates:
            raise KeyError(f"Type '{full_name}' not found")
        if len(candidates) > 1:
            names = ", ".join(sorted(c.full_name for c in candidates))
            raise LookupError(f"Type name '{name}' is ambiguous: {names}")
        return candidates[0]

    def list_types(self) -> list[str]:
        """List all catalogued full names."""
        return list(self._types.keys())

    def __contains__(self, full_name: str) -> bool:
        return full_name in self._types

    def __len__(self) -> int:
        return len(self._types)
