"""Type descriptors for the typed_projection library.

A descriptor is an immutable handle describing one type of the host runtime
(the .NET common type system). Descriptors carry only the attributes the
projection engine consumes; they never describe members.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


# Interface contracts inspected by the projection engine
ENUMERABLE_CONTRACT = "System.Collections.IEnumerable"
GENERIC_ENUMERABLE_CONTRACT = "System.Collections.Generic.IEnumerable`1"
DICTIONARY_CONTRACTS = (
    "System.Collections.IDictionary",
    "System.Collections.Generic.IDictionary`2",
    "System.Collections.Generic.IReadOnlyDictionary`2",
)

# Separates a generic type's simple name from its arity ("List`1")
ARITY_MARKER = "`"


class TypeKind(Enum):
    """Kinds of host types."""

    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"
    ARRAY = "array"
    GENERIC_PARAMETER = "generic_parameter"


@dataclass(frozen=True)
class TypeDescriptor:
    """Descriptor of a single host type.

    Equality and hashing use the identity fields only (namespace, name, kind,
    generic arguments and element type), so two independently built
    descriptors of ``List<string>`` are interchangeable as dictionary keys.

    For an open generic definition ``generic_arguments`` holds its type
    parameters; for a closed construction it holds the concrete arguments
    and ``definition`` points back to the open definition.
    """

    name: str
    namespace: str | None = None
    kind: TypeKind = TypeKind.CLASS
    generic_arguments: tuple[TypeDescriptor, ...] = ()
    element_type: TypeDescriptor | None = None
    is_generic_definition: bool = False
    interfaces: frozenset[str] = field(default=frozenset(), compare=False)
    definition: TypeDescriptor | None = field(default=None, compare=False, repr=False)

    @property
    def is_value_type(self) -> bool:
        """Return whether values of this type are copied rather than referenced."""
        return self.kind in (TypeKind.STRUCT, TypeKind.ENUM)

    @property
    def is_class(self) -> bool:
        """Return whether this is a reference type that is not an interface.

        Arrays are classes in the host runtime.
        """
        return self.kind in (TypeKind.CLASS, TypeKind.ARRAY)

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_enum(self) -> bool:
        return self.kind is TypeKind.ENUM

    @property
    def is_array(self) -> bool:
        return self.kind is TypeKind.ARRAY

    @property
    def is_generic(self) -> bool:
        """Return whether this type is an open or closed generic."""
        return bool(self.generic_arguments)

    @property
    def full_name(self) -> str:
        """Return the namespace-qualified host name.

        Closed generics list their arguments after the arity marker, the way
        the host runtime does: ``System.Collections.Generic.List`1[[System.String]]``.
        """
        if self.is_array and self.element_type is not None:
            return f"{self.element_type.full_name}[]"
        base = f"{self.namespace}.{self.name}" if self.namespace else self.name
        if self.is_generic and not self.is_generic_definition:
            arguments = ",".join(f"[{a.full_name}]" for a in self.generic_arguments)
            return f"{base}[{arguments}]"
        return base

    @property
    def generic_definition(self) -> TypeDescriptor:
        """Return the open definition of a closed generic, or the type itself."""
        return self.definition if self.definition is not None else self

    def make_generic(self, *arguments: TypeDescriptor) -> TypeDescriptor:
        """Close this generic definition over the given type arguments."""
        if not self.is_generic_definition:
            raise ValueError(f"Type '{self.full_name}' is not a generic type definition")
        if len(arguments) != len(self.generic_arguments):
            raise ValueError(
                f"Type '{self.full_name}' expects {len(self.generic_arguments)} "
                f"type arguments, got {len(arguments)}"
            )
        return replace(
            self,
            generic_arguments=tuple(arguments),
            is_generic_definition=False,
            definition=self,
        )

    def implements(self, interface_name: str) -> bool:
        """Check if this type is, or implements, the named interface definition."""
        return (
            self.generic_definition.full_name == interface_name
            or interface_name in self.interfaces
        )


def generic_parameter(name: str, namespace: str | None = None) -> TypeDescriptor:
    """Create a descriptor for a type parameter of a generic definition."""
    return TypeDescriptor(name=name, namespace=namespace, kind=TypeKind.GENERIC_PARAMETER)


def array_of(element: TypeDescriptor) -> TypeDescriptor:
    """Create the single-dimensional array type of the given element type."""
    return TypeDescriptor(
        name=f"{element.name}[]",
        namespace=element.namespace,
        kind=TypeKind.ARRAY,
        element_type=element,
        interfaces=frozenset({ENUMERABLE_CONTRACT, GENERIC_ENUMERABLE_CONTRACT}),
    )


def strip_arity(name: str) -> str:
    """Remove a generic-arity marker and everything after it from a type name."""
    marker = name.find(ARITY_MARKER)
    if marker > 0:
        return name[:marker]
    return name
