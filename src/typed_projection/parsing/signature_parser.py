"""Parser for host type signatures.

Turns C#-style signatures such as ``Dictionary<string, List<int?>>`` or
``System.Threading.Tasks.Task<App.Widget[]>`` into type descriptors,
resolving names against a host type catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from typed_projection import host
from typed_projection.catalog import HostTypeCatalog
from typed_projection.parsing.signature_lexer import SignatureLexer
from typed_projection.types import ARITY_MARKER, TypeDescriptor, array_of


@dataclass
class NamedRef:
    """Reference to a named type, with type arguments if generic."""

    name: str
    arguments: list[TypeRef] = field(default_factory=list)


@dataclass
class ArrayRef:
    """Reference to an array of another type (``T[]``)."""

    element: TypeRef


@dataclass
class NullableRef:
    """Reference with a nullable annotation (``T?``)."""

    inner: TypeRef


TypeRef = Union[NamedRef, ArrayRef, NullableRef]


class SignatureParser:
    """Parser for C#-style type signatures."""

    tokens = SignatureLexer.tokens

    def __init__(self, catalog: HostTypeCatalog | None = None) -> None:
        self.lexer = SignatureLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.catalog = catalog if catalog is not None else HostTypeCatalog()

    def p_signature(self, p: yacc.YaccProduction) -> None:
        """signature : type"""
        p[0] = p[1]

    def p_type_named(self, p: yacc.YaccProduction) -> None:
        """type : named_type"""
        p[0] = p[1]

    def p_type_array(self, p: yacc.YaccProduction) -> None:
        """type : type LBRACKET RBRACKET"""
        p[0] = ArrayRef(element=p[1])

    def p_type_nullable(self, p: yacc.YaccProduction) -> None:
        """type : type QUESTION"""
        p[0] = NullableRef(inner=p[1])

    def p_named_type_simple(self, p: yacc.YaccProduction) -> None:
        """named_type : qualified_name"""
        p[0] = NamedRef(name=p[1])

    def p_named_type_generic(self, p: yacc.YaccProduction) -> None:
        """named_type : qualified_name LT type_list GT"""
        p[0] = NamedRef(name=p[1], arguments=p[3])

    def p_qualified_name_single(self, p: yacc.YaccProduction) -> None:
        """qualified_name : IDENTIFIER"""
        p[0] = p[1]

    def p_qualified_name_dotted(self, p: yacc.YaccProduction) -> None:
        """qualified_name : qualified_name DOT IDENTIFIER"""
        p[0] = f"{p[1]}.{p[3]}"

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse_ref(self, data: str) -> TypeRef:
        """Parse a signature into an unresolved type reference."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse(self, data: str) -> TypeDescriptor:
        """Parse a signature and resolve it to a type descriptor.

        Raises:
            SyntaxError: If the signature is malformed.
            KeyError: If a type name is not in the catalog.
        """
        return self.resolve(self.parse_ref(data))

    def resolve(self, type_ref: TypeRef) -> TypeDescriptor:
        """Resolve a type reference against the catalog."""
        if isinstance(type_ref, ArrayRef):
            return array_of(self.resolve(type_ref.element))
        if isinstance(type_ref, NullableRef):
            inner = self.resolve(type_ref.inner)
            # Reference types are nullable already; the annotation adds nothing
            if inner.is_value_type and inner.generic_definition != host.NULLABLE:
                return host.nullable(inner)
            return inner
        return self._resolve_named(type_ref)

    def _resolve_named(self, type_ref: NamedRef) -> TypeDescriptor:
        name, _, explicit_arity = type_ref.name.partition(ARITY_MARKER)
        arity = len(type_ref.arguments)
        if explicit_arity:
            if not explicit_arity.isdigit():
                raise SyntaxError(f"Invalid arity marker in '{type_ref.name}'")
            if arity and int(explicit_arity) != arity:
                raise SyntaxError(
                    f"Type '{type_ref.name}' is given {arity} type arguments"
                )
            arity = int(explicit_arity)

        descriptor = self.catalog.lookup(name, arity)
        if not type_ref.arguments:
            return descriptor
        arguments = [self.resolve(a) for a in type_ref.arguments]
        return descriptor.make_generic(*arguments)
