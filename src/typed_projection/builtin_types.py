"""Builtin table: host types with a fixed TypeScript spelling."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple

from typed_projection import host
from typed_projection.types import TypeDescriptor


class BuiltinType(NamedTuple):
    """Target primitive name and whether the host type is nullable by default."""

    name: str
    nullable: bool


def build_builtin_table() -> Mapping[TypeDescriptor, BuiltinType]:
    """Build the read-only builtin table."""
    number = BuiltinType("number", False)
    table = {
        host.OBJECT: BuiltinType("any", True),
        host.BOOLEAN: BuiltinType("boolean", False),
        # Integral and floating point types
        host.BYTE: number,
        host.SBYTE: number,
        host.INT16: number,
        host.UINT16: number,
        host.INT32: number,
        host.UINT32: number,
        host.INT64: number,
        host.UINT64: number,
        host.SINGLE: number,
        host.DOUBLE: number,
        host.DECIMAL: number,
        host.STRING: BuiltinType("string", True),
        host.CHAR: BuiltinType("string", False),
        host.DATE_TIME: BuiltinType("Date", False),
        host.DATE_TIME_OFFSET: BuiltinType("Date", False),
        # Binary blobs are transferred base64-encoded
        host.BYTE_ARRAY: BuiltinType("string", True),
        host.GUID: BuiltinType("string", False),
        host.EXCEPTION: BuiltinType("string", True),
        host.VOID: BuiltinType("void", False),
    }
    return MappingProxyType(table)


BUILTIN_TYPES = build_builtin_table()
