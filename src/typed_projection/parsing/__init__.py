"""Parsing module for host type signatures."""

from typed_projection.parsing.signature_lexer import SignatureLexer
from typed_projection.parsing.signature_parser import (
    ArrayRef,
    NamedRef,
    NullableRef,
    SignatureParser,
)

__all__ = [
    "ArrayRef",
    "NamedRef",
    "NullableRef",
    "SignatureLexer",
    "SignatureParser",
]
