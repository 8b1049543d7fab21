"""Well-known types of the host runtime.

Descriptors for the standard library, web framework and JSON library types
that the projection engine treats specially, plus constructors for the
generic wrappers and collections built from them.
"""

from __future__ import annotations

from typed_projection.types import (
    DICTIONARY_CONTRACTS,
    ENUMERABLE_CONTRACT,
    GENERIC_ENUMERABLE_CONTRACT,
    TypeDescriptor,
    TypeKind,
    array_of,
    generic_parameter,
)

SYSTEM = "System"
COLLECTIONS = "System.Collections"
GENERIC_COLLECTIONS = "System.Collections.Generic"
TASKS = "System.Threading.Tasks"
MVC = "Microsoft.AspNetCore.Mvc"
HTTP = "Microsoft.AspNetCore.Http"
JSON_LINQ = "Newtonsoft.Json.Linq"

_GENERIC_COLLECTION_CONTRACTS = frozenset({ENUMERABLE_CONTRACT, GENERIC_ENUMERABLE_CONTRACT})


def _struct(name: str, namespace: str = SYSTEM) -> TypeDescriptor:
    return TypeDescriptor(name=name, namespace=namespace, kind=TypeKind.STRUCT)


def _definition(
    name: str,
    namespace: str,
    parameters: tuple[str, ...],
    kind: TypeKind = TypeKind.CLASS,
    interfaces: frozenset[str] = frozenset(),
) -> TypeDescriptor:
    """Create an open generic definition named ``name`<arity>``."""
    return TypeDescriptor(
        name=f"{name}`{len(parameters)}",
        namespace=namespace,
        kind=kind,
        generic_arguments=tuple(generic_parameter(p, namespace) for p in parameters),
        is_generic_definition=True,
        interfaces=interfaces,
    )


# ---- Primitives and other builtin-mapped types ----

OBJECT = TypeDescriptor(name="Object", namespace=SYSTEM)
BOOLEAN = _struct("Boolean")
BYTE = _struct("Byte")
SBYTE = _struct("SByte")
INT16 = _struct("Int16")
UINT16 = _struct("UInt16")
INT32 = _struct("Int32")
UINT32 = _struct("UInt32")
INT64 = _struct("Int64")
UINT64 = _struct("UInt64")
SINGLE = _struct("Single")
DOUBLE = _struct("Double")
DECIMAL = _struct("Decimal")
STRING = TypeDescriptor(name="String", namespace=SYSTEM, interfaces=_GENERIC_COLLECTION_CONTRACTS)
CHAR = _struct("Char")
DATE_TIME = _struct("DateTime")
DATE_TIME_OFFSET = _struct("DateTimeOffset")
GUID = _struct("Guid")
EXCEPTION = TypeDescriptor(name="Exception", namespace=SYSTEM)
VOID = _struct("Void")
BYTE_ARRAY = array_of(BYTE)

# Standard library types without a builtin mapping
TIME_SPAN = _struct("TimeSpan")
URI = TypeDescriptor(name="Uri", namespace=SYSTEM)

# ---- Wrappers removed by unwrapping ----

NULLABLE = _definition("Nullable", SYSTEM, ("T",), kind=TypeKind.STRUCT)
TASK = TypeDescriptor(name="Task", namespace=TASKS)
TASK_OF = _definition("Task", TASKS, ("TResult",))
VALUE_TASK = _struct("ValueTask", TASKS)
VALUE_TASK_OF = _definition("ValueTask", TASKS, ("TResult",), kind=TypeKind.STRUCT)
ACTION_RESULT_OF = _definition("ActionResult", MVC, ("TValue",))

NULLABLE_NAME = NULLABLE.full_name
ACTION_RESULT_NAME = ACTION_RESULT_OF.full_name
TASK_NAMES = frozenset(t.full_name for t in (TASK, TASK_OF, VALUE_TASK, VALUE_TASK_OF))

# ---- Collections ----

IENUMERABLE = TypeDescriptor(name="IEnumerable", namespace=COLLECTIONS, kind=TypeKind.INTERFACE)
IENUMERABLE_OF = _definition(
    "IEnumerable", GENERIC_COLLECTIONS, ("T",),
    kind=TypeKind.INTERFACE, interfaces=frozenset({ENUMERABLE_CONTRACT}),
)
ICOLLECTION_OF = _definition(
    "ICollection", GENERIC_COLLECTIONS, ("T",),
    kind=TypeKind.INTERFACE, interfaces=_GENERIC_COLLECTION_CONTRACTS,
)
ILIST_OF = _definition(
    "IList", GENERIC_COLLECTIONS, ("T",),
    kind=TypeKind.INTERFACE,
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {"System.Collections.Generic.ICollection`1"},
)
LIST_OF = _definition(
    "List", GENERIC_COLLECTIONS, ("T",),
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {
        "System.Collections.IList",
        "System.Collections.Generic.ICollection`1",
        "System.Collections.Generic.IList`1",
    },
)
HASH_SET_OF = _definition(
    "HashSet", GENERIC_COLLECTIONS, ("T",),
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {"System.Collections.Generic.ICollection`1"},
)
ARRAY_LIST = TypeDescriptor(
    name="ArrayList", namespace=COLLECTIONS,
    interfaces=frozenset({ENUMERABLE_CONTRACT, "System.Collections.IList"}),
)

IDICTIONARY = TypeDescriptor(
    name="IDictionary", namespace=COLLECTIONS, kind=TypeKind.INTERFACE,
    interfaces=frozenset({ENUMERABLE_CONTRACT}),
)
IDICTIONARY_OF = _definition(
    "IDictionary", GENERIC_COLLECTIONS, ("TKey", "TValue"),
    kind=TypeKind.INTERFACE,
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {"System.Collections.Generic.ICollection`1"},
)
IREADONLY_DICTIONARY_OF = _definition(
    "IReadOnlyDictionary", GENERIC_COLLECTIONS, ("TKey", "TValue"),
    kind=TypeKind.INTERFACE, interfaces=_GENERIC_COLLECTION_CONTRACTS,
)
DICTIONARY_OF = _definition(
    "Dictionary", GENERIC_COLLECTIONS, ("TKey", "TValue"),
    interfaces=_GENERIC_COLLECTION_CONTRACTS | set(DICTIONARY_CONTRACTS) | {
        "System.Collections.Generic.ICollection`1",
    },
)
HASHTABLE = TypeDescriptor(
    name="Hashtable", namespace=COLLECTIONS,
    interfaces=frozenset({ENUMERABLE_CONTRACT, "System.Collections.IDictionary"}),
)

# ---- Web framework and JSON library types ----

IACTION_RESULT = TypeDescriptor(name="IActionResult", namespace=MVC, kind=TypeKind.INTERFACE)
IFORM_COLLECTION = TypeDescriptor(
    name="IFormCollection", namespace=HTTP, kind=TypeKind.INTERFACE,
    interfaces=_GENERIC_COLLECTION_CONTRACTS,
)
JTOKEN = TypeDescriptor(name="JToken", namespace=JSON_LINQ, interfaces=_GENERIC_COLLECTION_CONTRACTS)
JOBJECT = TypeDescriptor(
    name="JObject", namespace=JSON_LINQ,
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {"System.Collections.Generic.IDictionary`2"},
)
JARRAY = TypeDescriptor(
    name="JArray", namespace=JSON_LINQ,
    interfaces=_GENERIC_COLLECTION_CONTRACTS | {"System.Collections.Generic.IList`1"},
)


# Declared types the catalog starts with (arrays are built on demand)
WELL_KNOWN_TYPES: tuple[TypeDescriptor, ...] = (
    OBJECT, BOOLEAN, BYTE, SBYTE, INT16, UINT16, INT32, UINT32, INT64, UINT64,
    SINGLE, DOUBLE, DECIMAL, STRING, CHAR, DATE_TIME, DATE_TIME_OFFSET, GUID,
    EXCEPTION, VOID, TIME_SPAN, URI,
    NULLABLE, TASK, TASK_OF, VALUE_TASK, VALUE_TASK_OF, ACTION_RESULT_OF,
    IENUMERABLE, IENUMERABLE_OF, ICOLLECTION_OF, ILIST_OF, LIST_OF, HASH_SET_OF,
    ARRAY_LIST, IDICTIONARY, IDICTIONARY_OF, IREADONLY_DICTIONARY_OF,
    DICTIONARY_OF, HASHTABLE,
    IACTION_RESULT, IFORM_COLLECTION, JTOKEN, JOBJECT, JARRAY,
)


def nullable(value_type: TypeDescriptor) -> TypeDescriptor:
    """Wrap a value type as ``Nullable<T>``."""
    return NULLABLE.make_generic(value_type)


def task(result: TypeDescriptor | None = None) -> TypeDescriptor:
    """Return ``Task<TResult>``, or the non-generic ``Task`` when no result is given."""
    if result is None:
        return TASK
    return TASK_OF.make_generic(result)


def action_result(value: TypeDescriptor) -> TypeDescriptor:
    return ACTION_RESULT_OF.make_generic(value)


def list_of(element: TypeDescriptor) -> TypeDescriptor:
    return LIST_OF.make_generic(element)


def enumerable_of(element: TypeDescriptor) -> TypeDescriptor:
    return IENUMERABLE_OF.make_generic(element)


def dictionary_of(key: TypeDescriptor, value: TypeDescriptor) -> TypeDescriptor:
    return DICTIONARY_OF.make_generic(key, value)
