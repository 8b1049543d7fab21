"""Tests for the type projection engine."""

import logging

import pytest

from typed_projection import host
from typed_projection.builtin_types import BUILTIN_TYPES
from typed_projection.catalog import HostTypeCatalog
from typed_projection.config import ProjectionConfig
from typed_projection.converter import Projection, TypeConverter
from typed_projection.diagnostics import CollectingDiagnostics
from typed_projection.parsing import SignatureParser
from typed_projection.registry import ModelBuilder
from typed_projection.types import TypeDescriptor, TypeKind, array_of, generic_parameter


class FakeRegistry:
    """Registry that records every call."""

    def __init__(self, modules=None):
        self.registered = []
        self.modules = modules or {}

    def register(self, descriptor):
        self.registered.append(descriptor)

    def lookup_module(self, descriptor):
        return self.modules.get(descriptor.generic_definition)


WIDGET = TypeDescriptor(name="Widget")
COLOR = TypeDescriptor(name="Color", namespace="App", kind=TypeKind.ENUM)
ISHAPE = TypeDescriptor(name="IShape", namespace="App", kind=TypeKind.INTERFACE)
POINT = TypeDescriptor(name="Point", namespace="App", kind=TypeKind.STRUCT)


def make_converter(strict_nulls=False, global_namespace=None, overrides=None, registry=None):
    """Build a converter with a recording registry and diagnostics sink."""
    config = ProjectionConfig(
        global_namespace=global_namespace,
        overrides=overrides or {},
        strict_nulls=strict_nulls,
    )
    return TypeConverter(
        config,
        registry=registry if registry is not None else FakeRegistry(),
        diagnostics=CollectingDiagnostics(),
    )


@pytest.fixture
def catalog():
    """Catalog with a few application types."""
    catalog = HostTypeCatalog()
    catalog.declare_class("Widget")
    catalog.declare_class("Box", "App", generic_parameters=["T"])
    catalog.declare_enum("Color", "App")
    return catalog


class TestProjection:
    """Tests for the Projection result."""

    def test_embedded_plain(self):
        assert Projection("number").embedded() == "number"

    def test_embedded_union(self):
        assert Projection("number | null", True).embedded() == "(number | null)"


class TestUnwrap:
    """Tests for wrapper removal and nullability."""

    def test_value_type(self):
        converter = make_converter()
        assert converter.unwrap(host.INT32) == (host.INT32, False)

    def test_reference_type(self):
        converter = make_converter()
        assert converter.unwrap(host.STRING) == (host.STRING, True)

    def test_interface(self):
        converter = make_converter()
        assert converter.unwrap(ISHAPE) == (ISHAPE, True)

    def test_array(self):
        converter = make_converter()
        ints = array_of(host.INT32)
        assert converter.unwrap(ints) == (ints, True)

    def test_nullable_value_type(self):
        converter = make_converter()
        assert converter.unwrap(host.nullable(host.INT32)) == (host.INT32, True)

    def test_task_before_nullable(self):
        """Test that a task of a nullable value type unwraps both layers."""
        converter = make_converter()
        assert converter.unwrap(host.task(host.nullable(host.INT32))) == (host.INT32, True)

    def test_task_without_result(self):
        """Test that a plain task stands for void."""
        converter = make_converter()
        assert converter.unwrap(host.task()) == (host.VOID, False)
        assert converter.unwrap(host.VALUE_TASK) == (host.VOID, False)

    def test_value_task(self):
        converter = make_converter()
        assert converter.unwrap(host.VALUE_TASK_OF.make_generic(host.INT32)) == (host.INT32, False)

    def test_action_result(self):
        converter = make_converter()
        assert converter.unwrap(host.action_result(WIDGET)) == (WIDGET, True)

    def test_task_of_action_result(self):
        """Test that the task is removed before the action result."""
        converter = make_converter()
        result = converter.unwrap(host.task(host.action_result(host.INT32)))
        assert result == (host.INT32, False)


class TestBuiltins:
    """Tests for builtin types."""

    @pytest.mark.parametrize("descriptor", list(BUILTIN_TYPES))
    def test_loose_nulls_exact_name(self, descriptor):
        """Test that without strict nulls the mapped name is used as is."""
        converter = make_converter()
        assert converter.project(descriptor) == Projection(BUILTIN_TYPES[descriptor].name)

    @pytest.mark.parametrize("descriptor", list(BUILTIN_TYPES))
    def test_strict_nulls(self, descriptor):
        """Test that nullable builtins gain '| null' under strict nulls."""
        converter = make_converter(strict_nulls=True)
        builtin = BUILTIN_TYPES[descriptor]
        text = converter.type_name(descriptor)

        if builtin.nullable:
            assert text == f"{builtin.name} | null"
        else:
            assert text == builtin.name

    def test_integer(self):
        assert make_converter().type_name(host.INT32) == "number"

    def test_binary_blob_is_string(self):
        """Test that byte[] is a builtin, not an array of numbers."""
        assert make_converter().type_name(host.BYTE_ARRAY) == "string"

    def test_nullable_value_type_strict(self):
        converter = make_converter(strict_nulls=True)
        result = converter.project(host.nullable(host.INT32))
        assert result == Projection("number | null", True)

    def test_nullable_value_type_loose(self):
        assert make_converter().type_name(host.nullable(host.INT32)) == "number"

    def test_is_complex_type(self):
        converter = make_converter()
        assert converter.is_complex_type(host.INT32) is False
        assert converter.is_complex_type(WIDGET) is True


class TestOverrides:
    """Tests for caller-supplied overrides."""

    def test_override_beats_builtin(self):
        converter = make_converter(overrides={host.INT64: "bigint"})
        assert converter.project(host.INT64) == Projection("bigint")

    def test_override_not_nullable(self):
        """Test that overrides are verbatim even under strict nulls."""
        converter = make_converter(strict_nulls=True, overrides={host.STRING: "Text"})
        assert converter.type_name(host.STRING) == "Text"

    def test_override_applies_after_unwrap(self):
        converter = make_converter(overrides={host.INT64: "bigint"})
        assert converter.type_name(host.task(host.nullable(host.INT64))) == "bigint"

    def test_override_skips_registration(self):
        registry = FakeRegistry()
        converter = make_converter(overrides={WIDGET: "Gadget"}, registry=registry)

        assert converter.type_name(WIDGET) == "Gadget"
        assert registry.registered == []

    def test_override_union_text_not_parenthesized(self):
        """Test that override text is embedded unchanged."""
        converter = make_converter(overrides={WIDGET: "A | B"})
        assert converter.type_name(array_of(WIDGET)) == "A | B[]"

    def test_config_mapping_copied(self):
        """Test that later changes to the caller's mapping are not seen."""
        overrides = {host.INT64: "bigint"}
        converter = make_converter(overrides=overrides)
        overrides[host.INT64] = "string"

        assert converter.type_name(host.INT64) == "bigint"


class TestSpecialCases:
    """Tests for framework and JSON types."""

    def test_action_result_interface(self):
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(host.IACTION_RESULT) == "any /* IActionResult */"

    def test_task_of_action_result_interface(self):
        converter = make_converter()
        assert converter.type_name(host.task(host.IACTION_RESULT)) == "any /* IActionResult */"

    def test_form_collection(self):
        """Test that form data wins over its enumerable contract."""
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(host.IFORM_COLLECTION) == "FormData"

    @pytest.mark.parametrize("descriptor", [host.JTOKEN, host.JOBJECT, host.JARRAY])
    def test_json_documents(self, descriptor):
        converter = make_converter(strict_nulls=True)
        assert converter.project(descriptor) == Projection("any")
        assert converter.registry.registered == []


class TestDictionaries:
    """Tests for key-value mappings."""

    def test_generic(self):
        converter = make_converter()
        result = converter.type_name(host.dictionary_of(host.STRING, host.INT32))
        assert result == "{ [key: string]: number }"

    def test_not_treated_as_sequence(self):
        """Test that dictionaries are never projected as arrays."""
        converter = make_converter()
        result = converter.type_name(host.IDICTIONARY_OF.make_generic(host.INT32, host.STRING))
        assert not result.endswith("[]")
        assert result == "{ [key: number]: string }"

    def test_non_generic(self):
        assert make_converter().type_name(host.HASHTABLE) == "{ [key: string]: any }"

    def test_open_definition(self):
        assert make_converter().type_name(host.DICTIONARY_OF) == "{ [key: string]: any }"

    def test_nested_value(self):
        converter = make_converter()
        result = converter.type_name(host.dictionary_of(host.STRING, host.list_of(host.INT32)))
        assert result == "{ [key: string]: number[] }"

    def test_strict_value(self):
        converter = make_converter(strict_nulls=True)
        result = converter.project(host.dictionary_of(host.INT32, host.nullable(host.INT32)))
        assert result == Projection("{ [key: number]: number | null }")

    def test_application_dictionary(self):
        """Test a non-generic class implementing a dictionary contract."""
        catalog = HostTypeCatalog()
        bag = catalog.declare_class(
            "PropertyBag", "App", interfaces=["System.Collections.Generic.IDictionary`2"]
        )
        converter = make_converter()

        assert converter.type_name(bag) == "{ [key: string]: any }"
        assert converter.registry.registered == []


class TestArrays:
    """Tests for arrays."""

    def test_string_array(self):
        assert make_converter().type_name(array_of(host.STRING)) == "string[]"

    def test_union_element_parenthesized(self):
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(array_of(host.STRING)) == "(string | null)[]"

    def test_nullable_value_elements(self):
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(array_of(host.nullable(host.INT32))) == "(number | null)[]"

    def test_class_elements(self):
        converter = make_converter(strict_nulls=True)

        assert converter.type_name(array_of(WIDGET)) == "(Widget | null)[]"
        assert converter.registry.registered == [WIDGET]

    def test_jagged(self):
        converter = make_converter()
        assert converter.type_name(array_of(array_of(host.INT32))) == "number[][]"


class TestSequences:
    """Tests for enumerable collections."""

    def test_list(self):
        assert make_converter().type_name(host.list_of(host.INT32)) == "number[]"

    def test_enumerable_strict(self):
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(host.enumerable_of(host.STRING)) == "(string | null)[]"

    def test_non_generic(self):
        assert make_converter().type_name(host.ARRAY_LIST) == "any[]"
        assert make_converter().type_name(host.IENUMERABLE) == "any[]"

    def test_list_of_lists(self):
        converter = make_converter()
        result = converter.type_name(host.list_of(host.list_of(host.STRING)))
        assert result == "string[][]"

    def test_sequence_not_registered(self):
        converter = make_converter()
        converter.type_name(host.list_of(host.INT32))
        assert converter.registry.registered == []


class TestEnums:
    """Tests for enums."""

    def test_enum(self):
        registry = ModelBuilder()
        converter = make_converter(registry=registry)

        assert converter.type_name(COLOR) == "App.Color"
        assert COLOR in registry

    def test_enum_not_nullable(self):
        converter = make_converter(strict_nulls=True, registry=ModelBuilder())
        assert converter.type_name(COLOR) == "App.Color"

    def test_nullable_enum(self):
        converter = make_converter(strict_nulls=True, registry=ModelBuilder())
        result = converter.project(host.nullable(COLOR))
        assert result == Projection("App.Color | null", True)

    def test_global_namespace(self):
        converter = make_converter(global_namespace="Api")
        assert converter.type_name(COLOR) == "Api.Color"


class TestRuntimeNamespace:
    """Tests for unmapped standard library types."""

    def test_struct(self):
        converter = make_converter(strict_nulls=True)
        assert converter.project(host.TIME_SPAN) == Projection("any")

    def test_class(self):
        converter = make_converter(strict_nulls=True)

        assert converter.project(host.URI) == Projection("any")
        assert converter.registry.registered == []
        assert converter.diagnostics.messages == []

    def test_nested_namespace(self):
        converter = make_converter()
        lazy = TypeDescriptor(name="Lazy", namespace="System.Threading")
        assert converter.type_name(lazy) == "any"

    def test_lookalike_namespace_not_matched(self):
        """Test that 'SystemX' is application code."""
        converter = make_converter()
        thing = TypeDescriptor(name="Thing", namespace="SystemX")
        assert converter.type_name(thing) == "SystemX.Thing"

    def test_plain_task_is_void(self):
        assert make_converter().type_name(host.task()) == "void"


class TestClasses:
    """Tests for classes and interfaces."""

    def test_class(self):
        registry = FakeRegistry()
        converter = make_converter(registry=registry)

        assert converter.type_name(WIDGET) == "Widget"
        assert registry.registered == [WIDGET]

    def test_nullable_class_strict(self):
        converter = make_converter(strict_nulls=True)
        assert converter.project(WIDGET) == Projection("Widget | null", True)

    def test_interface(self):
        converter = make_converter(registry=ModelBuilder())
        assert converter.type_name(ISHAPE) == "App.IShape"

    def test_registered_module(self):
        registry = FakeRegistry(modules={WIDGET: "Dto"})
        converter = make_converter(registry=registry)
        assert converter.type_name(WIDGET) == "Dto.Widget"

    def test_global_namespace_override(self):
        registry = FakeRegistry(modules={WIDGET: "Dto"})
        converter = make_converter(global_namespace="Api", registry=registry)
        assert converter.type_name(WIDGET) == "Api.Widget"

    def test_generic(self, catalog):
        box = catalog.get_or_raise("App.Box`1")
        converter = make_converter(registry=ModelBuilder())

        assert converter.type_name(box.make_generic(host.INT32)) == "App.Box<number>"

    def test_generic_multiple_arguments(self):
        catalog = HostTypeCatalog()
        pair = catalog.declare_class("Pair", "App", generic_parameters=["A", "B"])
        converter = make_converter(registry=ModelBuilder())

        result = converter.type_name(pair.make_generic(host.STRING, host.list_of(host.INT32)))
        assert result == "App.Pair<string, number[]>"

    def test_generic_strict(self, catalog):
        box = catalog.get_or_raise("App.Box`1")
        converter = make_converter(strict_nulls=True, registry=ModelBuilder())

        result = converter.type_name(box.make_generic(WIDGET))
        assert result == "App.Box<Widget | null> | null"

    def test_generic_global_namespace(self, catalog):
        box = catalog.get_or_raise("App.Box`1")
        converter = make_converter(global_namespace="Api")

        assert converter.type_name(box.make_generic(host.STRING)) == "Api.Box<string>"

    def test_no_arity_marker_without_module(self, catalog):
        """Test that an unregistered-module generic falls back to its stripped full name."""
        box = catalog.get_or_raise("App.Box`1")
        converter = make_converter()

        result = converter.type_name(box.make_generic(host.INT32))
        assert result == "App.Box<number>"
        assert "`" not in result

    def test_open_generic_parameter_name(self, catalog):
        """Test that an open definition projects its type parameters by name."""
        box = catalog.get_or_raise("App.Box`1")
        converter = make_converter()

        assert converter.type_name(box) == "App.Box<T>"
        assert converter.diagnostics.messages == []

    def test_runtime_generic_parameter(self):
        converter = make_converter()
        assert converter.type_name(host.LIST_OF) == "T[]"
        assert converter.type_name(generic_parameter("TKey", "App")) == "TKey"
        assert len(converter.diagnostics) == 0

    def test_registration_attempted_every_time(self):
        """Test that the engine always registers and leaves deduplication to the registry."""
        registry = FakeRegistry()
        converter = make_converter(registry=registry)
        converter.type_name(WIDGET)
        converter.type_name(array_of(WIDGET))

        assert registry.registered == [WIDGET, WIDGET]

    def test_single_registry_entry(self):
        registry = ModelBuilder()
        converter = make_converter(registry=registry)
        converter.type_name(WIDGET)
        converter.type_name(host.list_of(WIDGET))

        assert len(registry) == 1

    def test_action_result_of_class(self):
        converter = make_converter(strict_nulls=True)
        assert converter.type_name(host.task(host.action_result(WIDGET))) == "Widget | null"


class TestFallback:
    """Tests for types no rule applies to."""

    def test_application_struct(self):
        converter = make_converter(strict_nulls=True)

        assert converter.project(POINT) == Projection("any")
        assert converter.diagnostics.messages == ["Unknown conversion for type: App.Point"]

    def test_generic_struct_pretty_name(self):
        catalog = HostTypeCatalog()
        pair = catalog.declare_struct("Pair", "App", generic_parameters=["A", "B"])
        converter = make_converter()

        assert converter.type_name(pair.make_generic(host.INT32, host.STRING)) == "any"
        assert converter.diagnostics.messages == [
            "Unknown conversion for type: App.Pair<System.Int32, System.String>"
        ]

    def test_logged_by_default(self, caplog):
        converter = TypeConverter()
        with caplog.at_level(logging.WARNING, logger="typed_projection.diagnostics"):
            assert converter.type_name(POINT) == "any"

        assert [r.getMessage() for r in caplog.records] == [
            "Unknown conversion for type: App.Point"
        ]


class TestWrapNullable:
    """Tests for the nullable wrapping policy."""

    def test_loose_is_noop(self):
        converter = make_converter()
        assert converter.wrap_nullable(True, Projection("Widget")) == Projection("Widget")

    def test_not_nullable(self):
        converter = make_converter(strict_nulls=True)
        assert converter.wrap_nullable(False, Projection("Widget")) == Projection("Widget")

    def test_wraps(self):
        converter = make_converter(strict_nulls=True)
        assert converter.wrap_nullable(True, Projection("Widget")) == Projection("Widget | null", True)

    def test_wraps_union(self):
        converter = make_converter(strict_nulls=True)
        result = converter.wrap_nullable(True, Projection("A | B", True))
        assert result == Projection("(A | B) | null", True)


class TestPrettyName:
    """Tests for diagnostic names."""

    def test_non_generic(self):
        assert TypeConverter.pretty_name(host.INT32) == "System.Int32"

    def test_array(self):
        assert TypeConverter.pretty_name(array_of(host.INT32)) == "System.Int32[]"

    def test_nested_generic(self):
        descriptor = host.list_of(host.dictionary_of(host.STRING, host.INT32))
        assert TypeConverter.pretty_name(descriptor) == (
            "System.Collections.Generic.List<"
            "System.Collections.Generic.Dictionary<System.String, System.Int32>>"
        )

    def test_global_namespace(self):
        catalog = HostTypeCatalog()
        box = catalog.declare_class("Box", generic_parameters=["T"])
        assert TypeConverter.pretty_name(box.make_generic(host.INT32)) == "Box<System.Int32>"


class TestEndToEnd:
    """Projection of parsed signatures."""

    @pytest.mark.parametrize(
        "signature,expected",
        [
            ("int", "number"),
            ("string[]", "string[]"),
            ("Dictionary<string, int>", "{ [key: string]: number }"),
            ("Task<List<int?>>", "number[]"),
            ("Task", "void"),
            ("IEnumerable<Widget>", "Widget[]"),
            ("Dictionary<string, Box<Color>>", "{ [key: string]: App.Box<App.Color> }"),
            ("Newtonsoft.Json.Linq.JObject", "any"),
        ],
    )
    def test_loose(self, catalog, signature, expected):
        parser = SignatureParser(catalog)
        converter = TypeConverter(registry=ModelBuilder(), diagnostics=CollectingDiagnostics())

        assert converter.type_name(parser.parse(signature)) == expected

    @pytest.mark.parametrize(
        "signature,expected",
        [
            ("int", "number"),
            ("int?", "number | null"),
            ("Widget", "Widget | null"),
            ("Widget[]", "(Widget | null)[]"),
            ("Task<List<int?>>", "(number | null)[]"),
            ("ActionResult<Color?>", "App.Color | null"),
        ],
    )
    def test_strict(self, catalog, signature, expected):
        parser = SignatureParser(catalog)
        config = ProjectionConfig(strict_nulls=True)
        converter = TypeConverter(config, registry=ModelBuilder(), diagnostics=CollectingDiagnostics())

        assert converter.type_name(parser.parse(signature)) == expected

    def test_unknown_type_warns_once(self, catalog):
        catalog.declare_struct("Money", "App")
        parser = SignatureParser(catalog)
        diagnostics = CollectingDiagnostics()
        converter = TypeConverter(diagnostics=diagnostics)

        assert converter.type_name(parser.parse("Money")) == "any"
        assert len(diagnostics) == 1

    def test_registry_collects_models(self, catalog):
        parser = SignatureParser(catalog)
        registry = ModelBuilder()
        converter = TypeConverter(registry=registry, diagnostics=CollectingDiagnostics())

        converter.type_name(parser.parse("Dictionary<string, Box<Widget>>"))
        converter.type_name(parser.parse("Box<Color>[]"))

        assert [m.descriptor.full_name for m in registry.models()] == [
            "App.Box`1",
            "Widget",
            "App.Color",
        ]
        assert registry.lookup_module(catalog.get_or_raise("Widget")) is None
