"""Example usage of the typed_projection library."""

import logging

from typed_projection import (
    HostTypeCatalog,
    ModelBuilder,
    ProjectionConfig,
    SignatureParser,
    TypeConverter,
)

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

# Declare the application's data contracts
catalog = HostTypeCatalog()
catalog.declare_class("Widget", "Shop.Models")
catalog.declare_class("Page", "Shop.Models", generic_parameters=["T"])
catalog.declare_enum("Color", "Shop.Models")
catalog.declare_struct("Money", "Shop.Models")

parser = SignatureParser(catalog)
registry = ModelBuilder()
converter = TypeConverter(ProjectionConfig(strict_nulls=True), registry=registry)

signatures = [
    "int",
    "int?",
    "string[]",
    "Task<Page<Widget>>",
    "ActionResult<List<Color?>>",
    "Dictionary<string, Widget>",
    "IActionResult",
    "Newtonsoft.Json.Linq.JObject",
    "Money",
]

print("Projected types:")
for signature in signatures:
    descriptor = parser.parse(signature)
    print(f"  {signature:30} -> {converter.type_name(descriptor)}")

print("\nTypes to declare:")
for module, models in registry.modules().items():
    for model in models:
        print(f"  {module or '<global>'}: {converter.qualified_name(model.descriptor)}")
