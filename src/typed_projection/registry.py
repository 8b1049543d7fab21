"""Registry of complex types discovered during projection.

The projection engine registers every class, interface and enum it names so
that a declaration emitter can later write them out. ``ModelBuilder`` is the
default registry; any object with ``register`` and ``lookup_module`` can be
used instead.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Protocol

from typed_projection.types import TypeDescriptor

logger = logging.getLogger(__name__)


class ModelRegistry(Protocol):
    """Collaborator that stores complex types for later emission."""

    def register(self, descriptor: TypeDescriptor) -> None:
        """Record a type. Registering the same type again has no effect."""
        ...

    def lookup_module(self, descriptor: TypeDescriptor) -> str | None:
        """Return the module a registered type was grouped under, if any."""
        ...


@dataclass
class RegisteredModel:
    """A registered type and the module it will be emitted in."""

    descriptor: TypeDescriptor
    module: str | None


def namespace_module_name(descriptor: TypeDescriptor) -> str | None:
    """Group a type under its own namespace."""
    return descriptor.namespace or None


class ModelBuilder:
    """Registry keyed by generic definition.

    Closed constructions of one generic type (``Box<int>``, ``Box<string>``)
    share a single entry, since a single generic declaration covers them all.
    """

    def __init__(
        self,
        module_name_formatter: Callable[[TypeDescriptor], str | None] = namespace_module_name,
    ) -> None:
        self._models: dict[TypeDescriptor, RegisteredModel] = {}
        self._module_name_formatter = module_name_formatter
        self._lock = threading.Lock()

    def register(self, descriptor: TypeDescriptor) -> None:
        """Register a type, keeping the first registration of its definition."""
        key = descriptor.generic_definition
        with self._lock:
            if key in self._models:
                return
            model = RegisteredModel(descriptor=key, module=self._module_name_formatter(key))
            self._models[key] = model
        logger.debug("Registered %s in module %s", key.full_name, model.module)

    def get(self, descriptor: TypeDescriptor) -> RegisteredModel | None:
        """Get the registration of a type, if any."""
        return self._models.get(descriptor.generic_definition)

    def lookup_module(self, descriptor: TypeDescriptor) -> str | None:
        model = self.get(descriptor)
        if model is None:
            return None
        return model.module

    def models(self) -> list[RegisteredModel]:
        """List registrations in discovery order."""
        return list(self._models.values())

    def modules(self) -> dict[str | None, list[RegisteredModel]]:
        """Group registrations by module, in discovery order."""
        grouped: dict[str | None, list[RegisteredModel]] = {}
        for model in self._models.values():
            grouped.setdefault(model.module, []).append(model)
        return grouped

    def __contains__(self, descriptor: TypeDescriptor) -> bool:
        return descriptor.generic_definition in self._models

    def __len__(self) -> int:
        return len(self._models)
