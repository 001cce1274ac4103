"""Capability catalog: the table of every known operation."""

from __future__ import annotations

from collections.abc import Iterable

from .models import OperationDescriptor, ToolCategory


class CapabilityCatalog:
    """Registry of OperationDescriptors keyed by name.

    Iteration order is registration order. Every mutation bumps
    ``generation`` so derived caches can detect staleness.
    """

    def __init__(self, descriptors: Iterable[OperationDescriptor] | None = None):
        self._operations: dict[str, OperationDescriptor] = {}
        self._generation = 0
        if descriptors is not None:
            self.register_many(descriptors)

    @property
    def generation(self) -> int:
        return self._generation

    def register(self, descriptor: OperationDescriptor) -> None:
        """Insert a descriptor, replacing any existing one with the same name."""
        self._operations[descriptor.name] = descriptor
        self._generation += 1

    def register_many(self, descriptors: Iterable[OperationDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def get_by_name(self, name: str) -> OperationDescriptor | None:
        return self._operations.get(name)

    def get_by_category(self, category: ToolCategory) -> list[OperationDescriptor]:
        return [op for op in self._operations.values() if op.category == category]

    def all(self) -> list[OperationDescriptor]:
        return list(self._operations.values())

    def categories(self) -> set[ToolCategory]:
        """Categories that have at least one registered operation."""
        return {op.category for op in self._operations.values()}

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)
