"""Lazily populated registry of descriptor factories."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, List, Mapping, MutableMapping, TypeVar

from scaffoldkit.domain.errors import DescriptorNotFound, DuplicateDescriptor

T = TypeVar("T")
DescriptorFactory = Callable[[], T]


class DescriptorRegistry(Generic[T]):
    """Maps identifiers to descriptors built on first lookup.

    Each factory runs at most once per registry, also when several threads ask
    for the same identifier at the same time. A factory that raises leaves no
    cache entry behind, so the next lookup retries.
    """

    def __init__(
        self,
        factories: Mapping[str, DescriptorFactory[T]] | None = None,
        *,
        storage: MutableMapping[str, T] | None = None,
    ) -> None:
        self._factories: Dict[str, DescriptorFactory[T]] = dict(factories or {})
        self._storage: MutableMapping[str, T] = storage if storage is not None else {}
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def register(self, descriptor_id: str, factory: DescriptorFactory[T]) -> None:
        with self._guard:
            if descriptor_id in self._factories:
                raise DuplicateDescriptor(descriptor_id)
            self._factories[descriptor_id] = factory

    def get(self, descriptor_id: str) -> T:
        try:
            return self._storage[descriptor_id]
        except KeyError:
            pass
        factory = self._factories.get(descriptor_id)
        if factory is None:
            raise DescriptorNotFound(descriptor_id)
        with self._lock_for(descriptor_id):
            if descriptor_id in self._storage:
                return self._storage[descriptor_id]
            descriptor = factory()
            self._storage[descriptor_id] = descriptor
            return descriptor

    def ids(self) -> List[str]:
        return sorted(set(self._factories) | set(self._storage))

    def is_loaded(self, descriptor_id: str) -> bool:
        return descriptor_id in self._storage

    def __contains__(self, descriptor_id: object) -> bool:
        return descriptor_id in self._factories or descriptor_id in self._storage

    def _lock_for(self, descriptor_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(descriptor_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[descriptor_id] = lock
            return lock


__all__ = ["DescriptorFactory", "DescriptorRegistry"]
