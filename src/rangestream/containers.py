"""
Container Adapters - per-kind capabilities for stream storage

A ContainerAdapter describes one container kind to the stream machinery:

- element_type: the element type the kind is declared to hold
- insert: append (sequence kinds) or insert-if-absent (set kinds)
- with_element_type: the same kind specialized to a different element type

plus the plumbing every kind needs in Python: an empty builder, a
finalize step that freezes the builder into the container, and a read-only
indexable view that iteration ranges point into.

Adding a container kind means writing one adapter and registering it with
``register_container``; nothing else changes.
"""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from collections.abc import Set as AbstractSet
from collections.abc import Sequence as AbstractSequence
from typing import (
    Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional,
    Sequence, Tuple, TypeVar, get_args, get_origin,
)

from .exceptions import UnsupportedContainerError

T = TypeVar("T")


# =============================================================================
# SortedSet - ordered unique set kind
# =============================================================================

class SortedSet(AbstractSequence, Generic[T]):
    """
    A set that keeps its elements in ascending order.

    Indexable like a sequence, deduplicating like a set. Elements must be
    mutually orderable.

    ::: This is-in-layer Container-Layer.
    ::: This is a container.
    ::: This is stateful.
    """

    __slots__ = ("_items",)

    def __init__(self, iterable: Iterable[T] = ()):
        self._items: List[T] = []
        for item in iterable:
            self.add(item)

    def add(self, item: T) -> bool:
        """Insert item if absent. Returns True if it was inserted."""
        items = self._items
        if item != item:
            # NaN-like values never compare equal; match them by identity
            if any(existing is item for existing in items):
                return False
        index = bisect.bisect_left(items, item)
        if index < len(items) and (items[index] is item or items[index] == item):
            return False
        items.insert(index, item)
        return True

    def __getitem__(self, index):
        if isinstance(index, slice):
            return SortedSet(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, item) -> bool:
        items = self._items
        if item != item:
            return any(existing is item for existing in items)
        try:
            index = bisect.bisect_left(items, item)
        except TypeError:
            return False
        return index < len(items) and items[index] == item

    def __eq__(self, other) -> bool:
        if isinstance(other, SortedSet):
            return self._items == other._items
        if isinstance(other, AbstractSet):
            return len(self) == len(other) and all(item in other for item in self._items)
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"SortedSet({self._items!r})"


# =============================================================================
# ContainerAdapter - the per-kind capability set
# =============================================================================

class ContainerAdapter(ABC):
    """
    Capability mapping from a container kind to its element type, its
    insertion operation and its same-kind-other-element-type counterpart.

    ``value_type`` is the declared element type (``None`` when the kind
    was not parameterized).

    ::: This is-in-layer Container-Layer.
    ::: This is a strategy.
    ::: This is stateless.
    """

    #: The container class this adapter builds.
    kind: type = object

    def __init__(self, value_type: Any = None):
        self.value_type = value_type

    # -- contract -------------------------------------------------------------

    def element_type(self, container: Any) -> Any:
        """Element type held by ``container`` (the declared one by default)."""
        return self.value_type

    @abstractmethod
    def insert(self, builder: Any, value: Any) -> None:
        """Add one value to a builder obtained from ``new()``."""

    def with_element_type(self, value_type: Any = None) -> "ContainerAdapter":
        """The same container kind, declared to hold ``value_type``."""
        return type(self)(value_type)

    # -- plumbing -------------------------------------------------------------

    @abstractmethod
    def new(self) -> Any:
        """Create an empty builder."""

    def finalize(self, builder: Any) -> Any:
        """Freeze a builder into the container. No inserts may follow."""
        return builder

    def view(self, container: Any) -> Sequence:
        """Read-only indexable view of ``container``'s elements."""
        return container

    def build(self, values: Iterable[Any]) -> Any:
        """Create a finished container holding ``values`` in order."""
        builder = self.new()
        insert = self.insert
        for value in values:
            insert(builder, value)
        return self.finalize(builder)

    @property
    def kind_hint(self) -> Any:
        """The kind as a type expression, e.g. ``list[int]``."""
        if self.value_type is None or not isinstance(self.value_type, type):
            return self.kind
        return self.kind[self.value_type]

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.value_type == other.value_type

    def __hash__(self) -> int:
        return hash((type(self), self.value_type))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value_type!r})"


class ListAdapter(ContainerAdapter):
    """Generic sequence kind; also wraps any other Sequence as a source."""
    kind = list

    def new(self) -> list:
        return []

    def insert(self, builder: list, value: Any) -> None:
        builder.append(value)


class TupleAdapter(ContainerAdapter):
    """Immutable sequence kind, built as a list then frozen."""
    kind = tuple

    def new(self) -> list:
        return []

    def insert(self, builder: list, value: Any) -> None:
        builder.append(value)

    def finalize(self, builder: list) -> tuple:
        return tuple(builder)

    @property
    def kind_hint(self) -> Any:
        if isinstance(self.value_type, type):
            return tuple[self.value_type, ...]
        return tuple


class HashSetAdapter(ContainerAdapter):
    """
    Hash-based unique set kind.

    Python sets are not indexable, so ``view`` takes a one-time tuple
    snapshot in the set's own iteration order.
    """
    kind = set

    def new(self) -> set:
        return set()

    def insert(self, builder: set, value: Any) -> None:
        builder.add(value)

    def view(self, container: AbstractSet) -> Sequence:
        return tuple(container)


class FrozenSetAdapter(HashSetAdapter):
    """Immutable hash set kind."""
    kind = frozenset

    def finalize(self, builder: set) -> frozenset:
        return frozenset(builder)


class SortedSetAdapter(ContainerAdapter):
    """Ordered unique set kind backed by ``SortedSet``."""
    kind = SortedSet

    def new(self) -> SortedSet:
        return SortedSet()

    def insert(self, builder: SortedSet, value: Any) -> None:
        builder.add(value)


# =============================================================================
# Registry
# =============================================================================

class ContainerRegistry:
    """Registry of container adapters keyed by container class.

    ::: This is-in-layer Container-Layer.
    ::: This is a registry.
    ::: This is stateful.
    """

    def __init__(self):
        self._adapters: Dict[type, Callable[[Any], ContainerAdapter]] = {}
        # Fallbacks used only when wrapping a source of an unregistered class
        self._source_fallbacks: List[Tuple[type, Callable[[Any], ContainerAdapter]]] = []

    def register(self, kind: type, factory: Callable[[Any], ContainerAdapter]) -> None:
        """Register an adapter factory (called with the element type) for a kind."""
        self._adapters[kind] = factory

    def register_source_fallback(self, base: type, factory: Callable[[Any], ContainerAdapter]) -> None:
        """Register an adapter for sources that are merely instances of ``base``."""
        self._source_fallbacks.append((base, factory))

    def unregister(self, kind: type) -> None:
        self._adapters.pop(kind, None)

    def _lookup(self, cls: type) -> Optional[Callable[[Any], ContainerAdapter]]:
        for klass in getattr(cls, "__mro__", ()):
            factory = self._adapters.get(klass)
            if factory is not None:
                return factory
        return None

    def adapter_for(self, kind: Any) -> ContainerAdapter:
        """
        Resolve the adapter that builds ``kind``.

        Args:
            kind: A container class, optionally parameterized
                  (``list[int]``, ``SortedSet[float]``)

        Raises:
            UnsupportedContainerError: If no adapter builds this kind
        """
        origin = get_origin(kind)
        cls = origin if origin is not None else kind
        value_type = None
        if origin is not None:
            args = [arg for arg in get_args(kind) if arg is not Ellipsis]
            value_type = args[0] if len(args) == 1 else None

        factory = self._lookup(cls) if isinstance(cls, type) else None
        if factory is None:
            raise UnsupportedContainerError(kind)
        return factory(value_type)

    def adapter_for_source(self, source: Any) -> ContainerAdapter:
        """
        Resolve the adapter used to read ``source`` at the head of a chain.

        Raises:
            UnsupportedContainerError: If the source is neither a registered
                kind nor a Sequence/Set
        """
        factory = self._lookup(type(source))
        if factory is not None:
            return factory(None)
        for base, fallback in self._source_fallbacks:
            if isinstance(source, base):
                return fallback(None)
        raise UnsupportedContainerError(type(source))

    @property
    def kinds(self) -> List[type]:
        """All registered container classes."""
        return list(self._adapters)


registry = ContainerRegistry()
registry.register(list, ListAdapter)
registry.register(tuple, TupleAdapter)
registry.register(set, HashSetAdapter)
registry.register(frozenset, FrozenSetAdapter)
registry.register(SortedSet, SortedSetAdapter)
registry.register_source_fallback(AbstractSequence, ListAdapter)
registry.register_source_fallback(AbstractSet, HashSetAdapter)


def register_container(kind: type, factory: Callable[[Any], ContainerAdapter]) -> None:
    """Register an adapter factory for a container kind in the default registry."""
    registry.register(kind, factory)


def adapter_for(kind: Any) -> ContainerAdapter:
    """Resolve the adapter building ``kind`` from the default registry."""
    return registry.adapter_for(kind)


def adapter_for_source(source: Any) -> ContainerAdapter:
    """Resolve the adapter reading ``source`` from the default registry."""
    return registry.adapter_for_source(source)
