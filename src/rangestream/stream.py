"""
Stream - the single pipeline-stage type

Every link of a chain is a ``Stream``: the head wrapper borrowing the
caller's container, and each stage produced by an intermediate operation.
A stream holds a container adapter (its container kind), an iteration
range, the storage it owns (transforming stages only) and its element type.

Intermediate operations return a new ``Stream``:

    map, filter                       eager; build owned storage
    take, take_while, skip, skip_while narrow the range; share storage

Terminal operations consume the range and return a plain value:

    for_each, for_each_indexed, reduce, any, all, collect

Example:
    result = (
        Stream(range(80))
        .filter(lambda x: x % 2 != 0)
        .map(lambda x: x / 2.0)
        .take(10)
        .take_while(lambda x: x < 8)
        .collect(SortedSet)
    )
"""

from __future__ import annotations

from typing import (
    Any, Callable, Generic, Iterator, Optional, TypeVar, overload,
)

from .containers import ContainerAdapter, adapter_for, adapter_for_source
from .exceptions import EmptyStreamError
from .logging_config import get_logger
from .ranges import IterationRange
from .stages import (
    OwnedStorage,
    filter_storage,
    map_storage,
    require_callable,
    require_count,
    skip_range,
    skip_while_range,
    take_range,
    take_while_range,
)

logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_NO_INITIAL = object()


class Stream(Generic[T]):
    """
    A read-only range over some container, exposing the full set of
    intermediate and terminal operations.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a stream.
    ::: This is stateless.
    """

    __slots__ = ("_adapter", "_range", "_owned", "_element_type")

    def __init__(self, source: Any):
        """
        Wrap a source collection at the head of a chain.

        The source is borrowed: it is never copied (hash sets excepted,
        see ``HashSetAdapter.view``) and never mutated, so it must not be
        mutated while any stream built from it is in use.

        Raises:
            UnsupportedContainerError: If no adapter can read ``source``
        """
        adapter = adapter_for_source(source)
        element_type = adapter.element_type(source)
        if element_type is not None:
            adapter = adapter.with_element_type(element_type)
        self._adapter = adapter
        self._range = IterationRange.over(adapter.view(source))
        self._owned = None
        self._element_type = element_type

    @classmethod
    def _link(
        cls,
        adapter: ContainerAdapter,
        rng: IterationRange,
        owned: Optional[OwnedStorage],
        element_type: Any,
    ) -> "Stream":
        stage = cls.__new__(cls)
        stage._adapter = adapter
        stage._range = rng
        stage._owned = owned
        stage._element_type = element_type
        return stage

    def _narrowed(self, rng: IterationRange[T]) -> "Stream[T]":
        # Narrowed stages keep a reference to the owner so its storage lives on
        return Stream._link(self._adapter, rng, self._owned, self._element_type)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def kind(self) -> type:
        """The container class this stage's elements live in."""
        return self._adapter.kind

    @property
    def adapter(self) -> ContainerAdapter:
        """Container adapter for this stage's kind; map, filter and collect build through it."""
        return self._adapter

    @property
    def element_type(self) -> Any:
        """Declared element type, or None if it was never declared."""
        return self._element_type

    @property
    def range(self) -> IterationRange[T]:
        return self._range

    @property
    def owns_storage(self) -> bool:
        """True if this stage's range points into storage a map/filter built."""
        return self._owned is not None and self._owned.range.storage is self._range.storage

    def __len__(self) -> int:
        return len(self._range)

    def __iter__(self) -> Iterator[T]:
        return iter(self._range)

    def __repr__(self) -> str:
        return f"Stream(kind={self.kind.__name__}, size={len(self._range)})"

    # -------------------------------------------------------------------------
    # Transforming stages
    # -------------------------------------------------------------------------

    def map(self, mapper: Callable[[T], U], element_type: Any = None) -> "Stream[U]":
        """
        Eagerly apply ``mapper`` to every element.

        The result lives in the same container kind, re-declared to hold
        ``element_type``. Set kinds deduplicate mapped values.

        Args:
            mapper: Function from element to new element
            element_type: Declared element type of the result (for pyarrow
                          kinds, the arrow type of the built array)
        """
        require_callable("map", mapper, "mapper")
        adapter = self._adapter.with_element_type(element_type)
        owned = map_storage(self._range, mapper, adapter)
        logger.debug("map: %d -> %d elements into %s",
                     len(self._range), len(owned.range), adapter.kind.__name__)
        return Stream._link(adapter, owned.range, owned, adapter.element_type(owned.container))

    def filter(self, predicate: Callable[[T], bool]) -> "Stream[T]":
        """Eagerly keep the elements satisfying ``predicate``, in order."""
        require_callable("filter", predicate, "predicate")
        owned = filter_storage(self._range, predicate, self._adapter)
        logger.debug("filter: %d -> %d elements into %s",
                     len(self._range), len(owned.range), self.kind.__name__)
        return Stream._link(self._adapter, owned.range, owned, self._element_type)

    # -------------------------------------------------------------------------
    # Narrowing stages
    # -------------------------------------------------------------------------

    def take(self, count: int) -> "Stream[T]":
        """At most the first ``count`` elements."""
        rng = take_range(self._range, require_count("take", count))
        logger.debug("take(%d): %d -> %d elements in %s",
                     count, len(self._range), len(rng), self.kind.__name__)
        return self._narrowed(rng)

    def take_while(self, predicate: Callable[[T], bool]) -> "Stream[T]":
        """The longest prefix whose elements satisfy ``predicate``."""
        require_callable("take_while", predicate, "predicate")
        rng = take_while_range(self._range, predicate)
        logger.debug("take_while: %d -> %d elements in %s",
                     len(self._range), len(rng), self.kind.__name__)
        return self._narrowed(rng)

    def skip(self, count: int) -> "Stream[T]":
        """Everything after the first ``count`` elements."""
        rng = skip_range(self._range, require_count("skip", count))
        logger.debug("skip(%d): %d -> %d elements in %s",
                     count, len(self._range), len(rng), self.kind.__name__)
        return self._narrowed(rng)

    def skip_while(self, predicate: Callable[[T], bool]) -> "Stream[T]":
        """Everything from the first element failing ``predicate`` onwards."""
        require_callable("skip_while", predicate, "predicate")
        rng = skip_while_range(self._range, predicate)
        logger.debug("skip_while: %d -> %d elements in %s",
                     len(self._range), len(rng), self.kind.__name__)
        return self._narrowed(rng)

    # -------------------------------------------------------------------------
    # Terminal operations
    # -------------------------------------------------------------------------

    def for_each(self, consumer: Callable[[T], Any]) -> None:
        """Call ``consumer`` once per element, in range order."""
        require_callable("for_each", consumer, "consumer")
        for item in self._range:
            consumer(item)

    def for_each_indexed(self, consumer: Callable[[int, T], Any]) -> None:
        """Call ``consumer(index, element)`` with indices counting from 0."""
        require_callable("for_each_indexed", consumer, "consumer")
        for index, item in enumerate(self._range):
            consumer(index, item)

    @overload
    def reduce(self, reducer: Callable[[T, T], T]) -> T: ...

    @overload
    def reduce(self, reducer: Callable[[R, T], R], initial: R) -> R: ...

    def reduce(self, reducer, initial=_NO_INITIAL):
        """
        Fold the range left to right.

        Without ``initial`` the first element seeds the accumulator and the
        reducer only sees the remaining elements.

        Args:
            reducer: ``(accumulator, element) -> accumulator``
            initial: Optional seed; returned unchanged for an empty range

        Raises:
            EmptyStreamError: If the range is empty and no ``initial`` is given
        """
        require_callable("reduce", reducer, "reducer")
        items = iter(self._range)
        if initial is _NO_INITIAL:
            try:
                accumulator = next(items)
            except StopIteration:
                raise EmptyStreamError("reduce") from None
        else:
            accumulator = initial
        for item in items:
            accumulator = reducer(accumulator, item)
        return accumulator

    def any(self, predicate: Callable[[T], bool]) -> bool:
        """True if some element satisfies ``predicate``; stops at the first."""
        require_callable("any", predicate, "predicate")
        for item in self._range:
            if predicate(item):
                return True
        return False

    def all(self, predicate: Callable[[T], bool]) -> bool:
        """True if every element satisfies ``predicate``; stops at the first miss."""
        require_callable("all", predicate, "predicate")
        for item in self._range:
            if not predicate(item):
                return False
        return True

    def collect(self, kind: Any = None) -> Any:
        """
        Build a fresh container holding the range's elements in order.

        Args:
            kind: Result container class, optionally parameterized
                  (``list``, ``set``, ``SortedSet[float]``, ``pa.Array``).
                  Defaults to this stage's own kind.

        Returns:
            A new container owned by the caller

        Raises:
            UnsupportedContainerError: If no adapter builds ``kind``
        """
        adapter = self._adapter if kind is None else adapter_for(kind)
        return adapter.build(self._range)


def stream(source: Any) -> Stream:
    """Wrap ``source`` at the head of a new chain."""
    return Stream(source)
