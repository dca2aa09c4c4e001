"""
Stage construction - the work each intermediate operation does once.

Transforming stages (map, filter) scan their input range once and build a
new container they own, returned as ``OwnedStorage``. Narrowing stages
(take, take_while, skip, skip_while) scan at most once to compute a new
bound and return a sub-range over the same storage, without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from .containers import ContainerAdapter
from .exceptions import InvalidCountError, StageCompositionError
from .ranges import IterationRange

T = TypeVar("T")
U = TypeVar("U")


# =============================================================================
# Validation
# =============================================================================

def require_callable(stage: str, fn: Any, role: str) -> None:
    """Reject a non-callable operation value while the chain is composed."""
    if not callable(fn):
        raise StageCompositionError(stage, f"{role} must be callable, got {type(fn).__name__}")


def require_count(stage: str, count: Any) -> int:
    """Reject anything but a non-negative int (bool excluded)."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidCountError(stage, count)
    return count


# =============================================================================
# Transforming stages
# =============================================================================

@dataclass(frozen=True, eq=False)
class OwnedStorage(Generic[T]):
    """
    A finalized container bundled with the range over its read view.

    The container is never resized after the range is taken, so the range
    stays valid for as long as this object is alive.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    container: Any
    adapter: ContainerAdapter
    range: IterationRange[T]

    @classmethod
    def finalize(cls, adapter: ContainerAdapter, builder: Any) -> "OwnedStorage[T]":
        container = adapter.finalize(builder)
        return cls(container, adapter, IterationRange.over(adapter.view(container)))


def map_storage(
    source: IterationRange[T],
    mapper: Callable[[T], U],
    adapter: ContainerAdapter,
) -> OwnedStorage[U]:
    """Apply ``mapper`` to every element in range order, inserting each result."""
    builder = adapter.new()
    insert = adapter.insert
    for item in source:
        insert(builder, mapper(item))
    return OwnedStorage.finalize(adapter, builder)


def filter_storage(
    source: IterationRange[T],
    predicate: Callable[[T], bool],
    adapter: ContainerAdapter,
) -> OwnedStorage[T]:
    """Keep the elements satisfying ``predicate``, preserving range order."""
    builder = adapter.new()
    insert = adapter.insert
    for item in source:
        if predicate(item):
            insert(builder, item)
    return OwnedStorage.finalize(adapter, builder)


# =============================================================================
# Narrowing stages
# =============================================================================

def take_range(source: IterationRange[T], count: int) -> IterationRange[T]:
    """First ``count`` elements, or all of them if the range is shorter."""
    return source.narrow(source.start, min(source.start + count, source.end))


def take_while_range(source: IterationRange[T], predicate: Callable[[T], bool]) -> IterationRange[T]:
    """Maximal prefix whose elements all satisfy ``predicate``."""
    for index, item in source.enumerate():
        if not predicate(item):
            return source.narrow(source.start, index)
    return source


def skip_range(source: IterationRange[T], count: int) -> IterationRange[T]:
    """Drop the first ``count`` elements; over-skipping yields an empty range."""
    return source.narrow(min(source.start + count, source.end), source.end)


def skip_while_range(source: IterationRange[T], predicate: Callable[[T], bool]) -> IterationRange[T]:
    """Drop the maximal prefix satisfying ``predicate``."""
    for index, item in source.enumerate():
        if not predicate(item):
            return source.narrow(index, source.end)
    return source.narrow(source.end, source.end)
