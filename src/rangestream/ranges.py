"""
Iteration ranges - borrowed [start, end) windows into indexable storage.

A range never owns the storage it points into. Narrowing produces a new
range over the same storage object; it can only shrink.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class IterationRange(Generic[T]):
    """
    A read-only window ``storage[start:end]`` addressed by index.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    storage: Sequence[T]
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end <= len(self.storage):
            raise ValueError(
                f"Invalid range [{self.start}, {self.end}) over storage of "
                f"length {len(self.storage)}"
            )

    @classmethod
    def over(cls, storage: Sequence[T]) -> "IterationRange[T]":
        """Range covering the whole of ``storage``."""
        return cls(storage, 0, len(storage))

    def narrow(self, start: int, end: int) -> "IterationRange[T]":
        """Sub-range over the same storage; bounds must stay within this range."""
        if not self.start <= start <= end <= self.end:
            raise ValueError(
                f"[{start}, {end}) is not a sub-range of [{self.start}, {self.end})"
            )
        return IterationRange(self.storage, start, end)

    def __len__(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return self.end > self.start

    def __iter__(self) -> Iterator[T]:
        storage = self.storage
        for index in range(self.start, self.end):
            yield storage[index]

    def enumerate(self) -> Iterator[Tuple[int, T]]:
        """Yield ``(storage_index, value)`` pairs in range order."""
        storage = self.storage
        for index in range(self.start, self.end):
            yield index, storage[index]

    def __repr__(self) -> str:
        return f"IterationRange(<{type(self.storage).__name__}>, {self.start}, {self.end})"
