"""
Arrow Container Adapters - pyarrow arrays as stream sources and results

Arrow arrays are immutable, so their builders are plain Python lists that
``finalize`` converts into an array in one step. Reading goes through
``ArrowView``, which indexes the array without converting it as a whole.
"""

from __future__ import annotations

from collections.abc import Sequence as AbstractSequence
from typing import Any, Iterator, List, Optional, Union

import pyarrow as pa

from .containers import ContainerAdapter, register_container

ArrowArray = Union[pa.Array, pa.ChunkedArray]


def _as_data_type(value_type: Any) -> Optional[pa.DataType]:
    """Accept an arrow DataType, None, or a Python type arrow can infer from."""
    if value_type is None or isinstance(value_type, pa.DataType):
        return value_type
    if value_type is bool:
        return pa.bool_()
    if value_type is int:
        return pa.int64()
    if value_type is float:
        return pa.float64()
    if value_type is str:
        return pa.string()
    if value_type is bytes:
        return pa.binary()
    raise TypeError(f"Cannot map {value_type!r} to an arrow data type")


class ArrowView(AbstractSequence):
    """Read-only indexable view over an arrow array yielding Python values.

    ::: This is-in-layer Container-Layer.
    ::: This is a view.
    ::: This is stateless.
    """

    __slots__ = ("_array",)

    def __init__(self, array: ArrowArray):
        self._array = array

    @property
    def array(self) -> ArrowArray:
        return self._array

    def __len__(self) -> int:
        return len(self._array)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._array[index].to_pylist()
        return self._array[index].as_py()

    def __iter__(self) -> Iterator[Any]:
        for scalar in self._array:
            yield scalar.as_py()

    def __repr__(self) -> str:
        return f"ArrowView({self._array.type}, {len(self._array)})"


class ArrowArrayAdapter(ContainerAdapter):
    """
    ``pa.Array`` kind.

    ``value_type`` is the arrow type used when building; when None the
    type is inferred from the values.
    """
    kind = pa.Array

    def __init__(self, value_type: Any = None):
        super().__init__(_as_data_type(value_type))

    def element_type(self, container: ArrowArray) -> pa.DataType:
        return container.type

    def new(self) -> List[Any]:
        return []

    def insert(self, builder: List[Any], value: Any) -> None:
        builder.append(value)

    def finalize(self, builder: List[Any]) -> pa.Array:
        return pa.array(builder, type=self.value_type)

    def view(self, container: ArrowArray) -> ArrowView:
        return ArrowView(container)


class ChunkedArrayAdapter(ArrowArrayAdapter):
    """``pa.ChunkedArray`` kind; results are built as a single chunk."""
    kind = pa.ChunkedArray

    def finalize(self, builder: List[Any]) -> pa.ChunkedArray:
        array = pa.array(builder, type=self.value_type)
        return pa.chunked_array([array], type=array.type)


register_container(pa.Array, ArrowArrayAdapter)
register_container(pa.ChunkedArray, ChunkedArrayAdapter)
