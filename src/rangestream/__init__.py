"""
rangestream - fluent, container-generic collection pipelines

Wrap any supported container in a Stream, chain intermediate operations
(map, filter, take, take_while, skip, skip_while) and finish with a
terminal operation (for_each, for_each_indexed, reduce, any, all, collect).
"""

__version__ = "0.1.0"

from .exceptions import (
    StreamError,
    UnsupportedContainerError,
    StageCompositionError,
    InvalidCountError,
    EmptyStreamError,
)
from .config import StreamSettings, load_settings, reset_settings
from .logging_config import configure_logging, get_logger
from .containers import (
    ContainerAdapter,
    ContainerRegistry,
    ListAdapter,
    TupleAdapter,
    HashSetAdapter,
    FrozenSetAdapter,
    SortedSetAdapter,
    SortedSet,
    adapter_for,
    adapter_for_source,
    register_container,
)
from .arrow import ArrowArrayAdapter, ArrowView, ChunkedArrayAdapter
from .ranges import IterationRange
from .stages import OwnedStorage
from .stream import Stream, stream

__all__ = [
    "__version__",
    # Errors
    "StreamError",
    "UnsupportedContainerError",
    "StageCompositionError",
    "InvalidCountError",
    "EmptyStreamError",
    # Configuration / logging
    "StreamSettings",
    "load_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    # Containers
    "ContainerAdapter",
    "ContainerRegistry",
    "ListAdapter",
    "TupleAdapter",
    "HashSetAdapter",
    "FrozenSetAdapter",
    "SortedSetAdapter",
    "SortedSet",
    "ArrowArrayAdapter",
    "ChunkedArrayAdapter",
    "ArrowView",
    "adapter_for",
    "adapter_for_source",
    "register_container",
    # Core
    "IterationRange",
    "OwnedStorage",
    "Stream",
    "stream",
]
