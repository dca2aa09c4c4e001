"""
rangestream Exception Hierarchy

Contains all exception classes raised by stream composition and the
terminal operations.
"""


class StreamError(Exception):
    """
    Base exception for all rangestream operations.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class UnsupportedContainerError(StreamError, TypeError):
    """
    Raised when a source or ``collect`` target has no registered adapter.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """

    def __init__(self, kind):
        self.kind = kind
        name = getattr(kind, "__qualname__", None) or repr(kind)
        super().__init__(f"No container adapter registered for {name}")


class StageCompositionError(StreamError, TypeError):
    """
    Raised when a stage is built from an operation value of the wrong shape.

    The check happens while the chain is composed, before the stage
    reads any element.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class InvalidCountError(StreamError, ValueError):
    """
    Raised when take/skip receive a count that is not a non-negative int.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """

    def __init__(self, stage: str, count):
        self.stage = stage
        self.count = count
        super().__init__(f"[{stage}] count must be a non-negative integer, got {count!r}")


class EmptyStreamError(StreamError, ValueError):
    """
    Raised by ``reduce`` without an initial value on an empty range.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """

    def __init__(self, operation: str = "reduce"):
        self.operation = operation
        super().__init__(f"{operation}() of empty stream with no initial value")


__all__ = [
    "StreamError",
    "UnsupportedContainerError",
    "StageCompositionError",
    "InvalidCountError",
    "EmptyStreamError",
]
