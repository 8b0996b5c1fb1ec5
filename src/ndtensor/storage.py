"""Owned flat storage behind every tensor.

A `Buffer` at or below the configured static allocation limit is "inline":
its values live in one fixed-length list that writes and same-length
assignments fill in place, and that is swapped for a freshly preallocated
list whenever the length changes. Above the limit it is "heap": the list is
grown and truncated in place and a full assignment adopts the new list.
Either strategy may be compacted into an immutable tuple while its tensor is
frozen; the next write thaws it back into a list.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, Literal, TypeAlias, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

StorageStrategy: TypeAlias = Literal["inline", "heap"]


def select_strategy(length: int, static_allocation_limit: int) -> StorageStrategy:
    """Pick the backing strategy for a buffer of `length` values."""
    return "inline" if length <= static_allocation_limit else "heap"


def _preallocate(length: int, values: Iterable[T], fill: T) -> list[T]:
    """Fixed-length slots holding `values`, padded with `fill`."""
    slots: list[T] = [fill] * length
    for index, value in zip(range(length), values):
        slots[index] = value
    return slots


class Buffer(Generic[T]):
    """Contiguous values owned by exactly one tensor."""

    __slots__ = ("_values", "_strategy", "_limit", "_compacted")

    def __init__(self, values: Iterable[T], *, static_allocation_limit: int) -> None:
        self._limit = static_allocation_limit
        self._values: list[T] | tuple[T, ...] = list(values)
        self._strategy = select_strategy(len(self._values), self._limit)
        self._compacted = False

    @classmethod
    def allocate(
        cls,
        length: int,
        fill: Callable[[int], T],
        *,
        static_allocation_limit: int,
    ) -> "Buffer[T]":
        """Allocate `length` slots and populate slot `i` with `fill(i)`."""
        buffer: Buffer[T] = cls.__new__(cls)
        buffer._limit = static_allocation_limit
        buffer._compacted = False
        buffer._strategy = select_strategy(length, static_allocation_limit)
        if buffer._strategy == "inline":
            slots: list[T] = [None] * length  # type: ignore[list-item]
            for index in range(length):
                slots[index] = fill(index)
        else:
            slots = [fill(index) for index in range(length)]
        buffer._values = slots
        return buffer

    @property
    def strategy(self) -> StorageStrategy:
        return self._strategy

    @property
    def compacted(self) -> bool:
        return self._compacted

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __getitem__(self, index: int) -> T:
        return self._values[index]

    def __setitem__(self, index: int, value: T) -> None:
        self.thaw()
        self._values[index] = value  # type: ignore[index]

    def snapshot(self) -> tuple[T, ...]:
        """Return an immutable copy of the values."""
        return tuple(self._values)

    def assign(self, values: Iterable[T]) -> None:
        """Replace every value, keeping the current length."""
        replacement = list(values)
        if len(replacement) != len(self._values):
            raise ValueError(
                f"buffer assignment needs {len(self._values)} values, "
                f"got {len(replacement)}"
            )
        if self._strategy == "inline":
            self.thaw()
            self._values[:] = replacement  # type: ignore[index]
        else:
            self._values = replacement
            self._compacted = False

    def resize(self, length: int, fill: T) -> None:
        """Grow by padding with `fill`, or shrink by truncating from the end."""
        current = len(self._values)
        strategy = select_strategy(length, self._limit)
        if self._strategy == "heap" and strategy == "heap":
            self.thaw()
            values = self._values
            if length > current:
                values.extend([fill] * (length - current))  # type: ignore[union-attr]
            else:
                del values[length:]  # type: ignore[union-attr]
        else:
            self._values = _preallocate(length, self._values, fill)
            self._compacted = False
        self._strategy = strategy
        logger.debug("buffer resized %d -> %d (%s)", current, length, strategy)

    def compact(self) -> None:
        """Store values in an immutable tuple until the next write."""
        if not self._compacted:
            self._values = tuple(self._values)
            self._compacted = True

    def thaw(self) -> None:
        """Return compacted values to a writable list."""
        if self._compacted:
            self._values = list(self._values)
            self._compacted = False

    def copy(self) -> "Buffer[T]":
        """Return an independent, writable buffer holding the same values."""
        return Buffer(self._values, static_allocation_limit=self._limit)

    def release(self) -> "Buffer[T]":
        """Hand the values to a new buffer and leave this one empty."""
        moved: Buffer[T] = Buffer((), static_allocation_limit=self._limit)
        moved._values = self._values
        moved._strategy = self._strategy
        moved._compacted = self._compacted
        self._values = []
        self._strategy = select_strategy(0, self._limit)
        self._compacted = False
        return moved


__all__ = ["Buffer", "StorageStrategy", "select_strategy"]
