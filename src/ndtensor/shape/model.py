import operator
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from itertools import product
from math import prod
from typing import Self

from ..diagnostics import BadIndexer, BadInitShape


def _prefix_products(extents: Iterable[int]) -> tuple[int, ...]:
    """Return running products of `extents`, inclusive of each position."""
    running = 1
    products: list[int] = []
    for extent in extents:
        running *= extent
        products.append(running)
    return tuple(products)


@dataclass(frozen=True, slots=True)
class Shape:
    """Immutable extents of a dense row-major tensor.

    Rank 0 describes a scalar holding exactly one element. Every extent must
    be a positive integer; invalid extents raise `BadInitShape`.
    """

    extents: tuple[int, ...]
    element_count: int = field(init=False, repr=False, compare=False)
    cumulative_shape: tuple[int, ...] = field(init=False, repr=False, compare=False)
    reverse_cumulative_shape: tuple[int, ...] = field(
        init=False, repr=False, compare=False
    )
    strides: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        extents = tuple(self.extents)
        for axis, extent in enumerate(extents):
            if isinstance(extent, bool) or not isinstance(extent, int):
                raise BadInitShape(
                    message=(
                        f"invalid shape: extent at axis {axis} must be an int, "
                        f"got {type(extent).__name__}"
                    ),
                    help="pass positive integer extents",
                    related=("shape construction",),
                    data={"axis": axis, "extent": repr(extent)},
                )
            if extent <= 0:
                raise BadInitShape(
                    message=(
                        "invalid shape: all extents must be natural numbers "
                        f"(> 0), got {extent} at axis {axis}"
                    ),
                    help="pass positive integer extents",
                    related=("shape construction",),
                    data={"axis": axis, "extent": extent},
                )

        element_count = prod(extents)
        cumulative = _prefix_products(extents)
        object.__setattr__(self, "extents", extents)
        object.__setattr__(self, "element_count", element_count)
        object.__setattr__(self, "cumulative_shape", cumulative)
        object.__setattr__(
            self,
            "reverse_cumulative_shape",
            _prefix_products(reversed(extents))[::-1],
        )
        object.__setattr__(
            self,
            "strides",
            tuple(element_count // spanned for spanned in cumulative),
        )

    @classmethod
    def coerce(cls, value: "Shape | Iterable[int]") -> Self:
        """Return `value` as a shape, building one from extents if needed."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls((value,))
        return cls(tuple(value))

    @staticmethod
    def is_valid(extents: Iterable[int]) -> bool:
        """Return whether every extent is a positive integer."""
        for extent in extents:
            if isinstance(extent, bool) or not isinstance(extent, int):
                return False
            if extent <= 0:
                return False
        return True

    @property
    def rank(self) -> int:
        return len(self.extents)

    def __len__(self) -> int:
        return len(self.extents)

    def __getitem__(self, axis: int) -> int:
        return self.extents[axis]

    def __iter__(self) -> Iterator[int]:
        return iter(self.extents)

    def __str__(self) -> str:
        return "(" + ", ".join(str(extent) for extent in self.extents) + ")"

    def to_flat_index(self, indices: Sequence[int]) -> int:
        """Translate one per-axis index tuple into a row-major flat offset."""
        if len(indices) != self.rank:
            raise BadIndexer(
                message=(
                    f"invalid indexer: got {len(indices)} indices for a tensor "
                    f"of rank {self.rank}"
                ),
                help="pass exactly one index per axis",
                related=("flat index translation",),
                data={"reason": "rank", "expected": self.rank, "got": len(indices)},
            )

        offset = 0
        for axis, (raw_index, extent, stride) in enumerate(
            zip(indices, self.extents, self.strides)
        ):
            try:
                index = operator.index(raw_index)
            except TypeError as error:
                raise BadIndexer(
                    message=(
                        f"invalid indexer: index at axis {axis} must be an int, "
                        f"got {type(raw_index).__name__}"
                    ),
                    help="pass integer indices",
                    related=("flat index translation",),
                    data={"reason": "type", "axis": axis},
                ) from error
            if index < 0 or index >= extent:
                raise BadIndexer(
                    message=(
                        f"invalid indexer: index {index} is out of range for axis "
                        f"{axis} with extent {extent}"
                    ),
                    help=f"use indices in [0, {extent}) on axis {axis}",
                    related=("flat index translation",),
                    data={
                        "reason": "out_of_range",
                        "axis": axis,
                        "extent": extent,
                        "index": index,
                    },
                )
            offset += index * stride
        return offset

    def unravel(self, flat_index: int) -> tuple[int, ...]:
        """Translate one flat offset back into its per-axis index tuple."""
        if flat_index < 0 or flat_index >= self.element_count:
            raise BadIndexer(
                message=(
                    f"invalid indexer: flat index {flat_index} is out of range "
                    f"for {self.element_count} elements"
                ),
                help=f"use flat indices in [0, {self.element_count})",
                related=("flat index translation",),
                data={
                    "reason": "out_of_range",
                    "extent": self.element_count,
                    "index": flat_index,
                },
            )
        return tuple(
            (flat_index // stride) % extent
            for extent, stride in zip(self.extents, self.strides)
        )

    def indices(self) -> Iterator[tuple[int, ...]]:
        """Iterate every index tuple in row-major order."""
        return product(*(range(extent) for extent in self.extents))

    def drop_axis(self, axis: int) -> "Shape":
        """Return this shape with `axis` removed."""
        return Shape(self.extents[:axis] + self.extents[axis + 1 :])


__all__ = ["Shape"]
