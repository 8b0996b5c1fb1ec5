from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from itertools import product

from .diagnostics import BadSlice
from .shape import Shape


@dataclass(frozen=True, slots=True)
class Slicer:
    """Half-open per-axis range with a shared positive step over one shape."""

    shape: Shape
    start: tuple[int, ...]
    stop: tuple[int, ...]
    step: int = 1
    result_shape: Shape | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", Shape.coerce(self.shape))
        object.__setattr__(self, "start", tuple(self.start))
        object.__setattr__(self, "stop", tuple(self.stop))
        self.validate()

        counts = tuple(
            -(-(stop - start) // self.step) for start, stop in zip(self.start, self.stop)
        )
        result = Shape(counts) if all(count > 0 for count in counts) else None
        object.__setattr__(self, "result_shape", result)

    @classmethod
    def from_begin(
        cls, shape: Shape | Iterable[int], stop: Iterable[int], step: int = 1
    ) -> "Slicer":
        """Build a slicer whose start is the origin of every axis."""
        shape = Shape.coerce(shape)
        return cls(shape, (0,) * shape.rank, tuple(stop), step)

    @classmethod
    def to_end(
        cls, shape: Shape | Iterable[int], start: Iterable[int], step: int = 1
    ) -> "Slicer":
        """Build a slicer whose stop is the extent of every axis."""
        shape = Shape.coerce(shape)
        return cls(shape, tuple(start), shape.extents, step)

    def validate(self) -> None:
        """Check bounds and step, raising `BadSlice` on the first violation."""
        rank = self.shape.rank
        if len(self.start) != rank or len(self.stop) != rank:
            raise BadSlice(
                message=(
                    f"invalid slicer: start has {len(self.start)} and stop has "
                    f"{len(self.stop)} entries for a shape of rank {rank}"
                ),
                help="start and stop need one entry per axis",
                related=("slicer bounds",),
                data={
                    "reason": "rank",
                    "expected": rank,
                    "start_rank": len(self.start),
                    "stop_rank": len(self.stop),
                },
            )
        if isinstance(self.step, bool) or not isinstance(self.step, int):
            raise BadSlice(
                message="invalid slicer: step must be an int",
                help="use a positive integer step",
                related=("slicer step",),
                data={"reason": "step_type"},
            )
        if self.step == 0:
            raise BadSlice(
                message="invalid slicer: step must not be zero",
                help="use a positive integer step",
                related=("slicer step",),
                data={"reason": "zero_step", "step": self.step},
            )
        if self.step < 0:
            raise BadSlice(
                message=f"invalid slicer: step must be positive, got {self.step}",
                help="use a positive integer step",
                related=("slicer step",),
                data={"reason": "negative_step", "step": self.step},
            )

        for axis, (start, stop, extent) in enumerate(
            zip(self.start, self.stop, self.shape.extents)
        ):
            if start < 0 or stop < 0:
                raise BadSlice(
                    message=f"invalid slicer: negative bound at axis {axis}",
                    help="slice bounds must be non-negative",
                    related=("slicer bounds",),
                    data={
                        "reason": "negative_bound",
                        "axis": axis,
                        "start": start,
                        "stop": stop,
                    },
                )
            if start > stop:
                raise BadSlice(
                    message=(
                        f"invalid slicer: start {start} exceeds stop {stop} "
                        f"at axis {axis}"
                    ),
                    help="start must not exceed stop on any axis",
                    related=("slicer bounds",),
                    data={
                        "reason": "reversed",
                        "axis": axis,
                        "start": start,
                        "stop": stop,
                    },
                )
            if stop > extent:
                raise BadSlice(
                    message=(
                        f"invalid slicer: stop {stop} exceeds extent {extent} "
                        f"at axis {axis}"
                    ),
                    help=f"stop must be at most {extent} on axis {axis}",
                    related=("slicer bounds",),
                    data={
                        "reason": "out_of_range",
                        "axis": axis,
                        "stop": stop,
                        "extent": extent,
                    },
                )

    def selected_indices(self) -> Iterator[tuple[int, ...]]:
        """Iterate selected source index tuples in row-major order of the result."""
        return product(
            *(
                range(start, stop, self.step)
                for start, stop in zip(self.start, self.stop)
            )
        )


__all__ = ["Slicer"]
