from collections.abc import Sequence
from typing import Any

from ..diagnostics import AxisError
from ..shape import Shape


def check_axis(shape: Shape, axis: int, *, operation: str) -> int:
    """Validate `axis` against `shape`, raising `AxisError` when it does not exist."""
    if isinstance(axis, bool) or not isinstance(axis, int):
        raise AxisError(
            message=f"{operation}: axis must be an int, got {type(axis).__name__}",
            help="pass an integer axis",
            related=(f"{operation} axis",),
            data={"operation": operation, "max_axis": shape.rank - 1},
        )
    if axis < 0 or axis >= shape.rank:
        raise AxisError(
            message=(
                f"{operation}: axis {axis} is out of bounds for rank {shape.rank} "
                f"(valid axes are 0..{shape.rank - 1})"
            ),
            help=f"use an axis in [0, {shape.rank})",
            related=(f"{operation} axis",),
            data={"operation": operation, "max_axis": shape.rank - 1, "axis": axis},
        )
    return axis


def _lane_layout(shape: Shape, axis: int) -> tuple[int, int, int]:
    """Return (outer, extent, inner) element counts around `axis`."""
    extent = shape.extents[axis]
    outer = shape.cumulative_shape[axis] // extent
    inner = shape.reverse_cumulative_shape[axis] // extent
    return outer, extent, inner


def axis_wise(shape: Shape, values: Sequence[Any], axis: int) -> list[list[Any]]:
    """Split row-major `values` into the lanes that vary along `axis`.

    Lanes come out in row-major order of `shape` with `axis` removed, so lane
    `k` feeds position `k` of any per-lane reduction.
    """
    check_axis(shape, axis, operation="axis_wise")
    outer, extent, inner = _lane_layout(shape, axis)
    block = extent * inner
    return [
        [values[o * block + c * inner + i] for c in range(extent)]
        for o in range(outer)
        for i in range(inner)
    ]


def from_lanes(shape: Shape, lanes: Sequence[Sequence[Any]], axis: int) -> list[Any]:
    """Inverse of `axis_wise`: place lane values back at their flat offsets."""
    outer, extent, inner = _lane_layout(shape, axis)
    block = extent * inner
    values: list[Any] = [None] * shape.element_count
    for lane_index, lane in enumerate(lanes):
        o, i = divmod(lane_index, inner)
        for c in range(extent):
            values[o * block + c * inner + i] = lane[c]
    return values


__all__ = ["axis_wise", "check_axis", "from_lanes"]
