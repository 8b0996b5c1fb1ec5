import operator
from collections.abc import Callable, Sequence
from functools import reduce
from itertools import accumulate
from typing import Any, Literal, TypeAlias

LaneReducer: TypeAlias = Callable[[Sequence[Any]], Any]
LaneScan: TypeAlias = Callable[[Sequence[Any]], list[Any]]
ReducerName: TypeAlias = Literal[
    "sum",
    "prod",
    "mean",
    "variance",
    "min",
    "max",
    "argmin",
    "argmax",
    "peek_to_peek",
]
ScanName: TypeAlias = Literal["cumulative_sum", "cumulative_product"]


def lane_sum(lane: Sequence[Any]) -> Any:
    return reduce(operator.add, lane)


def lane_prod(lane: Sequence[Any]) -> Any:
    return reduce(operator.mul, lane)


def lane_mean(lane: Sequence[Any]) -> Any:
    return lane_sum(lane) / len(lane)


def lane_variance(lane: Sequence[Any]) -> Any:
    """Population variance: mean squared deviation from the lane mean."""
    center = lane_mean(lane)
    squared = ((value - center) * (value - center) for value in lane)
    return reduce(operator.add, squared) / len(lane)


def lane_argmin(lane: Sequence[Any]) -> int:
    """Position of the first minimum."""
    best = 0
    for position in range(1, len(lane)):
        if lane[position] < lane[best]:
            best = position
    return best


def lane_argmax(lane: Sequence[Any]) -> int:
    """Position of the first maximum."""
    best = 0
    for position in range(1, len(lane)):
        if lane[position] > lane[best]:
            best = position
    return best


def lane_peek_to_peek(lane: Sequence[Any]) -> Any:
    return max(lane) - min(lane)


LANE_REDUCERS: dict[str, LaneReducer] = {
    "sum": lane_sum,
    "prod": lane_prod,
    "mean": lane_mean,
    "variance": lane_variance,
    "min": min,
    "max": max,
    "argmin": lane_argmin,
    "argmax": lane_argmax,
    "peek_to_peek": lane_peek_to_peek,
}

LANE_SCANS: dict[str, LaneScan] = {
    "cumulative_sum": lambda lane: list(accumulate(lane, operator.add)),
    "cumulative_product": lambda lane: list(accumulate(lane, operator.mul)),
}


__all__ = [
    "LANE_REDUCERS",
    "LANE_SCANS",
    "LaneReducer",
    "LaneScan",
    "ReducerName",
    "ScanName",
]
