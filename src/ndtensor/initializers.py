from collections.abc import Callable
from enum import Enum
from typing import Any, TypeAlias

import numpy as np

from .diagnostics import InitializerException

FillStrategy: TypeAlias = Callable[[int], Any]


class Initializer(str, Enum):
    """Built-in fill strategies applied once per element at construction."""

    ZEROS = "zeros"
    ONES = "ones"
    NORMAL = "normal"
    UNIFORM = "uniform"
    SEQUENCE = "sequence"
    NONE = "none"


def resolve_fill_strategy(
    init: Initializer | str | FillStrategy,
    *,
    dtype: type,
    rng: np.random.Generator | None = None,
) -> FillStrategy:
    """Resolve one initializer selector into a per-index fill callable."""
    if callable(init) and not isinstance(init, str):
        custom = init
        return lambda index, custom=custom: dtype(custom(index))

    try:
        selector = Initializer(init)
    except ValueError as error:
        raise InitializerException(
            message=f"unknown initializer {init!r}",
            help="use an Initializer member or a callable fill(index)",
            related=("fill strategy",),
            data={"initializer": str(init)},
        ) from error

    if selector is Initializer.ZEROS:
        return lambda index: dtype(0)
    if selector is Initializer.ONES:
        return lambda index: dtype(1)
    if selector is Initializer.SEQUENCE:
        return lambda index: dtype(index)
    if selector is Initializer.NONE:
        return lambda index: None

    generator = np.random.default_rng() if rng is None else rng
    if selector is Initializer.NORMAL:
        return lambda index: dtype(float(generator.standard_normal()))
    return lambda index: dtype(float(generator.random()))


def guarded(fill: FillStrategy, *, dtype: type, initializer: str) -> FillStrategy:
    """Wrap `fill` so any failure surfaces as `InitializerException`."""

    dtype_name = getattr(dtype, "__name__", repr(dtype))

    def guarded_fill(index: int) -> Any:
        try:
            return fill(index)
        except Exception as error:
            raise InitializerException(
                message=(
                    f"unable to initialize element {index} as {dtype_name}: {error}"
                ),
                help="check that the element type can be built from the fill value",
                related=("fill strategy",),
                data={
                    "initializer": initializer,
                    "dtype": dtype_name,
                    "index": index,
                },
            ) from error

    return guarded_fill


__all__ = ["FillStrategy", "Initializer", "guarded", "resolve_fill_strategy"]
