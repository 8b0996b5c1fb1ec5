import logging
import operator
from collections.abc import Iterable

from ..diagnostics import BadReshape
from .model import Shape

logger = logging.getLogger(__name__)


def _normalize_target(target: Iterable[int]) -> tuple[int, ...]:
    """Coerce reshape target entries to plain ints."""
    normalized: list[int] = []
    for axis, extent in enumerate(target):
        if isinstance(extent, bool):
            raise BadReshape(
                message=f"invalid reshape: extent at axis {axis} must be an int",
                help="pass integer extents, with at most one negative placeholder",
                related=("reshape target",),
                data={"reason": "type", "axis": axis},
            )
        try:
            normalized.append(operator.index(extent))
        except TypeError as error:
            raise BadReshape(
                message=f"invalid reshape: extent at axis {axis} must be an int",
                help="pass integer extents, with at most one negative placeholder",
                related=("reshape target",),
                data={"reason": "type", "axis": axis},
            ) from error
    return tuple(normalized)


def infer_reshape(shape: Shape, target: Iterable[int]) -> Shape:
    """Resolve a reshape target with at most one negative placeholder."""
    extents = _normalize_target(target)
    element_count = shape.element_count

    inferred_axis: int | None = None
    explicit_product = 1
    for axis, extent in enumerate(extents):
        if extent == 0:
            raise BadReshape(
                message=f"invalid reshape: target extent at axis {axis} is zero",
                help="every target extent must be positive or the inferred placeholder",
                related=("reshape target",),
                data={"reason": "zero_extent", "axis": axis},
            )
        if extent < 0:
            if inferred_axis is not None:
                raise BadReshape(
                    message=(
                        "invalid reshape: more than one inferred extent found "
                        f"(axes {inferred_axis} and {axis})"
                    ),
                    help="use at most one negative placeholder",
                    related=("reshape target",),
                    data={
                        "reason": "multiple_inferred",
                        "axis": axis,
                        "first_axis": inferred_axis,
                    },
                )
            inferred_axis = axis
            continue
        explicit_product *= extent

    if inferred_axis is None:
        if explicit_product != element_count:
            raise BadReshape(
                message=(
                    f"invalid reshape: cannot reshape {element_count} elements "
                    f"into {explicit_product} elements"
                ),
                help="the target extents must multiply to the current element count",
                related=("reshape target",),
                data={
                    "reason": "count_mismatch",
                    "original": element_count,
                    "requested": explicit_product,
                },
            )
        resolved = Shape(extents)
    else:
        if element_count % explicit_product != 0:
            raise BadReshape(
                message=(
                    f"invalid reshape: cannot infer an extent fitting "
                    f"{element_count} elements into multiples of {explicit_product}"
                ),
                help="the explicit extents must divide the current element count",
                related=("reshape target",),
                data={
                    "reason": "count_mismatch",
                    "original": element_count,
                    "requested": explicit_product,
                },
            )
        resolved_extents = list(extents)
        resolved_extents[inferred_axis] = element_count // explicit_product
        resolved = Shape(tuple(resolved_extents))

    logger.debug("reshape %s to %s -> %s", shape, extents, resolved)
    return resolved


__all__ = ["infer_reshape"]
