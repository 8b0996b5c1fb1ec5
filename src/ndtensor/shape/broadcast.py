import logging

from ..diagnostics import BroadcastError
from .model import Shape

logger = logging.getLogger(__name__)


def _aligned_extents(lhs: Shape, rhs: Shape) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Left-pad the shorter extents with ones so both have equal rank."""
    rank = max(lhs.rank, rhs.rank)
    lhs_extents = (1,) * (rank - lhs.rank) + lhs.extents
    rhs_extents = (1,) * (rank - rhs.rank) + rhs.extents
    return lhs_extents, rhs_extents


def is_broadcastable(lhs: Shape, rhs: Shape) -> bool:
    """Return whether two shapes align under trailing-axis broadcasting."""
    lhs_extents, rhs_extents = _aligned_extents(lhs, rhs)
    for lhs_extent, rhs_extent in zip(lhs_extents, rhs_extents):
        if lhs_extent != rhs_extent and lhs_extent != 1 and rhs_extent != 1:
            return False
    return True


def broadcast_shapes(lhs: Shape, rhs: Shape) -> Shape:
    """Resolve the common shape of two broadcast-compatible shapes."""
    if lhs == rhs:
        return lhs

    lhs_extents, rhs_extents = _aligned_extents(lhs, rhs)
    result: list[int] = []
    for axis, (lhs_extent, rhs_extent) in enumerate(zip(lhs_extents, rhs_extents)):
        if lhs_extent == rhs_extent or rhs_extent == 1:
            result.append(lhs_extent)
        elif lhs_extent == 1:
            result.append(rhs_extent)
        else:
            raise BroadcastError(
                message=(
                    f"cannot broadcast shapes {lhs} and {rhs}: extents "
                    f"{lhs_extent} and {rhs_extent} mismatch at aligned axis {axis}"
                ),
                help="aligned extents must be equal or one of them must be 1",
                related=("trailing-axis broadcasting",),
                data={
                    "reason": "incompatible",
                    "axis": axis,
                    "lhs_extent": lhs_extent,
                    "rhs_extent": rhs_extent,
                    "lhs_shape": str(lhs),
                    "rhs_shape": str(rhs),
                },
            )
    resolved = Shape(tuple(result))
    logger.debug("broadcast %s with %s -> %s", lhs, rhs, resolved)
    return resolved


def broadcast_index_map(source: Shape, target: Shape) -> tuple[int, ...]:
    """Map each flat position of `target` to the flat position of `source` it reads.

    Axes where `source` has extent 1, or that `source` lacks, reuse the same
    source element for every target position along them.
    """
    if source == target:
        return tuple(range(source.element_count))
    if broadcast_shapes(source, target) != target:
        raise BroadcastError(
            message=f"cannot broadcast shape {source} to {target}",
            help="the target must be the broadcast result of the source",
            related=("trailing-axis broadcasting",),
            data={
                "reason": "not_a_target",
                "lhs_shape": str(source),
                "rhs_shape": str(target),
            },
        )

    leading = target.rank - source.rank
    mapping: list[int] = []
    for target_index in target.indices():
        source_index = tuple(
            0 if extent == 1 else index
            for index, extent in zip(target_index[leading:], source.extents)
        )
        mapping.append(source.to_flat_index(source_index))
    return tuple(mapping)


__all__ = ["broadcast_index_map", "broadcast_shapes", "is_broadcastable"]
