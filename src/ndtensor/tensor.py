import logging
import operator
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Generic, Self, TypeVar

import numpy as np

from .config import DEFAULT_CONFIG, TensorConfig
from .diagnostics import (
    BadIndexer,
    BadInitShape,
    BadReshape,
    BadSlice,
    BroadcastError,
    ErrorCode,
    FreezeException,
    InitializerException,
    OperationUndefined,
)
from .initializers import FillStrategy, Initializer, guarded, resolve_fill_strategy
from .reduction import (
    LANE_REDUCERS,
    LANE_SCANS,
    ReducerName,
    ScanName,
    axis_wise,
    check_axis,
    from_lanes,
)
from .shape import Shape, broadcast_index_map, broadcast_shapes, infer_reshape
from .slicer import Slicer
from .storage import Buffer, StorageStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")

BinaryOp = Callable[[Any, Any], Any]


def _reflected(op: BinaryOp) -> BinaryOp:
    return lambda lhs, rhs: op(rhs, lhs)


def _extents_argument(extents: tuple[Any, ...]) -> tuple[int, ...]:
    """Accept both `f(2, 3)` and `f((2, 3))` spellings."""
    if len(extents) == 1 and isinstance(extents[0], Iterable):
        return tuple(extents[0])
    return tuple(extents)


def _dtype_name(dtype: type) -> str:
    return getattr(dtype, "__name__", repr(dtype))


def _initializer_name(init: Initializer | str | FillStrategy) -> str:
    if isinstance(init, Initializer):
        return init.value
    if isinstance(init, str):
        return init
    return getattr(init, "__name__", "custom")


def _infer_dtype(values: Sequence[Any], default: type) -> type:
    for value in values:
        if value is not None:
            return type(value)
    return default


def _nest(values: Sequence[Any], extents: tuple[int, ...]) -> Any:
    if not extents:
        return values[0]
    step = len(values) // extents[0]
    return [
        _nest(values[position * step : (position + 1) * step], extents[1:])
        for position in range(extents[0])
    ]


class Tensor(Generic[T]):
    """Dense row-major N-dimensional array of one element type.

    A tensor owns its buffer exclusively and shares its `TensorConfig` with
    every tensor derived from it. Binary operators broadcast over trailing
    axes; in-place operators require identical shapes.
    """

    __slots__ = ("_shape", "_buffer", "_config", "_dtype", "_frozen", "_released")
    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        shape: Shape | Iterable[int],
        init: Initializer | str | FillStrategy = Initializer.NORMAL,
        *,
        dtype: type = float,
        config: TensorConfig = DEFAULT_CONFIG,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Build one tensor of `shape` populated by the selected fill strategy."""
        resolved_shape = Shape.coerce(shape)
        initializer_name = _initializer_name(init)
        fill = guarded(
            resolve_fill_strategy(init, dtype=dtype, rng=rng),
            dtype=dtype,
            initializer=initializer_name,
        )
        buffer: Buffer[T] = Buffer.allocate(
            resolved_shape.element_count,
            fill,
            static_allocation_limit=config.static_allocation_limit,
        )
        self._adopt(resolved_shape, buffer, dtype=dtype, config=config)
        logger.debug(
            "built tensor %s of %s with %s fill (%s storage)",
            resolved_shape,
            _dtype_name(dtype),
            initializer_name,
            buffer.strategy,
        )

    def _adopt(
        self,
        shape: Shape,
        buffer: Buffer[T],
        *,
        dtype: type,
        config: TensorConfig,
        frozen: bool = False,
    ) -> None:
        self._shape = shape
        self._buffer = buffer
        self._dtype = dtype
        self._config = config
        self._frozen = frozen
        self._released = False

    @classmethod
    def _wrap(
        cls,
        shape: Shape,
        values: Iterable[Any],
        *,
        dtype: type,
        config: TensorConfig,
    ) -> "Tensor[Any]":
        """Build a tensor around already validated values."""
        tensor: Tensor[Any] = cls.__new__(cls)
        buffer: Buffer[Any] = Buffer(
            values, static_allocation_limit=config.static_allocation_limit
        )
        tensor._adopt(shape, buffer, dtype=dtype, config=config)
        return tensor

    @classmethod
    def from_data(
        cls,
        values: Iterable[Any],
        shape: Shape | Iterable[int],
        *,
        dtype: type | None = None,
        config: TensorConfig = DEFAULT_CONFIG,
    ) -> "Tensor[Any]":
        """Build a tensor from explicit row-major values.

        When `dtype` is given every value is converted with it; otherwise the
        element type is taken from the first value.
        """
        resolved_shape = Shape.coerce(shape)
        data = list(values)
        if len(data) != resolved_shape.element_count:
            raise BadInitShape(
                message=(
                    f"invalid shape: {len(data)} values cannot fill shape "
                    f"{resolved_shape} of {resolved_shape.element_count} elements"
                ),
                help="pass exactly one value per element of the shape",
                related=("tensor construction",),
                data={
                    "reason": "count_mismatch",
                    "expected": resolved_shape.element_count,
                    "got": len(data),
                },
            )
        if dtype is None:
            resolved_dtype = _infer_dtype(data, float)
        else:
            converted: list[Any] = []
            for position, value in enumerate(data):
                try:
                    converted.append(dtype(value))
                except Exception as error:
                    raise InitializerException(
                        message=(
                            f"unable to convert element {position} ({value!r}) "
                            f"to {_dtype_name(dtype)}: {error}"
                        ),
                        help="pass values the element type can be built from",
                        related=("tensor construction",),
                        data={
                            "initializer": "data",
                            "dtype": _dtype_name(dtype),
                            "index": position,
                        },
                    ) from error
            data = converted
            resolved_dtype = dtype
        return cls._wrap(resolved_shape, data, dtype=resolved_dtype, config=config)

    # state

    def _check_live(self, operation: str) -> None:
        if self._released:
            raise OperationUndefined(
                code=ErrorCode.RELEASED_TENSOR,
                message=f"{operation}: tensor storage was moved to another tensor",
                help="use the tensor returned by move()",
                related=("tensor ownership",),
                data={"operation": operation},
            )

    def _require_mutable(self, operation: str) -> None:
        self._check_live(operation)
        if self._frozen:
            raise OperationUndefined(
                code=ErrorCode.FROZEN_TENSOR,
                message=f"{operation}: tensor is frozen",
                help="call unfreeze() before mutating the tensor",
                related=("tensor freeze",),
                data={"operation": operation},
            )

    @property
    def _storage(self) -> Buffer[T]:
        self._check_live("read")
        return self._buffer

    @property
    def shape(self) -> Shape:
        self._check_live("shape")
        return self._shape

    @property
    def rank(self) -> int:
        return self.shape.rank

    @property
    def size(self) -> int:
        return self.shape.element_count

    @property
    def dtype(self) -> type:
        return self._dtype

    @property
    def config(self) -> TensorConfig:
        return self._config

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def released(self) -> bool:
        return self._released

    @property
    def storage_strategy(self) -> StorageStrategy:
        return self._storage.strategy

    @property
    def values(self) -> tuple[T, ...]:
        """Flat row-major copy of the elements."""
        return self._storage.snapshot()

    def tolist(self) -> Any:
        """Nested lists following the shape; a scalar for rank 0."""
        return _nest(self._storage.snapshot(), self._shape.extents)

    def __repr__(self) -> str:
        if self._released:
            return "Tensor(<released>)"
        return (
            f"Tensor(shape={self._shape}, dtype={_dtype_name(self._dtype)}, "
            f"values={list(self._buffer)})"
        )

    def _derive(self, shape: Shape, values: list[Any]) -> "Tensor[Any]":
        """Wrap operation results sharing this tensor's configuration."""
        return Tensor._wrap(
            shape,
            values,
            dtype=_infer_dtype(values, self._dtype),
            config=self._config,
        )

    # indexing

    @staticmethod
    def _index_key(key: Any) -> tuple[Any, ...]:
        return key if isinstance(key, tuple) else (key,)

    def to_flat_index(self, indices: Sequence[int]) -> int:
        return self.shape.to_flat_index(indices)

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, Slicer):
            return self.slice(key)
        storage = self._storage
        return storage[self._shape.to_flat_index(self._index_key(key))]

    def __setitem__(self, key: Any, value: T) -> None:
        self._require_mutable("setitem")
        self._buffer[self._shape.to_flat_index(self._index_key(key))] = value

    def gather(self, flat_indices: Iterable[int]) -> list[T]:
        """Return the values stored at each flat offset."""
        storage = self._storage
        size = self._shape.element_count
        gathered: list[T] = []
        for raw_index in flat_indices:
            index = operator.index(raw_index)
            if index < 0 or index >= size:
                raise BadIndexer(
                    message=(
                        f"invalid indexer: flat index {index} is out of range "
                        f"for {size} elements"
                    ),
                    help=f"use flat indices in [0, {size})",
                    related=("gather",),
                    data={"reason": "out_of_range", "extent": size, "index": index},
                )
            gathered.append(storage[index])
        return gathered

    def item(self) -> T:
        """Return the only element of a one-element tensor."""
        storage = self._storage
        if len(storage) != 1:
            raise OperationUndefined(
                message=(
                    f"item: only one-element tensors convert to a value, got "
                    f"{len(storage)} elements"
                ),
                help="reduce or index the tensor first",
                related=("item",),
                data={"operation": "item", "got": len(storage)},
            )
        return storage[0]

    # shape manipulation

    def reshape(self, *extents: Any) -> Self:
        """Refactor the extents in place; one negative entry is inferred."""
        target = _extents_argument(extents)
        self._require_mutable("reshape")
        self._shape = infer_reshape(self._shape, target)
        return self

    def resize(self, *extents: Any) -> Self:
        """Change the element count in place, zero-padding or truncating at the end."""
        target = _extents_argument(extents)
        self._require_mutable("resize")
        if not Shape.is_valid(target):
            raise BadReshape(
                message=f"invalid resize: target extents {target} must all be positive",
                help="resize takes explicit positive extents",
                related=("resize target",),
                data={"reason": "invalid_extent", "original": self._shape.element_count},
            )
        new_shape = Shape(target)
        padding: Any = None
        if new_shape.element_count > self._shape.element_count:
            zero = guarded(
                lambda index: self._dtype(0), dtype=self._dtype, initializer="zeros"
            )
            padding = zero(self._shape.element_count)
        self._buffer.resize(new_shape.element_count, padding)
        logger.debug("resized tensor %s -> %s", self._shape, new_shape)
        self._shape = new_shape
        return self

    def ravel(self) -> Self:
        """Reshape in place to rank 1."""
        return self.reshape(-1)

    def flatten(self) -> "Tensor[T]":
        """Return a rank-1 copy."""
        return self.copy().ravel()

    def squeeze(self) -> Self:
        """Drop every extent-1 axis in place."""
        self._require_mutable("squeeze")
        self._shape = Shape(tuple(extent for extent in self._shape.extents if extent != 1))
        return self

    def swap_axes(self, first: int, second: int) -> Self:
        """Transpose two axes in place, moving the data with them."""
        self._require_mutable("swap_axes")
        check_axis(self._shape, first, operation="swap_axes")
        check_axis(self._shape, second, operation="swap_axes")
        if first == second:
            return self

        extents = list(self._shape.extents)
        extents[first], extents[second] = extents[second], extents[first]
        swapped = Shape(tuple(extents))
        source = self._buffer
        values: list[T] = []
        for index in swapped.indices():
            original = list(index)
            original[first], original[second] = original[second], original[first]
            values.append(source[self._shape.to_flat_index(original)])
        source.assign(values)
        self._shape = swapped
        return self

    def slice(self, slicer: Slicer) -> "Tensor[T]":
        """Return a new tensor holding the elements `slicer` selects."""
        storage = self._storage
        if slicer.shape != self._shape:
            raise BadSlice(
                message=(
                    f"invalid slicer: built for shape {slicer.shape}, "
                    f"applied to shape {self._shape}"
                ),
                help="build the slicer from this tensor's shape",
                related=("slicer bounds",),
                data={
                    "reason": "shape_mismatch",
                    "expected": str(self._shape),
                    "got": str(slicer.shape),
                },
            )
        if slicer.result_shape is None:
            raise BadSlice(
                message="invalid slicer: selection is empty on at least one axis",
                help="use start < stop on every axis",
                related=("slicer bounds",),
                data={"reason": "empty"},
            )
        values = [
            storage[self._shape.to_flat_index(index)]
            for index in slicer.selected_indices()
        ]
        return Tensor._wrap(
            slicer.result_shape, values, dtype=self._dtype, config=self._config
        )

    # freeze / copy / move

    def freeze(self) -> None:
        """Forbid mutation until `unfreeze()`; fails when the config forbids it."""
        self._check_live("freeze")
        if not self._config.freezeable:
            raise FreezeException(
                message="cannot freeze a tensor configured as non-freezeable",
                help="build the tensor with TensorConfig(freezeable=True)",
                related=("tensor freeze",),
                data={"operation": "freeze"},
            )
        if not self._frozen:
            self._frozen = True
            self._buffer.compact()
            logger.debug("froze tensor %s", self._shape)

    def unfreeze(self) -> bool:
        """Allow mutation again; returns whether the tensor was frozen."""
        changed = self._frozen
        self._frozen = False
        return changed

    def copy(self) -> "Tensor[T]":
        """Deep copy with a separate buffer and the same configuration."""
        clone: Tensor[T] = Tensor.__new__(Tensor)
        clone._adopt(
            self._shape, self._storage.copy(), dtype=self._dtype, config=self._config
        )
        return clone

    def copy_to(self, target: "Tensor[Any]", explicit_resize: bool = False) -> None:
        """Copy values into `target`, which takes this tensor's shape."""
        storage = self._storage
        target._require_mutable("copy_to")
        if not explicit_resize and target._shape.element_count != len(storage):
            raise OperationUndefined(
                message=(
                    f"copy_to: target holds {target._shape.element_count} elements "
                    f"but source holds {len(storage)} and resize is disabled"
                ),
                help="pass explicit_resize=True to resize the target",
                related=("copy_to",),
                data={
                    "operation": "copy_to",
                    "expected": len(storage),
                    "got": target._shape.element_count,
                },
            )
        if target._shape.element_count != len(storage):
            target._buffer.resize(len(storage), None)
        target._buffer.assign(storage.snapshot())
        target._shape = self._shape
        target._dtype = self._dtype

    def move(self) -> "Tensor[T]":
        """Transfer the buffer to a new tensor; this tensor becomes released."""
        self._check_live("move")
        moved: Tensor[T] = type(self).__new__(type(self))
        moved._adopt(
            self._shape,
            self._buffer.release(),
            dtype=self._dtype,
            config=self._config,
            frozen=self._frozen,
        )
        self._released = True
        logger.debug("moved tensor %s", self._shape)
        return moved

    # element-wise

    def _resolve_broadcast(self, other: "Tensor[Any]", *, operation: str) -> Shape:
        if not (self._config.broadcastable and other._config.broadcastable):
            raise BroadcastError(
                message=(
                    f"{operation}: cannot broadcast {self._shape} with "
                    f"{other._shape}, a tensor is configured non-broadcastable"
                ),
                help="use identical shapes or broadcastable configurations",
                related=("trailing-axis broadcasting",),
                data={
                    "reason": "not_broadcastable",
                    "operation": operation,
                    "lhs_shape": str(self._shape),
                    "rhs_shape": str(other._shape),
                },
            )
        return broadcast_shapes(self._shape, other._shape)

    def _binary(self, other: Any, op: BinaryOp, *, operation: str) -> "Tensor[Any]":
        lhs = self._storage
        if not isinstance(other, Tensor):
            return self._derive(self._shape, [op(value, other) for value in lhs])

        rhs = other._storage
        if other._shape == self._shape:
            return self._derive(self._shape, [op(a, b) for a, b in zip(lhs, rhs)])

        shape = self._resolve_broadcast(other, operation=operation)
        lhs_map = broadcast_index_map(self._shape, shape)
        rhs_map = broadcast_index_map(other._shape, shape)
        return self._derive(
            shape, [op(lhs[i], rhs[j]) for i, j in zip(lhs_map, rhs_map)]
        )

    def _inplace(self, other: Any, op: BinaryOp, *, operation: str) -> Self:
        self._require_mutable(operation)
        lhs = self._buffer
        if isinstance(other, Tensor):
            rhs = other._storage
            if other._shape != self._shape:
                raise OperationUndefined(
                    message=(
                        f"{operation}: in-place operation needs matching shapes, "
                        f"got {self._shape} and {other._shape}"
                    ),
                    help="use the out-of-place operator to broadcast",
                    related=("in-place element-wise",),
                    data={
                        "operation": operation,
                        "expected": str(self._shape),
                        "got": str(other._shape),
                    },
                )
            result = [op(a, b) for a, b in zip(lhs.snapshot(), rhs.snapshot())]
        else:
            result = [op(value, other) for value in lhs]
        lhs.assign(result)
        self._dtype = _infer_dtype(result, self._dtype)
        return self

    def __add__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, operator.add, operation="add")

    def __radd__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, _reflected(operator.add), operation="add")

    def __sub__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, operator.sub, operation="subtract")

    def __rsub__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, _reflected(operator.sub), operation="subtract")

    def __mul__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, operator.mul, operation="multiply")

    def __rmul__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, _reflected(operator.mul), operation="multiply")

    def __truediv__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, operator.truediv, operation="divide")

    def __rtruediv__(self, other: Any) -> "Tensor[Any]":
        return self._binary(other, _reflected(operator.truediv), operation="divide")

    def __iadd__(self, other: Any) -> Self:
        return self._inplace(other, operator.add, operation="add")

    def __isub__(self, other: Any) -> Self:
        return self._inplace(other, operator.sub, operation="subtract")

    def __imul__(self, other: Any) -> Self:
        return self._inplace(other, operator.mul, operation="multiply")

    def __itruediv__(self, other: Any) -> Self:
        return self._inplace(other, operator.truediv, operation="divide")

    def __neg__(self) -> "Tensor[Any]":
        return self.map(operator.neg)

    def __abs__(self) -> "Tensor[Any]":
        return self.map(abs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return self._storage.snapshot() == other._storage.snapshot()

    def eq(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.eq, operation="eq")

    def ne(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.ne, operation="ne")

    def lt(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.lt, operation="lt")

    def le(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.le, operation="le")

    def gt(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.gt, operation="gt")

    def ge(self, other: Any) -> "Tensor[bool]":
        return self._binary(other, operator.ge, operation="ge")

    def map(self, fn: Callable[[T], Any]) -> "Tensor[Any]":
        """Return a new tensor with `fn` applied to every element."""
        return self._derive(self._shape, [fn(value) for value in self._storage])

    def apply(self, fn: Callable[[T], T]) -> Self:
        """Apply `fn` to every element in place."""
        self._require_mutable("apply")
        result = [fn(value) for value in self._buffer]
        self._buffer.assign(result)
        self._dtype = _infer_dtype(result, self._dtype)
        return self

    def clip(self, low: T, high: T) -> Self:
        """Clamp every element into `[low, high]` in place."""
        self._require_mutable("clip")
        if low > high:
            raise OperationUndefined(
                message=f"clip: lower bound {low!r} exceeds upper bound {high!r}",
                help="pass low <= high",
                related=("clip",),
                data={"operation": "clip"},
            )
        self._buffer.assign(
            low if value < low else high if value > high else value
            for value in self._buffer
        )
        return self

    # reductions

    def axis_wise(self, axis: int) -> list[list[T]]:
        """Lanes of elements varying along `axis`, in row-major order of the rest."""
        return axis_wise(self.shape, self._storage, axis)

    def _reduce(self, name: ReducerName, axis: int | None) -> Any:
        reducer = LANE_REDUCERS[name]
        storage = self._storage
        if axis is None:
            return reducer(storage.snapshot())
        check_axis(self._shape, axis, operation=name)
        lanes = axis_wise(self._shape, storage, axis)
        return self._derive(
            self._shape.drop_axis(axis), [reducer(lane) for lane in lanes]
        )

    def _scan(self, name: ScanName, axis: int | None) -> "Tensor[Any]":
        scan = LANE_SCANS[name]
        storage = self._storage
        if axis is None:
            return self._derive(Shape((len(storage),)), scan(storage.snapshot()))
        check_axis(self._shape, axis, operation=name)
        lanes = axis_wise(self._shape, storage, axis)
        scanned = [scan(lane) for lane in lanes]
        return self._derive(self._shape, from_lanes(self._shape, scanned, axis))

    def sum(self, axis: int | None = None) -> Any:
        return self._reduce("sum", axis)

    def prod(self, axis: int | None = None) -> Any:
        return self._reduce("prod", axis)

    def mean(self, axis: int | None = None) -> Any:
        return self._reduce("mean", axis)

    def variance(self, axis: int | None = None) -> Any:
        return self._reduce("variance", axis)

    def min(self, axis: int | None = None) -> Any:
        return self._reduce("min", axis)

    def max(self, axis: int | None = None) -> Any:
        return self._reduce("max", axis)

    def argmin(self, axis: int | None = None) -> Any:
        """First position of the minimum; a flat offset when `axis` is None."""
        return self._reduce("argmin", axis)

    def argmax(self, axis: int | None = None) -> Any:
        """First position of the maximum; a flat offset when `axis` is None."""
        return self._reduce("argmax", axis)

    def peek_to_peek(self, axis: int | None = None) -> Any:
        """Range of values, `max - min`."""
        return self._reduce("peek_to_peek", axis)

    def cumulative_sum(self, axis: int | None = None) -> "Tensor[Any]":
        return self._scan("cumulative_sum", axis)

    def cumulative_product(self, axis: int | None = None) -> "Tensor[Any]":
        return self._scan("cumulative_product", axis)

    def all(
        self, predicate: Callable[[T], bool] = bool, axis: int | None = None
    ) -> "bool | Tensor[bool]":
        """Whether `predicate` holds for every element, per lane when `axis` is set."""
        storage = self._storage
        if axis is None:
            return all(predicate(value) for value in storage)
        check_axis(self._shape, axis, operation="all")
        lanes = axis_wise(self._shape, storage, axis)
        return Tensor._wrap(
            self._shape.drop_axis(axis),
            [all(predicate(value) for value in lane) for lane in lanes],
            dtype=bool,
            config=self._config,
        )

    def any(
        self, predicate: Callable[[T], bool] = bool, axis: int | None = None
    ) -> "bool | Tensor[bool]":
        """Whether `predicate` holds for some element, per lane when `axis` is set."""
        storage = self._storage
        if axis is None:
            return any(predicate(value) for value in storage)
        check_axis(self._shape, axis, operation="any")
        lanes = axis_wise(self._shape, storage, axis)
        return Tensor._wrap(
            self._shape.drop_axis(axis),
            [any(predicate(value) for value in lane) for lane in lanes],
            dtype=bool,
            config=self._config,
        )


__all__ = ["Tensor"]
