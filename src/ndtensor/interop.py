from typing import Any

import numpy as np
from array_api_compat import array_namespace
from numpy.typing import DTypeLike, NDArray

from .config import DEFAULT_CONFIG, TensorConfig
from .diagnostics import OperationUndefined
from .tensor import Tensor


def from_array(
    array: Any,
    *,
    dtype: type | None = None,
    config: TensorConfig = DEFAULT_CONFIG,
) -> Tensor[Any]:
    """Copy one array-API array (numpy, torch, ...) into a new tensor."""
    try:
        xp = array_namespace(array)
    except TypeError as error:
        raise OperationUndefined(
            message=f"from_array: unsupported array type {type(array).__name__}",
            help="pass an array recognised by array_api_compat",
            related=("array interop",),
            data={"operation": "from_array", "type": type(array).__name__},
        ) from error

    extents = tuple(int(extent) for extent in array.shape)
    flat = xp.reshape(array, (-1,))
    return Tensor.from_data(flat.tolist(), extents, dtype=dtype, config=config)


def to_numpy(tensor: Tensor[Any], *, dtype: DTypeLike = None) -> NDArray[Any]:
    """Return a numpy array with the tensor's shape and a copy of its values."""
    return np.asarray(tensor.values, dtype=dtype).reshape(tensor.shape.extents)


__all__ = ["from_array", "to_numpy"]
