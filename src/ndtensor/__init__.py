import logging

from .config import DEFAULT_CONFIG, TensorConfig
from .diagnostics import (
    AxisError,
    BadIndexer,
    BadInitShape,
    BadReshape,
    BadSlice,
    BroadcastError,
    ErrorCode,
    FreezeException,
    InitializerException,
    OperationUndefined,
    TensorError,
)
from .initializers import Initializer
from .interop import from_array, to_numpy
from .logsetup import setup_logging
from .shape import Shape, broadcast_shapes, is_broadcastable
from .slicer import Slicer
from .tensor import Tensor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AxisError",
    "BadIndexer",
    "BadInitShape",
    "BadReshape",
    "BadSlice",
    "BroadcastError",
    "DEFAULT_CONFIG",
    "ErrorCode",
    "FreezeException",
    "Initializer",
    "InitializerException",
    "OperationUndefined",
    "Shape",
    "Slicer",
    "Tensor",
    "TensorConfig",
    "TensorError",
    "broadcast_shapes",
    "from_array",
    "is_broadcastable",
    "setup_logging",
    "to_numpy",
]
