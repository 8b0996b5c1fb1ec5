from .broadcast import broadcast_index_map, broadcast_shapes, is_broadcastable
from .model import Shape
from .reshape import infer_reshape

__all__ = [
    "Shape",
    "broadcast_index_map",
    "broadcast_shapes",
    "infer_reshape",
    "is_broadcastable",
]
