from enum import Enum
from typing import Literal, TypeAlias

DiagnosticSeverity: TypeAlias = Literal["error"]
DiagnosticValue: TypeAlias = str | int | bool


class ErrorCode(str, Enum):
    """Canonical diagnostic codes for tensor failures."""

    BAD_INIT_SHAPE = "bad_init_shape"
    BAD_RESHAPE = "bad_reshape"
    BAD_SLICE = "bad_slice"
    BAD_INDEXER = "bad_indexer"
    AXIS_ERROR = "axis_error"
    BROADCAST_ERROR = "broadcast_error"
    OPERATION_UNDEFINED = "operation_undefined"
    FROZEN_TENSOR = "frozen_tensor"
    RELEASED_TENSOR = "released_tensor"
    FREEZE_EXCEPTION = "freeze_exception"
    INITIALIZER_EXCEPTION = "initializer_exception"


class TensorError(ValueError):
    """Structured base error for tensor failures."""

    default_code: ErrorCode = ErrorCode.OPERATION_UNDEFINED
    severity: DiagnosticSeverity
    code: str
    external_code: str
    help: str | None
    related: tuple[str, ...]
    data: dict[str, DiagnosticValue]
    message: str

    @staticmethod
    def _normalize_code(code: ErrorCode) -> str:
        """Return the canonical `snake_case` value of a code."""
        if not isinstance(code, ErrorCode):
            raise TypeError("diagnostic code must be an ErrorCode")
        return code.value

    @staticmethod
    def _normalize_related(related: tuple[str, ...]) -> tuple[str, ...]:
        """Validate related notes."""
        normalized_related: list[str] = []
        for note in related:
            if not isinstance(note, str):
                raise TypeError("related diagnostics must be tuple[str, ...]")
            if not note.strip():
                raise ValueError("related diagnostic note cannot be empty")
            normalized_related.append(note)
        return tuple(normalized_related)

    @staticmethod
    def _normalize_data(data: dict[str, DiagnosticValue]) -> dict[str, DiagnosticValue]:
        """Validate and copy diagnostic payload data."""
        normalized_data: dict[str, DiagnosticValue] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError("diagnostic data keys must be strings")
            if not isinstance(value, str | int | bool):
                raise TypeError(
                    "diagnostic data values must be str, int, or bool entries"
                )
            normalized_data[key] = value
        return normalized_data

    def __init__(
        self,
        *,
        message: str,
        code: ErrorCode | None = None,
        help: str | None = None,
        related: tuple[str, ...] = (),
        data: dict[str, DiagnosticValue] | None = None,
    ) -> None:
        """Build one structured tensor error."""
        normalized_code = self._normalize_code(
            self.default_code if code is None else code
        )
        if not isinstance(message, str):
            raise TypeError("diagnostic message must be a string")
        if not message.strip():
            raise ValueError("diagnostic message cannot be empty")
        if help is not None and not isinstance(help, str):
            raise TypeError("diagnostic help must be a string or None")

        payload_data = {} if data is None else data
        self.code = normalized_code
        self.external_code = normalized_code.upper()
        self.severity = "error"
        self.help = help
        self.related = self._normalize_related(related)
        self.data = self._normalize_data(payload_data)
        self.message = message
        super().__init__(message)


class BadInitShape(TensorError):
    """Shape has a non-positive extent, or data length does not match it."""

    default_code = ErrorCode.BAD_INIT_SHAPE


class BadReshape(TensorError):
    """Reshape target cannot be resolved against the current element count."""

    default_code = ErrorCode.BAD_RESHAPE


class BadSlice(TensorError):
    """Slicer bounds or step are invalid for the referenced shape."""

    default_code = ErrorCode.BAD_SLICE


class BadIndexer(TensorError):
    """Index tuple has the wrong rank or an out-of-range entry."""

    default_code = ErrorCode.BAD_INDEXER


class AxisError(TensorError):
    """Requested axis does not exist."""

    default_code = ErrorCode.AXIS_ERROR


class BroadcastError(TensorError):
    """Shapes cannot be broadcast together."""

    default_code = ErrorCode.BROADCAST_ERROR


class OperationUndefined(TensorError):
    """Operation is not defined for the given operands or tensor state."""

    default_code = ErrorCode.OPERATION_UNDEFINED


class FreezeException(TensorError):
    """Freeze requested on a tensor whose configuration forbids it."""

    default_code = ErrorCode.FREEZE_EXCEPTION


class InitializerException(TensorError):
    """Fill strategy failed to produce a value of the element type."""

    default_code = ErrorCode.INITIALIZER_EXCEPTION


__all__ = [
    "AxisError",
    "BadIndexer",
    "BadInitShape",
    "BadReshape",
    "BadSlice",
    "BroadcastError",
    "ErrorCode",
    "FreezeException",
    "InitializerException",
    "OperationUndefined",
    "TensorError",
]
