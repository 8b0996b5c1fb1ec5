import pytest

from ndtensor import (
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


def test_tensor_error_exposes_structured_fields() -> None:
    error = BadReshape(
        message="invalid reshape: cannot reshape 24 elements into 20 elements",
        help="the target extents must multiply to the current element count",
        related=("reshape target",),
        data={"original": 24, "requested": 20},
    )

    assert error.code == "bad_reshape"
    assert error.external_code == "BAD_RESHAPE"
    assert error.severity == "error"
    assert error.related[0] == "reshape target"
    assert error.data == {"original": 24, "requested": 20}
    assert str(error) == "invalid reshape: cannot reshape 24 elements into 20 elements"


@pytest.mark.parametrize(
    ("error_type", "code"),
    [
        (BadInitShape, ErrorCode.BAD_INIT_SHAPE),
        (BadReshape, ErrorCode.BAD_RESHAPE),
        (BadSlice, ErrorCode.BAD_SLICE),
        (BadIndexer, ErrorCode.BAD_INDEXER),
        (AxisError, ErrorCode.AXIS_ERROR),
        (BroadcastError, ErrorCode.BROADCAST_ERROR),
        (OperationUndefined, ErrorCode.OPERATION_UNDEFINED),
        (FreezeException, ErrorCode.FREEZE_EXCEPTION),
        (InitializerException, ErrorCode.INITIALIZER_EXCEPTION),
    ],
)
def test_typed_errors_default_to_their_code(
    error_type: type[TensorError], code: ErrorCode
) -> None:
    error = error_type(message="failure")

    assert isinstance(error, TensorError)
    assert isinstance(error, ValueError)
    assert error.code == code.value


def test_explicit_code_overrides_default() -> None:
    error = OperationUndefined(code=ErrorCode.FROZEN_TENSOR, message="frozen")
    assert error.code == "frozen_tensor"


def test_string_code_is_rejected() -> None:
    with pytest.raises(TypeError):
        OperationUndefined(code="frozen_tensor", message="frozen")  # type: ignore[arg-type]


def test_error_rejects_blank_message() -> None:
    with pytest.raises(ValueError):
        BadSlice(message="   ")


def test_error_rejects_blank_related_note() -> None:
    with pytest.raises(ValueError):
        BadSlice(message="bad slice", related=(" ",))


def test_error_rejects_non_scalar_data() -> None:
    with pytest.raises(TypeError):
        BadSlice(message="bad slice", data={"axes": [0, 1]})  # type: ignore[dict-item]
