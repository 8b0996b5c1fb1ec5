from fractions import Fraction

import pytest

from ndtensor import (
    BadIndexer,
    BadInitShape,
    BadSlice,
    InitializerException,
    OperationUndefined,
    Shape,
    Slicer,
    Tensor,
)


def test_parameterized_constructor_allocates_element_count() -> None:
    tensor = Tensor((2, 3, 4), "zeros")

    assert tensor.shape == Shape((2, 3, 4))
    assert tensor.size == 24
    assert tensor.rank == 3
    assert len(tensor.values) == 24
    assert tensor.dtype is float


def test_non_positive_shape_is_rejected() -> None:
    with pytest.raises(BadInitShape):
        Tensor((2, 0), "zeros")
    with pytest.raises(BadInitShape):
        Tensor((-3,), "zeros")


def test_from_data_validates_count() -> None:
    with pytest.raises(BadInitShape) as error:
        Tensor.from_data([1, 2, 3], (2, 2))

    assert error.value.data == {"reason": "count_mismatch", "expected": 4, "got": 3}


def test_from_data_infers_dtype() -> None:
    tensor = Tensor.from_data([1, 2, 3, 4], (2, 2))

    assert tensor.dtype is int
    assert tensor.tolist() == [[1, 2], [3, 4]]


def test_from_data_converts_with_explicit_dtype() -> None:
    tensor = Tensor.from_data(["1/2", "3"], (2,), dtype=Fraction)
    assert tensor.values == (Fraction(1, 2), Fraction(3))

    with pytest.raises(InitializerException) as error:
        Tensor.from_data(["x"], (1,), dtype=int)
    assert error.value.data["index"] == 0


def test_scalar_tensor() -> None:
    tensor = Tensor.from_data([7], ())

    assert tensor.rank == 0
    assert tensor[()] == 7
    assert tensor.item() == 7
    assert tensor.tolist() == 7


def test_item_requires_one_element() -> None:
    with pytest.raises(OperationUndefined):
        Tensor((2,), "zeros").item()


def test_indexing_reads_row_major() -> None:
    tensor = Tensor((2, 3, 4), "sequence", dtype=int)

    assert tensor[0, 0, 0] == 0
    assert tensor[1, 2, 3] == 23
    assert tensor[1, 0, 2] == 14
    assert tensor.to_flat_index((1, 0, 2)) == 14


def test_rank_one_accepts_bare_int_key() -> None:
    tensor = Tensor.from_data([4, 5, 6], (3,))
    assert tensor[2] == 6


def test_out_of_range_index_is_rejected() -> None:
    tensor = Tensor((2, 3), "zeros")

    with pytest.raises(BadIndexer) as error:
        tensor[2, 0]
    assert error.value.data["axis"] == 0
    assert error.value.data["extent"] == 2
    assert error.value.data["index"] == 2

    with pytest.raises(BadIndexer):
        tensor[0]


def test_setitem_writes_one_element() -> None:
    tensor = Tensor((2, 2), "zeros", dtype=int)
    tensor[1, 1] = 9

    assert tensor.values == (0, 0, 0, 9)


def test_gather_reads_flat_offsets() -> None:
    tensor = Tensor((2, 3), "sequence", dtype=int)

    assert tensor.gather([5, 0, 3]) == [5, 0, 3]
    with pytest.raises(BadIndexer):
        tensor.gather([6])


def test_slice_selects_row_major_subset() -> None:
    tensor = Tensor((4, 5), "sequence", dtype=int)
    sliced = tensor.slice(Slicer(tensor.shape, (1, 0), (4, 5), 2))

    assert sliced.shape == Shape((2, 3))
    assert sliced.tolist() == [[5, 7, 9], [15, 17, 19]]
    assert tensor.values == tuple(range(20))


def test_getitem_accepts_slicer() -> None:
    tensor = Tensor((3, 3), "sequence", dtype=int)
    sliced = tensor[Slicer.to_end(tensor.shape, (1, 1))]

    assert sliced.tolist() == [[4, 5], [7, 8]]


def test_slice_rejects_foreign_shape() -> None:
    tensor = Tensor((4, 5), "zeros")
    with pytest.raises(BadSlice) as error:
        tensor.slice(Slicer.from_begin((5, 4), (2, 2)))

    assert error.value.data["reason"] == "shape_mismatch"


def test_slice_rejects_empty_selection() -> None:
    tensor = Tensor((4, 5), "zeros")
    with pytest.raises(BadSlice) as error:
        tensor.slice(Slicer(tensor.shape, (1, 1), (1, 5)))

    assert error.value.data["reason"] == "empty"


def test_repr_names_shape_and_dtype() -> None:
    tensor = Tensor.from_data([1, 2], (2,))
    assert repr(tensor) == "Tensor(shape=(2), dtype=int, values=[1, 2])"
