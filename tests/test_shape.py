from math import prod

import pytest

from ndtensor import BadIndexer, BadInitShape, Shape


def test_shape_reports_rank_and_extents() -> None:
    assert Shape((3, 2, 4, 5)).rank == 4
    assert Shape((3, 2, 4)).rank == 3
    assert Shape(()).rank == 0
    assert Shape((4, 6, 4, 46, 8, 3))[3] == 46


def test_scalar_shape_holds_one_element() -> None:
    shape = Shape(())

    assert shape.element_count == 1
    assert shape.cumulative_shape == ()
    assert shape.to_flat_index(()) == 0


def test_element_count_is_product_of_extents() -> None:
    assert Shape((5, 3, 6)).element_count == 90


def test_cumulative_shape_holds_prefix_products() -> None:
    shape = Shape((4, 1, 7, 1))

    assert shape.cumulative_shape == (4, 4, 28, 28)
    assert shape.cumulative_shape[-1] == shape.element_count


def test_reverse_cumulative_shape_holds_suffix_products() -> None:
    shape = Shape((2, 3, 4))

    assert shape.reverse_cumulative_shape == (24, 12, 4)


def test_strides_are_row_major() -> None:
    assert Shape((2, 3, 4)).strides == (12, 4, 1)


def test_shape_equality_is_structural() -> None:
    assert Shape((5, 6, 4)) == Shape([5, 6, 4])
    assert Shape((5, 6, 4)) != Shape((4, 5, 6))
    assert Shape((5, 6)) != Shape((5, 6, 1))
    assert hash(Shape((5, 6))) == hash(Shape((5, 6)))


def test_shape_stringifies_without_trailing_separator() -> None:
    assert str(Shape((4, 5, 3))) == "(4, 5, 3)"
    assert str(Shape((9, 5, 6, 7, 6))) == "(9, 5, 6, 7, 6)"
    assert str(Shape((5,))) == "(5)"
    assert str(Shape(())) == "()"


@pytest.mark.parametrize("extents", [(4, -1, 9, -2), (0,), (3, 0, 2)])
def test_non_positive_extent_is_rejected(extents: tuple[int, ...]) -> None:
    assert not Shape.is_valid(extents)
    with pytest.raises(BadInitShape) as error:
        Shape(extents)

    assert error.value.code == "bad_init_shape"
    assert error.value.data["extent"] <= 0


def test_non_integer_extent_is_rejected() -> None:
    assert not Shape.is_valid((2.0, 3))
    with pytest.raises(BadInitShape):
        Shape((2.0, 3))  # type: ignore[arg-type]


def test_coerce_accepts_shapes_and_sequences() -> None:
    shape = Shape((2, 3))

    assert Shape.coerce(shape) is shape
    assert Shape.coerce([2, 3]) == shape
    assert Shape.coerce(7) == Shape((7,))


@pytest.mark.parametrize("extents", [(1,), (3,), (2, 3), (2, 3, 4), (4, 1, 3, 2)])
def test_flat_index_is_a_bijection_onto_the_buffer(extents: tuple[int, ...]) -> None:
    shape = Shape(extents)
    offsets = [shape.to_flat_index(index) for index in shape.indices()]

    assert offsets == list(range(prod(extents)))
    for offset in offsets:
        assert shape.to_flat_index(shape.unravel(offset)) == offset


def test_to_flat_index_rejects_wrong_rank() -> None:
    with pytest.raises(BadIndexer) as error:
        Shape((2, 3)).to_flat_index((1,))

    assert error.value.data == {"reason": "rank", "expected": 2, "got": 1}


def test_to_flat_index_names_offending_axis() -> None:
    with pytest.raises(BadIndexer) as error:
        Shape((2, 3)).to_flat_index((1, 3))

    assert error.value.data == {
        "reason": "out_of_range",
        "axis": 1,
        "extent": 3,
        "index": 3,
    }


def test_to_flat_index_rejects_negative_index() -> None:
    with pytest.raises(BadIndexer):
        Shape((2, 3)).to_flat_index((-1, 0))


def test_unravel_rejects_out_of_range_offset() -> None:
    with pytest.raises(BadIndexer):
        Shape((2, 3)).unravel(6)


def test_drop_axis_removes_one_extent() -> None:
    assert Shape((2, 3, 4)).drop_axis(1) == Shape((2, 4))
    assert Shape((5,)).drop_axis(0) == Shape(())
