from fractions import Fraction

import numpy as np
import pytest

from ndtensor import Initializer, InitializerException, Tensor


def test_zero_and_one_fill() -> None:
    assert Tensor((2, 2), Initializer.ZEROS).values == (0.0, 0.0, 0.0, 0.0)
    assert Tensor((3,), Initializer.ONES, dtype=int).values == (1, 1, 1)


def test_sequence_fill_counts_flat_positions() -> None:
    tensor = Tensor((2, 3), Initializer.SEQUENCE, dtype=int)
    assert tensor.values == (0, 1, 2, 3, 4, 5)


def test_initializer_accepts_string_selectors() -> None:
    assert Tensor((2,), "ones", dtype=Fraction).values == (Fraction(1), Fraction(1))


def test_uniform_fill_stays_in_unit_interval() -> None:
    tensor = Tensor((50,), Initializer.UNIFORM, rng=np.random.default_rng(0))
    assert all(0.0 <= value < 1.0 for value in tensor.values)


def test_random_fill_is_reproducible_with_a_seeded_generator() -> None:
    first = Tensor((4, 4), Initializer.NORMAL, rng=np.random.default_rng(7))
    second = Tensor((4, 4), Initializer.NORMAL, rng=np.random.default_rng(7))

    assert first == second
    assert all(isinstance(value, float) for value in first.values)


def test_no_op_fill_leaves_empty_slots() -> None:
    tensor = Tensor((2, 2), Initializer.NONE)
    assert tensor.values == (None, None, None, None)

    tensor[1, 0] = 3.5
    assert tensor.values == (None, None, 3.5, None)


def test_custom_fill_callable_is_called_per_index() -> None:
    tensor = Tensor((2, 2), lambda index: index * index, dtype=int)
    assert tensor.values == (0, 1, 4, 9)


def test_fill_failure_is_wrapped() -> None:
    class Strict:
        def __init__(self, value: object) -> None:
            raise RuntimeError("no conversion")

    with pytest.raises(InitializerException) as error:
        Tensor((2,), Initializer.ZEROS, dtype=Strict)

    assert error.value.data["dtype"] == "Strict"
    assert error.value.data["index"] == 0
    assert isinstance(error.value.__cause__, RuntimeError)


def test_unknown_initializer_is_rejected() -> None:
    with pytest.raises(InitializerException):
        Tensor((2,), "glorot")
