import math
import random

import pytest

from scribenet.kernel import Kernel, TrainingKernel


def test_weight_count_matches_dimensions():
    kernel = Kernel(3, 2, 0, random.Random(0))
    assert len(kernel.weights) == 3 * 2
    assert (kernel.width, kernel.height, kernel.index) == (3, 2, 0)


def test_weights_lie_within_xavier_bound():
    kernel = Kernel(3, 3, 4, random.Random(7))
    bound = math.sqrt(6.0 / 9.0 + 1.0)
    assert all(-bound <= w <= bound for w in kernel.weights)


def test_seeded_generators_give_identical_weights():
    first = Kernel(3, 3, 0, random.Random(42))
    second = Kernel(3, 3, 1, random.Random(42))
    assert first.weights == second.weights


def test_window_offsets_follow_row_stride():
    kernel = Kernel(3, 3, 0, random.Random(1))
    kernel.generate_window(10)
    offsets = [offset for offset, _ in kernel.window]
    assert offsets == [0, 1, 2, 10, 11, 12, 20, 21, 22]


def test_window_weights_come_from_kernel_weights():
    kernel = Kernel(3, 3, 0, random.Random(2))
    kernel.generate_window(5)
    assert kernel.window[0][1] == kernel.weights[0]
    assert all(weight in kernel.weights for _, weight in kernel.window)


def test_regenerating_window_replaces_it():
    kernel = Kernel(2, 2, 0, random.Random(3))
    kernel.generate_window(8)
    kernel.generate_window(4)
    assert len(kernel.window) == 4
    assert kernel.window[-1][0] == 1 + 1 * 4


def test_str_requires_window():
    kernel = Kernel(3, 3, 0, random.Random(0))
    with pytest.raises(ValueError):
        str(kernel)
    kernel.generate_window(3)
    assert str(kernel).count("Index: ") == 9


def test_str_lists_every_window_entry():
    kernel = Kernel(3, 3, 0, random.Random(0))
    kernel.generate_window(6)
    text = str(kernel)
    assert text.startswith("Kernel Window:\n")
    assert text.count("Index: ") == 9
    assert text.count("Weight: ") == 9


def test_invalid_dimensions_raise():
    with pytest.raises(ValueError):
        Kernel(0, 3, 0)


def test_training_kernel_starts_without_gradients():
    kernel = TrainingKernel(3, 3, 5, random.Random(0))
    assert kernel.gradients == []
    assert isinstance(kernel, Kernel)
    assert len(kernel.weights) == 9