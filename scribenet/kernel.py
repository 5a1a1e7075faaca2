"""Convolution kernels with Xavier-style random initialisation."""

from __future__ import annotations

import math
import random


class Kernel:
    """A width-by-height grid of weights used to convolve a flat image."""

    def __init__(self, width: int, height: int, index: int, rng: random.Random | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"kernel dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.index = index
        generator = rng if rng is not None else random.Random()
        bound = math.sqrt(6.0 / float(width * height) + 1.0)
        self.weights: list[float] = [generator.uniform(-bound, bound) for _ in range(width * height)]
        self.window: list[tuple[int, float]] = []

    def generate_window(self, row_stride: int) -> None:
        """Build the (flat offset, weight) pairs for an image with the given row stride."""
        self.window = [
            (col + row * row_stride, self.weights[col + row])
            for row in range(self.height)
            for col in range(self.width)
        ]

    def __str__(self) -> str:
        if not self.window:
            raise ValueError("kernel window has not been generated")
        entries = "".join(f"Index: {offset}\nWeight: {weight:g}\n" for offset, weight in self.window)
        return "Kernel Window:\n" + entries


class TrainingKernel(Kernel):
    """A kernel that also carries gradients for training."""

    def __init__(self, width: int, height: int, index: int, rng: random.Random | None = None) -> None:
        super().__init__(width, height, index, rng)
        self.gradients: list[float] = []