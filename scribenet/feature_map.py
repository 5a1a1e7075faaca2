"""Feature maps produced by convolution and pooling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from scribenet.kernel import Kernel


@dataclass
class Family:
    """Indices linking a map to its parent map, its kernel and its children."""

    mother: int = -1
    father: int = -1
    partners: list[int] = field(default_factory=list)
    children: list[int] = field(default_factory=list)


class FeatureMap:
    """A flat, row-major grid of values with lineage information."""

    def __init__(self, data: Iterable[float] | np.ndarray, width: int, father: int = -1) -> None:
        values = np.array(data, dtype=np.float64).ravel()
        if values.size == 0:
            raise ValueError("feature map data must not be empty")
        if width <= 0 or width > values.size:
            raise ValueError(f"invalid row width {width} for {values.size} values")
        values.flags.writeable = False
        self.data = values
        self.flat_length = int(values.size)
        self.row_stride = width
        self.rows = self.flat_length // width
        self.index = -1
        self.family = Family(father=father)

    def __call__(self, col: int, row: int) -> float:
        if not 0 <= col < self.row_stride or not 0 <= row < self.rows:
            raise IndexError(f"position ({col}, {row}) outside {self.row_stride}x{self.rows} map")
        return float(self.data[row * self.row_stride + col])

    def _grid(self) -> np.ndarray:
        return self.data[: self.rows * self.row_stride].reshape(self.rows, self.row_stride)

    def convolve(self, kernels: Sequence[Kernel]) -> list[FeatureMap]:
        """Convolve this map with each kernel, returning one child map per kernel."""
        grid = self._grid()
        features = []
        for kernel in kernels:
            kernel.generate_window(self.row_stride)
            steps = self.row_stride - kernel.width + 1
            height = self.rows - kernel.height + 1
            if steps <= 0 or height <= 0:
                raise ValueError(
                    f"kernel {kernel.width}x{kernel.height} larger than map {self.row_stride}x{self.rows}"
                )
            result = np.zeros((height, steps))
            for offset, weight in kernel.window:
                dy, dx = divmod(offset, self.row_stride)
                result += weight * grid[dy : dy + height, dx : dx + steps]
            feature = FeatureMap(result, steps, kernel.index)
            feature.family.mother = self.index
            features.append(feature)
            self.family.partners.append(kernel.index)
        return features

    def upsample(self, target: FeatureMap) -> FeatureMap:
        """Bilinearly resample this map to the shape of ``target``."""
        grid = self._grid()
        ys = np.arange(target.rows) * (self.rows / target.rows)
        xs = np.arange(target.row_stride) * (self.row_stride / target.row_stride)
        y0 = np.floor(ys).astype(int)
        x0 = np.floor(xs).astype(int)
        y1 = np.minimum(y0 + 1, self.rows - 1)
        x1 = np.minimum(x0 + 1, self.row_stride - 1)
        wy = (ys - y0)[:, None]
        wx = (xs - x0)[None, :]
        top = grid[np.ix_(y0, x0)] * (1 - wx) + grid[np.ix_(y0, x1)] * wx
        bottom = grid[np.ix_(y1, x0)] * (1 - wx) + grid[np.ix_(y1, x1)] * wx
        output = top * (1 - wy) + bottom * wy
        return FeatureMap(output, target.row_stride)

    def fuse(self, second: FeatureMap) -> FeatureMap:
        """Element-wise mean of this map and another of the same size."""
        if second.flat_length != self.flat_length:
            raise ValueError(
                f"cannot fuse maps of {self.flat_length} and {second.flat_length} values"
            )
        return FeatureMap((self.data + second.data) / 2.0, self.row_stride)

    def maxpool(self, width: int, height: int) -> FeatureMap:
        """Stride-one max pooling over width-by-height windows."""
        if width <= 0 or height <= 0 or width > self.row_stride or height > self.rows:
            raise ValueError(
                f"pool window {width}x{height} does not fit map {self.row_stride}x{self.rows}"
            )
        windows = sliding_window_view(self._grid(), (height, width))
        pooled = windows.max(axis=(2, 3))
        feature = FeatureMap(pooled, pooled.shape[1], -1)
        feature.family.mother = self.index
        return feature

    def push_child(self, child_index: int) -> None:
        """Record the index of a map derived from this one."""
        self.family.children.append(child_index)