"""Image samples: pixel intensities in [0, 1] together with their label."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from scribenet.feature_map import FeatureMap
from scribenet.kernel import Kernel
from scribenet.label import Label


class Channel(Enum):
    """Colour channels of an RGB image, in storage order."""

    RED = 0
    GREEN = 1
    BLUE = 2


_CHANNEL_NAMES = ("Red", "Green", "Blue")


def _format_values(values: np.ndarray) -> str:
    return "".join(f"{float(value):g} " for value in values)


def _as_array(sample: np.ndarray | Sequence) -> np.ndarray:
    array = np.asarray(sample)
    if array.ndim not in (2, 3) or array.shape[0] == 0 or array.shape[1] == 0:
        raise ValueError(f"expected a non-empty rows x cols [x channels] array, got shape {array.shape}")
    return array


def _split_rgb(sample: np.ndarray | Sequence) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    array = _as_array(sample)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"RGB image needs 3 channels, got shape {array.shape}")
    scaled = array.astype(np.float64) / 255.0
    red, green, blue = (scaled[:, :, c].ravel().copy() for c in range(3))
    return red, green, blue


def _flatten_grey(sample: np.ndarray | Sequence) -> np.ndarray:
    array = _as_array(sample)
    if array.ndim == 3:
        if array.shape[2] != 1:
            raise ValueError(f"greyscale image needs 1 channel, got shape {array.shape}")
        array = array[:, :, 0]
    return (array.astype(np.float64) / 255.0).ravel()


class _BaseImage:
    """Geometry and label shared by every image kind."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        array = _as_array(sample)
        self.label = Label(filename, num_objects, positions)
        self.rows = int(array.shape[0])
        self.row_stride = int(array.shape[1])
        self.flat_length = self.rows * self.row_stride

    def _index(self, col: int, row: int) -> int:
        if not 0 <= col < self.row_stride or not 0 <= row < self.rows:
            raise IndexError(f"position ({col}, {row}) outside {self.row_stride}x{self.rows} image")
        return row * self.row_stride + col

    def __str__(self) -> str:
        return (
            f"Image: {self.label.filename}\n"
            f"Flat Length: {self.flat_length}\n"
            f"Row Stride: {self.row_stride}\n"
            f"Rows: {self.rows}\n"
            f"Label Objects: {self.label.num_objects}\n"
        )


class Image(_BaseImage):
    """An image used for inference."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)

    def __str__(self) -> str:
        return super().__str__()


class RGBImage(Image):
    """A three-channel image for inference."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)
        self.pixels = _split_rgb(sample)
        self.channels = 3

    def channel(self, channel: Channel | int) -> np.ndarray:
        """Flat intensities of one colour channel."""
        return self.pixels[Channel(channel).value]

    def __str__(self) -> str:
        lines = [super().__str__(), f"Channels: {self.channels}\n"]
        lines.extend(
            f"{name} intensities: {_format_values(values)}\n"
            for name, values in zip(_CHANNEL_NAMES, self.pixels)
        )
        return "".join(lines)


class GreyscaleImage(Image):
    """A single-channel image for inference."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)
        self.grey = _flatten_grey(sample)
        self.channels = 1

    def __call__(self, col: int, row: int) -> float:
        return float(self.grey[self._index(col, row)])

    def __str__(self) -> str:
        return super().__str__() + f"Pixel intensities: {_format_values(self.grey)}\n"


class TrainingImage(_BaseImage):
    """An image used for training."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)

    def __str__(self) -> str:
        return super().__str__()


class TrainingRGBImage(TrainingImage):
    """A three-channel training image that can be convolved per channel."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)
        self.pixels = _split_rgb(sample)
        self.channels = 3

    def __call__(self, channel: Channel | int, col: int, row: int) -> float:
        return float(self.pixels[Channel(channel).value][self._index(col, row)])

    def convolve(self, kernels: Sequence[Kernel]) -> tuple[list[FeatureMap], list[FeatureMap], list[FeatureMap]]:
        """Convolve each channel with its equal share of the kernels, red first."""
        kernels = list(kernels)
        if len(kernels) % 3:
            raise ValueError(f"kernel count {len(kernels)} is not divisible by 3 channels")
        per_channel = len(kernels) // 3
        red, green, blue = (
            FeatureMap(values, self.row_stride).convolve(kernels[start : start + per_channel])
            for values, start in zip(self.pixels, range(0, len(kernels) + 1, per_channel or 1))
        )
        return red, green, blue

    def __str__(self) -> str:
        lines = [super().__str__(), f"Channels: {self.channels}\n"]
        lines.extend(
            f"{name} intensities: {_format_values(values)}\n"
            for name, values in zip(_CHANNEL_NAMES, self.pixels)
        )
        return "".join(lines)


class TrainingGreyscaleImage(TrainingImage):
    """A single-channel training image."""

    def __init__(
        self,
        sample: np.ndarray | Sequence,
        filename: str,
        num_objects: int,
        positions: Sequence[float],
    ) -> None:
        super().__init__(sample, filename, num_objects, positions)
        self.grey = _flatten_grey(sample)
        self.channels = 1

    def __call__(self, col: int, row: int) -> float:
        return float(self.grey[self._index(col, row)])

    def __str__(self) -> str:
        return super().__str__() + f"Pixel intensities: {_format_values(self.grey)}\n"