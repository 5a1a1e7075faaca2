"""A block of layers that turns a sample into a tree of feature maps."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from scribenet.feature_map import FeatureMap
from scribenet.kernel import Kernel, TrainingKernel

logger = logging.getLogger(__name__)

_KERNEL_SIZE = 3


class LType(Enum):
    """Kinds of layer a bloc can hold."""

    CONVOLVE = auto()
    EMBEDDING = auto()
    MAXPOOL = auto()
    UPSAMPLE_FUSE = auto()


@dataclass(frozen=True)
class Layer:
    """Inclusive kernel and output-map index ranges of one layer."""

    kernel_start: int
    kernel_end: int
    map_out_start: int
    map_out_end: int
    desc: LType
    maxpool_width: int = 0
    maxpool_height: int = 0


def _log_layer(layer: Layer) -> None:
    logger.info(
        "Layer meta: \nKernel start: %d\nKernel end: %d\nMap start: %d\nMap end: %d",
        layer.kernel_start,
        layer.kernel_end,
        layer.map_out_start,
        layer.map_out_end,
    )


class Bloc:
    """Layers whose kernels and maps live in shared, index-addressed lists."""

    def __init__(self, sample_channels: int, kernels_per_channel: int) -> None:
        if sample_channels <= 0 or kernels_per_channel <= 0:
            raise ValueError("channel and kernel counts must be positive")
        total = sample_channels * kernels_per_channel
        self.input_channels = sample_channels
        self.layers_count = 1
        self.kernels_per_layer: list[int] = [total]
        self.maps: list[FeatureMap] = []
        self.kernels: list[Kernel] = []
        self.maps_per_layer: list[int] = [total]
        self.kernel_type: type[Kernel] = TrainingKernel
        self.rng = random.Random()
        embedding = Layer(0, total - 1, 0, total - 1, LType.EMBEDDING)
        self.layers: list[Layer] = [embedding]
        _log_layer(embedding)

    def previous_layer(self) -> Layer:
        """The most recently added layer."""
        return self.layers[-1]

    def count_maps_out_previous_layer(self) -> int:
        """Number of maps the most recently added layer produces."""
        last = self.layers[-1]
        return last.map_out_end - last.map_out_start + 1

    def add_convolve_layer(self, kernels_in_layer: int) -> None:
        """Append a layer convolving every previous map with each of its kernels."""
        if kernels_in_layer <= 0:
            raise ValueError("a convolve layer needs at least one kernel")
        prev = self.previous_layer()
        layer = Layer(
            prev.kernel_end + 1,
            prev.kernel_end + kernels_in_layer,
            prev.map_out_end + 1,
            prev.map_out_end + kernels_in_layer * self.count_maps_out_previous_layer(),
            LType.CONVOLVE,
        )
        self.layers.append(layer)
        _log_layer(layer)

    def add_maxpool_layer(self, width: int, height: int) -> None:
        """Append a layer max-pooling every previous map with a width-by-height window."""
        prev = self.previous_layer()
        layer = Layer(
            prev.kernel_end,
            prev.kernel_end,
            prev.map_out_end + 1,
            prev.map_out_end + self.count_maps_out_previous_layer(),
            LType.MAXPOOL,
            width,
            height,
        )
        self.layers.append(layer)
        _log_layer(layer)

    def load_kernel_vector(self, layer: int) -> list[Kernel]:
        """Create the kernels of a layer, record them and return them."""
        if not 0 <= layer < len(self.layers) or layer > self.layers_count:
            raise IndexError(f"layer {layer} is not available")
        spec = self.layers[layer]
        loaded = [
            self.kernel_type(_KERNEL_SIZE, _KERNEL_SIZE, index, self.rng)
            for index in range(spec.kernel_start, spec.kernel_end + 1)
        ]
        self.kernels.extend(loaded)
        return loaded

    def map_indices(self, layer: int) -> list[int]:
        """Indices of the maps that feed the given layer."""
        if not 0 < layer < len(self.layers):
            raise IndexError(f"layer {layer} has no previous layer")
        prev = self.layers[layer - 1]
        return list(range(prev.map_out_start, prev.map_out_end + 1))

    def store_input_convolution(self, convolutions: Sequence[Sequence[FeatureMap]]) -> None:
        """Store the per-channel maps of the embedding layer, red first."""
        before = len(self.maps)
        for channel_maps in list(convolutions)[: self.input_channels]:
            for feature in channel_maps:
                feature.index = len(self.maps)
                self.maps.append(feature)
        self.maps_per_layer.append(len(self.maps) - before)

    def store_convolution(self, convolutions: Sequence[FeatureMap]) -> None:
        """Store derived maps and register each one as a child of its mother."""
        before = len(self.maps)
        for number, feature in enumerate(convolutions):
            feature.index = len(self.maps)
            mother = feature.family.mother
            if not 0 <= mother < len(self.maps):
                raise IndexError(
                    f"invalid mother index {mother} (maps: {len(self.maps)}) at convolution {number}"
                )
            self.maps[mother].push_child(feature.index)
            self.maps.append(feature)
        self.maps_per_layer.append(len(self.maps) - before)

    def forward_pass(self, input_sample) -> None:
        """Run every layer in order, starting from the sample's own convolution."""
        for position, layer in enumerate(self.layers):
            if layer.desc is LType.EMBEDDING:
                kernels = self.load_kernel_vector(position)
                self.store_input_convolution(input_sample.convolve(kernels))
            elif layer.desc is LType.CONVOLVE:
                indices = self.map_indices(position)
                kernels = self.load_kernel_vector(position)
                for index in indices:
                    self.store_convolution(self.maps[index].convolve(kernels))
            elif layer.desc is LType.MAXPOOL:
                pooled = [
                    self.maps[index].maxpool(layer.maxpool_width, layer.maxpool_height)
                    for index in self.map_indices(position)
                ]
                self.store_convolution(pooled)
            else:
                raise ValueError(f"layer type {layer.desc.name} cannot run in a forward pass")
            self.layers_count += 1