"""Labelled image datasets loaded from an image directory and a labels file."""

from __future__ import annotations

import logging
import os
from typing import Iterator, Sequence

import numpy as np
from PIL import Image as PILImage

from scribenet.sample import TrainingGreyscaleImage, TrainingRGBImage

logger = logging.getLogger(__name__)

_IMAGE_MODES = {TrainingRGBImage: "RGB", TrainingGreyscaleImage: "L"}


def letterbox(image: np.ndarray, target_height: int, target_width: int) -> np.ndarray:
    """Scale an image to fit the target size, keeping its aspect ratio, centred on black."""
    array = np.asarray(image)
    if array.ndim not in (2, 3) or array.shape[0] == 0 or array.shape[1] == 0:
        raise ValueError(f"expected a non-empty rows x cols [x channels] array, got shape {array.shape}")
    if target_height <= 0 or target_width <= 0:
        raise ValueError(f"target size must be positive, got {target_width}x{target_height}")

    rows, cols = array.shape[:2]
    scale = min(
        np.float32(target_width) / np.float32(cols),
        np.float32(target_height) / np.float32(rows),
    )
    new_width = max(1, int(np.float32(cols) * scale))
    new_height = max(1, int(np.float32(rows) * scale))
    x_offset = max(0, (target_width - new_width) // 2)
    y_offset = max(0, (target_height - new_height) // 2)

    new_width = min(new_width, target_width)
    new_height = min(new_height, target_height)
    if x_offset + new_width > target_width:
        x_offset = target_width - new_width
    if y_offset + new_height > target_height:
        y_offset = target_height - new_height
    if (
        new_width <= 0
        or new_height <= 0
        or x_offset < 0
        or y_offset < 0
        or x_offset + new_width > target_width
        or y_offset + new_height > target_height
    ):
        raise ValueError(f"bad crop/resize parameters for a {cols}x{rows} image")

    single_plane = array.ndim == 3 and array.shape[2] == 1
    source = array[:, :, 0] if single_plane else array
    resized = np.asarray(
        PILImage.fromarray(np.ascontiguousarray(source.astype(np.uint8))).resize(
            (new_width, new_height), PILImage.Resampling.BILINEAR
        )
    )
    if single_plane:
        resized = resized[:, :, None]

    canvas = np.zeros((target_height, target_width) + array.shape[2:], dtype=np.uint8)
    canvas[y_offset : y_offset + new_height, x_offset : x_offset + new_width] = resized
    return canvas


def _parse_line(line: str, positions_length: int) -> tuple[str, int, list[float]] | None:
    tokens = line.split()
    if len(tokens) < 2 or tokens[1] not in {"0", "1"} and not _is_bool_integer(tokens[1]):
        logger.warning("Malformed line: %s", line)
        return None
    name, present = tokens[0], int(tokens[1])
    if not present:
        return name, present, [0.0] * positions_length
    values = tokens[2 : 2 + positions_length]
    try:
        coords = [float(value) for value in values]
    except ValueError:
        coords = []
    if len(coords) != positions_length:
        logger.warning("Malformed line: %s", line)
        return None
    return name, present, coords


def _is_bool_integer(token: str) -> bool:
    try:
        return int(token) in (0, 1)
    except ValueError:
        return False


class Dataset:
    """Training samples listed in a labels file, letterboxed to a fixed size."""

    def __init__(
        self,
        images_dir: str | os.PathLike,
        labels_file: str | os.PathLike,
        target_height: int,
        target_width: int,
        label_positions_length: int,
        image_type: type = TrainingRGBImage,
    ) -> None:
        if image_type not in _IMAGE_MODES:
            raise TypeError(f"unsupported image type {image_type!r}")
        self.image_type = image_type
        self.samples: list = []
        mode = _IMAGE_MODES[image_type]

        with open(labels_file, encoding="utf-8") as handle:
            for raw in handle:
                line = raw.rstrip("\r\n")
                if not line:
                    continue
                parsed = _parse_line(line, label_positions_length)
                if parsed is None:
                    continue
                name, present, coords = parsed
                path = os.path.join(images_dir, name)
                try:
                    with PILImage.open(path) as picture:
                        pixels = np.asarray(picture.convert(mode))
                except OSError:
                    logger.warning("Could not load image: %s", path)
                    continue
                try:
                    boxed = letterbox(pixels, target_height, target_width)
                except ValueError:
                    logger.warning("Bad crop/resize params for %s", path)
                    continue
                self.samples.append(image_type(boxed, name, present, coords))
        logger.info("%d training samples loaded.", len(self.samples))

    def objects_present(self) -> int:
        """Object count of the first sample's label, or 0 for an empty dataset."""
        return self.samples[0].label.num_objects if self.samples else 0

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, index: int):
        return self.samples[index]

    def __iter__(self) -> Iterator:
        return iter(self.samples)

    def __str__(self) -> str:
        parts = [f"Dataset with {len(self.samples)} samples.\n"]
        for number, sample in enumerate(self.samples):
            coords = "".join(f"{coord:g} " for coord in sample.label.positions)
            parts.append(
                f"Sample {number}: {sample.label.filename}"
                f" | Present: {sample.label.num_objects}"
                f" | Coordinates: {coords}\n"
                f"Image size: {sample.flat_length * sample.channels}"
                f" | Row stride: {sample.row_stride}"
                f" | Linear length: {sample.flat_length}"
                f" | Channels: {sample.channels}"
                f" | Rows: {sample.rows}\n"
            )
        return "".join(parts)


__all__: Sequence[str] = ["Dataset", "letterbox"]