"""Metadata attached to a training sample."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(frozen=True, init=False)
class Label:
    """File name, number of objects present and their label positions."""

    filename: str
    num_objects: int
    positions: tuple[float, ...] = field(default_factory=tuple)

    def __init__(self, filename: str, num_objects: int, positions: Sequence[float]) -> None:
        object.__setattr__(self, "filename", str(filename))
        object.__setattr__(self, "num_objects", int(num_objects))
        object.__setattr__(self, "positions", tuple(positions))

    def length(self) -> int:
        """Number of position values held by the label."""
        return len(self.positions)