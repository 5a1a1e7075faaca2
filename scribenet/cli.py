"""Command that loads the dataset and runs a forward pass on its first sample."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from scribenet.bloc import Bloc
from scribenet.dataset import Dataset


def _build_bloc() -> Bloc:
    bloc = Bloc(3, 3)
    for _ in range(3):
        bloc.add_convolve_layer(3)
    bloc.add_maxpool_layer(2, 2)
    for _ in range(4):
        bloc.add_convolve_layer(3)
    bloc.add_maxpool_layer(2, 2)
    for _ in range(4):
        bloc.add_convolve_layer(3)
    return bloc


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="scribenet", description=__doc__)
    parser.add_argument("--images-dir", default="lib/samples/")
    parser.add_argument("--labels-file", default="lib/labels.txt")
    parser.add_argument("--height", type=int, default=300)
    parser.add_argument("--width", type=int, default=300)
    parser.add_argument("--positions", type=int, default=8)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        dataset = Dataset(args.images_dir, args.labels_file, args.height, args.width, args.positions)
    except OSError as exc:
        print(f"Could not open labels file: {args.labels_file} ({exc})", file=sys.stderr)
        return 1
    if not len(dataset):
        print("No training samples loaded.", file=sys.stderr)
        return 1

    bloc = _build_bloc()
    sample = dataset[0]
    print(f"Sample getter check: \n{sample}")
    try:
        bloc.forward_pass(sample)
    except ValueError as exc:
        print(f"Forward pass failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())