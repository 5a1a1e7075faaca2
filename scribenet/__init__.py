"""Convolution and max-pooling feature-map network with labelled image dataset loading."""

__version__ = "0.1.0"