import random

import numpy as np
import pytest

from scribenet.bloc import Bloc, Layer, LType
from scribenet.feature_map import FeatureMap
from scribenet.sample import TrainingRGBImage


@pytest.fixture
def sample():
    pixels = np.random.default_rng(0).integers(0, 256, (6, 6, 3), dtype=np.uint8)
    return TrainingRGBImage(pixels, "s.png", 1, [0.5, 0.5])


def _small_bloc(seed=1):
    bloc = Bloc(3, 1)
    bloc.rng = random.Random(seed)
    bloc.add_convolve_layer(2)
    bloc.add_maxpool_layer(2, 2)
    return bloc


def test_embedding_layer():
    bloc = Bloc(3, 1)
    assert bloc.layers[0] == Layer(0, 2, 0, 2, LType.EMBEDDING)
    assert bloc.count_maps_out_previous_layer() == 3


def test_constructor_rejects_zero():
    with pytest.raises(ValueError):
        Bloc(0, 3)


def test_convolve_layer_ranges():
    bloc = Bloc(3, 1)
    prev = bloc.previous_layer()
    bloc.add_convolve_layer(2)
    layer = bloc.previous_layer()
    assert layer.desc is LType.CONVOLVE
    assert layer.kernel_start == prev.kernel_end + 1
    assert layer.kernel_end - layer.kernel_start + 1 == 2
    assert layer.map_out_start == prev.map_out_end + 1
    assert bloc.count_maps_out_previous_layer() == 2 * 3


def test_maxpool_layer_ranges():
    bloc = Bloc(3, 1)
    bloc.add_convolve_layer(2)
    prev = bloc.previous_layer()
    before = bloc.count_maps_out_previous_layer()
    bloc.add_maxpool_layer(2, 2)
    layer = bloc.previous_layer()
    assert layer.kernel_start == layer.kernel_end == prev.kernel_end
    assert layer.map_out_start == prev.map_out_end + 1
    assert bloc.count_maps_out_previous_layer() == before
    assert (layer.maxpool_width, layer.maxpool_height) == (2, 2)


def test_map_indices():
    bloc = _small_bloc()
    assert bloc.map_indices(1) == [0, 1, 2]
    with pytest.raises(IndexError):
        bloc.map_indices(0)
    with pytest.raises(IndexError):
        bloc.map_indices(3)


def test_load_kernel_vector_records_kernels():
    bloc = _small_bloc()
    kernels = bloc.load_kernel_vector(1)
    layer = bloc.layers[1]
    assert [k.index for k in kernels] == list(range(layer.kernel_start, layer.kernel_end + 1))
    assert bloc.kernels == kernels
    assert all((k.width, k.height) == (3, 3) for k in kernels)


def test_forward_pass_builds_all_maps(sample):
    bloc = _small_bloc()
    bloc.forward_pass(sample)
    assert len(bloc.maps) == bloc.layers[-1].map_out_end + 1
    assert [m.index for m in bloc.maps] == list(range(len(bloc.maps)))
    assert len(bloc.kernels) == bloc.layers[-1].kernel_end + 1
    assert bloc.layers_count == 1 + len(bloc.layers)


def test_forward_pass_family_links(sample):
    bloc = _small_bloc()
    bloc.forward_pass(sample)
    first_conv = bloc.layers[1].map_out_start
    assert bloc.maps[0].family.children == [first_conv, first_conv + 1]
    assert bloc.maps[first_conv].family.mother == 0
    for child in bloc.maps[bloc.layers[1].map_out_start :]:
        assert child.index in bloc.maps[child.family.mother].family.children


def test_embedding_maps_match_channel_convolution(sample):
    bloc = _small_bloc()
    bloc.forward_pass(sample)
    expected = FeatureMap(sample.pixels[0], sample.row_stride).convolve([bloc.kernels[0]])[0]
    np.testing.assert_allclose(bloc.maps[0].data, expected.data)


def test_maxpool_maps_take_window_maximum(sample):
    bloc = _small_bloc()
    bloc.forward_pass(sample)
    pool = bloc.layers[2]
    for pooled in bloc.maps[pool.map_out_start : pool.map_out_end + 1]:
        mother = bloc.maps[pooled.family.mother]
        assert pooled.family.father == -1
        assert pooled.row_stride == mother.row_stride - 1
        window = [mother(0, 0), mother(1, 0), mother(0, 1), mother(1, 1)]
        assert pooled(0, 0) == max(window)


def test_forward_pass_is_deterministic_with_seed(sample):
    first, second = _small_bloc(7), _small_bloc(7)
    first.forward_pass(sample)
    second.forward_pass(sample)
    for a, b in zip(first.maps, second.maps):
        np.testing.assert_array_equal(a.data, b.data)


def test_store_convolution_rejects_bad_mother():
    bloc = Bloc(3, 1)
    feature = FeatureMap([1.0, 2.0], 2)
    feature.family.mother = 5
    with pytest.raises(IndexError):
        bloc.store_convolution([feature])


def test_store_input_convolution_counts_maps():
    bloc = Bloc(3, 1)
    maps = ([FeatureMap([1.0], 1)], [FeatureMap([2.0], 1)], [FeatureMap([3.0], 1)])
    bloc.store_input_convolution(maps)
    assert [m(0, 0) for m in bloc.maps] == [1.0, 2.0, 3.0]
    assert bloc.maps_per_layer[-1] == 3


def test_unsupported_layer_raises(sample):
    bloc = Bloc(3, 1)
    bloc.layers.append(Layer(2, 2, 3, 5, LType.UPSAMPLE_FUSE))
    with pytest.raises(ValueError):
        bloc.forward_pass(sample)