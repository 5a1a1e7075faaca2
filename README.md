# scribenet

scribenet loads a directory of labelled images and runs a sample through a
stack of convolution and max-pooling layers. Every feature map that a pass
produces is kept, along with its lineage: the map it came from (`mother`),
the kernel that made it (`father`), the kernels applied to it (`partners`)
and the maps derived from it (`children`).

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Labels file

Each non-blank line of the labels file describes one image:

```
<image file name> <present: 0 or 1> [coordinate ...]
```

- If `present` is 1, the line must give at least the expected number of
  coordinates. Any extra values after those are ignored.
- If `present` is 0, all coordinates are set to zero.
- Malformed lines, images that cannot be opened, and images that cannot be
  fitted to the target size are logged as warnings and skipped.

Image paths are built by joining the images directory with the file name.
Each image is converted to RGB, or to greyscale if `TrainingGreyscaleImage`
is chosen as the image type. It is then passed through `letterbox`, which
scales it bilinearly to fit the target size while keeping its aspect ratio,
and centres it on a black canvas. Pixel values are stored as intensities in
[0, 1].

## Command line

```
scribenet [--images-dir DIR] [--labels-file FILE] [--height H] [--width W] [--positions N]
```

The defaults are `lib/samples/`, `lib/labels.txt`, 300, 300 and 8.

The command does the following:

1. Loads the dataset as RGB samples.
2. Prints the first sample.
3. Builds the default network: an RGB embedding layer with three kernels per
   channel, three convolution layers, a 2×2 max-pool layer, four convolution
   layers, a second 2×2 max-pool layer, and four more convolution layers.
   Every convolution layer has three 3×3 kernels.
4. Runs a forward pass over the first sample.

Layer layouts and progress are logged at INFO level. The command exits with
status 1 in any of these cases: the labels file cannot be opened, no sample
loads, or the forward pass fails (for example, when the image is too small
for the layers).

## Library use

```python
from scribenet.dataset import Dataset
from scribenet.bloc import Bloc
from scribenet.sample import TrainingRGBImage

dataset = Dataset("lib/samples/", "lib/labels.txt", 300, 300, 8, TrainingRGBImage)

net = Bloc(3, 3)            # input channels, kernels per channel
net.add_convolve_layer(3)
net.add_maxpool_layer(2, 2)
net.add_convolve_layer(3)

net.forward_pass(dataset[0])
print(len(net.maps), "feature maps")
```

### Modules

- `scribenet.label`: `Label`, which holds the file name, the number of objects
  and the positions for one image.
- `scribenet.kernel`: `Kernel` and `TrainingKernel`. Weights are drawn
  uniformly from ±sqrt(6 / (width·height) + 1). An optional `random.Random`
  can be passed in for reproducible weights.
- `scribenet.feature_map`: `FeatureMap` and `Family`. `FeatureMap` provides
  `convolve` (valid, stride one), `maxpool` (stride one), `upsample`
  (bilinear) and `fuse` (element-wise mean).
- `scribenet.sample`: `Channel`, `Image`, `RGBImage`, `GreyscaleImage`,
  `TrainingImage`, `TrainingRGBImage` and `TrainingGreyscaleImage`.
  `TrainingRGBImage.convolve` splits its kernels equally across red, green
  and blue.
- `scribenet.dataset`: `Dataset`, which supports `len`, indexing and
  iteration, and `letterbox`.
- `scribenet.bloc`: `Bloc`, `Layer` and `LType`. Kernels and maps are kept
  in shared lists, and each `Layer` records inclusive index ranges into them.
- `scribenet.cli`: `main`, the command above.

## What the package does not do

- It does not train. `TrainingKernel` carries an empty `gradients` list, but
  there is no loss, no backpropagation and no weight update.
- Each forward pass creates fresh random kernels.
- Nothing can be saved or loaded, neither kernels nor maps.
- `LType.UPSAMPLE_FUSE` exists, but a forward pass raises `ValueError` if a
  layer of that type is reached, and `Bloc` has no method that adds one.