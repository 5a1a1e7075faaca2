[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scribenet"
version = "0.1.0"
description = "Convolution and max-pooling feature-map network with a labelled image dataset loader"
requires-python = ">=3.10"
keywords = ["convolution", "feature map", "maxpool", "dataset", "letterbox", "image recognition"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
scribenet = "scribenet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["scribenet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
