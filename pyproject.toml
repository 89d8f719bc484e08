[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixelflow"
version = "2.1.0"
description = "Image processing on NumPy arrays: pixel operators, resizing, morphology, thresholding, buffer pooling and batch pipelines"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["image processing", "morphology", "threshold", "otsu", "resize", "pipeline", "numpy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pixelflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
