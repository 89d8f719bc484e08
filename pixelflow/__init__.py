"""In-memory 8-bit image processing: pixel operators, resizing, morphology, thresholding, buffer pooling and batch pipelines."""

__version__ = "2.1.0"

__all__ = [
    "buffers",
    "execution",
    "image",
    "morphology",
    "pipeline",
    "pixel",
    "processor",
    "resize",
    "threshold",
]