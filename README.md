# pixelflow

Image processing for 8-bit images held in memory: pixel operators, resizing,
morphology, thresholding, a reusable buffer pool, execution contexts and
multi-worker batch pipelines. Everything is built on NumPy.

An `Image` wraps a `(height, width, channels)` `uint8` array. Valid images
have 1 (grayscale), 3 (RGB) or 4 (RGBA) channels. Their bytes are laid out
row by row, with the channels of each pixel interleaved.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Images (`pixelflow.image`)

```python
import numpy as np
from pixelflow.image import Image, create_image, from_bytes

img = create_image(64, 32, 3)                  # zero-filled 64x32 RGB image
raw = from_bytes(bytes(4 * 4), 4, 4, 1)        # copy raw grayscale bytes
assert raw.is_valid()
data = raw.to_bytes()                          # interleaved row-major bytes
clone = raw.copy()
wrapped = Image(np.zeros((8, 8), dtype=np.uint8))  # 2-D arrays get one channel
```

`Image` exposes `width`, `height`, `channels`, `pitch`, `total_bytes` and
`pixel_count`. Two images compare equal when their shapes and pixels match.
`Image()` with no arguments is empty and not valid.

`create_image` and `from_bytes` raise `ValueError` for a bad width, height or
channel count, and `from_bytes` also raises it when the byte count does not
match. `validate_image_params` only returns `True` or `False`.
`validate_input` raises `ValueError` for an invalid image, and
`validate_same_size` raises it when two images differ in size or channels.

## Operators

Each operator checks its input, raises `ValueError` for an invalid image or
bad parameters, and returns a new image.

```python
from pixelflow.pixel import invert, to_grayscale, adjust_brightness
from pixelflow.resize import resize, resize_by_scale, resize_fit, InterpolationMode
from pixelflow.morphology import erode, dilate, opening, closing, StructuringElement
from pixelflow.threshold import threshold, otsu_threshold, otsu_binarize, ThresholdType

gray = to_grayscale(img)                       # 0.299 R + 0.587 G + 0.114 B
brighter = adjust_brightness(img, 50)          # clamped to 0..255
big = resize(img, 128, 64)                     # bilinear by default
small = resize(img, 32, 16, InterpolationMode.NEAREST_NEIGHBOR)
half = resize_by_scale(img, 0.5, 0.5)
fitted = resize_fit(img, 200, 200)             # keeps the aspect ratio
eroded = erode(gray, 3, StructuringElement.CROSS)
binary = threshold(gray, 128, 255, ThresholdType.BINARY)
level = otsu_threshold(gray)
auto = otsu_binarize(gray, 255)
```

- `pixelflow.pixel`: `invert`, `to_grayscale`, `adjust_brightness`, and
  `invert_in_place` / `adjust_brightness_in_place`, which change the image
  they are given.
- `pixelflow.resize`: nearest-neighbour and bilinear interpolation.
  `InterpolationMode.BICUBIC` exists but is rejected with `ValueError`.
- `pixelflow.morphology`: `erode`, `dilate`, `opening`, `closing`,
  `gradient`, `top_hat` and `black_hat` with rectangle, cross or ellipse
  elements (`structuring_element` returns the mask). Kernel sizes must be
  positive and odd. Pixels outside the image are ignored.
- `pixelflow.threshold`: `threshold` with the five `ThresholdType` kinds,
  `adaptive_threshold` (mean or Gaussian local mean minus `c`, BINARY or
  BINARY_INV only, odd block size of at least 3), `otsu_threshold` and
  `otsu_binarize`. Otsu works on the grayscale version of the image.

## Buffer pool and execution contexts

`pixelflow.buffers.MemoryPool` hands out `bytearray` buffers rounded up to a
multiple of 256 bytes (`align_size`). It keeps released buffers for reuse, up
to `max_pool_size` bytes, and reports usage through `stats()` as a
`MemoryStats`. `default_pool()` returns the shared instance.

`pixelflow.execution.ExecutionContext` runs work under an `ExecutionMode`:

- `SYNC` runs each submitted task immediately.
- `ASYNC` queues tasks on one worker, in order.
- `BATCH` spreads tasks over four workers.

`submit(fn, *args)` returns a future. `synchronize()` waits for queued work and
re-raises the first error. `allocate_output` and `allocate_like` return
zero-filled images, drawn from the shared pool when `use_pool` is set. Use
`recycle` to give an image's storage back to the pool. Contexts are context
managers. The shortcuts are `sync_context()`, `async_context()` and
`batch_context()`.

## Processor and builder (`pixelflow.processor`)

`ImageProcessor(mode, pooling)` puts the pixel operators and bilinear resizing
behind one object that owns an execution context. In `SYNC` mode each call
finishes before it returns. In `ASYNC` and `BATCH` modes the call returns the
allocated output at once and fills it in the background, in call order.
`download`, `synchronize` and `PipelineBuilder.execute` wait for that work.

```python
from pixelflow.processor import ImageProcessor, PipelineBuilder

proc = ImageProcessor()
loaded = proc.load(img)
result = (
    PipelineBuilder(proc)
    .start(loaded)
    .grayscale()
    .brightness(20)
    .invert()
    .resize(32, 16)
    .execute()
)
host_copy = proc.download(result)

chained = proc.pipeline(loaded, [proc.to_grayscale, proc.invert])
```

If `start` was not called, `execute` returns an empty, invalid image.

## Batch pipelines (`pixelflow.pipeline`)

`PipelineProcessor(num_workers)` applies its steps, in order, to a copy of each
image. A step gets the working image. It can change that image in place and
return `None`, or return a new `Image` to replace it. `process` handles one
image. `process_batch` spreads a batch over the workers and returns the
results in input order.

```python
from pixelflow.pipeline import PipelineProcessor
from pixelflow.pixel import invert_in_place, adjust_brightness

with PipelineProcessor(4) as pipeline:
    pipeline.add_step(lambda im: adjust_brightness(im, 20))
    pipeline.add_step(invert_in_place)
    outputs = pipeline.process_batch([img, img.copy()])
    assert len(pipeline) == 2
```

## What the package does not do

pixelflow works only on images already in memory. It does not read or write
image files. It has no convolution, blurring, edge detection, histogram,
colour-space conversion or general filtering. It provides no command-line
tool.

## Running the tests

```
pytest
```