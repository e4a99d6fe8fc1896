"""In-memory pixel grid.

An ``Image`` owns a float64 buffer of ``height x width`` samples stored row
major. NaN marks undefined pixels. Buffers passed to the constructor are
copied, so two images never share memory.
"""

from __future__ import annotations

import numpy as np

from wsrt_beam.errors import DimensionMismatchError
from wsrt_beam.qa import image_stats


class Image:
    """A width x height grid of double-precision pixels."""

    def __init__(self, width: int = 0, height: int = 0, initial_value: float = 0.0):
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._data = np.full((self._height, self._width), initial_value, dtype=np.float64)

    @classmethod
    def from_array(cls, data, width: int | None = None, height: int | None = None) -> Image:
        """Create an image from a 2-D array or a flat buffer.

        A flat buffer requires ``width`` and ``height``. The data is copied.
        """
        arr = np.array(data, dtype=np.float64, copy=True)
        if arr.ndim == 1:
            if width is None or height is None:
                raise ValueError("width and height are required for a flat buffer")
            if arr.size != width * height:
                raise DimensionMismatchError(
                    f"Buffer of {arr.size} samples does not fit {width}x{height}"
                )
            arr = arr.reshape(height, width)
        elif arr.ndim != 2:
            raise ValueError(f"Expected 1-D or 2-D data, got {arr.ndim}-D")
        image = cls()
        image._height, image._width = arr.shape
        image._data = arr
        return image

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        return self._width * self._height

    @property
    def shape(self) -> tuple[int, int]:
        return (self._height, self._width)

    @property
    def data(self) -> np.ndarray:
        """The 2-D pixel array (a live view, not a copy)."""
        return self._data

    def ravel(self) -> np.ndarray:
        """Flat row-major view of the pixels."""
        return self._data.reshape(-1)

    def empty(self) -> bool:
        return self._width == 0 or self._height == 0

    def copy(self) -> Image:
        return Image.from_array(self._data)

    def same_shape(self, other: Image) -> bool:
        return self.shape == other.shape

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value) -> None:
        self._data[index] = value

    def __repr__(self) -> str:
        return f"Image(width={self._width}, height={self._height})"

    # In-place arithmetic

    def fill(self, value: float) -> Image:
        self._data.fill(value)
        return self

    def reset(self) -> None:
        self._width = 0
        self._height = 0
        self._data = np.zeros((0, 0), dtype=np.float64)

    def negate(self) -> None:
        np.negative(self._data, out=self._data)

    def __imul__(self, other):
        if isinstance(other, Image):
            if not self.same_shape(other):
                raise DimensionMismatchError(
                    f"Cannot multiply {self.width}x{self.height} image "
                    f"by {other.width}x{other.height} image"
                )
            self._data *= other._data
        else:
            self._data *= float(other)
        return self

    def __itruediv__(self, factor):
        if isinstance(factor, Image):
            return NotImplemented
        self._data *= 1.0 / float(factor)
        return self

    # Resizing

    def trim(self, out_width: int, out_height: int) -> Image:
        """Cut the borders off, keeping a centred ``out_width x out_height`` box."""
        if out_width > self._width or out_height > self._height:
            raise ValueError(
                f"Trimmed size {out_width}x{out_height} exceeds {self._width}x{self._height}"
            )
        start_x = (self._width - out_width) // 2
        start_y = (self._height - out_height) // 2
        return Image.from_array(
            self._data[start_y : start_y + out_height, start_x : start_x + out_width]
        )

    def trim_box(self, x1: int, y1: int, box_width: int, box_height: int) -> Image:
        """Extract the box whose lower corner is at pixel ``(x1, y1)``."""
        if x1 < 0 or y1 < 0 or x1 + box_width > self._width or y1 + box_height > self._height:
            raise ValueError(
                f"Box ({x1}, {y1}, {box_width}x{box_height}) lies outside "
                f"{self._width}x{self._height} image"
            )
        return Image.from_array(self._data[y1 : y1 + box_height, x1 : x1 + box_width])

    def untrim(self, out_width: int, out_height: int) -> Image:
        """Zero-pad to ``out_width x out_height``, the complement of ``trim``."""
        if out_width < self._width or out_height < self._height:
            raise ValueError(
                f"Untrimmed size {out_width}x{out_height} is smaller than "
                f"{self._width}x{self._height}"
            )
        out = Image(out_width, out_height)
        start_x = (out_width - self._width) // 2
        start_y = (out_height - self._height) // 2
        out._data[start_y : start_y + self._height, start_x : start_x + self._width] = self._data
        return out

    # Statistics

    def sum(self) -> float:
        return float(np.sum(self._data))

    def average(self) -> float:
        if self.size == 0:
            return float("nan")
        return self.sum() / self.size

    def min(self) -> float:
        return image_stats.minimum(self._data)

    def max(self) -> float:
        return image_stats.maximum(self._data)

    def median(self) -> float:
        return image_stats.median(self._data)

    def mad(self) -> float:
        return image_stats.mad(self._data)

    def stddev_from_mad(self) -> float:
        return image_stats.stddev_from_mad(self._data)

    def rms(self) -> float:
        return image_stats.rms(self._data)
