"""Render target: a Taichi color buffer.

The canvas stores linear, unclamped RGB in a ``ti.Vector.field`` indexed
``[x, y]`` with (0, 0) at the top-left, matching the camera's pixel
convention. Clamping to the displayable [0, 1] range happens only on
export, in a Taichi kernel; no gamma or other encoding is applied.

Taichi must be initialized before a Canvas is created.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.core.canvas import Canvas
    >>> from src.tracer.core.tuples import color
    >>> canvas = Canvas(10, 20)
    >>> canvas.write_pixel(2, 3, color(1.5, 0.0, 0.0))
    >>> canvas.to_display_numpy()[3, 2]
    array([1., 0., 0.], dtype=float32)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.tracer.core.tuples import Color

# Maximum supported image dimensions
MAX_IMAGE_WIDTH = 4096
MAX_IMAGE_HEIGHT = 4096


@ti.kernel
def _write_row(buffer: ti.template(), y: ti.i32, row: ti.types.ndarray(dtype=ti.f32, ndim=2)):
    for x in range(row.shape[0]):
        buffer[x, y] = tm.vec3(row[x, 0], row[x, 1], row[x, 2])


@ti.kernel
def _clamp_into(src: ti.template(), dst: ti.template()):
    for i, j in src:
        dst[i, j] = tm.clamp(src[i, j], 0.0, 1.0)


class Canvas:
    """A width x height grid of linear colors backed by Taichi fields.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate the color buffer, cleared to black.

        Raises:
            ValueError: If a dimension is not positive or exceeds the
                maximum supported size.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        self._width = width
        self._height = height
        self._color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        self._display_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        self.clear()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _check_pixel(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} canvas")

    def clear(self) -> None:
        """Reset every pixel to black."""
        self._color_buffer.fill(0.0)

    def write_pixel(self, x: int, y: int, c: Color) -> None:
        self._check_pixel(x, y)
        self._color_buffer[x, y] = [float(c[0]), float(c[1]), float(c[2])]

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_pixel(x, y)
        value = self._color_buffer[x, y]
        return np.array([value[0], value[1], value[2]], dtype=np.float64)

    def write_row(self, y: int, colors: npt.ArrayLike) -> None:
        """Write a full row of colors.

        Args:
            y: Row index, 0 at the top.
            colors: Array of shape ``(width, 3)``.
        """
        row = np.ascontiguousarray(colors, dtype=np.float32)
        if row.shape != (self._width, 3):
            raise ValueError(f"Row must have shape ({self._width}, 3), got {row.shape}")
        self._check_pixel(0, y)
        _write_row(self._color_buffer, y, row)

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Linear colors as an array of shape (height, width, 3)."""
        return np.transpose(self._color_buffer.to_numpy(), (1, 0, 2))

    def to_display_numpy(self) -> npt.NDArray[np.float32]:
        """Colors clamped to [0, 1] as an array of shape (height, width, 3)."""
        _clamp_into(self._color_buffer, self._display_buffer)
        return np.transpose(self._display_buffer.to_numpy(), (1, 0, 2))

    def __repr__(self) -> str:
        return f"Canvas(width={self._width}, height={self._height})"
