"""Pinhole camera mapping pixels to world-space rays.

The canvas sits one unit in front of the eye, at z = -1 in camera space.
The field of view spans the longer image side, so the camera frames the
same region whatever the aspect ratio:

    half_view = tan(field_of_view / 2)
    landscape (aspect >= 1): half_width = half_view, half_height = half_view / aspect
    portrait  (aspect < 1):  half_width = half_view * aspect, half_height = half_view
    pixel_size = 2 * half_width / hsize

The camera's ``transform`` is a view transform (world -> camera space, see
``view_transform``). Rays start at the eye and pass through the pixel
centers. Pixel (0, 0) is the top-left corner; x grows to the right and y
grows downward.

Two ways to generate rays:
    - ``ray_for_pixel``: one ray, computed with numpy in Python scope
    - ``generate_rays``: every ray at once, computed by a Taichi kernel;
      requires ``ti.init`` to have been called

Example:
    >>> import math
    >>> camera = Camera(hsize=201, vsize=101, field_of_view=math.pi / 2)
    >>> camera.ray_for_pixel(100, 50).direction
    array([ 0.,  0., -1.,  0.])
"""

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
import taichi as ti

from src.tracer.core.matrix import IDENTITY, Matrix4, inverse
from src.tracer.core.ray import Ray, make_ray
from src.tracer.core.tuples import freeze, normalize, point

logger = logging.getLogger(__name__)


# =============================================================================
# Camera Data Structure
# =============================================================================


@dataclass(frozen=True, eq=False)
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        hsize: Horizontal size of the image in pixels.
        vsize: Vertical size of the image in pixels.
        field_of_view: Angle in radians covered by the longer image side.
        transform: World -> camera space transform. Default identity, which
            puts the eye at the origin looking down -z.
        half_width: Half of the canvas width at z = -1 (computed).
        half_height: Half of the canvas height at z = -1 (computed).
        pixel_size: Side of one pixel on the canvas (computed).
        inverse: Cached inverse of ``transform`` (computed).
    """

    hsize: int
    vsize: int
    field_of_view: float
    transform: Matrix4 = field(default_factory=lambda: IDENTITY)
    half_width: float = field(init=False)
    half_height: float = field(init=False)
    pixel_size: float = field(init=False)
    inverse: Matrix4 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.hsize <= 0 or self.vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {self.hsize}x{self.vsize}")
        if not 0.0 < self.field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {self.field_of_view}")

        half_view = math.tan(self.field_of_view / 2.0)
        aspect = self.hsize / self.vsize
        if aspect >= 1.0:
            half_width = half_view
            half_height = half_view / aspect
        else:
            half_width = half_view * aspect
            half_height = half_view

        object.__setattr__(self, "transform", freeze(self.transform))
        object.__setattr__(self, "half_width", half_width)
        object.__setattr__(self, "half_height", half_height)
        object.__setattr__(self, "pixel_size", half_width * 2.0 / self.hsize)
        object.__setattr__(self, "inverse", inverse(self.transform))
        logger.debug(
            "Camera %dx%d fov=%.4f pixel_size=%.6f", self.hsize, self.vsize, self.field_of_view, self.pixel_size
        )

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Build the world-space ray through the center of pixel (px, py).

        Args:
            px: Pixel column, 0 at the left edge.
            py: Pixel row, 0 at the top edge.

        Returns:
            A ray from the eye with a unit direction.
        """
        # offset from the canvas edge to the pixel's center
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # the camera looks toward -z, so +x is to the left
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self.inverse @ point(world_x, world_y, -1.0)
        origin = self.inverse @ point(0.0, 0.0, 0.0)
        return make_ray(origin, normalize(pixel - origin))

    def generate_rays(self) -> tuple[np.ndarray, np.ndarray]:
        """Compute every primary ray with a Taichi kernel.

        Returns:
            Tuple of (origins, directions), each a float64 array of shape
            ``(vsize, hsize, 4)`` indexed ``[y, x]``.
        """
        origins = np.zeros((self.vsize, self.hsize, 4), dtype=np.float64)
        directions = np.zeros((self.vsize, self.hsize, 4), dtype=np.float64)
        inv = np.ascontiguousarray(self.inverse, dtype=np.float64)
        _generate_rays_kernel(inv, origins, directions, self.half_width, self.half_height, self.pixel_size)
        return origins, directions

    def rays(self) -> Iterator[tuple[int, int, Ray]]:
        """Yield ``(x, y, ray)`` for every pixel, row by row."""
        origins, directions = self.generate_rays()
        for y in range(self.vsize):
            for x in range(self.hsize):
                yield x, y, make_ray(origins[y, x], directions[y, x])


# =============================================================================
# Ray Generation (Taichi kernel)
# =============================================================================


@ti.kernel
def _generate_rays_kernel(
    inv: ti.types.ndarray(dtype=ti.f64, ndim=2),
    origins: ti.types.ndarray(dtype=ti.f64, ndim=3),
    directions: ti.types.ndarray(dtype=ti.f64, ndim=3),
    half_width: ti.f64,
    half_height: ti.f64,
    pixel_size: ti.f64,
):
    """Fill ``origins``/``directions`` with the ray through each pixel center."""
    for y, x in ti.ndrange(origins.shape[0], origins.shape[1]):
        world_x = half_width - (ti.cast(x, ti.f64) + 0.5) * pixel_size
        world_y = half_height - (ti.cast(y, ti.f64) + 0.5) * pixel_size

        # inverse view transform applied to the canvas point (world_x, world_y, -1)
        px = inv[0, 0] * world_x + inv[0, 1] * world_y - inv[0, 2] + inv[0, 3]
        py = inv[1, 0] * world_x + inv[1, 1] * world_y - inv[1, 2] + inv[1, 3]
        pz = inv[2, 0] * world_x + inv[2, 1] * world_y - inv[2, 2] + inv[2, 3]

        # and to the eye at the camera-space origin
        ox = inv[0, 3]
        oy = inv[1, 3]
        oz = inv[2, 3]

        dx = px - ox
        dy = py - oy
        dz = pz - oz
        length = ti.sqrt(dx * dx + dy * dy + dz * dz)

        origins[y, x, 0] = ox
        origins[y, x, 1] = oy
        origins[y, x, 2] = oz
        origins[y, x, 3] = 1.0
        directions[y, x, 0] = dx / length
        directions[y, x, 1] = dy / length
        directions[y, x, 2] = dz / length
        directions[y, x, 3] = 0.0
