"""Renderer driving camera rays through a world into a canvas.

This module provides the rendering loop with support for:
- Serial rendering, or row-parallel rendering on a process pool
- Progress callbacks for UI updates
- A generator variant yielding progress after each batch of rows

Primary rays for the whole image are generated up front by the camera's
Taichi kernel. Shading runs row by row in Python; with ``workers > 1``
each worker process receives a read-only copy of the world once (pool
initializer) and then shades whole rows sent to it.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tracer.core.renderer import RenderConfig, Renderer
    >>> from src.tracer.scene.world import default_world
    >>>
    >>> renderer = Renderer(RenderConfig(width=40, height=20, field_of_view=math.pi / 3))
    >>> canvas = renderer.render(default_world(), renderer.make_camera())
    >>> image = canvas.to_display_numpy()
"""

import logging
import math
import multiprocessing
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.tracer.camera.camera import Camera
from src.tracer.core.canvas import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, Canvas
from src.tracer.core.integrator import MAX_DEPTH, color_at
from src.tracer.core.matrix import IDENTITY, Matrix4
from src.tracer.core.ray import Ray
from src.tracer.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, rows_total)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Camera field of view in radians, in (0, pi).
        max_depth: Secondary rays allowed per camera ray.
        workers: Number of processes shading rows; 1 renders serially.
        rows_per_batch: Rows completed between progress reports.
    """

    width: int
    height: int
    field_of_view: float
    max_depth: int = MAX_DEPTH
    workers: int = 1
    rows_per_batch: int = 16

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if not 0.0 < self.field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {self.field_of_view}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.rows_per_batch < 1:
            raise ValueError(f"rows_per_batch must be at least 1, got {self.rows_per_batch}")


# =============================================================================
# Row Shading (runs in the calling process or in pool workers)
# =============================================================================

# Per-process state installed by the pool initializer
_worker_world: World | None = None
_worker_depth: int = MAX_DEPTH


def _init_worker(world: World, max_depth: int) -> None:
    global _worker_world, _worker_depth
    _worker_world = world
    _worker_depth = max_depth


def shade_row(world: World, origins: np.ndarray, directions: np.ndarray, max_depth: int) -> npt.NDArray[np.float64]:
    """Trace one row of primary rays.

    Args:
        world: The scene.
        origins: Ray origins, shape (width, 4).
        directions: Ray directions, shape (width, 4).
        max_depth: Secondary rays allowed per camera ray.

    Returns:
        Linear colors of shape (width, 3).
    """
    row = np.empty((len(origins), 3), dtype=np.float64)
    for x in range(len(origins)):
        row[x] = color_at(world, Ray(origins[x], directions[x]), max_depth)
    return row


def _shade_row_task(task: tuple[int, np.ndarray, np.ndarray]) -> tuple[int, npt.NDArray[np.float64]]:
    y, origins, directions = task
    return y, shade_row(_worker_world, origins, directions, _worker_depth)


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Renders worlds into a canvas according to a RenderConfig.

    The renderer owns its canvas (a Taichi field), so Taichi must be
    initialized before a Renderer is created.

    Attributes:
        config: The render configuration.
        canvas: The render target, overwritten by every render.
    """

    def __init__(self, config: RenderConfig) -> None:
        self.config = config
        self.canvas = Canvas(config.width, config.height)

    def make_camera(self, transform: Matrix4 = IDENTITY) -> Camera:
        """Build a camera matching the configured size and field of view."""
        return Camera(self.config.width, self.config.height, self.config.field_of_view, transform)

    def _check_camera(self, camera: Camera) -> None:
        if camera.hsize != self.config.width or camera.vsize != self.config.height:
            raise ValueError(
                f"Camera is {camera.hsize}x{camera.vsize} but the renderer is "
                f"configured for {self.config.width}x{self.config.height}"
            )

    def render(self, world: World, camera: Camera, callback: ProgressCallback | None = None) -> Canvas:
        """Render a full image.

        Args:
            world: The scene to render.
            camera: A camera whose size matches the configuration.
            callback: Optional callback called after each batch of rows.
                Receives (rows_done, rows_total).

        Returns:
            The renderer's canvas holding the linear image.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(world, camera, callback=progress)
        """
        for done, total in self.render_progressive(world, camera):
            if callback is not None:
                callback(done, total)
        return self.canvas

    def render_progressive(self, world: World, camera: Camera) -> Generator[tuple[int, int], None, None]:
        """Render, yielding progress after each batch of rows.

        This is a generator-based alternative to render() with callbacks.
        Rows may finish out of order when rendering on several workers.

        Yields:
            Tuple of (rows_done, rows_total).
        """
        self._check_camera(camera)
        config = self.config
        total = config.height
        self.canvas.clear()

        start = time.perf_counter()
        logger.info("Rendering %dx%d with %d worker(s)", config.width, config.height, config.workers)

        origins, directions = camera.generate_rays()
        done = 0

        if config.workers == 1:
            for y in range(total):
                self.canvas.write_row(y, shade_row(world, origins[y], directions[y], config.max_depth))
                done += 1
                if done % config.rows_per_batch == 0 or done == total:
                    yield done, total
        else:
            tasks = ((y, origins[y], directions[y]) for y in range(total))
            ctx = multiprocessing.get_context("spawn")
            with ctx.Pool(processes=config.workers, initializer=_init_worker, initargs=(world, config.max_depth)) as pool:
                for y, row in pool.imap_unordered(_shade_row_task, tasks):
                    self.canvas.write_row(y, row)
                    done += 1
                    if done % config.rows_per_batch == 0 or done == total:
                        yield done, total

        logger.info("Rendered %d rows in %.2fs", total, time.perf_counter() - start)

    def __repr__(self) -> str:
        return f"Renderer(width={self.config.width}, height={self.config.height}, workers={self.config.workers})"
