"""Camera module for view and ray generation.

This module provides the camera model for generating primary rays:

Components:
    camera: Pinhole camera placed with a view transform

Camera responsibilities:
    - Map pixel coordinates to rays through pixel centers
    - Size the canvas from the field of view and aspect ratio
    - Position and orient the eye through a world -> camera transform

Batched ray generation for a whole image runs in a Taichi kernel;
single rays are computed with numpy.
"""

from .camera import Camera

__all__ = [
    "Camera",
]
