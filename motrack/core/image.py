# -*- coding: utf-8 -*-
# Copyright (c) 2025 Telespazio France.
#
# This file is part of MOTRACK.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Module for image classes."""
from __future__ import annotations

import logging
import os
import threading
from typing import Protocol

import imageio.v2 as imageio
import numpy as np
from numpy.typing import NDArray

from motrack.core.errors import InvalidOffsetError

logger = logging.getLogger(__name__)

ColorSample = tuple[int, int, int]
"""Three 8 bits channel values (red, green, blue)"""


class PixelGrid(Protocol):
    """Read only rectangular grid of color samples."""

    @property
    def width(self) -> int:
        """Grid width in pixel"""

    @property
    def height(self) -> int:
        """Grid height in pixel"""

    def sample(self, x: int, y: int) -> ColorSample:
        """Color at column x, row y. Only defined inside the grid."""


def _to_rgb(array: NDArray) -> NDArray:
    """Normalize a decoded image array to a (height, width, 3) uint8 array.

    Gray images are expanded to three identical channels, alpha channel is dropped.
    The reduction to 8 bits only depends on the array type, so that all frames of a
    sequence get the same scale:

    - unsigned integers keep their 8 most significant bits,
    - floats are expected in [0, 1] and scaled to [0, 255],
    - booleans become 0 or 255,
    - signed integers are clipped to [0, 255].
    """
    if array.ndim == 2:
        array = np.stack([array] * 3, axis=-1)
    elif array.ndim == 3 and array.shape[2] in (3, 4):
        array = array[:, :, :3]
    else:
        raise ValueError(f"Unsupported image shape {array.shape}, expect (H, W), (H, W, 3) or (H, W, 4)")

    if array.dtype == np.uint8:
        return array

    if array.dtype == np.bool_:
        return array.astype(np.uint8) * 255
    if np.issubdtype(array.dtype, np.unsignedinteger):
        return (array >> (array.dtype.itemsize * 8 - 8)).astype(np.uint8)
    if np.issubdtype(array.dtype, np.floating):
        return np.clip(np.rint(array * 255), 0, 255).astype(np.uint8)
    if np.issubdtype(array.dtype, np.signedinteger):
        return np.clip(array, 0, 255).astype(np.uint8)

    raise ValueError(f"Unsupported image type {array.dtype}")


class RgbImage:
    # pylint: disable=too-many-instance-attributes
    """RGB pixel grid, read by imageio or built from an array."""

    def __init__(self, array: NDArray, filepath: str | None = None):
        self._array = _to_rgb(np.asarray(array))
        self._array.setflags(write=False)
        self.filepath = filepath
        self.file_name = os.path.basename(filepath) if filepath else None
        self._pixels = None
        self._pixels_lock = threading.Lock()

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> RgbImage:
        """Read image file.
        Errors raised by imageio (missing file, unsupported format) are not caught.

        Args:
            path (str | os.PathLike): image file path

        Returns:
            RgbImage: decoded image
        """
        filepath = str(path)
        logger.debug("Read image %s", filepath)
        return cls(imageio.imread(filepath), filepath)

    @classmethod
    def from_array(cls, array: NDArray) -> RgbImage:
        """Build image from an in memory array

        Args:
            array (NDArray): (H, W), (H, W, 3) or (H, W, 4) array

        Returns:
            RgbImage: image wrapping a copy of the array
        """
        return cls(np.array(array))

    @property
    def width(self) -> int:
        """Image width (number of columns)"""
        return self._array.shape[1]

    @property
    def height(self) -> int:
        """Image height (number of rows)"""
        return self._array.shape[0]

    def _get_pixels(self) -> list[list[ColorSample]]:
        pixels = self._pixels
        if pixels is None:
            with self._pixels_lock:
                # built once even if several threads sample a cold image
                if self._pixels is None:
                    self._pixels = [[tuple(pixel) for pixel in row] for row in self._array.tolist()]
                pixels = self._pixels
        return pixels

    def load_samples(self):
        """Build the pixel samples cache, before sampling from several threads"""
        self._get_pixels()

    def sample(self, x: int, y: int) -> ColorSample:
        """Color sample at column x and row y.

        Args:
            x (int): column index
            y (int): row index

        Raises:
            InvalidOffsetError: if x or y is outside the image

        Returns:
            ColorSample: (r, g, b)
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise InvalidOffsetError(
                f"Position ({x}, {y}) outside of image of size {self.width}x{self.height}"
            )
        return self._get_pixels()[y][x]

    def window(self, x_off: int, y_off: int, x_size: int, y_size: int) -> NDArray:
        """Read a box of the image.

        Args:
            x_off (int): box X offset
            y_off (int): box Y offset
            x_size (int): X size of the box
            y_size (int): Y size of the box

        Raises:
            InvalidOffsetError: if the box is not fully inside the image

        Returns:
            NDArray: (y_size, x_size, 3) read only view of the image
        """
        if (
            x_off < 0
            or y_off < 0
            or x_size < 0
            or y_size < 0
            or x_off + x_size > self.width
            or y_off + y_size > self.height
        ):
            raise InvalidOffsetError(
                f"Box ({x_off}, {y_off}, {x_size}, {y_size}) exceeds image of size "
                f"{self.width}x{self.height}"
            )
        return self._array[y_off : y_off + y_size, x_off : x_off + x_size]

    def is_compatible_with(self, image: PixelGrid) -> bool:
        """Check that images have the same width and height

        Args:
            image (PixelGrid): image to compare with

        Returns:
            bool: True if images have same geometry
        """
        return self.width == image.width and self.height == image.height

    def clear_cache(self):
        """Release pixel samples cache"""
        with self._pixels_lock:
            self._pixels = None

    @property
    def image_information(self) -> str:
        """
        Returns:
            str: Image geometric info
        """
        return f"""File: {self.filepath}
        Width: {self.width}
        Height: {self.height}
        """

    def _get_array(self) -> NDArray:
        return self._array

    array: NDArray = property(_get_array, doc="Access to image array (numpy array)")
