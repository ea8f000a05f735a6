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
"""
This module contains the iterator over pixel pairs shared by two images for a given offset.
"""
from __future__ import annotations

from collections.abc import Iterator

from motrack.core.image import ColorSample, PixelGrid


def overlap_size(width: int, height: int, dx: int, dy: int) -> int:
    """Number of positions in both images once the first is shifted by (dx, dy)

    Args:
        width (int): images width
        height (int): images height
        dx (int): X offset
        dy (int): Y offset

    Returns:
        int: (width - |dx|) * (height - |dy|), 0 if there is no overlap
    """
    overlap_width = width - abs(dx)
    overlap_height = height - abs(dy)
    if overlap_width <= 0 or overlap_height <= 0:
        return 0
    return overlap_width * overlap_height


class OverlapPairIterator(Iterator[tuple[ColorSample, ColorSample]]):
    # pylint: disable=too-many-instance-attributes
    """Iterates over `(img_a.sample(x + dx, y + dy), img_b.sample(x, y))` pairs, row by row.

    Only `(x, y)` positions for which the shifted position is inside `img_a` are produced.
    Rather than testing every position, the valid sub rectangle of `img_b` is computed once
    from the offset:

        x in [max(0, -dx), min(width, width - dx))
        y in [max(0, -dy), min(height, height - dy))

    The iterator cannot be restarted. Both images must have the same size, this is not
    verified here.
    """

    def __init__(self, img_a: PixelGrid, img_b: PixelGrid, dx: int, dy: int):
        self._img_a = img_a
        self._img_b = img_b
        self._dx = dx
        self._dy = dy

        width = img_b.width
        height = img_b.height
        self._x_start = max(0, -dx)
        self._x_stop = min(width, width - dx)
        self._y_stop = min(height, height - dy)

        # current position in img_b
        self._x = self._x_start
        self._y = max(0, -dy)

        # empty overlap, nothing to produce
        if self._x_start >= self._x_stop:
            self._y = self._y_stop

    def __iter__(self) -> OverlapPairIterator:
        return self

    def __next__(self) -> tuple[ColorSample, ColorSample]:
        if self._y >= self._y_stop:
            raise StopIteration

        x = self._x
        y = self._y
        self._x += 1
        if self._x >= self._x_stop:
            self._x = self._x_start
            self._y += 1

        return self._img_a.sample(x + self._dx, y + self._dy), self._img_b.sample(x, y)

    def __len__(self) -> int:
        """Number of pairs not produced yet"""
        if self._y >= self._y_stop:
            return 0
        row_size = self._x_stop - self._x_start
        return (self._y_stop - self._y) * row_size - (self._x - self._x_start)
