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
"""Modules for the center-out enumeration of candidate offsets"""
from __future__ import annotations

import math
from collections.abc import Iterator
from typing import NamedTuple


class Offset(NamedTuple):
    """Integer translation, applied to the first image positions"""

    dx: int
    dy: int

    @property
    def ring(self) -> int:
        """Chebyshev distance to (0, 0)"""
        return max(abs(self.dx), abs(self.dy))


# walk directions as (x step, y step): up, right, down, left
_DIRECTIONS = ((0, -1), (1, 0), (0, 1), (-1, 0))


def _axis_range(size: int) -> tuple[int, int]:
    """[start, stop) offsets of an axis of `size` values centered on 0, never empty"""
    size = max(size, 0)
    return -(size // 2), max(size - size // 2, 1)


class SpiralOffsetSequence(Iterator[Offset]):
    # pylint: disable=too-many-instance-attributes
    """Iterates over all offsets of a `width` x `height` rectangle centered on (0, 0),
    from the center to the borders.

    The rectangle covers `dx` in `[-(width // 2), width - width // 2)`, and the same for `dy`,
    so that `SpiralOffsetSequence(2 * x_gate, 2 * y_gate)` covers `[-x_gate, x_gate)` x
    `[-y_gate, y_gate)`. An axis of size 0 or 1 only contains 0.

    Offsets are produced ring by ring: all offsets at Chebyshev distance k come before any
    offset at distance k + 1, (0, 0) being the first one.
    The walk goes one arm at a time, up, right, down, left, the arm growing by one every two
    turns. Positions of the walk outside the rectangle are skipped. The walk stops after
    ring `ceil(max(width, height) / 2)`.
    """

    def __init__(self, width: int, height: int):
        self._x_start, self._x_stop = _axis_range(width)
        self._y_start, self._y_stop = _axis_range(height)
        self._max_radius = math.ceil(max(width, height, 0) / 2)

        # walk state
        self._x = 0
        self._y = 0
        self._direction = 0
        self._arm_length = 1
        self._arm_steps_left = 1
        self._turns = 0
        self._started = False
        self._exhausted = False

    @property
    def max_radius(self) -> int:
        """Last ring walked"""
        return self._max_radius

    def _step(self):
        step_x, step_y = _DIRECTIONS[self._direction]
        self._x += step_x
        self._y += step_y
        self._arm_steps_left -= 1
        if self._arm_steps_left == 0:
            self._direction = (self._direction + 1) % 4
            self._turns += 1
            if self._turns % 2 == 0:
                self._arm_length += 1
            self._arm_steps_left = self._arm_length

    def _in_rectangle(self) -> bool:
        return self._x_start <= self._x < self._x_stop and self._y_start <= self._y < self._y_stop

    def __iter__(self) -> SpiralOffsetSequence:
        return self

    def __next__(self) -> Offset:
        while not self._exhausted:
            if self._started:
                self._step()
            self._started = True

            if max(abs(self._x), abs(self._y)) > self._max_radius:
                self._exhausted = True
            elif self._in_rectangle():
                return Offset(self._x, self._y)

        raise StopIteration

    def __len__(self) -> int:
        """Total number of offsets of the sequence"""
        return (self._x_stop - self._x_start) * (self._y_stop - self._y_start)
