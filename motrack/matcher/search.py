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
This module contains the parallel search of the translation between two images.

The candidate offsets are taken in spiral order by a pool of worker threads. Each worker
scores its offset with the best score known so far as exclusion threshold, so that far
offsets are abandoned early once a good match is found near the center.

When several offsets share the minimal score, the one kept depends on the thread
scheduling: only the score of the result is deterministic.
"""
from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from motrack.core.errors import InvalidGeometryError
from motrack.core.image import PixelGrid
from motrack.matcher.scorer import NO_MATCH_SCORE, diff_at_offset
from motrack.matcher.spiral import Offset, SpiralOffsetSequence

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Result of a translation search"""

    offset: Offset
    """best offset found"""
    score: float
    """mean color difference at `offset`, 0 for a perfect match"""
    visited: int
    """number of offsets scored"""
    pruned: int
    """number of offsets scored 1.0: pruned by the exclusion threshold, without overlap
    or of maximal difference"""
    workers: int
    """number of workers used"""


class SearchState:
    """Best score and offset shared by the workers of one search"""

    def __init__(self):
        self.least_diff = NO_MATCH_SCORE
        self.best_offset = Offset(0, 0)
        self._lock = threading.Lock()

    def offer(self, score: float, offset: Offset) -> bool:
        """Keep `offset` if `score` is strictly lower than the current best one.

        Args:
            score (float): offset score
            offset (Offset): scored offset

        Returns:
            bool: True if the offset is the new best one
        """
        # unlocked read first, most offsets do not improve the score
        if score >= self.least_diff:
            return False
        with self._lock:
            # another worker could have found better meanwhile
            if score < self.least_diff:
                self.least_diff = score
                self.best_offset = offset
                return True
        return False


class OffsetCursor:
    """Thread safe access to an offset sequence, each offset is given once"""

    def __init__(self, offsets: SpiralOffsetSequence):
        self._offsets = offsets
        self._lock = threading.Lock()

    def next_offset(self) -> Optional[Offset]:
        """Take the next offset

        Returns:
            Optional[Offset]: next offset, None when all offsets have been taken
        """
        with self._lock:
            return next(self._offsets, None)


class MotionSearchCoordinator:
    """Search the offset that best aligns two images of the same size.

    The returned offset `(dx, dy)` is such that `img_b.sample(x, y)` is the closest to
    `img_a.sample(x + dx, y + dy)`.
    """

    def __init__(self, workers: Optional[int] = None, stop_on_exact_match: bool = True):
        """Constructor.

        Args:
            workers (Optional[int], optional): number of worker threads.
                Defaults to None, meaning available CPU count.
            stop_on_exact_match (bool, optional): stop the search once an offset with a
                score of 0 is found. Defaults to True.
        """
        if workers is not None and workers < 1:
            raise ValueError(f"Number of workers must be positive, got {workers}")
        self._workers = workers or os.cpu_count() or 1
        self._stop_on_exact_match = stop_on_exact_match

    @property
    def workers(self) -> int:
        """Number of worker threads started by a search"""
        return self._workers

    def search(
        self, img_a: PixelGrid, img_b: PixelGrid, x_gate: float, y_gate: float
    ) -> SearchResult:
        """Search the best offset in `[-x_gate, x_gate) x [-y_gate, y_gate)`.

        Args:
            img_a (PixelGrid): shifted image
            img_b (PixelGrid): image of reference
            x_gate (float): maximum X offset magnitude, truncated to int
            y_gate (float): maximum Y offset magnitude, truncated to int

        Raises:
            InvalidGeometryError: if images width or height differ
            ValueError: if a gate is negative

        Returns:
            SearchResult: best offset and its score
        """
        if img_a.width != img_b.width or img_a.height != img_b.height:
            raise InvalidGeometryError(
                f"Cannot compare images of different sizes: {img_a.width}x{img_a.height} "
                f"and {img_b.width}x{img_b.height}"
            )
        if x_gate < 0 or y_gate < 0:
            raise ValueError(f"Gates must not be negative, got ({x_gate}, {y_gate})")

        x_gate = int(x_gate)
        y_gate = int(y_gate)

        state = SearchState()
        offsets = SpiralOffsetSequence(2 * x_gate, 2 * y_gate)
        cursor = OffsetCursor(offsets)
        exact_match = threading.Event()

        logger.info(
            "Search offset in [-%s, %s) x [-%s, %s), %s candidates, %s workers",
            x_gate,
            x_gate,
            y_gate,
            y_gate,
            len(offsets),
            self._workers,
        )

        with ThreadPoolExecutor(
            max_workers=self._workers, thread_name_prefix="motrack-search"
        ) as executor:
            futures = [
                executor.submit(self._work, img_a, img_b, cursor, state, exact_match)
                for _ in range(self._workers)
            ]
            counters = [future.result() for future in futures]

        visited = sum(counter[0] for counter in counters)
        pruned = sum(counter[1] for counter in counters)

        logger.info(
            "Best offset %s with score %.6f (%s offsets scored, %s pruned)",
            tuple(state.best_offset),
            state.least_diff,
            visited,
            pruned,
        )

        return SearchResult(
            offset=state.best_offset,
            score=state.least_diff,
            visited=visited,
            pruned=pruned,
            workers=self._workers,
        )

    def find_offset(
        self, img_a: PixelGrid, img_b: PixelGrid, x_gate: float, y_gate: float
    ) -> Offset:
        """Same as `search`, only returns the best offset"""
        return self.search(img_a, img_b, x_gate, y_gate).offset

    def _work(
        self,
        img_a: PixelGrid,
        img_b: PixelGrid,
        cursor: OffsetCursor,
        state: SearchState,
        exact_match: threading.Event,
    ) -> tuple[int, int]:
        """Worker loop, score offsets until the cursor is exhausted.

        Returns:
            tuple[int, int]: number of scored offsets, number of pruned offsets
        """
        visited = 0
        pruned = 0
        while not exact_match.is_set():
            offset = cursor.next_offset()
            if offset is None:
                break

            # stale threshold is fine, the state lock re-checks
            score = diff_at_offset(img_a, img_b, offset, state.least_diff)
            visited += 1
            if score == NO_MATCH_SCORE:
                pruned += 1

            if state.offer(score, offset):
                logger.debug("New best offset %s, score %.6f", tuple(offset), score)
                if score == 0 and self._stop_on_exact_match:
                    exact_match.set()

        return visited, pruned


def find_offset(
    img_a: PixelGrid,
    img_b: PixelGrid,
    x_gate: float,
    y_gate: float,
    workers: Optional[int] = None,
) -> Offset:
    """Search the offset that best aligns `img_a` on `img_b`.

    Args:
        img_a (PixelGrid): shifted image
        img_b (PixelGrid): image of reference
        x_gate (float): maximum X offset magnitude
        y_gate (float): maximum Y offset magnitude
        workers (Optional[int], optional): worker threads, defaults to CPU count.

    Returns:
        Offset: (dx, dy) such that `img_b.sample(x, y) ~ img_a.sample(x + dx, y + dy)`
    """
    return MotionSearchCoordinator(workers).find_offset(img_a, img_b, x_gate, y_gate)
