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
"""Module scoring the difference between two images for one candidate offset."""

from motrack.core.image import PixelGrid
from motrack.matcher.color import color_difference
from motrack.matcher.overlap import OverlapPairIterator, overlap_size
from motrack.matcher.spiral import Offset

NO_MATCH_SCORE = 1.0
"""Score of an offset without overlap, or pruned by the exclusion threshold"""


def diff_at_offset(
    img_a: PixelGrid, img_b: PixelGrid, offset: Offset, exclusion_threshold: float
) -> float:
    """Compute the mean color difference between `img_a` shifted by `offset` and `img_b`.

    The accumulation stops as soon as the running mean exceeds `exclusion_threshold`:
    differences only add up, so the final mean cannot get back under it.
    In that case `NO_MATCH_SCORE` is returned instead of the exact value, so any returned
    value greater than `exclusion_threshold` is always 1.0.

    Images must have the same size, the caller is in charge of this check.

    Args:
        img_a (PixelGrid): shifted image
        img_b (PixelGrid): image of reference
        offset (Offset): (dx, dy) applied to `img_a` positions
        exclusion_threshold (float): best score known so far

    Returns:
        float: mean difference in [0, 1], 1.0 if no overlap or pruned
    """
    dx, dy = offset
    nb_pixels = overlap_size(img_b.width, img_b.height, dx, dy)
    if nb_pixels <= 0:
        return NO_MATCH_SCORE

    diff_sum = 0.0
    for sample_a, sample_b in OverlapPairIterator(img_a, img_b, dx, dy):
        diff_sum += color_difference(sample_a, sample_b)
        if diff_sum / nb_pixels > exclusion_threshold:
            return NO_MATCH_SCORE

    return diff_sum / nb_pixels
