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
"""Color comparison module"""

from motrack.core.image import ColorSample

# 3 channels * 255
MAX_CHANNELS_DIFF = 765


def color_difference(color_a: ColorSample, color_b: ColorSample) -> float:
    """Mean fractional channel difference of two colors.

    Args:
        color_a (ColorSample): first (r, g, b) sample
        color_b (ColorSample): second (r, g, b) sample

    Returns:
        float: 0 for identical colors, 1 for black versus white
    """
    return (
        abs(color_a[0] - color_b[0]) + abs(color_a[1] - color_b[1]) + abs(color_a[2] - color_b[2])
    ) / MAX_CHANNELS_DIFF
