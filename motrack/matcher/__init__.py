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
"""Translation search between two pixel grids."""
from motrack.matcher.search import MotionSearchCoordinator, SearchResult, find_offset
from motrack.matcher.spiral import Offset, SpiralOffsetSequence

__all__ = [
    "MotionSearchCoordinator",
    "Offset",
    "SearchResult",
    "SpiralOffsetSequence",
    "find_offset",
]
