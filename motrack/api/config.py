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
"""Runtime configuration module for MOTRACK.

This module defines the RuntimeConfiguration dataclass which specifies how
MOTRACK should search and report translations, but not which images to process.
The same configuration can be reused across several image pairs or sequences.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class RuntimeConfiguration:
    """Runtime configuration for MOTRACK processing behavior.

    Attributes:
        output_directory: Directory where track results are written
        x_gate: Maximum X offset magnitude, 0 for the image width minus one
        y_gate: Maximum Y offset magnitude, 0 for the image height minus one
        write_csv: Whether to write track results as CSV in `output_directory`
        workers: Optional number of worker threads, overrides processing configuration
    """

    output_directory: Path
    x_gate: float = 0.0
    y_gate: float = 0.0
    write_csv: bool = True
    workers: Optional[int] = None
