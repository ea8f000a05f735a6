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
"""MOTRACK exceptions module."""


class MotrackException(Exception):
    """Base class of MOTRACK errors."""


class ConfigurationError(MotrackException):
    """Raised when the processing configuration is missing or invalid."""


class InvalidGeometryError(MotrackException):
    """Raised when two images to compare do not have the same width and height."""


class InvalidOffsetError(MotrackException, IndexError):
    """Raised when a position or a box requested to an image exceeds its dimensions."""
