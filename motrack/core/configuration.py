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
Represents the processing configuration of the application.

Contains search and tracking parameters.
"""
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from motrack.core.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


@dataclass
class SearchConfiguration:
    """Translation search configuration class"""

    workers: int
    """number of worker threads, 0 for CPU count"""
    stop_on_exact_match: bool
    """stop searching once a perfect match is found"""

    def __post_init__(self):
        if self.workers < 0:
            raise ConfigurationError(f"workers must be positive or 0, got {self.workers}")

    @property
    def worker_count(self) -> Optional[int]:
        """Number of workers to start, None for CPU count"""
        return self.workers or None


@dataclass
class TrackConfiguration:
    """Image sequence tracking configuration class"""

    csv_separator: str


class ProcessingConfiguration:
    """Application configuration."""

    def __init__(self):
        """Initialize Configuration class."""
        self.search_configuration: Optional[SearchConfiguration] = None
        self.track_configuration: Optional[TrackConfiguration] = None

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ProcessingConfiguration":
        """Create configuration from a dictionary.

        Args:
            config_dict: Dictionary containing configuration

        Raises:
            ConfigurationError: If a section is missing or has unexpected keys

        Returns:
            ProcessingConfiguration: Configured instance
        """
        instance = cls()
        instance._load_configuration(config_dict)
        return instance

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ProcessingConfiguration":
        """Load configuration from a file.

        Args:
            filepath: Path to configuration file

        Raises:
            ConfigurationError: If file doesn't exist or contains invalid JSON

        Returns:
            ProcessingConfiguration: Configured instance
        """
        filepath_str = str(filepath)
        if not os.path.exists(filepath_str):
            LOGGER.error("%s does not exist.", filepath_str)
            raise ConfigurationError(f"{filepath_str} does not exist.")

        try:
            with open(filepath_str, encoding="utf-8") as json_file:
                config_dict = json.load(json_file)
        except json.JSONDecodeError as error:
            raise ConfigurationError(
                f"{filepath_str} is not a valid configuration file: {error}"
            ) from error

        return cls.from_dict(config_dict)

    @classmethod
    def default(cls) -> "ProcessingConfiguration":
        """Load built-in configuration

        Returns:
            ProcessingConfiguration: default configuration
        """
        return cls.from_file(DEFAULT_CONFIGURATION_PATH)

    def _load_configuration(self, config_dict: dict[str, Any]) -> None:
        """Load configuration from dictionary.

        Args:
            config_dict: Dictionary containing configuration
        """
        try:
            self.search_configuration = SearchConfiguration(
                **config_dict["search_configuration"]
            )
            self.track_configuration = TrackConfiguration(**config_dict["track_configuration"])
        except KeyError as error:
            raise ConfigurationError(f"Missing configuration section {error}") from error
        except TypeError as error:
            raise ConfigurationError(f"Invalid configuration: {error}") from error


DEFAULT_CONFIGURATION_PATH = Path(
    os.path.dirname(os.path.dirname(__file__)), "configuration", "processing_configuration.json"
)
