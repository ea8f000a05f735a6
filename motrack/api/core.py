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
"""MOTRACK API core module.

Provides the main entry point for the MOTRACK API functionality.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from motrack.api.config import RuntimeConfiguration
from motrack.core.configuration import ProcessingConfiguration
from motrack.core.errors import InvalidGeometryError
from motrack.core.image import RgbImage
from motrack.core.utils import get_filename
from motrack.matcher.search import MotionSearchCoordinator, SearchResult

logger = logging.getLogger(__name__)

TRACK_COLUMNS = ["image_a", "image_b", "dx", "dy", "score", "cumulative_dx", "cumulative_dy"]


@dataclass
class TrackResult:
    """Result of image sequence tracking."""

    points: pd.DataFrame
    """one row per consecutive images pair, see `TRACK_COLUMNS`"""
    csv_file: Optional[Path] = None
    """written CSV file, if any"""


class MotrackAPI:
    """Main API class for MOTRACK functionality.

    The search configuration and runtime options are given once, then any number of
    image pairs or sequences can be processed.

    Example:
        >>> config = RuntimeConfiguration(output_directory=Path("results"), x_gate=52, y_gate=52)
        >>> api = MotrackAPI(ProcessingConfiguration.default(), config)
        >>> dx, dy = api.translation_from_paths("frame_1.png", "frame_2.png")
        >>> track = api.track(["frame_1.png", "frame_2.png", "frame_3.png"])
    """

    def __init__(
        self,
        processing_configuration: Optional[ProcessingConfiguration] = None,
        runtime_configuration: Optional[RuntimeConfiguration] = None,
    ):
        """Initialize the MOTRACK API.

        Args:
            processing_configuration: Search and tracking parameters.
                Defaults to the built-in configuration.
            runtime_configuration: Gates and output settings.
                Defaults to unbounded gates and no CSV output.
        """
        self._processing_configuration = (
            processing_configuration or ProcessingConfiguration.default()
        )
        self._runtime_configuration = runtime_configuration or RuntimeConfiguration(
            output_directory=Path(os.getcwd()), write_csv=False
        )

        search_conf = self._processing_configuration.search_configuration
        workers = self._runtime_configuration.workers or search_conf.worker_count
        self._coordinator = MotionSearchCoordinator(workers, search_conf.stop_on_exact_match)

    def load_images(
        self, path_a: str | os.PathLike, path_b: str | os.PathLike
    ) -> tuple[RgbImage, RgbImage]:
        """Read both images and check they have the same size.

        Args:
            path_a: File path to the shifted image
            path_b: File path to the image of reference

        Raises:
            InvalidGeometryError: If images sizes differ

        Returns:
            Tuple containing both images
        """
        img_a = RgbImage.from_path(path_a)
        img_b = RgbImage.from_path(path_b)
        self._check_compatibility(img_a, img_b)
        return img_a, img_b

    def search(
        self,
        img_a: RgbImage,
        img_b: RgbImage,
        x_gate: Optional[float] = None,
        y_gate: Optional[float] = None,
    ) -> SearchResult:
        """Search the translation between two loaded images.

        Args:
            img_a: shifted image
            img_b: image of reference
            x_gate: Maximum X offset, 0 for `width - 1`. Defaults to runtime configuration.
            y_gate: Maximum Y offset, 0 for `height - 1`. Defaults to runtime configuration.

        Returns:
            SearchResult: best offset and its score
        """
        self._check_compatibility(img_a, img_b)
        x_gate, y_gate = self._resolve_gates(img_a, img_b, x_gate, y_gate)
        img_a.load_samples()
        img_b.load_samples()
        return self._coordinator.search(img_a, img_b, x_gate, y_gate)

    def translation_from_paths(
        self,
        path_a: str | os.PathLike,
        path_b: str | os.PathLike,
        x_gate: Optional[float] = None,
        y_gate: Optional[float] = None,
    ) -> tuple[float, float]:
        """Apparent translation between two image files.

        The images are expected to show the same content up to a translation,
        otherwise the result is meaningless. Small gates avoid such nonsense results
        and dramatically speed up the search.

        Args:
            path_a: File path to the shifted image
            path_b: File path to the image of reference
            x_gate: Maximum X offset, 0 for `width - 1`. Defaults to runtime configuration.
            y_gate: Maximum Y offset, 0 for `height - 1`. Defaults to runtime configuration.

        Returns:
            tuple[float, float]: (dx, dy) such that pixel (x, y) of B matches pixel
            (x + dx, y + dy) of A
        """
        logger.info("Process %s and %s", path_a, path_b)
        img_a, img_b = self.load_images(path_a, path_b)
        result = self.search(img_a, img_b, x_gate, y_gate)
        return float(result.offset.dx), float(result.offset.dy)

    def track(
        self,
        image_paths: Sequence[str | os.PathLike],
        x_gate: Optional[float] = None,
        y_gate: Optional[float] = None,
    ) -> TrackResult:
        """Compute the translation between each consecutive images of a sequence.

        Args:
            image_paths: ordered image file paths, at least two
            x_gate: Maximum X offset, 0 for `width - 1`. Defaults to runtime configuration.
            y_gate: Maximum Y offset, 0 for `height - 1`. Defaults to runtime configuration.

        Raises:
            ValueError: If less than two images are given
            InvalidGeometryError: If an image size differs from the previous one

        Returns:
            TrackResult: per pair offsets, and CSV path if written
        """
        if len(image_paths) < 2:
            raise ValueError(f"Tracking needs at least two images, got {len(image_paths)}")

        logger.info("Track %s images", len(image_paths))

        rows = []
        previous_path = image_paths[0]
        previous = RgbImage.from_path(previous_path)
        for path in image_paths[1:]:
            current = RgbImage.from_path(path)
            result = self.search(previous, current, x_gate, y_gate)
            rows.append(
                {
                    "image_a": get_filename(previous_path),
                    "image_b": get_filename(path),
                    "dx": result.offset.dx,
                    "dy": result.offset.dy,
                    "score": result.score,
                }
            )
            # cached samples are not needed anymore
            previous.clear_cache()
            previous_path, previous = path, current

        points = pd.DataFrame(rows)
        points["cumulative_dx"] = points["dx"].cumsum()
        points["cumulative_dy"] = points["dy"].cumsum()
        points = points[TRACK_COLUMNS]

        csv_file = None
        if self._runtime_configuration.write_csv:
            csv_file = self._write_csv(points, image_paths[0], image_paths[-1])

        return TrackResult(points=points, csv_file=csv_file)

    def _check_compatibility(self, img_a: RgbImage, img_b: RgbImage):
        if not img_a.is_compatible_with(img_b):
            raise InvalidGeometryError(
                f"""Images sizes are not compatible:
            * Image A : {img_a.image_information}
            * Image B : {img_b.image_information}
            """
            )

    def _resolve_gates(
        self,
        img_a: RgbImage,
        img_b: RgbImage,
        x_gate: Optional[float],
        y_gate: Optional[float],
    ) -> tuple[float, float]:
        """Apply runtime configuration defaults, and replace 0 gates by image size minus one"""
        if x_gate is None:
            x_gate = self._runtime_configuration.x_gate
        if y_gate is None:
            y_gate = self._runtime_configuration.y_gate

        # 0 means (nearly) unlimited on this axis
        if x_gate == 0:
            x_gate = img_a.width - 1
        if y_gate == 0:
            y_gate = img_b.height - 1

        return x_gate, y_gate

    def _check_output_dir(self):
        output_dir_path = Path(self._runtime_configuration.output_directory)
        if not output_dir_path.exists():
            output_dir_path.mkdir(parents=True)

    def _write_csv(
        self, points: pd.DataFrame, first_path: str | os.PathLike, last_path: str | os.PathLike
    ) -> Path:
        self._check_output_dir()
        csv_file = (
            Path(self._runtime_configuration.output_directory)
            / f"track_{get_filename(first_path)}_{get_filename(last_path)}.csv"
        )
        if csv_file.exists():
            logger.warning("CSV file exists, will overwrite it: %s", str(csv_file))

        logger.info("Write to csv %s", str(csv_file))
        separator = self._processing_configuration.track_configuration.csv_separator
        points.to_csv(csv_file, sep=separator, index=False)
        return csv_file


def translation_from_paths(
    path_a: str | os.PathLike,
    path_b: str | os.PathLike,
    x_gate: float = 0.0,
    y_gate: float = 0.0,
) -> tuple[float, float]:
    """Apparent translation between two image files, with the built-in configuration.

    Args:
        path_a: File path to the shifted image
        path_b: File path to the image of reference
        x_gate: Maximum X offset. Defaults to 0, meaning image width minus one.
        y_gate: Maximum Y offset. Defaults to 0, meaning image height minus one.

    Returns:
        tuple[float, float]: (dx, dy)
    """
    return MotrackAPI().translation_from_paths(path_a, path_b, x_gate, y_gate)
