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
"""MOTRACK command line interface module.

Provides command line interface for MOTRACK functionality.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import rich_click as click

from motrack.api import MotrackAPI, RuntimeConfiguration
from motrack.core.configuration import DEFAULT_CONFIGURATION_PATH, ProcessingConfiguration
from motrack.log import configure_logging
from motrack.version import __version__

logger = logging.getLogger(__name__)

click.rich_click.SHOW_ARGUMENTS = True

_LOGGING_OPTIONS = {
    "name": "Logging Options",
    "options": ["--debug", "--no-log-file", "--log-file-path"],
}

# Configure option groups
click.rich_click.OPTION_GROUPS = {
    "motrack offset": [
        {
            "name": "Search Options",
            "options": ["--x-gate", "--y-gate", "--conf", "--workers"],
        },
        _LOGGING_OPTIONS,
    ],
    "motrack track": [
        {
            "name": "Search Options",
            "options": ["--x-gate", "--y-gate", "--conf", "--workers"],
        },
        {
            "name": "Output Options",
            "options": ["--out"],
        },
        _LOGGING_OPTIONS,
    ],
}


def search_options(function):
    """Options shared by commands searching translations"""
    options = [
        click.option(
            "--x-gate",
            "-xg",
            type=click.FloatRange(min=0),
            default=0.0,
            help="Maximum X offset to search, 0 for image width minus one",
            show_default=True,
        ),
        click.option(
            "--y-gate",
            "-yg",
            type=click.FloatRange(min=0),
            default=0.0,
            help="Maximum Y offset to search, 0 for image height minus one",
            show_default=True,
        ),
        click.option(
            "--conf",
            type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
            default=DEFAULT_CONFIGURATION_PATH,
            help="Configuration file path. Default is the built-in configuration.",
            show_default=True,
        ),
        click.option(
            "--workers",
            "-w",
            type=click.IntRange(min=1),
            default=None,
            help="Number of search threads. Overrides configuration.",
        ),
        click.option("--debug", "-d", is_flag=True, help="Enable Debug mode"),
        click.option("--no-log-file", is_flag=True, help="Do not log in file"),
        click.option(
            "--log-file-path",
            type=click.Path(),
            default="motrack.log",
            help="Log file path",
            show_default=True,
        ),
    ]
    for option in reversed(options):
        function = option(function)
    return function


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """MOTRACK - apparent MOtion TRACKing between images.

    Finds the integer translation that best aligns images showing the same content.
    """


@cli.command(short_help="Computes the apparent translation between two images")
@click.argument(
    "image_a", type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path)
)
@click.argument(
    "image_b", type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path)
)
@search_options
def offset(
    image_a: Path,
    image_b: Path,
    x_gate: float,
    y_gate: float,
    conf: Path,
    workers: Optional[int],
    debug: bool,
    no_log_file: bool,
    log_file_path: str,
) -> None:
    """\b
    Computes the apparent translation (dx, dy) between two images of the same size, where:
    - IMAGE_A  Path to the shifted image
    - IMAGE_B  Path to the image of reference

    Pixel (x, y) of IMAGE_B matches pixel (x + dx, y + dy) of IMAGE_A.

    \b

    Examples:

        \b
        # Unbounded search

        motrack offset frame_1.png frame_2.png

        \b
        # Search offsets up to 52 pixels

        motrack offset frame_1.png frame_2.png --x-gate 52 --y-gate 52
    """
    configure_logging(debug, not no_log_file, log_file_path)

    logger.info("Start MOTRACK %s", __version__)

    try:
        logger.info("Load config from file %s", conf)
        processing_configuration = ProcessingConfiguration.from_file(conf)
        runtime_configuration = RuntimeConfiguration(
            output_directory=Path.cwd(),
            x_gate=x_gate,
            y_gate=y_gate,
            write_csv=False,
            workers=workers,
        )

        api = MotrackAPI(processing_configuration, runtime_configuration)
        img_a, img_b = api.load_images(image_a, image_b)
        result = api.search(img_a, img_b)

        logger.info("Processing completed successfully")

        click.echo(f"dx: {float(result.offset.dx)}")
        click.echo(f"dy: {float(result.offset.dy)}")
        click.echo(f"score: {result.score:.6f}")

    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Error during processing: %s", str(e), exc_info=debug)
        sys.exit(1)


@cli.command(short_help="Computes the translations along a sequence of images")
@click.argument(
    "images",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--out",
    type=click.Path(path_type=Path),
    default="results",
    help="Output results folder path",
    show_default=True,
)
@search_options
def track(
    images: tuple[Path, ...],
    out: Path,
    x_gate: float,
    y_gate: float,
    conf: Path,
    workers: Optional[int],
    debug: bool,
    no_log_file: bool,
    log_file_path: str,
) -> None:
    """\b
    Computes the apparent translation between each consecutive images of a sequence
    and writes them, with their cumulative sum, in a CSV file, where:
    - IMAGES  Ordered paths of the images, at least two

    \b

    Examples:

        \b
        motrack track frame_*.png --x-gate 20 --y-gate 20 --out results
    """
    configure_logging(debug, not no_log_file, log_file_path)

    logger.info("Start MOTRACK %s", __version__)

    try:
        if len(images) < 2:
            raise click.UsageError("At least two images are required")

        logger.info("Load config from file %s", conf)
        processing_configuration = ProcessingConfiguration.from_file(conf)
        runtime_configuration = RuntimeConfiguration(
            output_directory=out,
            x_gate=x_gate,
            y_gate=y_gate,
            write_csv=True,
            workers=workers,
        )

        api = MotrackAPI(processing_configuration, runtime_configuration)
        result = api.track(list(images))

        logger.info("Processing completed successfully")
        logger.info("Results written to %s", result.csv_file)

        _print_summary(result)

    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Error during processing: %s", str(e), exc_info=debug)
        sys.exit(1)


def _print_summary(result) -> None:
    """Print summary of tracking results.

    Args:
        result: Track result object
    """
    points = result.points
    click.echo("\nMOTRACK Tracking Summary")
    click.echo("========================")

    click.echo(f"\nTracked {len(points) + 1} images")
    for row in points.itertuples(index=False):
        click.echo(
            f"  {row.image_a} -> {row.image_b}: dx={row.dx} dy={row.dy} score={row.score:.6f}"
        )

    last = points.iloc[-1]
    click.echo(f"\nCumulative offset: dx={last['cumulative_dx']} dy={last['cumulative_dy']}")
    click.echo(f"CSV: {result.csv_file}")


if __name__ == "__main__":
    sys.exit(cli())
