#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unit tests for error handling."""

import logging

import numpy as np
import pytest

from motrack.core.errors import (
    ConfigurationError,
    InvalidGeometryError,
    InvalidOffsetError,
    MotrackException,
)
from motrack.core.image import RgbImage
from motrack.log import configure_logging
from motrack.matcher.search import MotionSearchCoordinator


@pytest.mark.parametrize("error_class", [ConfigurationError, InvalidGeometryError, InvalidOffsetError])
def test_errors_are_motrack_exceptions(error_class):
    """Test every MOTRACK error can be caught with the base class."""
    try:
        raise error_class("Test error")
    except MotrackException as e:
        assert str(e) == "Test error"


def test_invalid_offset_is_index_error():
    """Test InvalidOffsetError can be handled as a plain IndexError."""
    assert issubclass(InvalidOffsetError, IndexError)
    assert not issubclass(InvalidGeometryError, IndexError)


def test_geometry_error_message():
    """Test geometry error gives both image sizes."""
    img_a = RgbImage.from_array(np.zeros((4, 6, 3), dtype=np.uint8))
    img_b = RgbImage.from_array(np.zeros((6, 4, 3), dtype=np.uint8))

    with pytest.raises(InvalidGeometryError, match="6x4 and 4x6"):
        MotionSearchCoordinator(1).search(img_a, img_b, 1, 1)


def test_offset_error_message():
    """Test offset error gives the requested position and the image size."""
    img = RgbImage.from_array(np.zeros((4, 6, 3), dtype=np.uint8))

    with pytest.raises(InvalidOffsetError, match=r"\(6, 0\) outside of image of size 6x4"):
        img.sample(6, 0)


def test_configure_logging_file(tmp_path):
    """Test logging configuration writes in the log file."""
    log_file = tmp_path / "motrack.log"
    root_logger = logging.getLogger()
    previous_handlers = list(root_logger.handlers)
    previous_level = root_logger.level

    try:
        configure_logging(debug=True, log_file=True, log_file_path=str(log_file))
        assert root_logger.level == logging.DEBUG

        logging.getLogger("motrack.test").debug("debug message %s", 42)
        for handler in root_logger.handlers:
            handler.flush()

        assert "debug message 42" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in previous_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(previous_level)


def test_configure_logging_without_file(tmp_path):
    """Test no file is created when file logging is disabled."""
    log_file = tmp_path / "motrack.log"
    root_logger = logging.getLogger()
    previous_handlers = list(root_logger.handlers)
    previous_level = root_logger.level

    try:
        configure_logging(debug=False, log_file=False, log_file_path=str(log_file))
        assert root_logger.level == logging.INFO
        assert not any(isinstance(handler, logging.FileHandler) for handler in root_logger.handlers)
        assert not log_file.exists()
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in previous_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(previous_level)
