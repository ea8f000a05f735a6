#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unit tests for the difference scorer."""

import numpy as np
import pytest

from motrack.core.image import RgbImage
from motrack.matcher.scorer import NO_MATCH_SCORE, diff_at_offset
from motrack.matcher.spiral import Offset
from tests.utils.images import gradient_array, noise_array, shift_array, solid_array


class CountingImage:
    """Image wrapper counting sample requests"""

    def __init__(self, image):
        self._image = image
        self.width = image.width
        self.height = image.height
        self.calls = 0

    def sample(self, x, y):
        self.calls += 1
        return self._image.sample(x, y)


def _expected_diff(array_a, array_b, dx, dy):
    """Mean color difference computed with numpy on the overlap"""
    height, width = array_a.shape[:2]
    ys = slice(max(0, -dy), min(height, height - dy))
    xs = slice(max(0, -dx), min(width, width - dx))
    ys_a = slice(ys.start + dy, ys.stop + dy)
    xs_a = slice(xs.start + dx, xs.stop + dx)
    diff = np.abs(array_a[ys_a, xs_a].astype(int) - array_b[ys, xs].astype(int))
    return diff.sum(axis=2).mean() / 765


def test_identical_images_score_zero():
    """Test an image against itself at zero offset."""
    img = RgbImage.from_array(gradient_array())
    assert diff_at_offset(img, img, Offset(0, 0), 1.0) == 0


def test_exact_value_when_under_threshold():
    """Test the exact mean difference is returned when it does not exceed the threshold."""
    array_a = noise_array(12, 9, seed=1)
    array_b = noise_array(12, 9, seed=2)
    img_a = RgbImage.from_array(array_a)
    img_b = RgbImage.from_array(array_b)

    for dx, dy in [(0, 0), (2, -1), (-3, 4), (11, 8)]:
        expected = _expected_diff(array_a, array_b, dx, dy)
        assert diff_at_offset(img_a, img_b, Offset(dx, dy), 1.0) == pytest.approx(expected)


def test_shifted_image_scores_zero_at_shift():
    """Test the true shift scores 0 even though B borders are undefined."""
    array_a = gradient_array()
    img_a = RgbImage.from_array(array_a)
    img_b = RgbImage.from_array(shift_array(array_a, 2, -1))

    assert diff_at_offset(img_a, img_b, Offset(2, -1), 1.0) == 0
    assert diff_at_offset(img_a, img_b, Offset(0, 0), 1.0) > 0


def test_no_overlap_returns_sentinel():
    """Test an offset without overlap scores 1.0."""
    img = RgbImage.from_array(gradient_array())
    assert diff_at_offset(img, img, Offset(6, 0), 1.0) == NO_MATCH_SCORE
    assert diff_at_offset(img, img, Offset(-1, -7), 1.0) == NO_MATCH_SCORE


def test_pruned_offset_returns_sentinel():
    """Test a score above the exclusion threshold is only reported as 1.0."""
    array_a = noise_array(10, 10, seed=3)
    array_b = noise_array(10, 10, seed=4)
    img_a = RgbImage.from_array(array_a)
    img_b = RgbImage.from_array(array_b)

    true_score = _expected_diff(array_a, array_b, 1, 1)
    assert 0 < true_score < 1

    assert diff_at_offset(img_a, img_b, Offset(1, 1), true_score / 2) == NO_MATCH_SCORE
    assert diff_at_offset(img_a, img_b, Offset(1, 1), true_score + 1e-6) == pytest.approx(
        true_score
    )


def test_result_above_threshold_is_always_sentinel():
    """Test no intermediate value between the threshold and 1.0 is returned."""
    array_a = noise_array(8, 8, seed=5)
    img_a = RgbImage.from_array(array_a)
    img_b = RgbImage.from_array(shift_array(array_a, 1, 0))

    for threshold in [0.0, 0.05, 0.1, 0.2, 0.3, 0.5]:
        for dx in range(-3, 4):
            for dy in range(-3, 4):
                score = diff_at_offset(img_a, img_b, Offset(dx, dy), threshold)
                assert score <= threshold or score == NO_MATCH_SCORE


def test_early_exit_stops_sampling():
    """Test scoring stops at the first sample exceeding the threshold."""
    img_a = CountingImage(RgbImage.from_array(solid_array(10, 10, (0, 0, 0))))
    img_b = CountingImage(RgbImage.from_array(solid_array(10, 10, (255, 255, 255))))

    assert diff_at_offset(img_a, img_b, Offset(0, 0), 0.0) == NO_MATCH_SCORE
    assert img_a.calls == 1
    assert img_b.calls == 1


def test_full_scan_without_pruning():
    """Test every overlap pixel is read when the threshold is never exceeded."""
    img = RgbImage.from_array(gradient_array())
    img_a = CountingImage(img)
    img_b = CountingImage(img)

    diff_at_offset(img_a, img_b, Offset(1, -2), 1.0)
    assert img_a.calls == 5 * 4
    assert img_b.calls == 5 * 4


def test_black_and_white_is_maximal():
    """Test opposite solid images score 1.0 even without pruning."""
    img_a = RgbImage.from_array(solid_array(4, 4, (0, 0, 0)))
    img_b = RgbImage.from_array(solid_array(4, 4, (255, 255, 255)))
    assert diff_at_offset(img_a, img_b, Offset(0, 0), 1.0) == 1.0
