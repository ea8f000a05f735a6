# -*- coding: utf-8 -*-
"""End 2 end test module"""
import logging
import shutil
import tempfile
import unittest
from pathlib import Path

import imageio.v2 as imageio
import pandas as pd
from click.testing import CliRunner

from motrack.cli.commands import cli, offset, track
from tests.utils.images import gradient_array, noise_array, shift_array


class E2ETest(unittest.TestCase):
    def setUp(self):
        self.work_dir = Path(tempfile.mkdtemp())
        self.result_dir = self.work_dir / "test_results"

        self.gradient_a = self.work_dir / "gradient_a.png"
        self.gradient_b = self.work_dir / "gradient_b.png"
        array = gradient_array()
        imageio.imwrite(self.gradient_a, array)
        imageio.imwrite(self.gradient_b, shift_array(array, 2, -1))

        self.frames = []
        frame = noise_array(16, 12, seed=21)
        for index, (dx, dy) in enumerate([(0, 0), (1, 1), (-2, 0)]):
            frame = shift_array(frame, dx, dy)
            path = self.work_dir / f"frame_{index}.png"
            imageio.imwrite(path, frame)
            self.frames.append(path)

        root_logger = logging.getLogger()
        self._handlers = list(root_logger.handlers)
        self._level = root_logger.level

    def tearDown(self):
        # CLI replaces root handlers with handlers bound to the runner streams
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in self._handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(self._level)

        shutil.rmtree(self.work_dir, ignore_errors=True)

    def test_offset(self):
        """Test offset between two images"""
        runner = CliRunner()
        result = runner.invoke(
            offset,
            [
                str(self.gradient_a),
                str(self.gradient_b),
                "--x-gate",
                "3",
                "--y-gate",
                "3",
                "--no-log-file",
            ],
        )

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("dx: 2.0", result.output)
        self.assertIn("dy: -1.0", result.output)
        self.assertIn("score: 0.000000", result.output)

    def test_offset_unbounded(self):
        """Test offset with default gates and a single worker"""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["offset", str(self.gradient_a), str(self.gradient_b), "-w", "1", "--no-log-file"],
        )

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("dx: 2.0", result.output)
        self.assertIn("dy: -1.0", result.output)

    def test_offset_log_file(self):
        """Test log file is written"""
        log_file = self.work_dir / "motrack.log"
        runner = CliRunner()
        result = runner.invoke(
            offset,
            [str(self.gradient_a), str(self.gradient_a), "--log-file-path", str(log_file)],
        )

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("dx: 0.0", result.output)
        for handler in logging.getLogger().handlers:
            handler.flush()
        self.assertIn("Start MOTRACK", log_file.read_text(encoding="utf-8"))

    def test_offset_geometry_mismatch(self):
        """Test images of different sizes make the command fail"""
        other = self.work_dir / "other.png"
        imageio.imwrite(other, gradient_array(5, 6))

        runner = CliRunner()
        result = runner.invoke(offset, [str(self.gradient_a), str(other), "--no-log-file"])

        self.assertEqual(1, result.exit_code)
        self.assertIn("not compatible", result.output)

    def test_offset_missing_file(self):
        """Test missing input is rejected by the command line parser"""
        runner = CliRunner()
        result = runner.invoke(
            offset, [str(self.gradient_a), str(self.work_dir / "missing.png"), "--no-log-file"]
        )

        self.assertEqual(2, result.exit_code)

    def test_track(self):
        """Test tracking a sequence"""
        runner = CliRunner()
        result = runner.invoke(
            track,
            [str(path) for path in self.frames]
            + ["--out", str(self.result_dir), "--x-gate", "3", "--y-gate", "3", "--no-log-file"],
        )

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("Tracked 3 images", result.output)

        csv_file = self.result_dir / "track_frame_0_frame_2.csv"
        self.assertTrue(csv_file.exists())
        points = pd.read_csv(csv_file, sep=";")
        self.assertEqual([1, -2], list(points["dx"]))
        self.assertEqual([1, 0], list(points["dy"]))
        self.assertEqual([1, -1], list(points["cumulative_dx"]))
        self.assertEqual([1, 1], list(points["cumulative_dy"]))

    def test_track_single_image(self):
        """Test tracking needs two images"""
        runner = CliRunner()
        result = runner.invoke(track, [str(self.frames[0]), "--no-log-file"])

        self.assertEqual(1, result.exit_code)
