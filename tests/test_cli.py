"""Tests for the CLI interface."""

from __future__ import annotations

import json
import tempfile
import unittest
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from sinhalize.cli import main
from sinhalize.resources import DEFAULT_DATA_DIR


class TestCLI(unittest.TestCase):
    """Tests for the command line interface."""

    def test_basic_text_input(self) -> None:
        with patch("sys.stdout", new=StringIO()) as fake_stdout:
            result = main(["api bath kanavaa."])
        self.assertEqual(result, 0)
        self.assertEqual(fake_stdout.getvalue(), "අපි බත් කනවා.\n")

    def test_stdin_input(self) -> None:
        with patch("sys.stdin", StringIO("mama school yanavaa\n")):
            with patch("sys.stdout", new=StringIO()) as fake_stdout:
                result = main([])
        self.assertEqual(result, 0)
        # Trailing newline of the input is kept, not doubled.
        self.assertEqual(fake_stdout.getvalue(), "මම school යනවා\n")

    def test_explicit_data_dir(self) -> None:
        with patch("sys.stdout", new=StringIO()) as fake_stdout:
            main(["--data-dir", str(DEFAULT_DATA_DIR), "apibathkanavaa"])
        self.assertEqual(fake_stdout.getvalue(), "අපිබත්කනවා\n")

    def test_report_output(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            report_path = Path(td) / "output_report.json"

            with patch("sys.stdout", new=StringIO()):
                result = main(["--report", str(report_path), "eyaagee bara 55kg ."])
            self.assertEqual(result, 0)
            self.assertTrue(report_path.exists())

            report = json.loads(report_path.read_text(encoding="utf-8"))
            self.assertEqual(report["schema_version"], 1)
            self.assertEqual(report["text"], "eyaagee bara 55kg .")
            self.assertIn("tokens", report)
            self.assertIn("numeral", [sp["rule"] for sp in report["spans"]])

    def test_debug_goes_to_stderr(self) -> None:
        with patch("sys.stdout", new=StringIO()) as fake_stdout:
            with patch("sys.stderr", new=StringIO()) as fake_stderr:
                main(["--debug", "api"])
        self.assertEqual(fake_stdout.getvalue(), "අපි\n")
        self.assertIn("[DEBUG]", fake_stderr.getvalue())

    def test_missing_data_dir(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                main(["--data-dir", str(Path(td) / "nope"), "api"])

    def test_help(self) -> None:
        """Test --help output."""
        with patch("sys.stdout", new=StringIO()):
            with self.assertRaises(SystemExit) as cm:
                main(["--help"])
        # argparse exits with 0 for --help
        self.assertEqual(cm.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
