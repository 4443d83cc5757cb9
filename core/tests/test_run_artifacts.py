"""Tests for run artifact writer."""

import json
import os
import tempfile
import unittest
from pathlib import Path

from core.run_artifacts import build_run_report, write_run_report
from extraction.extractor import ExtractionStats


class TestRunArtifacts(unittest.TestCase):
    def test_write_run_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_run_report(
                report={"status": "success", "value": 1},
                run_id="run-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            self.assertEqual(Path(path).name, "run-123.json")
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["run_id"], "run-123")
            self.assertEqual(payload["status"], "success")
            self.assertEqual(payload["value"], 1)
            self.assertIn("timestamp_utc", payload)

    def test_build_run_report(self) -> None:
        stats = ExtractionStats()
        stats.files_processed = 2
        stats.record_failure("Bad.cs")
        report = build_run_report(stats, "src", None, "partial")
        self.assertEqual(report["status"], "partial")
        self.assertEqual(report["input"], os.path.abspath("src"))
        self.assertEqual(report["output"], "<stdout>")
        self.assertEqual(report["stats"]["files_failed"], 1)
        self.assertEqual(report["stats"]["failed_files"], ["Bad.cs"])

    def test_build_run_report_with_output_file(self) -> None:
        report = build_run_report(ExtractionStats(), "src", "out/model.json", "success")
        self.assertEqual(report["output"], os.path.abspath("out/model.json"))


if __name__ == "__main__":
    unittest.main()
