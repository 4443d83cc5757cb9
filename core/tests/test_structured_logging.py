"""Tests for structured logging context helpers."""

import contextvars
import logging
import unittest

from core.structured_logging import (
    _RunContextFilter,
    configure_structured_logging,
    file_scope,
    get_phase,
    get_run_id,
    get_source_file,
    phase_scope,
    set_run_id,
)


class TestStructuredLogging(unittest.TestCase):
    def test_set_run_id_generates_value(self) -> None:
        ctx = contextvars.copy_context()
        run_id = ctx.run(set_run_id)
        self.assertTrue(run_id)
        self.assertEqual(ctx.run(get_run_id), run_id)

    def test_set_run_id_explicit(self) -> None:
        ctx = contextvars.copy_context()
        self.assertEqual(ctx.run(set_run_id, "run-1"), "run-1")

    def test_phase_scope_resets(self) -> None:
        before = get_phase()
        with phase_scope("extract"):
            self.assertEqual(get_phase(), "extract")
            with phase_scope("serialize"):
                self.assertEqual(get_phase(), "serialize")
            self.assertEqual(get_phase(), "extract")
        self.assertEqual(get_phase(), before)

    def test_file_scope_resets(self) -> None:
        with file_scope("Repo.cs"):
            self.assertEqual(get_source_file(), "Repo.cs")
        self.assertEqual(get_source_file(), "-")

    def test_filter_injects_fields(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        with phase_scope("extract"), file_scope("Repo.cs"):
            self.assertTrue(_RunContextFilter().filter(record))
        self.assertEqual(record.phase, "extract")
        self.assertEqual(record.source_file, "Repo.cs")

    def test_configure_installs_filter(self) -> None:
        root = logging.getLogger()
        handler = logging.StreamHandler()
        root.addHandler(handler)
        old_level = root.level
        try:
            configure_structured_logging("debug")
            self.assertEqual(root.level, logging.DEBUG)
            self.assertTrue(any(isinstance(f, _RunContextFilter) for f in handler.filters))
        finally:
            root.removeHandler(handler)
            root.setLevel(old_level)


if __name__ == "__main__":
    unittest.main()
