"""Tests for FacetSearch logger configuration."""

import io
import logging
import sys
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FacetSearch.utils.log import configure_logging, log, log_file_path


class TestConfigureLogging(unittest.TestCase):
    def setUp(self) -> None:
        self._saved = (list(log.handlers), log.level, log.propagate)

    def tearDown(self) -> None:
        for handler in log.handlers:
            if handler not in self._saved[0]:
                handler.close()
        log.handlers[:] = self._saved[0]
        log.setLevel(self._saved[1])
        log.propagate = self._saved[2]

    def test_records_carry_level_and_action(self) -> None:
        stream = io.StringIO()
        configure_logging(level="INFO", action="build", stream=stream)
        log.debug("hidden")
        log.warning("%s is no valid facet. Ignore", "COUNTRY2")
        lines = stream.getvalue().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertTrue(lines[0].endswith("[WARN] build: COUNTRY2 is no valid facet. Ignore"))

    def test_reconfiguring_replaces_own_handlers_only(self) -> None:
        foreign = logging.NullHandler()
        log.addHandler(foreign)
        first, second = io.StringIO(), io.StringIO()
        configure_logging(stream=first)
        configure_logging(stream=second)
        log.info("once")
        self.assertEqual(first.getvalue(), "")
        self.assertEqual(second.getvalue().count("once"), 1)
        self.assertIn(foreign, log.handlers)

    def test_file_receives_debug_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            stream = io.StringIO()
            path = configure_logging(level="ERROR", action="build", log_to_file=True, log_dir=tmp, stream=stream)
            self.assertIsNotNone(path)
            self.assertEqual(path.parent, Path(tmp) / "build")
            log.debug("template details")
            for handler in log.handlers:
                handler.flush()
            self.assertIn("template details", path.read_text(encoding="utf-8"))
            self.assertEqual(stream.getvalue(), "")
            configure_logging(stream=stream)

    def test_no_file_without_action(self) -> None:
        self.assertIsNone(configure_logging(log_to_file=True, stream=io.StringIO()))

    def test_log_file_path(self) -> None:
        path = log_file_path("log", "spellcheck", datetime(2024, 5, 3, 14, 2, 11))
        self.assertEqual(path, Path("log") / "spellcheck" / "spellcheck_0503140211.log")


if __name__ == "__main__":
    unittest.main()
