# Path and File Name : /home/nexpose/setup/nexpose_installer/tests/test_logging_setup.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests installer logging configuration - default level, log file handler and unwritable log paths

"""
Tests for logging configuration.
"""

import io
import logging
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from nexpose_installer.errors import ConfigError
from nexpose_installer.logging_setup import setup_logging


class TestSetupLogging(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp(prefix="nexpose_logging_"))
        root = logging.getLogger()
        self.saved_handlers = root.handlers[:]
        self.saved_level = root.level

        self.stderr = io.StringIO()
        patcher = patch('sys.stderr', self.stderr)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            if handler not in self.saved_handlers:
                handler.close()
        root.handlers = self.saved_handlers
        root.setLevel(self.saved_level)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_default_level_is_warning(self):
        logger = setup_logging()

        self.assertEqual(logger.name, 'nexpose_installer')
        self.assertEqual(logging.getLogger().level, logging.WARNING)
        logging.getLogger('nexpose_installer.test').info("hidden")
        logging.getLogger('nexpose_installer.test').warning("shown")
        output = self.stderr.getvalue()
        self.assertIn(" - WARNING - shown", output)
        self.assertNotIn("hidden", output)

    def test_log_file_receives_records_at_chosen_level(self):
        log_file = self.temp_dir / "logs" / "setup.log"

        setup_logging('INFO', log_file)
        logging.getLogger('nexpose_installer.test').debug("debug record")
        logging.getLogger('nexpose_installer.test').info("info record")

        self.assertTrue(log_file.exists())
        contents = log_file.read_text()
        self.assertIn(" - INFO - info record", contents)
        self.assertNotIn("debug record", contents)
        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        self.assertEqual(len(file_handlers), 1)

    def test_unwritable_log_file(self):
        blocker = self.temp_dir / "not-a-directory"
        blocker.write_text("")

        with self.assertRaises(ConfigError) as context:
            setup_logging('INFO', blocker / "setup.log")

        self.assertIn("Cannot open log file", context.exception.message)

    def test_invalid_level(self):
        with self.assertRaises(ValueError):
            setup_logging('CHATTY')


if __name__ == '__main__':
    unittest.main()
