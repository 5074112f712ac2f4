# Path and File Name : /home/nexpose/setup/nexpose_installer/tests/test_os_check.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests host OS detection from os-release descriptors

"""
Tests for OS detection.
"""

import shutil
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from nexpose_installer.errors import EnvironmentCheckError
from nexpose_installer.system.os_check import OSCheck, parse_os_release

UBUNTU_OS_RELEASE = """PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
VERSION="22.04.4 LTS (Jammy Jellyfish)"
VERSION_CODENAME=jammy
ID=ubuntu
ID_LIKE=debian
"""

AMAZON_OS_RELEASE = """NAME="Amazon Linux"
VERSION="2023"
ID="amzn"
ID_LIKE="fedora"
VERSION_ID="2023"
"""


class TestParseOsRelease(unittest.TestCase):
    """Test descriptor parsing."""

    def test_strips_quotes_and_skips_comments(self):
        values = parse_os_release('# comment\n\nNAME="Rocky Linux"\nVERSION_ID=\'9.3\'\nID=rocky\n')
        self.assertEqual(values['NAME'], 'Rocky Linux')
        self.assertEqual(values['VERSION_ID'], '9.3')
        self.assertEqual(values['ID'], 'rocky')

    def test_value_containing_equals(self):
        values = parse_os_release('HOME_URL="https://example.test/?a=b"\n')
        self.assertEqual(values['HOME_URL'], 'https://example.test/?a=b')


class TestOSCheck(unittest.TestCase):
    """Test OSCheck.detect()."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp(prefix="nexpose_os_check_"))
        self.os_release = self.temp_dir / "os-release"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_detects_ubuntu(self):
        self.os_release.write_text(UBUNTU_OS_RELEASE)
        profile = OSCheck(self.os_release).detect()
        self.assertEqual(profile.name, 'Ubuntu')
        self.assertEqual(profile.version_id, '22.04')
        self.assertEqual(profile.os_id, 'ubuntu')
        self.assertEqual(profile.version_codename, 'jammy')
        self.assertEqual(profile.describe(), 'Ubuntu 22.04')

    def test_detects_amazon_linux(self):
        self.os_release.write_text(AMAZON_OS_RELEASE)
        profile = OSCheck(self.os_release).detect()
        self.assertEqual(profile.name, 'Amazon Linux')
        self.assertEqual(profile.version_id, '2023')
        self.assertEqual(profile.version_codename, '')

    def test_missing_descriptor_fails_fast(self):
        with self.assertRaises(EnvironmentCheckError) as context:
            OSCheck(self.temp_dir / "does-not-exist").detect()
        self.assertIn("Cannot determine OS", context.exception.message)
        self.assertTrue(any("does-not-exist" in line for line in context.exception.details))

    def test_descriptor_without_name_fails(self):
        self.os_release.write_text('VERSION_ID="1"\n')
        with self.assertRaises(EnvironmentCheckError):
            OSCheck(self.os_release).detect()


if __name__ == '__main__':
    unittest.main()
