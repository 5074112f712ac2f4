# Path and File Name : /home/nexpose/setup/nexpose_installer/tests/test_command_runner.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests external command execution - sudo prefixing, redaction and failure mapping

"""
Tests for CommandRunner.
"""

import os
import subprocess
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from nexpose_installer.system.command_runner import (
    CommandResult,
    CommandRunner,
    in_effective_group,
    invoking_user,
    redact_argv,
)


class TestRedaction(unittest.TestCase):

    def test_secret_values_masked(self):
        rendered = redact_argv(['nsc.sh', '-a', 'SECRET', '-n', 'engine'], ['SECRET'])
        self.assertEqual(rendered, 'nsc.sh -a **** -n engine')

    def test_empty_secret_masks_nothing(self):
        self.assertEqual(redact_argv(['docker', ''], ['']), 'docker ')


class TestPrivileged(unittest.TestCase):

    def test_sudo_prefix_when_not_root(self):
        self.assertEqual(CommandRunner(use_sudo=True).privileged(['systemctl', 'start', 'docker']),
                         ['sudo', 'systemctl', 'start', 'docker'])

    def test_no_prefix_as_root(self):
        self.assertEqual(CommandRunner(use_sudo=False).privileged(['systemctl', 'start', 'docker']),
                         ['systemctl', 'start', 'docker'])

    @patch('nexpose_installer.system.command_runner.os.geteuid', return_value=0)
    def test_root_detected(self, mock_geteuid):
        self.assertFalse(CommandRunner().use_sudo)

    @patch('nexpose_installer.system.command_runner.os.geteuid', return_value=1000)
    def test_non_root_detected(self, mock_geteuid):
        self.assertTrue(CommandRunner().use_sudo)


class TestDockerCommand(unittest.TestCase):
    """docker goes through sudo until the docker group is effective for this process."""

    @patch('nexpose_installer.system.command_runner.in_effective_group', return_value=False)
    def test_sudo_without_effective_group(self, mock_group):
        runner = CommandRunner(use_sudo=True)
        self.assertEqual(runner.docker_command(['docker', 'ps']), ['sudo', 'docker', 'ps'])
        mock_group.assert_called_once_with('docker')

    @patch('nexpose_installer.system.command_runner.in_effective_group', return_value=True)
    def test_no_sudo_with_effective_group(self, mock_group):
        self.assertEqual(CommandRunner(use_sudo=True).docker_command(['docker', 'ps']), ['docker', 'ps'])

    @patch('nexpose_installer.system.command_runner.in_effective_group', return_value=False)
    def test_no_sudo_as_root(self, mock_group):
        self.assertEqual(CommandRunner(use_sudo=False).docker_command(['docker', 'ps']), ['docker', 'ps'])

    @patch('nexpose_installer.system.command_runner.os.getgroups', return_value=[4, 27])
    @patch('nexpose_installer.system.command_runner.os.getegid', return_value=1000)
    @patch('nexpose_installer.system.command_runner.grp.getgrnam')
    def test_group_membership_from_process_groups(self, mock_getgrnam, mock_getegid, mock_getgroups):
        mock_getgrnam.return_value = MagicMock(gr_gid=999)
        self.assertFalse(in_effective_group('docker'))

        mock_getgrnam.return_value = MagicMock(gr_gid=27)
        self.assertTrue(in_effective_group('docker'))

    @patch('nexpose_installer.system.command_runner.grp.getgrnam', side_effect=KeyError('docker'))
    def test_missing_group(self, mock_getgrnam):
        self.assertFalse(in_effective_group('docker'))


class TestInvokingUser(unittest.TestCase):

    def test_sudo_caller_preferred(self):
        with patch.dict('os.environ', {'SUDO_USER': 'operator', 'USER': 'root'}):
            self.assertEqual(invoking_user(), 'operator')

    def test_user_without_sudo(self):
        with patch.dict('os.environ', {'USER': 'operator'}):
            os.environ.pop('SUDO_USER', None)
            self.assertEqual(invoking_user(), 'operator')


class TestRun(unittest.TestCase):

    @patch('nexpose_installer.system.command_runner.subprocess.run')
    def test_captured_output(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout='engine-a\n\nengine-b\n', stderr='')

        result = CommandRunner(use_sudo=False).run(['docker', 'ps', '--format', '{{.Names}}'])

        self.assertTrue(result.ok)
        self.assertEqual(result.lines(), ['engine-a', 'engine-b'])
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ['docker', 'ps', '--format', '{{.Names}}'])
        self.assertFalse(kwargs['check'])
        self.assertEqual(kwargs['stdout'], subprocess.PIPE)

    @patch('nexpose_installer.system.command_runner.subprocess.run')
    def test_streamed_output(self, mock_run):
        mock_run.return_value = MagicMock(returncode=3, stdout=None, stderr=None)

        result = CommandRunner(use_sudo=False).run(['docker', 'pull', 'image'], capture=False)

        self.assertFalse(result.ok)
        self.assertEqual(result.returncode, 3)
        self.assertEqual(result.stdout, '')
        self.assertIsNone(mock_run.call_args[1]['stdout'])

    @patch('nexpose_installer.system.command_runner.subprocess.run')
    def test_stdin_text(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout='', stderr='')
        CommandRunner(use_sudo=False).run(['tee', '/tmp/x'], input_text='line\n')
        self.assertEqual(mock_run.call_args[1]['input'], 'line\n')

    @patch('nexpose_installer.system.command_runner.subprocess.run', side_effect=FileNotFoundError)
    def test_missing_executable(self, mock_run):
        result = CommandRunner(use_sudo=False).run(['docker', '--version'])
        self.assertEqual(result.returncode, 127)
        self.assertIn('command not found', result.stderr)

    @patch('nexpose_installer.system.command_runner.subprocess.run',
           side_effect=subprocess.TimeoutExpired(cmd='docker', timeout=1))
    def test_timeout(self, mock_run):
        with self.assertLogs('nexpose_installer.system.command_runner', level='WARNING'):
            result = CommandRunner(use_sudo=False).run(['docker', 'info'], timeout=1)
        self.assertEqual(result.returncode, 124)


class TestCommandResult(unittest.TestCase):

    def test_lines_skip_blank(self):
        result = CommandResult(argv=['id'], returncode=0, stdout='  a b \n\n')
        self.assertEqual(result.lines(), ['a b'])


if __name__ == '__main__':
    unittest.main()
