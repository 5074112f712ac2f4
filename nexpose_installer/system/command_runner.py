# Path and File Name : /home/nexpose/setup/nexpose_installer/system/command_runner.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Single seam for running external commands (package manager, systemctl, docker) with sudo handling and secret redaction

"""
Command Runner: every external command the installer issues goes through here.

- Blocking, synchronous subprocess.run calls (no shell)
- Privileged commands are prefixed with sudo unless already root
- docker commands also go through sudo until the docker group is effective
- Secrets passed via `redact` never reach the log
"""

import getpass
import grp
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

REDACTED = '****'


@dataclass
class CommandResult:
    """Outcome of one external command."""
    argv: List[str]
    returncode: int
    stdout: str = ''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def lines(self) -> List[str]:
        """Non-empty stdout lines, stripped."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def invoking_user() -> str:
    """User who should own data and join the docker group (the sudo caller, not root)."""
    return os.environ.get('SUDO_USER') or os.environ.get('USER') or getpass.getuser()


def in_effective_group(name: str) -> bool:
    """True if this process already holds group `name` (new memberships need a new session)."""
    try:
        gid = grp.getgrnam(name).gr_gid
    except KeyError:
        return False
    return gid == os.getegid() or gid in os.getgroups()


def redact_argv(argv: Sequence[str], secrets: Iterable[str] = ()) -> str:
    """Render argv for logging with secret values masked."""
    hidden = {s for s in secrets if s}
    return ' '.join(REDACTED if arg in hidden else arg for arg in argv)


class CommandRunner:
    """Runs external commands."""

    def __init__(self, use_sudo: Optional[bool] = None, docker_sudo: Optional[bool] = None):
        if use_sudo is None:
            use_sudo = os.geteuid() != 0
        if docker_sudo is None:
            docker_sudo = use_sudo and not in_effective_group('docker')
        self.use_sudo = use_sudo
        self.docker_sudo = docker_sudo

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program)

    def privileged(self, argv: Sequence[str]) -> List[str]:
        """Prefix argv with sudo when the installer is not running as root."""
        argv = list(argv)
        if self.use_sudo:
            return ['sudo'] + argv
        return argv

    def docker_command(self, argv: Sequence[str]) -> List[str]:
        """
        Prefix a docker argv with sudo unless this session can reach the daemon socket.

        Docker group membership granted during this run is not effective until
        the operator logs in again, so it is not relied on here.
        """
        argv = list(argv)
        if self.docker_sudo:
            return ['sudo'] + argv
        return argv

    def run(self, argv: Sequence[str], capture: bool = True, input_text: Optional[str] = None,
            redact: Iterable[str] = (), timeout: Optional[float] = None) -> CommandResult:
        """
        Run a command and wait for it.

        Args:
            argv: Command and arguments
            capture: Capture stdout/stderr (False streams to the terminal)
            input_text: Text written to the command's stdin
            redact: Argument values masked in the log
            timeout: Seconds before the command is killed

        Returns:
            CommandResult. A missing executable is reported as returncode 127.
        """
        argv = [str(arg) for arg in argv]
        logger.debug("Running: %s", redact_argv(argv, redact))

        try:
            completed = subprocess.run(
                argv,
                check=False,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                timeout=timeout,
            )
        except FileNotFoundError:
            logger.debug("Executable not found: %s", argv[0])
            return CommandResult(argv=argv, returncode=127, stderr=f"{argv[0]}: command not found")
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", timeout, redact_argv(argv, redact))
            return CommandResult(argv=argv, returncode=124, stderr='timed out')

        result = CommandResult(
            argv=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or '',
            stderr=completed.stderr or '',
        )
        if not result.ok:
            logger.debug("Exit code %d from: %s", result.returncode, redact_argv(argv, redact))
        return result
