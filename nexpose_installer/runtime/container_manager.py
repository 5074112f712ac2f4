# Path and File Name : /home/nexpose/setup/nexpose_installer/runtime/container_manager.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Ensures the scan engine container exists and is running - pulls, prepares data directory and runs it when absent

"""
Container Manager: exactly one running container with the configured name.

  exists + running -> nothing to do
  exists + stopped -> docker start
  absent           -> docker pull (operator may override a failure),
                      data directory setup, docker run -d

Any start/create failure is terminal.
"""

import grp
import logging
import pwd
from enum import Enum
from typing import List, Optional

from ..config import ContainerSpec
from ..errors import ContainerError, OperatorAbort
from ..prompts import OperatorPrompter
from ..system.command_runner import CommandResult, CommandRunner, invoking_user

logger = logging.getLogger(__name__)


class ContainerStatus(Enum):
    """Which path ensure_running() took."""
    ALREADY_RUNNING = "already_running"
    STARTED = "started"
    CREATED = "created"


def owner_spec(user: str) -> str:
    """user:group for chown, using the user's primary group when resolvable."""
    try:
        gid = pwd.getpwnam(user).pw_gid
        return f"{user}:{grp.getgrgid(gid).gr_name}"
    except KeyError:
        return f"{user}:{user}"


class ContainerManager:
    """Manages the scan engine container lifecycle."""

    def __init__(self, spec: ContainerSpec, runner: Optional[CommandRunner] = None,
                 prompter: Optional[OperatorPrompter] = None, user: Optional[str] = None):
        self.spec = spec
        self.runner = runner or CommandRunner()
        self.prompter = prompter or OperatorPrompter()
        self.user = user or invoking_user()

    def _docker(self, argv: List[str], **kwargs) -> CommandResult:
        return self.runner.run(self.runner.docker_command(argv), **kwargs)

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    def _names(self, all_containers: bool) -> List[str]:
        argv = ['docker', 'ps']
        if all_containers:
            argv.append('-a')
        argv += ['--format', '{{.Names}}']
        result = self._docker(argv)
        if not result.ok:
            raise ContainerError(
                "Cannot list Docker containers.",
                [f"'{' '.join(argv)}' exited with code {result.returncode}"] + _stderr_lines(result),
            )
        return result.lines()

    def exists(self) -> bool:
        return self.spec.name in self._names(all_containers=True)

    def is_running(self) -> bool:
        return self.spec.name in self._names(all_containers=False)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def ensure_running(self) -> ContainerStatus:
        """
        Make sure the container exists and is running.

        Raises:
            ContainerError: If the container cannot be started or created
            OperatorAbort: If the operator declines after a failed pull
        """
        name = self.spec.name

        if self.exists():
            print(f"Container '{name}' already exists.")
            if self.is_running():
                print(f"✓ Container '{name}' is already running")
                return ContainerStatus.ALREADY_RUNNING

            print(f"Starting existing container '{name}'...")
            result = self._docker(['docker', 'start', name])
            if not result.ok:
                raise ContainerError(
                    f"Failed to start existing container '{name}' (exit code {result.returncode})",
                    _stderr_lines(result),
                )
            print(f"✓ Container '{name}' started")
            return ContainerStatus.STARTED

        self.pull_image()
        self.prepare_data_directory()
        self.create_container()
        return ContainerStatus.CREATED

    def pull_image(self) -> bool:
        """
        Pull the configured image.

        The published image location is not guaranteed stable, so a failed
        pull only warns and lets the operator decide.

        Returns:
            True if the pull succeeded, False if the operator chose to continue anyway
        """
        image = self.spec.image
        print("Pulling Nexpose Scan Engine Docker image...")
        print("⚠ WARNING: Please verify the correct image name with Rapid7 documentation.")
        print(f"  The image '{image}' may not be publicly available.")

        result = self._docker(['docker', 'pull', image], capture=False)
        if result.ok:
            print(f"✓ Image pulled: {image}")
            return True

        logger.warning("docker pull %s exited with code %d", image, result.returncode)
        print(f"⚠ Warning: Failed to pull image '{image}'")
        print("  Please check with Rapid7 for the correct image name and registry.")
        print("  You may need to:")
        print("    1. Log into a private registry: docker login <registry>")
        print("    2. Use a different image name (--config or NEXPOSE_IMAGE)")
        print("    3. Build the image locally")
        if not self.prompter.confirm():
            raise OperatorAbort(f"Aborted after failing to pull image '{image}'")
        return False

    def prepare_data_directory(self) -> None:
        """Create the persistent data directory owned by the invoking user."""
        path = self.spec.host_data_path
        owner = owner_spec(self.user)

        for argv, action in (
            (['mkdir', '-p', path], "create"),
            (['chown', owner, path], f"set ownership {owner} on"),
        ):
            result = self.runner.run(self.runner.privileged(argv))
            if not result.ok:
                raise ContainerError(
                    f"Failed to {action} data directory {path} (exit code {result.returncode})",
                    _stderr_lines(result),
                )
        print(f"✓ Data directory ready: {path} (owner {owner})")

    def create_container(self) -> None:
        """docker run the engine detached with restart policy, port and volume."""
        spec = self.spec
        print("Running Nexpose Scan Engine Docker container...")
        argv = [
            'docker', 'run', '-d',
            '--name', spec.name,
            '--restart', spec.restart_policy,
            '-p', spec.port_mapping,
            '-v', spec.volume_mapping,
            spec.image,
        ]
        result = self._docker(argv)
        if not result.ok:
            raise ContainerError(
                f"Failed to start Nexpose container '{spec.name}' (exit code {result.returncode}). "
                "This may be due to:",
                [
                    f"1. Image not available: {spec.image}",
                    f"2. Port {spec.host_port} already in use",
                    "3. Insufficient permissions",
                ] + _stderr_lines(result),
            )
        container_id = result.stdout.strip()[:12]
        print(f"✓ Container '{spec.name}' created ({container_id})")

    # ------------------------------------------------------------------
    # In-container execution
    # ------------------------------------------------------------------

    def file_exists(self, path: str) -> bool:
        """True if `path` is a regular file inside the running container."""
        return self._docker(['docker', 'exec', self.spec.name, 'test', '-f', path]).ok

    def exec(self, argv: List[str], redact: tuple = ()) -> CommandResult:
        """Run a command inside the container, streaming its output."""
        return self._docker(['docker', 'exec', self.spec.name] + list(argv), capture=False, redact=redact)


def _stderr_lines(result: CommandResult, limit: int = 5) -> List[str]:
    lines = [line for line in result.stderr.splitlines() if line.strip()]
    return lines[-limit:]
