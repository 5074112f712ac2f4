# Path and File Name : /home/nexpose/setup/nexpose_installer/provisioning/docker_provisioner.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Installs, starts and enables Docker with the distribution's package manager - idempotent, skips work already done

"""
Docker Provisioner: makes sure the Docker engine is installed and running.

Idempotent:
- Installed and running  -> nothing to do
- Installed, not running -> systemctl start + enable only
- Not installed          -> distribution-specific install, start, enable, verify

Also grants the invoking user docker group membership (once).
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from ..errors import EnvironmentCheckError, ProvisioningError
from ..system.command_runner import CommandResult, CommandRunner, invoking_user
from ..system.os_check import HostProfile

logger = logging.getLogger(__name__)

DOCKER_PACKAGES = [
    'docker-ce',
    'docker-ce-cli',
    'containerd.io',
    'docker-buildx-plugin',
    'docker-compose-plugin',
]

SUPPORTED_OS = "Ubuntu, Debian, CentOS, RHEL, Rocky Linux, AlmaLinux, Amazon Linux"

DEBIAN_FAMILY = 'debian'
RHEL_FAMILY = 'rhel'
AMAZON_FAMILY = 'amazon'

FAMILY_LABELS = {
    DEBIAN_FAMILY: 'Debian/Ubuntu',
    RHEL_FAMILY: 'CentOS/RHEL/Rocky/AlmaLinux',
    AMAZON_FAMILY: 'Amazon Linux',
}


class DockerState(Enum):
    """Observed state of the Docker engine."""
    MISSING = "missing"
    STOPPED = "stopped"
    RUNNING = "running"


def select_family(profile: HostProfile) -> str:
    """
    Map a host to one of the supported installation procedures.

    Raises:
        EnvironmentCheckError: If the distribution is not supported
    """
    name = profile.name
    if name == 'Ubuntu' or 'Debian' in name:
        return DEBIAN_FAMILY
    if any(marker in name for marker in ('CentOS', 'Red Hat', 'Rocky', 'AlmaLinux')):
        return RHEL_FAMILY
    if 'Amazon Linux' in name:
        return AMAZON_FAMILY
    raise EnvironmentCheckError(
        f"Unsupported OS: {name}. Please install Docker manually.",
        [f"Supported OS: {SUPPORTED_OS}"],
    )


class DockerProvisioner:
    """Installs and starts the Docker engine."""

    APT_KEYRING_DIR = "/etc/apt/keyrings"
    APT_KEY_PATH = "/etc/apt/keyrings/docker.asc"
    APT_SOURCE_PATH = "/etc/apt/sources.list.d/docker.list"
    RHEL_REPO_URL = "https://download.docker.com/linux/centos/docker-ce.repo"
    DOCKER_GROUP = "docker"

    def __init__(self, runner: Optional[CommandRunner] = None, user: Optional[str] = None):
        self.runner = runner or CommandRunner()
        self.user = user or invoking_user()

    # ------------------------------------------------------------------
    # State detection
    # ------------------------------------------------------------------

    def docker_state(self) -> DockerState:
        if not self.runner.which('docker'):
            return DockerState.MISSING
        if self.runner.run(self.runner.docker_command(['docker', 'info'])).ok:
            return DockerState.RUNNING
        return DockerState.STOPPED

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def ensure_docker(self, profile: HostProfile) -> DockerState:
        """
        Bring Docker to the running state.

        Args:
            profile: Detected host, used only when an install is needed

        Returns:
            State observed before any action was taken

        Raises:
            EnvironmentCheckError: Unsupported distribution
            ProvisioningError: Any install/start/verify step failed
        """
        state = self.docker_state()

        if state is DockerState.RUNNING:
            print("✓ Docker is already installed and running")
            return state

        if state is DockerState.STOPPED:
            print("⚠ Docker is installed but not running. Starting Docker...")
            self._start_service()
            print("✓ Docker service started and enabled")
            return state

        print("Docker not found. Installing Docker...")
        family = select_family(profile)
        print(f"Installing Docker on {FAMILY_LABELS[family]}...")
        if family == DEBIAN_FAMILY:
            self._install_debian(profile)
        elif family == RHEL_FAMILY:
            self._install_rhel()
        else:
            self._install_amazon()

        self._start_service()
        self._verify_installation()
        print("✓ Docker installation complete")
        return state

    def ensure_group_membership(self) -> bool:
        """
        Add the invoking user to the docker group unless already a member.

        Returns:
            True if membership was added (takes effect in a new session)
        """
        groups = self.runner.run(['id', '-nG', self.user])
        if groups.ok and self.DOCKER_GROUP in groups.stdout.split():
            print(f"✓ User {self.user} is already in the '{self.DOCKER_GROUP}' group")
            return False

        print(f"Adding current user ({self.user}) to the '{self.DOCKER_GROUP}' group...")
        self._step(['usermod', '-aG', self.DOCKER_GROUP, self.user],
                   f"Adding {self.user} to the {self.DOCKER_GROUP} group")
        print("NOTE: Please log out and log back in (or restart your terminal session) "
              "for Docker group changes to take effect.")
        print("      You can test with: docker run hello-world")
        return True

    # ------------------------------------------------------------------
    # Installation procedures
    # ------------------------------------------------------------------

    def _install_debian(self, profile: HostProfile) -> None:
        distro = 'debian' if profile.os_id == 'debian' or 'Debian' in profile.name else 'ubuntu'

        self._step(['apt-get', 'update', '-y'], "Updating package lists")
        self._step(['apt-get', 'install', '-y', 'ca-certificates', 'curl', 'gnupg', 'lsb-release'],
                   "Installing prerequisite packages")
        self._step(['install', '-m', '0755', '-d', self.APT_KEYRING_DIR], "Creating apt keyring directory")
        self._step(['curl', '-fsSL', f"https://download.docker.com/linux/{distro}/gpg", '-o', self.APT_KEY_PATH],
                   "Downloading Docker's GPG key")
        self._step(['chmod', 'a+r', self.APT_KEY_PATH], "Setting GPG key permissions")

        arch = self._query(['dpkg', '--print-architecture'], "Detecting package architecture")
        codename = profile.version_codename or self._query(['lsb_release', '-cs'], "Detecting release codename")
        source_line = (
            f"deb [arch={arch} signed-by={self.APT_KEY_PATH}] "
            f"https://download.docker.com/linux/{distro} {codename} stable\n"
        )
        self._step(['tee', self.APT_SOURCE_PATH], "Adding Docker apt repository", input_text=source_line)

        self._step(['apt-get', 'update', '-y'], "Updating package lists")
        self._step(['apt-get', 'install', '-y'] + DOCKER_PACKAGES, "Installing Docker Engine")

    def _install_rhel(self) -> None:
        self._step(['yum', 'install', '-y', 'yum-utils'], "Installing yum-utils")
        self._step(['yum-config-manager', '--add-repo', self.RHEL_REPO_URL], "Adding Docker yum repository")
        self._step(['yum', 'install', '-y'] + DOCKER_PACKAGES, "Installing Docker Engine")

    def _install_amazon(self) -> None:
        self._step(['yum', 'update', '-y'], "Updating packages")
        self._step(['yum', 'install', '-y', 'docker'], "Installing Docker")

    def _start_service(self) -> None:
        self._step(['systemctl', 'start', 'docker'], "Starting Docker service")
        self._step(['systemctl', 'enable', 'docker'], "Enabling Docker service at boot")

    def _verify_installation(self) -> None:
        result = self.runner.run(['docker', '--version'])
        if not result.ok:
            raise ProvisioningError(
                "Docker installation failed.",
                [f"'docker --version' exited with code {result.returncode}"] + _tail(result),
            )
        print(f"✓ {result.stdout.strip()}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _step(self, argv: Sequence[str], description: str, input_text: Optional[str] = None) -> CommandResult:
        """Run one privileged step; any nonzero exit aborts provisioning."""
        logger.info("%s", description)
        result = self.runner.run(self.runner.privileged(argv), input_text=input_text)
        if not result.ok:
            raise ProvisioningError(
                f"{description} failed (exit code {result.returncode})",
                [f"Command: {' '.join(result.argv)}"] + _tail(result),
            )
        return result

    def _query(self, argv: Sequence[str], description: str) -> str:
        result = self.runner.run(argv)
        value = result.stdout.strip()
        if not result.ok or not value:
            raise ProvisioningError(
                f"{description} failed (exit code {result.returncode})",
                [f"Command: {' '.join(result.argv)}"] + _tail(result),
            )
        return value


def _tail(result: CommandResult, limit: int = 5) -> List[str]:
    lines = [line for line in result.stderr.splitlines() if line.strip()]
    return lines[-limit:]
