# Path and File Name : /home/nexpose/setup/nexpose_installer/installer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Main installer orchestrator - detects host, provisions Docker, ensures the scan engine container and registers it with the console

"""
Nexpose Scan Engine Installer: Main orchestrator.

Runs four idempotent stages in order; any terminal failure raises an
InstallerError which stops the pipeline and propagates to main().
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from . import __version__
from .config import InstallerConfig, load_config
from .errors import InstallerError
from .logging_setup import setup_logging
from .prompts import OperatorPrompter
from .provisioning.docker_provisioner import DockerProvisioner
from .registration.console_registrar import ConsoleRegistrar
from .runtime.container_manager import ContainerManager
from .system.command_runner import CommandRunner
from .system.os_check import HostProfile, OSCheck

logger = logging.getLogger(__name__)


@dataclass
class StageResult:
    """Summary of a completed pipeline stage; failures raise instead."""
    name: str
    message: str = ''


class NexposeInstaller:
    """Main installer orchestrator."""

    VERSION = __version__

    def __init__(self, config: InstallerConfig, runner: Optional[CommandRunner] = None,
                 prompter: Optional[OperatorPrompter] = None, user: Optional[str] = None,
                 probe: Optional[Callable[[str, int, float], bool]] = None):
        self.config = config
        self.runner = runner or CommandRunner()
        self.prompter = prompter or OperatorPrompter()

        self.os_check = OSCheck(config.os_release_path)
        self.provisioner = DockerProvisioner(self.runner, user=user)
        self.container_manager = ContainerManager(config.container, self.runner, self.prompter, user=user)
        self.registrar = ConsoleRegistrar(config, self.container_manager, self.prompter, probe=probe)

        self.host_profile: Optional[HostProfile] = None
        self.results: List[StageResult] = []

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _detect_environment(self) -> StageResult:
        self.host_profile = self.os_check.detect()
        print(f"✓ Detected OS: {self.host_profile.describe()}")
        return StageResult('environment', self.host_profile.describe())

    def _provision_docker(self) -> StageResult:
        state = self.provisioner.ensure_docker(self.host_profile)
        added = self.provisioner.ensure_group_membership()
        message = f"docker was {state.value}"
        if added:
            message += "; docker group membership added (effective after re-login)"
        return StageResult('provisioning', message)

    def _ensure_container(self) -> StageResult:
        status = self.container_manager.ensure_running()
        print("✓ Nexpose Scan Engine Docker container is ready")
        return StageResult('container', status.value)

    def _register_engine(self) -> StageResult:
        outcome = self.registrar.register()
        return StageResult('registration', outcome.message)

    def stages(self) -> List[Tuple[str, Callable[[], StageResult]]]:
        return [
            ("Detecting host environment", self._detect_environment),
            ("Checking Docker installation", self._provision_docker),
            ("Setting up Nexpose Scan Engine container", self._ensure_container),
            ("Connecting scan engine to Nexpose Console", self._register_engine),
        ]

    def run(self) -> List[StageResult]:
        """
        Execute every stage in order.

        Raises:
            InstallerError: If any stage fails
        """
        print("=" * 80)
        print("NEXPOSE SCAN ENGINE INSTALLER")
        print("=" * 80)
        print(f"Version: {self.VERSION}\n")

        stages = self.stages()
        for index, (title, stage) in enumerate(stages, start=1):
            print(f"\n[{index}/{len(stages)}] {title}...")
            result = stage()
            logger.info("Stage %s: %s", result.name, result.message)
            self.results.append(result)

        print("\nSetup complete! Check your Nexpose Console to verify the engine connection.")
        return self.results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nexpose-setup',
        description='Install Docker, run the Nexpose Scan Engine container and register it with the console',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    nexpose-setup                                  # Interactive setup
    nexpose-setup --engine-name engine-west-1      # Prompt only for the activation key
    nexpose-setup --config engine.yaml --log-file /tmp/nexpose-setup.log
        """
    )
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML file overriding container/console settings')
    parser.add_argument('--activation-key', default=None,
                        help='Console activation key (default: prompt, or NEXPOSE_ACTIVATION_KEY)')
    parser.add_argument('--engine-name', default=None,
                        help='Engine name shown in the console (default: prompt, or NEXPOSE_ENGINE_NAME)')
    parser.add_argument('--log-file', type=Path, default=None,
                        help='Also write log records to this file')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Log level (default: WARNING)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def report_failure(error: InstallerError) -> None:
    print(f"\n✗ Installation failed: {error.message}", file=sys.stderr)
    for line in error.details:
        print(f"  {line}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Process exit status (0 on success)
    """
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
        config = load_config(
            config_path=args.config,
            activation_key=args.activation_key,
            engine_name=args.engine_name,
        )
        NexposeInstaller(config).run()
        return 0
    except KeyboardInterrupt:
        print("\n\nInstallation cancelled by user.", file=sys.stderr)
        return 1
    except InstallerError as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        report_failure(e)
        return e.exit_code
    except Exception as e:
        print(f"\n✗ Fatal error during installation: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
