# Path and File Name : /home/nexpose/setup/nexpose_installer/registration/console_registrar.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Registers the scan engine with the Nexpose console - collects credentials, checks preconditions, runs nsc.sh in the container and reports the outcome

"""
Console Registrar: pairs the running scan engine with the Nexpose console.

Strictly linear:
  1. Collect activation key (reprompt until non-empty)
  2. Collect engine name (reprompt until non-empty)
  3. Container must be running            (terminal if not)
  4. Console TCP reachability             (operator may continue)
  5. Registration binary must exist       (terminal if not)
  6. Execute nsc.sh -t console ...
  7. Report success or failure banner     (terminal on failure)

Nothing is retried automatically.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import InstallerConfig
from ..errors import OperatorAbort, PreconditionError, RegistrationError
from ..prompts import OperatorPrompter, mask_secret
from ..runtime.container_manager import ContainerManager
from .connectivity import probe_tcp

logger = logging.getLogger(__name__)

CONNECTION_TYPE = "console"
BANNER_WIDTH = 64

TROUBLESHOOTING_STEPS = [
    "Verify activation key is correct",
    "Check network connectivity to console",
    "Ensure console is accessible on specified port",
    "Check firewall settings",
    "Verify engine name is unique",
]


@dataclass(frozen=True)
class RegistrationRequest:
    """One registration attempt. The key is kept out of repr()."""
    console_host: str
    console_port: int
    activation_key: str = field(repr=False)
    engine_name: str

    def arguments(self) -> List[str]:
        return [
            '-t', CONNECTION_TYPE,
            '-h', self.console_host,
            '-p', str(self.console_port),
            '-a', self.activation_key,
            '-n', self.engine_name,
        ]


@dataclass
class ConnectionOutcome:
    """Exit status of the registration command with its operator message."""
    status_code: int
    message: str

    @property
    def ok(self) -> bool:
        return self.status_code == 0


def format_banner(lines: List[str]) -> str:
    """Frame lines in a '#' box."""
    inner = BANNER_WIDTH - 4
    rule = '#' * BANNER_WIDTH
    body = [f"# {line:<{inner}} #" for line in lines]
    return '\n'.join([rule] + body + [rule])


def format_success_banner(engine_name: str) -> str:
    return format_banner([
        "SUCCESS: Connection to Nexpose Console established!",
        f"The scan engine '{engine_name}' should now appear",
        "in your Nexpose Console under Administration > Engines.",
    ])


def format_failure_banner(status_code: int) -> str:
    lines = [
        "ERROR: Failed to connect Nexpose Scan Engine to Console",
        f"Exit code: {status_code}",
        "",
        "Troubleshooting steps:",
    ]
    lines += [f"{number}. {step}" for number, step in enumerate(TROUBLESHOOTING_STEPS, start=1)]
    return format_banner(lines)


class ConsoleRegistrar:
    """Runs the registration sequence against the configured console."""

    def __init__(self, config: InstallerConfig, container_manager: ContainerManager,
                 prompter: Optional[OperatorPrompter] = None,
                 probe: Optional[Callable[[str, int, float], bool]] = None):
        self.config = config
        self.container_manager = container_manager
        self.prompter = prompter or OperatorPrompter()
        self.probe = probe or probe_tcp

    @property
    def binary_path(self) -> str:
        return self.config.container.registration_binary

    def register(self) -> ConnectionOutcome:
        """
        Run the full registration sequence.

        Raises:
            PreconditionError: Container not running or registration binary missing
            OperatorAbort: Operator declined after an unreachable console
            RegistrationError: Registration command exited nonzero
        """
        console = self.config.console
        print(format_banner(["Nexpose Console Connection Setup"]))
        print(f"Console Host: {console.host}")
        print(f"Console Port: {console.port}")
        print("")

        request = self.collect_request()
        self.check_container_running()
        self.check_reachability()
        self.check_registration_binary()
        outcome = self.execute(request)
        return self.report(outcome, request)

    def collect_request(self) -> RegistrationRequest:
        """Prompt for (or accept pre-supplied) activation key and engine name."""
        key = self.prompter.require(
            "Enter Nexpose Activation Key: ", "Activation Key", initial=self.config.activation_key)
        engine_name = self.prompter.require(
            "Enter Desired Engine Name: ", "Engine Name", initial=self.config.engine_name)

        request = RegistrationRequest(
            console_host=self.config.console.host,
            console_port=self.config.console.port,
            activation_key=key,
            engine_name=engine_name,
        )

        print("")
        print("Configuration Summary:")
        print(f"- Console Host: {request.console_host}")
        print(f"- Console Port: {request.console_port}")
        print(f"- Activation Key: {mask_secret(request.activation_key)}")
        print(f"- Engine Name: {request.engine_name}")
        print("")
        return request

    def check_container_running(self) -> None:
        name = self.container_manager.spec.name
        if not self.container_manager.is_running():
            raise PreconditionError(
                f"The '{name}' Docker container is not running.",
                ["Please ensure the container is running before attempting to connect."],
            )
        print(f"✓ Container '{name}' is running")

    def check_reachability(self) -> bool:
        """
        Probe the console. An unreachable console is a warning the operator may override.

        Returns:
            True if reachable, False if the operator chose to continue anyway
        """
        console = self.config.console
        print("Testing network connectivity to console...")
        if self.probe(console.host, console.port, console.probe_timeout):
            print(f"✓ Console reachable at {console.host}:{console.port}")
            return True

        logger.warning("Console %s:%s unreachable", console.host, console.port)
        print(f"⚠ Warning: Cannot reach console at {console.host}:{console.port}")
        print("  Please verify network connectivity and firewall settings.")
        if not self.prompter.confirm():
            raise OperatorAbort(f"Aborted: console {console.host}:{console.port} unreachable")
        return False

    def check_registration_binary(self) -> None:
        if not self.container_manager.file_exists(self.binary_path):
            raise PreconditionError(
                "Connection script not found in container.",
                [
                    f"The path {self.binary_path} does not exist.",
                    "Please verify the container image and Rapid7 documentation.",
                ],
            )

    def execute(self, request: RegistrationRequest) -> ConnectionOutcome:
        print("Attempting to connect Nexpose Scan Engine to Console...")
        result = self.container_manager.exec(
            [self.binary_path] + request.arguments(),
            redact=(request.activation_key,),
        )
        if result.ok:
            message = f"Scan engine '{request.engine_name}' registered with {request.console_host}:{request.console_port}"
        else:
            message = f"Registration command exited with code {result.returncode}"
        logger.info("%s", message)
        return ConnectionOutcome(status_code=result.returncode, message=message)

    def report(self, outcome: ConnectionOutcome, request: RegistrationRequest) -> ConnectionOutcome:
        print("")
        if outcome.ok:
            print(format_success_banner(request.engine_name))
            return outcome

        print(format_failure_banner(outcome.status_code), file=sys.stderr)
        raise RegistrationError(outcome.message, status_code=outcome.status_code)
