# Path and File Name : /home/nexpose/setup/nexpose_installer/errors.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Installer error taxonomy - every terminal failure is a RuntimeError subclass carrying detail lines

"""
Installer errors.

All terminal failures raise a subclass of InstallerError, which is a
RuntimeError so it propagates to the top-level main() the same way every
other installer failure does. Details are extra human-readable lines printed
under the message (causes, remediation, paths).
"""

from typing import List, Optional, Sequence


class InstallerError(RuntimeError):
    """Base class for terminal installer failures."""

    exit_code = 1

    def __init__(self, message: str, details: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.message = message
        self.details: List[str] = list(details or [])


class ConfigError(InstallerError):
    """Invalid or unreadable installer configuration."""


class EnvironmentCheckError(InstallerError):
    """Host cannot be identified or is not a supported distribution."""


class ProvisioningError(InstallerError):
    """Package manager or service manager step failed."""


class ContainerError(InstallerError):
    """Container could not be pulled, created or started."""


class PreconditionError(InstallerError):
    """A required precondition for registration is not met."""


class OperatorAbort(InstallerError):
    """Operator declined to continue after a warning."""


class RegistrationError(InstallerError):
    """Registration command inside the container exited nonzero."""

    def __init__(self, message: str, status_code: int, details: Optional[Sequence[str]] = None):
        super().__init__(message, details)
        self.status_code = status_code
