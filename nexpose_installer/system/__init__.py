# Path and File Name : /home/nexpose/setup/nexpose_installer/system/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Host system package initialization

"""
Host System Package: OS detection and external command execution.
"""

from .command_runner import CommandResult, CommandRunner
from .os_check import HostProfile, OSCheck

__all__ = ['CommandResult', 'CommandRunner', 'HostProfile', 'OSCheck']
