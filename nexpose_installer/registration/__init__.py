# Path and File Name : /home/nexpose/setup/nexpose_installer/registration/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Console registration package initialization

"""
Console Registration Package: pairs the scan engine with the Nexpose console.
"""

from .console_registrar import ConnectionOutcome, ConsoleRegistrar, RegistrationRequest
from .connectivity import probe_tcp

__all__ = ['ConnectionOutcome', 'ConsoleRegistrar', 'RegistrationRequest', 'probe_tcp']
