# Path and File Name : /home/nexpose/setup/nexpose_installer/registration/connectivity.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: TCP reachability probe for the Nexpose console endpoint

"""
Connectivity probe: TCP connect only, no protocol or authentication.
"""

import logging
import socket

logger = logging.getLogger(__name__)


def probe_tcp(host: str, port: int, timeout: float = 5.0) -> bool:
    """
    Check that a TCP connection to host:port can be opened.

    Returns:
        True if the connection succeeded, False otherwise
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        logger.info("Console %s:%s unreachable: %s", host, port, e)
        return False
