# Path and File Name : /home/nexpose/setup/nexpose_installer/runtime/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Container runtime package initialization

"""
Container Runtime Package: keeps the scan engine container running.
"""

from .container_manager import ContainerManager, ContainerStatus

__all__ = ['ContainerManager', 'ContainerStatus']
