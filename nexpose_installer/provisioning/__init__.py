# Path and File Name : /home/nexpose/setup/nexpose_installer/provisioning/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Docker provisioning package initialization

"""
Provisioning Package: installs and starts the Docker engine on the host.
"""

from .docker_provisioner import DockerProvisioner, DockerState, select_family

__all__ = ['DockerProvisioner', 'DockerState', 'select_family']
