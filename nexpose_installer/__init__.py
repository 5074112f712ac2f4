# Path and File Name : /home/nexpose/setup/nexpose_installer/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Nexpose installer package initialization

"""
Nexpose Scan Engine Installer

Installs Docker when absent, runs the Rapid7 Nexpose scan engine container
and registers the engine with a Nexpose console.
"""

__version__ = "1.0.0"
