# Path and File Name : /home/nexpose/setup/nexpose_installer/__main__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Module entry point enabling python3 -m nexpose_installer invocation

"""
Module entry point for python3 -m nexpose_installer.
"""

import sys

from nexpose_installer.installer import main

if __name__ == '__main__':
    sys.exit(main())
