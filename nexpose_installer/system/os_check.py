# Path and File Name : /home/nexpose/setup/nexpose_installer/system/os_check.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Detects host distribution and version from /etc/os-release - fail-fast if the descriptor is missing

"""
OS Check: reads the os-release descriptor into a HostProfile.
No side effects. Missing or unusable descriptor is a terminal error.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..errors import EnvironmentCheckError


@dataclass(frozen=True)
class HostProfile:
    """Identity of the host operating system."""
    name: str
    version_id: str
    os_id: str = ''
    id_like: str = ''
    version_codename: str = ''

    def describe(self) -> str:
        return f"{self.name} {self.version_id}".strip()


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse KEY=value lines, skipping comments and stripping quotes."""
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        values[key.strip()] = value
    return values


class OSCheck:
    """Identifies the host distribution."""

    OS_RELEASE_PATH = Path("/etc/os-release")

    def __init__(self, os_release_path: Optional[Path] = None):
        self.os_release_path = Path(os_release_path) if os_release_path else self.OS_RELEASE_PATH

    def detect(self) -> HostProfile:
        """
        Read and normalize the OS descriptor.

        Raises:
            EnvironmentCheckError: If the descriptor is absent or names no distribution
        """
        if not self.os_release_path.exists():
            raise EnvironmentCheckError(
                "Cannot determine OS. Please install Docker manually.",
                [f"OS descriptor not found: {self.os_release_path}"],
            )

        try:
            values = parse_os_release(self.os_release_path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError) as e:
            raise EnvironmentCheckError(f"Cannot read OS descriptor {self.os_release_path}: {e}")

        name = values.get('NAME', '').strip()
        if not name:
            raise EnvironmentCheckError(
                "Cannot determine OS. Please install Docker manually.",
                [f"{self.os_release_path} does not define NAME"],
            )

        return HostProfile(
            name=name,
            version_id=values.get('VERSION_ID', '').strip(),
            os_id=values.get('ID', '').strip().lower(),
            id_like=values.get('ID_LIKE', '').strip().lower(),
            version_codename=values.get('VERSION_CODENAME', '').strip(),
        )
