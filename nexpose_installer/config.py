# Path and File Name : /home/nexpose/setup/nexpose_installer/config.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Immutable installer configuration - defaults, optional YAML overrides and environment overrides

"""
Installer Configuration: one immutable InstallerConfig built at startup.

Precedence (highest first):
  1. Explicit overrides passed by the CLI
  2. Environment variables (NEXPOSE_*)
  3. Optional YAML file (container: / console: mappings)
  4. Built-in defaults

Validation is fail-closed: unknown keys, malformed ports and empty names
raise ConfigError before any side effect happens.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

DEFAULT_OS_RELEASE_PATH = Path("/etc/os-release")


@dataclass(frozen=True)
class ContainerSpec:
    """Scan engine container definition."""
    image: str = "rapid7/insightvm_scan_engine:latest"
    name: str = "nexpose-scan-engine"
    restart_policy: str = "unless-stopped"
    host_port: int = 50000
    container_port: int = 50000
    host_data_path: str = "/opt/nexpose-data"
    container_data_path: str = "/opt/rapid7/nexpose/engine/data"
    registration_binary: str = "/opt/rapid7/nexpose/engine/nsc.sh"

    @property
    def port_mapping(self) -> str:
        return f"{self.host_port}:{self.container_port}"

    @property
    def volume_mapping(self) -> str:
        return f"{self.host_data_path}:{self.container_data_path}"


@dataclass(frozen=True)
class ConsoleEndpoint:
    """Pre-configured Nexpose console the engine registers with."""
    host: str = "135.148.171.125"
    port: int = 40815
    probe_timeout: float = 5.0


@dataclass(frozen=True)
class InstallerConfig:
    """Everything the installer stages need, fixed for the whole run."""
    container: ContainerSpec = field(default_factory=ContainerSpec)
    console: ConsoleEndpoint = field(default_factory=ConsoleEndpoint)
    os_release_path: Path = DEFAULT_OS_RELEASE_PATH
    activation_key: Optional[str] = None
    engine_name: Optional[str] = None


# Environment variable -> (section, field)
ENV_OVERRIDES = {
    'NEXPOSE_IMAGE': ('container', 'image'),
    'NEXPOSE_CONTAINER_NAME': ('container', 'name'),
    'NEXPOSE_CONSOLE_HOST': ('console', 'host'),
    'NEXPOSE_CONSOLE_PORT': ('console', 'port'),
}

SECRET_ENV = {
    'NEXPOSE_ACTIVATION_KEY': 'activation_key',
    'NEXPOSE_ENGINE_NAME': 'engine_name',
}


def _coerce(section: str, cls: type, key: str, value: Any) -> Any:
    """Convert a raw override to the dataclass field's type."""
    type_map = {f.name: f.type for f in fields(cls)}
    if key not in type_map:
        allowed = ', '.join(sorted(type_map))
        raise ConfigError(
            f"Unknown {section} setting: '{key}'",
            [f"Allowed {section} settings: {allowed}"],
        )

    field_type = type_map[key]
    if field_type in (int, 'int'):
        try:
            port = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{section}.{key} must be an integer, got {value!r}")
        if key.endswith('port') and not 1 <= port <= 65535:
            raise ConfigError(f"{section}.{key} must be between 1 and 65535, got {port}")
        return port
    if field_type in (float, 'float'):
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{section}.{key} must be a number, got {value!r}")
        if number <= 0:
            raise ConfigError(f"{section}.{key} must be positive, got {number}")
        return number

    text = str(value).strip()
    if not text:
        raise ConfigError(f"{section}.{key} cannot be empty")
    return text


def _apply(section: str, current: Any, overrides: Mapping[str, Any]) -> Any:
    if not overrides:
        return current
    changes = {key: _coerce(section, type(current), key, value) for key, value in overrides.items()}
    return replace(current, **changes)


def load_yaml_overrides(path: Path) -> Dict[str, Dict[str, Any]]:
    """
    Read a YAML configuration file.

    Returns:
        Mapping with optional 'container' and 'console' sections

    Raises:
        ConfigError: If the file is missing, unparseable or malformed
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Configuration file {path} is not valid YAML: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping at the top level")

    unknown = set(data) - {'container', 'console'}
    if unknown:
        raise ConfigError(
            f"Unknown configuration sections in {path}: {', '.join(sorted(unknown))}",
            ["Supported sections: container, console"],
        )

    sections = {}
    for section in ('container', 'console'):
        value = data.get(section) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"'{section}' in {path} must be a mapping")
        sections[section] = value
    return sections


def load_config(config_path: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None,
                activation_key: Optional[str] = None,
                engine_name: Optional[str] = None,
                os_release_path: Optional[Path] = None) -> InstallerConfig:
    """
    Build the installer configuration.

    Args:
        config_path: Optional YAML file with container/console overrides
        environ: Environment mapping (defaults to os.environ)
        activation_key: Activation key given on the command line
        engine_name: Engine name given on the command line
        os_release_path: Alternate OS descriptor (used by tests)

    Returns:
        Frozen InstallerConfig
    """
    if environ is None:
        environ = os.environ

    overrides: Dict[str, Dict[str, Any]] = {'container': {}, 'console': {}}
    if config_path is not None:
        for section, values in load_yaml_overrides(Path(config_path)).items():
            overrides[section].update(values)

    for env_name, (section, key) in ENV_OVERRIDES.items():
        if environ.get(env_name):
            overrides[section][key] = environ[env_name]

    config = InstallerConfig(
        container=_apply('container', ContainerSpec(), overrides['container']),
        console=_apply('console', ConsoleEndpoint(), overrides['console']),
    )

    # Operator-supplied values are validated later, at prompt time
    secrets = {attr: environ.get(env_name) for env_name, attr in SECRET_ENV.items()}
    if activation_key is not None:
        secrets['activation_key'] = activation_key
    if engine_name is not None:
        secrets['engine_name'] = engine_name

    return replace(
        config,
        activation_key=secrets['activation_key'],
        engine_name=secrets['engine_name'],
        os_release_path=Path(os_release_path) if os_release_path else DEFAULT_OS_RELEASE_PATH,
    )
