"""
Gandalf configuration.

Settings are read from a YAML file (``/etc/gandalf.conf`` by default) or
from ``GANDALF_*`` environment variables. Keys are addressed with the
colon-delimited names used in the file, e.g. ``git:bare:location``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gandalf.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "/etc/gandalf.conf"
DEFAULT_API_URL = "http://localhost:7990/rest"
DEFAULT_PROJECT = "INFRA"
DEFAULT_TIMEOUT = 6.0

# colon key -> environment variable
_ENV_KEYS = {
    "git:bare:location": "GANDALF_BARE_LOCATION",
    "git:bare:template": "GANDALF_BARE_TEMPLATE",
    "repository:tempDir": "GANDALF_TEMP_DIR",
    "api:url": "GANDALF_API_URL",
    "api:username": "GANDALF_API_USERNAME",
    "api:password": "GANDALF_API_PASSWORD",
    "api:project": "GANDALF_API_PROJECT",
    "api:timeout": "GANDALF_API_TIMEOUT",
}


def _lookup(data: dict[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split(":"):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


@dataclass
class GandalfConfig:
    """Read-only settings shared by every unit of work."""

    bare_location: str
    bare_template: str | None = None
    temp_dir: str | None = None
    api_url: str = DEFAULT_API_URL
    api_username: str = ""
    api_password: str = ""
    api_project: str = DEFAULT_PROJECT
    api_timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GandalfConfig":
        """
        Build a config from nested mappings (the parsed YAML document).

        Raises:
            ConfigurationError: If git:bare:location is missing or a value
                has the wrong type
        """
        bare_location = _lookup(data, "git:bare:location")
        if not bare_location:
            raise ConfigurationError("git:bare:location is not set")

        timeout = _lookup(data, "api:timeout")
        try:
            api_timeout = float(timeout) if timeout is not None else DEFAULT_TIMEOUT
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"api:timeout must be a number, got {timeout!r}") from e

        return cls(
            bare_location=str(bare_location),
            bare_template=_lookup(data, "git:bare:template"),
            temp_dir=_lookup(data, "repository:tempDir"),
            api_url=_lookup(data, "api:url") or DEFAULT_API_URL,
            api_username=_lookup(data, "api:username") or "",
            api_password=_lookup(data, "api:password") or "",
            api_project=_lookup(data, "api:project") or DEFAULT_PROJECT,
            api_timeout=api_timeout,
        )

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "GandalfConfig":
        """
        Load config from a YAML file.

        Args:
            path: Config file path (default: $GANDALF_CONFIG or /etc/gandalf.conf)

        Raises:
            ConfigurationError: If the file is missing or not valid YAML
        """
        path = Path(path or os.environ.get("GANDALF_CONFIG", DEFAULT_CONFIG_PATH))
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"could not read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"invalid config file {path}: expected a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "GandalfConfig":
        """
        Load config from environment variables.

        Environment variables:
            GANDALF_BARE_LOCATION: Root directory of bare repositories (required)
            GANDALF_BARE_TEMPLATE: Hook template root (optional)
            GANDALF_TEMP_DIR: Root for working clones (optional)
            GANDALF_API_URL, GANDALF_API_USERNAME, GANDALF_API_PASSWORD:
                Remote host access
            GANDALF_API_PROJECT: Default project (optional, default: INFRA)
            GANDALF_API_TIMEOUT: Read timeout in seconds (optional, default: 6)

        Raises:
            ConfigurationError: If GANDALF_BARE_LOCATION is not set
        """
        data: dict[str, Any] = {}
        for key, env_name in _ENV_KEYS.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            node = data
            *parents, leaf = key.split(":")
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = value

        if not _lookup(data, "git:bare:location"):
            raise ConfigurationError("GANDALF_BARE_LOCATION environment variable not set")
        return cls.from_dict(data)

    def get(self, key: str) -> Any:
        """
        Read a setting by its colon-delimited name.

        Raises:
            ConfigurationError: If the key is unknown or the setting is unset
        """
        attrs = {
            "git:bare:location": self.bare_location,
            "git:bare:template": self.bare_template,
            "repository:tempDir": self.temp_dir,
            "api:url": self.api_url,
            "api:username": self.api_username,
            "api:password": self.api_password,
            "api:project": self.api_project,
            "api:timeout": self.api_timeout,
        }
        if key not in attrs:
            raise ConfigurationError(f"unknown config key {key}")
        value = attrs[key]
        if value is None:
            raise ConfigurationError(f"{key} is not set")
        return value
