# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Configuration for runbook dispatch.

Values come from three layers, highest priority first:
- CLI flags and their environment variables (bound by the CLI)
- An optional YAML config file
- Built-in defaults

The result is a frozen DispatchConfig. The only value filled in after
loading is the job id, which with_job_id() generates once per run.
"""

import uuid
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import yaml

from runbook.errors import InputError


DEFAULT_TIMEOUT = 10

# Config file keys → DispatchConfig fields
CONFIG_KEYS = {
    "id": "job_id",
    "job_id": "job_id",
    "command": "command",
    "timeout": "timeout",
    "runtime_assets": "runtime_assets",
    "subscriptions": "subscriptions",
    "namespace": "namespace",
    "sensu_api_url": "sensu_api_url",
    "sensu_access_token": "sensu_access_token",
    "sensu_trusted_ca_file": "sensu_trusted_ca_file",
    "event_log": "event_log",
}


@dataclass(frozen=True)
class DispatchConfig:
    """Immutable view of everything a dispatch run needs."""
    command: str = ""
    subscriptions: Tuple[str, ...] = ()
    namespace: str = ""
    sensu_api_url: str = ""
    timeout: int = DEFAULT_TIMEOUT
    runtime_assets: Tuple[str, ...] = ()
    job_id: Optional[str] = None
    sensu_access_token: str = ""
    sensu_trusted_ca_file: Optional[str] = None
    event_log: Optional[str] = None

    @property
    def api_base_url(self) -> str:
        return self.sensu_api_url.rstrip("/")

    def validate(self) -> None:
        """Check required values before any network call.

        Raises:
            InputError: If a required value is missing or invalid.
        """
        if not self.sensu_api_url:
            raise InputError("--sensu-api-url flag or $SENSU_API_URL environment variable must be set")
        if not self.namespace:
            raise InputError("--namespace flag or $SENSU_NAMESPACE environment variable must be set")
        if not self.command:
            raise InputError("--command flag or $SENSU_RUNBOOK_COMMAND environment variable must be set")
        if not self.subscriptions:
            raise InputError(
                "--subscriptions flag or $SENSU_RUNBOOK_SUBSCRIPTIONS environment variable must be set"
            )
        if self.timeout <= 0:
            raise InputError(f"--timeout must be a positive number of seconds, got: {self.timeout}")

    def redacted(self) -> Dict[str, Any]:
        """Return the config as a dict with the access token masked."""
        return {
            "job_id": self.job_id,
            "command": self.command,
            "timeout": self.timeout,
            "subscriptions": list(self.subscriptions),
            "runtime_assets": list(self.runtime_assets),
            "namespace": self.namespace,
            "sensu_api_url": self.sensu_api_url,
            "sensu_access_token": "****" if self.sensu_access_token else "",
            "sensu_trusted_ca_file": self.sensu_trusted_ca_file,
            "event_log": self.event_log,
        }


def split_list(value: Union[str, Iterable[str], None], name: str = "list") -> Tuple[str, ...]:
    """
    Split a comma-separated list, keeping order and duplicates.

    "web,db,cache" → ("web", "db", "cache")
    "web,web" → ("web", "web")
    Items are stripped and empty items dropped. Lists pass through.

    Raises:
        InputError: If value is neither a string nor a list of strings.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        items = list(value)
    else:
        raise InputError(f"{name} must be a comma-separated string or a list of strings, got: {value!r}")
    return tuple(item.strip() for item in items if item.strip())


def load_config(config_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    """Load a YAML config file into a dict of DispatchConfig field values.

    Returns an empty dict when no path is given.

    Raises:
        FileNotFoundError: If the file does not exist.
        InputError: If the file is unreadable, not a mapping or has unknown keys.
    """
    if not config_path:
        return {}

    path = Path(config_path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InputError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    values = {}
    for key, value in data.items():
        normalized = str(key).replace("-", "_")
        if normalized not in CONFIG_KEYS:
            raise InputError(f"Unknown config key in {path}: {key}")
        values[CONFIG_KEYS[normalized]] = value
    return values


def _parse_timeout(value: Any) -> int:
    # bool is an int subclass and floats would truncate
    if isinstance(value, (bool, float)):
        raise InputError(f"--timeout must be an integer, got: {value}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InputError(f"--timeout must be an integer, got: {value}")


def _text(merged: Dict[str, Any], key: str) -> str:
    value = merged.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InputError(f"{key} must be a string, got: {value!r}")
    return value


def build_config(
    options: Dict[str, Any],
    file_values: Optional[Dict[str, Any]] = None,
) -> DispatchConfig:
    """
    Merge CLI options over config file values into a DispatchConfig.

    Args:
        options: Values from flags/environment; None means "not given"
        file_values: Values from load_config()

    Returns:
        DispatchConfig (not yet validated)

    Raises:
        InputError: If a value has the wrong type
    """
    merged = dict(file_values or {})
    merged.update({k: v for k, v in options.items() if v is not None})

    timeout = merged.get("timeout")
    return DispatchConfig(
        command=_text(merged, "command"),
        subscriptions=split_list(merged.get("subscriptions"), "subscriptions"),
        namespace=_text(merged, "namespace"),
        sensu_api_url=_text(merged, "sensu_api_url"),
        timeout=DEFAULT_TIMEOUT if timeout is None else _parse_timeout(timeout),
        runtime_assets=split_list(merged.get("runtime_assets"), "runtime_assets"),
        job_id=_text(merged, "job_id") or None,
        sensu_access_token=_text(merged, "sensu_access_token"),
        sensu_trusted_ca_file=_text(merged, "sensu_trusted_ca_file") or None,
        event_log=_text(merged, "event_log") or None,
    )


def with_job_id(config: DispatchConfig) -> DispatchConfig:
    """Return a config whose job id is fixed, generating a UUIDv4 if unset."""
    if config.job_id:
        return config
    return replace(config, job_id=str(uuid.uuid4()))
