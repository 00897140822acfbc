"""
Settings loading utilities.

Supports environment variable interpolation and config inheritance.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from mlbridge.config.settings import BackendConfig, ClientSettings, LoggingConfig


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_settings(
    config_path: Path,
    base_path: Path | None = None,
) -> ClientSettings:
    """
    Load client settings from YAML file(s).

    Example file:
        backend:
          base_url: ${MLBRIDGE_URL:http://127.0.0.1:8787}
          timeout_s: 600
        logging:
          level: DEBUG

    Args:
        config_path: Path to the main settings file.
        base_path: Optional base settings for inheritance. Defaults to a
            ``base.yaml`` next to ``config_path`` when one exists.

    Returns:
        Fully validated ClientSettings instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    merged = _deep_merge(base_data, load_yaml(config_path))

    backend_data = merged.get("backend") or {}
    # Empty strings come from unset ${VAR} interpolations
    timeout = backend_data.get("timeout_s")
    backend = BackendConfig(
        base_url=backend_data.get("base_url") or "http://127.0.0.1:8787",
        timeout_s=float(timeout) if timeout not in (None, "") else None,
        verify_tls=backend_data.get("verify_tls", True),
        headers={
            k: v for k, v in (backend_data.get("headers") or {}).items() if v != ""
        },
    )

    logging_data = merged.get("logging") or {}
    logging = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=logging_data.get("json_output", False),
    )

    return ClientSettings(backend=backend, logging=logging)
