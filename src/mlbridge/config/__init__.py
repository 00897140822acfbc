"""
Configuration management with typed Pydantic models.

Provides backend connection and logging settings, loadable from YAML.
"""

from mlbridge.config.loader import load_settings
from mlbridge.config.settings import BackendConfig, ClientSettings, LoggingConfig

__all__ = [
    "BackendConfig",
    "ClientSettings",
    "LoggingConfig",
    "load_settings",
]
