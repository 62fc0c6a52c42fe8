"""Config – 12-factor settings and loaders."""

from mp_authz.config.settings import (
    AuthorizationSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mp_authz.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "AuthorizationSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
