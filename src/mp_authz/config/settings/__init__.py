"""Config settings – 12-factor env-based configuration."""
from mp_authz.config.settings.base import AuthorizationSettings, Settings
from mp_authz.config.settings.factory import SettingsFactory
from mp_authz.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "AuthorizationSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
