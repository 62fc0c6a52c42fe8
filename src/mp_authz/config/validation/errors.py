"""Errors raised while loading or validating engine settings."""
from __future__ import annotations

from mp_authz.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings could not be loaded, or loaded values are unusable."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A field without a default was provided by no loader or override."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str, *, env_var: str | None = None) -> None:
        where = f" (set {env_var})" if env_var else ""
        super().__init__(
            f"Required setting '{setting_name}' is missing{where}",
            detail={"setting": setting_name, "env_var": env_var},
        )
        self.setting_name = setting_name
        self.env_var = env_var


class InvalidSettingValueError(ConfigError):
    """A setting was supplied but cannot drive the engine.

    ``env_var`` names the variable the raw value came from, when a loader
    read it from the environment.
    """
    default_code = "invalid_setting_value"

    def __init__(
        self,
        setting_name: str,
        value: object,
        reason: str,
        *,
        env_var: str | None = None,
    ) -> None:
        source = f" from {env_var}" if env_var else ""
        super().__init__(
            f"Setting '{setting_name}'{source} has invalid value {value!r}: {reason}",
            detail={
                "setting": setting_name,
                "value": repr(value),
                "reason": reason,
                "env_var": env_var,
            },
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason
        self.env_var = env_var


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
