"""Config settings – Settings base class and AuthorizationSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_authz.config.validation.errors import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def env_var(cls, field_name: str) -> str:
        """Return the environment variable that feeds *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class AuthorizationSettings(Settings):
    """Tunables of the permission engine, read from ``AUTHZ_*`` variables."""

    _prefix: ClassVar[str] = "AUTHZ"

    cache_ttl_seconds: float = 300.0
    subscribe_activity: str = "SUBSCRIBE"
    publish_activity: str = "PUBLISH"
    framework_owner: str = "UP_FRAMEWORK"
    channel_owner_prefix: str = "CHAN_ID"

    def _validate(self) -> None:
        if self.cache_ttl_seconds <= 0:
            raise InvalidSettingValueError(
                "cache_ttl_seconds", self.cache_ttl_seconds, "must be positive"
            )
        for name in (
            "subscribe_activity",
            "publish_activity",
            "framework_owner",
            "channel_owner_prefix",
        ):
            if not getattr(self, name):
                raise InvalidSettingValueError(name, getattr(self, name), "must not be empty")


__all__ = ["AuthorizationSettings", "Settings"]
