"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from mp_authz.config.settings.base import Settings
from mp_authz.config.settings.loaders import SettingsLoader
from mp_authz.config.validation.errors import (
    ConfigError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


class SettingsFactory:
    """Merge values from several loaders plus explicit overrides into one settings object.

    Loaders are applied in order; later loaders override earlier ones for
    overlapping fields.  *overrides* take the highest priority.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Raises
        ------
        MissingRequiredSettingError
            When a required field is absent after all sources are merged.
        InvalidSettingValueError
            When a value cannot be coerced or fails validation.
        ConfigError
            On any other construction failure.
        """
        merged: dict[str, Any] = {}
        for loader in loaders or []:
            merged.update(loader.values(settings_cls))
        if overrides:
            merged.update(overrides)

        for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
            if field.name in merged:
                continue
            if (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
            ):
                raise MissingRequiredSettingError(
                    field.name, env_var=settings_cls.env_var(field.name)
                )

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(
                f"Failed to construct {settings_cls.__name__}: {exc}", cause=exc
            ) from exc


__all__ = ["SettingsFactory"]
