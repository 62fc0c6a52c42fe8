"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, Mapping, TypeVar

from mp_authz.config.settings.base import Settings
from mp_authz.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


def _is_required(field: dataclasses.Field[Any]) -> bool:
    return (
        field.default is dataclasses.MISSING
        and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
    )


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def values(self, settings_class: type[T]) -> dict[str, Any]:
        """Return the field values this source provides, already coerced."""

    def load(self, settings_class: type[T]) -> T:
        found = self.values(settings_class)
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            if field.name not in found and _is_required(field):
                raise MissingRequiredSettingError(
                    field.name, env_var=settings_class.env_var(field.name)
                )
        try:
            return settings_class(**found)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc


class EnvSettingsLoader(SettingsLoader):
    """Load settings from ``<PREFIX>_<FIELD>`` environment variables."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def values(self, settings_class: type[T]) -> dict[str, Any]:
        environ = self._environ if self._environ is not None else os.environ
        found: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = settings_class.env_var(field.name)
            raw = environ.get(env_key)
            if raw is not None:
                found[field.name] = self._coerce(field.name, env_key, raw, field.type)
        return found

    def _coerce(self, name: str, env_key: str, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        try:
            if type_hint is bool or type_hint == "bool":
                return value.lower() in ("1", "true", "yes", "on")
            if type_hint is int or type_hint == "int":
                return int(value)
            if type_hint is float or type_hint == "float":
                return float(value)
        except ValueError as exc:
            raise InvalidSettingValueError(name, value, str(exc), env_var=env_key) from exc
        return value


class DotenvSettingsLoader(EnvSettingsLoader):
    """Load a ``.env`` file into the environment, then read it like ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        super().__init__()
        self._env_file = env_file
        self._override = override

    def values(self, settings_class: type[T]) -> dict[str, Any]:
        from dotenv import load_dotenv

        load_dotenv(self._env_file, override=self._override)
        return super().values(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
