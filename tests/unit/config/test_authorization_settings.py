"""Unit tests – AuthorizationSettings, loaders and SettingsFactory."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import pytest

from mp_authz.config import (
    AuthorizationSettings,
    ConfigError,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
    SettingsFactory,
)


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"
    api_key: str


class TestAuthorizationSettings:
    def test_defaults(self) -> None:
        s = AuthorizationSettings()
        assert s.cache_ttl_seconds == 300.0
        assert s.subscribe_activity == "SUBSCRIBE"
        assert s.publish_activity == "PUBLISH"
        assert s.framework_owner == "UP_FRAMEWORK"
        assert s.channel_owner_prefix == "CHAN_ID"

    @pytest.mark.parametrize("ttl", [0, -1.5])
    def test_ttl_must_be_positive(self, ttl: float) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            AuthorizationSettings(cache_ttl_seconds=ttl)
        assert exc_info.value.setting_name == "cache_ttl_seconds"
        assert exc_info.value.env_var is None
        assert exc_info.value.detail["reason"] == "must be positive"

    def test_names_must_not_be_empty(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            AuthorizationSettings(subscribe_activity="")

    def test_env_var_names(self) -> None:
        assert AuthorizationSettings.env_var("framework_owner") == "AUTHZ_FRAMEWORK_OWNER"
        assert Settings.env_var("debug") == "DEBUG"

    def test_config_errors_share_base(self) -> None:
        assert issubclass(InvalidSettingValueError, ConfigError)
        assert issubclass(MissingRequiredSettingError, ConfigError)


class TestEnvSettingsLoader:
    def test_reads_prefixed_variables(self) -> None:
        env = {"AUTHZ_CACHE_TTL_SECONDS": "60", "AUTHZ_FRAMEWORK_OWNER": "PORTAL"}
        s = EnvSettingsLoader(env).load(AuthorizationSettings)
        assert s.cache_ttl_seconds == 60.0
        assert s.framework_owner == "PORTAL"
        assert s.publish_activity == "PUBLISH"

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHZ_SUBSCRIBE_ACTIVITY", "VIEW")
        assert EnvSettingsLoader().load(AuthorizationSettings).subscribe_activity == "VIEW"

    def test_bad_number(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"AUTHZ_CACHE_TTL_SECONDS": "soon"}).load(AuthorizationSettings)
        err = exc_info.value
        assert err.setting_name == "cache_ttl_seconds"
        assert err.env_var == "AUTHZ_CACHE_TTL_SECONDS"
        assert err.detail == {
            "setting": "cache_ttl_seconds",
            "value": "'soon'",
            "reason": err.reason,
            "env_var": "AUTHZ_CACHE_TTL_SECONDS",
        }
        assert "AUTHZ_CACHE_TTL_SECONDS" in err.message

    def test_invalid_value_rejected_by_validation(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"AUTHZ_CACHE_TTL_SECONDS": "0"}).load(AuthorizationSettings)

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader({}).load(RequiredSettings)
        assert exc_info.value.env_var == "REQ_API_KEY"
        assert exc_info.value.detail["setting"] == "api_key"


class TestDotenvSettingsLoader:
    def test_loads_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AUTHZ_CACHE_TTL_SECONDS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("AUTHZ_CACHE_TTL_SECONDS=45\n")
        try:
            s = DotenvSettingsLoader(str(env_file)).load(AuthorizationSettings)
        finally:
            monkeypatch.delenv("AUTHZ_CACHE_TTL_SECONDS", raising=False)
        assert s.cache_ttl_seconds == 45.0


class TestSettingsFactory:
    def test_later_loaders_and_overrides_win(self) -> None:
        s = SettingsFactory.create(
            AuthorizationSettings,
            loaders=[
                EnvSettingsLoader({"AUTHZ_CACHE_TTL_SECONDS": "10", "AUTHZ_PUBLISH_ACTIVITY": "POST"}),
                EnvSettingsLoader({"AUTHZ_CACHE_TTL_SECONDS": "20"}),
            ],
            overrides={"framework_owner": "ROOT"},
        )
        assert s.cache_ttl_seconds == 20.0
        assert s.publish_activity == "POST"
        assert s.framework_owner == "ROOT"

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(RequiredSettings, loaders=[EnvSettingsLoader({})])

    def test_required_from_override(self) -> None:
        s = SettingsFactory.create(RequiredSettings, overrides={"api_key": "k"})
        assert s.api_key == "k"

    def test_unknown_field_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            SettingsFactory.create(AuthorizationSettings, overrides={"nope": 1})
