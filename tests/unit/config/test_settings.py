"""Unit tests for config settings, loaders and SearchSettings validation."""

from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from catalog_search.config.settings import (
    HARD_MAX_LIMIT,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SearchSettings,
    Settings,
)
from catalog_search.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from catalog_search.kernel.errors import ApplicationError


# ---------------------------------------------------------------------------
# Concrete settings classes used across tests
# ---------------------------------------------------------------------------


@dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    host: str = "localhost"
    port: int = 8080
    debug: bool = False
    ratio: float = 0.5
    allowed_origins: list[str] = field(default_factory=list)


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"

    dsn: str


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_defaults_when_unset(self) -> None:
        assert EnvSettingsLoader().load(AppSettings) == AppSettings()

    def test_loads_typed_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOST", "example.com")
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_RATIO", "0.25")
        monkeypatch.setenv("APP_ALLOWED_ORIGINS", "a.com, b.com,,")
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.host == "example.com"
        assert settings.port == 9000
        assert settings.ratio == 0.25
        assert settings.allowed_origins == ["a.com", "b.com"]

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("ON", True), ("1", True), ("no", False), ("0", False)])
    def test_bool_values(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        monkeypatch.setenv("APP_DEBUG", raw)
        assert EnvSettingsLoader().load(AppSettings).debug is expected

    def test_unparseable_value_raises_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "eighty")
        with pytest.raises(ConfigError, match="APP_PORT") as exc_info:
            EnvSettingsLoader().load(AppSettings)
        assert isinstance(exc_info.value.cause, ValueError)

    def test_missing_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REQ_DSN", raising=False)
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader().load(RequiredSettings)
        assert exc_info.value.setting_name == "REQ_DSN"

    def test_required_present(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQ_DSN", "postgresql+asyncpg://localhost/catalog")
        assert EnvSettingsLoader().load(RequiredSettings).dsn.endswith("/catalog")


# ---------------------------------------------------------------------------
# SearchSettings
# ---------------------------------------------------------------------------


class TestSearchSettings:
    def test_defaults(self) -> None:
        s = SearchSettings()
        assert s.text_search_language == "spanish"
        assert s.full_text_min_length == 3
        assert s.cache_namespace == "product_search"
        assert s.default_limit == 20
        assert s.max_limit == HARD_MAX_LIMIT == 100
        assert s.cache_ttl_seconds == 60

    def test_loaded_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CATALOG_SEARCH_TEXT_SEARCH_LANGUAGE", "english")
        monkeypatch.setenv("CATALOG_SEARCH_MAX_LIMIT", "50")
        monkeypatch.setenv("CATALOG_SEARCH_CACHE_TTL_SECONDS", "300")
        s = EnvSettingsLoader().load(SearchSettings)
        assert s.text_search_language == "english"
        assert s.max_limit == 50
        assert s.cache_ttl_seconds == 300

    @pytest.mark.parametrize(
        ("kwargs", "setting"),
        [
            ({"max_limit": 0}, "max_limit"),
            ({"max_limit": 101}, "max_limit"),
            ({"default_limit": 0}, "default_limit"),
            ({"default_limit": 30, "max_limit": 25}, "default_limit"),
            ({"full_text_min_length": 0}, "full_text_min_length"),
            ({"text_search_language": "english'; --"}, "text_search_language"),
            ({"cache_namespace": ""}, "cache_namespace"),
            ({"cache_ttl_seconds": -1}, "cache_ttl_seconds"),
        ],
    )
    def test_invalid_values(self, kwargs: dict, setting: str) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            SearchSettings(**kwargs)
        assert exc_info.value.setting_name == setting
        assert exc_info.value.code == "invalid_setting_value"

    def test_invalid_env_value_propagates_unwrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CATALOG_SEARCH_MAX_LIMIT", "500")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(SearchSettings)

    def test_config_errors_are_application_errors(self) -> None:
        assert issubclass(ConfigError, ApplicationError)


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CATALOG_SEARCH_DEFAULT_LIMIT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("CATALOG_SEARCH_DEFAULT_LIMIT=10\n")
        try:
            s = DotenvSettingsLoader(str(env_file)).load(SearchSettings)
        finally:
            monkeypatch.delenv("CATALOG_SEARCH_DEFAULT_LIMIT", raising=False)
        assert s.default_limit == 10

    def test_environment_wins_without_override(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CATALOG_SEARCH_CACHE_NAMESPACE", "from_env")
        env_file = tmp_path / ".env"
        env_file.write_text("CATALOG_SEARCH_CACHE_NAMESPACE=from_file\n")
        s = DotenvSettingsLoader(str(env_file)).load(SearchSettings)
        assert s.cache_namespace == "from_env"

    def test_override(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CATALOG_SEARCH_CACHE_NAMESPACE", "from_env")
        env_file = tmp_path / ".env"
        env_file.write_text("CATALOG_SEARCH_CACHE_NAMESPACE=from_file\n")
        s = DotenvSettingsLoader(str(env_file), override=True).load(SearchSettings)
        assert s.cache_namespace == "from_file"
