"""Server settings resolution from the environment."""

import pytest

from survey_server.config import ServerSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("SERVER_HOST", "SERVER_PORT", "SERVER_CORS_ORIGINS", "SERVER_CATALOG_PATH",
                "SERVER_LOG_LEVEL", "ADMIN_API_KEY", "TRUSTED_PROXY_SECRET",
                "SERVER_DEBUG_ERRORS"):
        monkeypatch.delenv(var, raising=False)


class TestLoadSettings:

    def test_defaults_match_dataclass(self):
        assert load_settings() == ServerSettings()

    def test_origins_are_split_and_trimmed(self, monkeypatch):
        monkeypatch.setenv("SERVER_CORS_ORIGINS", " http://a.test, ,http://b.test ")
        assert load_settings().cors_origins == ["http://a.test", "http://b.test"]

    def test_empty_secrets_mean_disabled(self, monkeypatch):
        monkeypatch.setenv("ADMIN_API_KEY", "")
        monkeypatch.setenv("TRUSTED_PROXY_SECRET", "")
        monkeypatch.setenv("SERVER_CATALOG_PATH", "")
        s = load_settings()
        assert s.admin_api_key is None
        assert s.trusted_proxy_secret is None
        assert s.catalog_path is None

    @pytest.mark.parametrize("raw, expected", [("true", True), ("YES", True), ("0", False), ("", False)])
    def test_debug_errors_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SERVER_DEBUG_ERRORS", raw)
        assert load_settings().debug_errors is expected

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("SERVER_LOG_LEVEL", "debug")
        monkeypatch.setenv("SERVER_PORT", "9000")
        s = load_settings()
        assert (s.log_level, s.port) == ("DEBUG", 9000)
