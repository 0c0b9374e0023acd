"""Tests for environment settings."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError
from vinylmatch.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from .env file and shell environment."""
    for key in list(os.environ.keys()):
        if key.startswith(("VINYLMATCH_", "DISCOGS_")):
            monkeypatch.delenv(key, raising=False)
    # Change to temp dir so Settings won't find .env file
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.discogs_token is None
        assert settings.discogs_user_agent == "VinylMatch/1.0"
        assert settings.discogs_api_base == "https://api.discogs.com"
        assert settings.cache_dir == Path("cache") / "discogs"
        assert settings.log_level == "WARNING"


class TestEnvironment:
    """Tests for reading environment variables."""

    @pytest.mark.parametrize(
        "var", ["DISCOGS_TOKEN", "VINYLMATCH_DISCOGS_TOKEN"], ids=["bare", "prefixed"]
    )
    def test_token_aliases(self, monkeypatch: pytest.MonkeyPatch, var: str) -> None:
        monkeypatch.setenv(var, "abc123")

        assert Settings().discogs_token == "abc123"

    def test_user_agent_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DISCOGS_USER_AGENT", "MyApp/2.0")

        assert Settings().discogs_user_agent == "MyApp/2.0"

    def test_prefixed_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VINYLMATCH_CACHE_DIR", "/var/cache/vm")
        monkeypatch.setenv("VINYLMATCH_DISCOGS_API_BASE", "http://localhost:9000")
        monkeypatch.setenv("VINYLMATCH_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.cache_dir == Path("/var/cache/vm")
        assert settings.discogs_api_base == "http://localhost:9000"
        assert settings.log_level == "DEBUG"

    def test_env_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("DISCOGS_TOKEN=from-file\n", encoding="utf-8")

        assert Settings().discogs_token == "from-file"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestLogLevel:
    """Tests for LogLevel type validation."""

    @pytest.mark.parametrize(
        ("input_level", "expected"),
        [("debug", "DEBUG"), ("Info", "INFO"), ("WaRnInG", "WARNING")],
    )
    def test_normalizes_to_uppercase(self, input_level: str, expected: str) -> None:
        assert Settings(log_level=input_level).log_level == expected

    @pytest.mark.parametrize("level", ["TRACE", "verbose", ""])
    def test_rejects_invalid_levels(self, level: str) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level=level)


class TestConversions:
    """Tests for building library configs from settings."""

    def test_to_discogs_config(self) -> None:
        config = Settings(
            discogs_token="abc", discogs_user_agent="MyApp/2.0"
        ).to_discogs_config()

        assert config.token == "abc"
        assert config.has_token
        assert config.user_agent == "MyApp/2.0"
        assert config.api_base == "https://api.discogs.com"

    def test_to_cache_config(self) -> None:
        config = Settings(cache_dir=Path("/data/links")).to_cache_config()

        assert config.album_path == Path("/data/links/albums.json")
        assert config.curated_path == Path("/data/links/curated-links.json")
