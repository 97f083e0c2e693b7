"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from medsafety.core.config import Settings


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("CACHE_BACKEND", "CACHE_TTL_SECONDS", "ADVERSE_EVENT_RATE_THRESHOLD", "REDIS_URL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.cache_backend == "redis"
        assert settings.cache_key_prefix == "medsafety:"
        assert settings.cache_ttl_seconds == 86400
        assert settings.adverse_event_rate_threshold == 10.0
        assert settings.top_medications_limit == 10

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "memory")
        monkeypatch.setenv("adverse_event_rate_threshold", "5.5")

        settings = Settings(_env_file=None)

        assert settings.cache_backend == "memory"
        assert settings.adverse_event_rate_threshold == 5.5

    def test_invalid_backend_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "memcached")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
