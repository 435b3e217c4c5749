"""Tests for ClientConfig."""

import dataclasses

import pytest

from svgmaker.config import DEFAULT_BASE_URL, ClientConfig
from svgmaker.errors import ErrorKind, SVGMakerError


class TestDefaults:
    def test_default_values(self):
        config = ClientConfig(api_key="k")
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout == 30.0
        assert config.max_retries == 3
        assert config.retry_backoff_factor == 300
        assert config.retry_status_codes == frozenset({408, 429, 500, 502, 503, 504})
        assert config.rate_limit == 60
        assert config.logging is False

    def test_is_immutable(self):
        config = ClientConfig(api_key="k")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.timeout = 5  # type: ignore[misc]

    def test_status_codes_coerced_to_frozenset(self):
        config = ClientConfig(api_key="k", retry_status_codes=[500, 503])
        assert config.retry_status_codes == frozenset({500, 503})


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"timeout": 0},
            {"max_retries": -1},
            {"rate_limit": -5},
            {"log_level": "verbose"},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(SVGMakerError) as exc_info:
            ClientConfig(api_key="k", **overrides)
        assert exc_info.value.kind is ErrorKind.VALIDATION


class TestMerged:
    def test_returns_new_instance(self):
        original = ClientConfig(api_key="k")

        updated = original.merged(timeout=5.0, max_retries=1)

        assert updated.timeout == 5.0
        assert updated.max_retries == 1
        assert original.timeout == 30.0

    def test_unknown_option_rejected(self):
        with pytest.raises(SVGMakerError, match="retries"):
            ClientConfig(api_key="k").merged(retries=3)


class TestFromEnv:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SVGMAKER_API_KEY", "env-key")
        monkeypatch.setenv("SVGMAKER_TIMEOUT", "12.5")
        monkeypatch.setenv("SVGMAKER_RATE_LIMIT", "10")

        config = ClientConfig.from_env()

        assert config.api_key == "env-key"
        assert config.timeout == 12.5
        assert config.rate_limit == 10

    def test_overrides_take_precedence(self, monkeypatch):
        monkeypatch.setenv("SVGMAKER_MAX_RETRIES", "7")

        config = ClientConfig.from_env(max_retries=1)

        assert config.max_retries == 1
