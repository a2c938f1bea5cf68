"""Unit tests for Settings validators and env-var loading in config.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr, ValidationError

from avis.config import Settings


# ─────────────────────────────────────────────────────────────
# Validator tests
# ─────────────────────────────────────────────────────────────


class TestParseCorsOrigins:
    """Tests for parse_cors_origins validator."""

    def test_none_returns_empty_list(self) -> None:
        assert Settings.parse_cors_origins(None) == []

    def test_csv_string(self) -> None:
        result = Settings.parse_cors_origins("http://a.test, http://b.test")
        assert result == ["http://a.test", "http://b.test"]

    def test_json_array_string(self) -> None:
        result = Settings.parse_cors_origins('["http://a.test", "http://b.test"]')
        assert result == ["http://a.test", "http://b.test"]

    def test_strips_trailing_slash(self) -> None:
        result = Settings.parse_cors_origins("http://a.test/, http://b.test")
        assert result == ["http://a.test", "http://b.test"]

    def test_empty_string(self) -> None:
        assert Settings.parse_cors_origins("  ") == []

    def test_list_passthrough(self) -> None:
        assert Settings.parse_cors_origins(["http://a.test"]) == ["http://a.test"]


class TestRequireJwtSecretInProduction:
    """Tests for require_jwt_secret_in_production validator."""

    def _validate(self, secret: str | None, env: str = "development") -> SecretStr | None:
        info = MagicMock()
        info.data = {"env": env}
        value = SecretStr(secret) if secret is not None else None
        return Settings.require_jwt_secret_in_production(value, info)

    def test_dev_allows_missing_secret(self) -> None:
        assert self._validate(None) is None

    def test_prod_rejects_missing_secret(self) -> None:
        with pytest.raises(ValueError, match="JWT_SECRET must be set"):
            self._validate(None, env="production")

    def test_prod_rejects_empty_secret(self) -> None:
        with pytest.raises(ValueError, match="JWT_SECRET must be set"):
            self._validate("", env="production")

    def test_prod_accepts_secret(self) -> None:
        result = self._validate("s3cret", env="production")
        assert result is not None
        assert result.get_secret_value() == "s3cret"

    def test_prod_settings_without_secret_fail(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AVIS_ENV", "production")
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValidationError, match="JWT_SECRET must be set"):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestEnvironmentFlags:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AVIS_ENV", raising=False)
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.is_development
        assert not settings.is_production
        assert settings.metrics_key == "k6_performance"
        assert settings.jwt_expires_minutes == 1440

    def test_production(self) -> None:
        settings = Settings(_env_file=None, AVIS_ENV="production", jwt_secret="x")  # type: ignore[call-arg]
        assert settings.is_production
        assert not settings.is_development


# ─────────────────────────────────────────────────────────────
# Comprehensive env-var loading test
# ─────────────────────────────────────────────────────────────

# Every Settings field mapped to (field_name, ENV_VAR_NAME, env_string_value, expected).
# Aliased fields use their alias; all others use UPPER_CASE(field_name).
# List fields use JSON array syntax.
_ENV_FIELD_SPECS: list[tuple[str, str, str, object]] = [
    # --- Core (aliased) ---
    ("env", "AVIS_ENV", "staging", "staging"),
    ("debug", "AVIS_DEBUG", "true", True),
    ("log_level", "AVIS_LOG_LEVEL", "WARNING", "WARNING"),
    # --- Storage ---
    ("database_url", "DATABASE_URL", "postgresql://u:p@db.test/avis", "postgresql://u:p@db.test/avis"),
    ("redis_url", "REDIS_URL", "redis://cache.test:6379/1", "redis://cache.test:6379/1"),
    ("metrics_key", "METRICS_KEY", "perf", "perf"),
    # --- Auth ---
    ("jwt_secret", "JWT_SECRET", "s3cret", "s3cret"),
    ("jwt_algorithm", "JWT_ALGORITHM", "HS512", "HS512"),
    ("jwt_expires_minutes", "JWT_EXPIRES_MINUTES", "60", 60),
    ("bcrypt_rounds", "BCRYPT_ROUNDS", "12", 12),
    ("auth_rate_limit", "AUTH_RATE_LIMIT", "5/minute", "5/minute"),
    # --- HTTP ---
    ("cors_origins", "CORS_ORIGINS", '["http://app.test/"]', ["http://app.test"]),
]

_SECRET_FIELDS = {"jwt_secret"}


class TestSettingsEnvLoading:
    """Verify every Settings field can be loaded from its env var."""

    def test_all_fields_loadable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for _field, env_var, env_val, _expected in _ENV_FIELD_SPECS:
            monkeypatch.setenv(env_var, env_val)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        for field_name, env_var, _env_val, expected in _ENV_FIELD_SPECS:
            actual = getattr(settings, field_name)
            if field_name in _SECRET_FIELDS:
                actual = actual.get_secret_value()
            assert actual == expected, (
                f"Field {field_name!r} (env={env_var}): expected {expected!r}, got {actual!r}"
            )

    def test_field_spec_covers_all_settings_fields(self) -> None:
        model_fields = set(Settings.model_fields.keys())
        spec_fields = {field_name for field_name, *_ in _ENV_FIELD_SPECS}
        missing = model_fields - spec_fields
        assert not missing, f"Fields missing from _ENV_FIELD_SPECS: {missing}"
