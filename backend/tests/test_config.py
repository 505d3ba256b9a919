# backend/tests/test_config.py
"""
Tests for environment-dependent settings rules.
"""

import pytest
from pydantic import ValidationError

from investment_tracker.config import Settings, TEST_DATABASE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "BASE_CURRENCY", "SCHEDULER_ENABLED"):
        monkeypatch.delenv(name, raising=False)


class TestEnvironmentRules:
    def test_test_environment_defaults(self):
        s = Settings(environment="test", scheduler_enabled=True)

        assert s.database_url == TEST_DATABASE_URL
        assert s.is_sqlite
        assert s.scheduler_enabled is False

    def test_development_requires_database_url(self):
        with pytest.raises(ValidationError, match="DATABASE_URL is required"):
            Settings(environment="development")

    def test_development_sqlite_warns(self):
        with pytest.warns(UserWarning):
            Settings(environment="development", database_url="sqlite:///./dev.db")

    def test_production_rejects_sqlite(self):
        with pytest.raises(ValidationError, match="Production requires PostgreSQL"):
            Settings(environment="production", database_url="sqlite:///./prod.db")

    def test_production_postgresql(self):
        s = Settings(environment="production", database_url="postgresql://u:p@db:5432/portfolio")

        assert s.is_postgresql
        assert s.scheduler_enabled is True


class TestValuationSettings:
    def test_base_currency_upper_cased(self):
        assert Settings(environment="test", base_currency="usd").base_currency == "USD"

    def test_base_currency_length(self):
        with pytest.raises(ValidationError):
            Settings(environment="test", base_currency="LIRA")
