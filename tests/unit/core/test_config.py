# tests/unit/core/test_config.py
from stockroom.core.config import Settings


def test_email_lists_parse_comma_separated_env(monkeypatch):
    monkeypatch.setenv("PURCHASING_EMAILS", "buyer@test.com, boss@test.com,,")
    settings = Settings()
    assert settings.PURCHASING_EMAILS == ["buyer@test.com", "boss@test.com"]


def test_threshold_defaults():
    settings = Settings()
    assert settings.LOW_STOCK_THRESHOLD == 5
    assert settings.CRITICAL_STOCK_THRESHOLD == 2
    assert settings.REORDER_POINT == 10
    assert settings.REORDER_TARGET_STOCK == 100
    assert settings.STANDARD_REORDER_QUANTITY == 50
