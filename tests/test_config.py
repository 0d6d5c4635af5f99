import pytest

from config import Settings


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "mongodb://db.internal:27017")
    monkeypatch.setenv("DATABASE_NAME", "orders")
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_live_abc")
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", "secret")
    monkeypatch.setenv("FRONTEND_URL", "https://food.example.com/")
    monkeypatch.setenv("JWT_SECRET", "jwt")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings.from_env()

    assert settings.database_url == "mongodb://db.internal:27017"
    assert settings.database_name == "orders"
    assert settings.razorpay_key_id == "rzp_live_abc"
    assert settings.frontend_url == "https://food.example.com"
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.log_level == "DEBUG"
    assert settings.port == 9000
    assert settings.razorpay_currency == "INR"
    assert settings.require() is settings


@pytest.mark.parametrize("missing", ["razorpay_key_id", "razorpay_key_secret", "jwt_secret"])
def test_require_rejects_missing_credentials(missing):
    values = {"razorpay_key_id": "id", "razorpay_key_secret": "secret", "jwt_secret": "jwt"}
    values[missing] = ""
    with pytest.raises(ValueError):
        Settings(**values).require()
