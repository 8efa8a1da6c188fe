import pytest

from checkout_service.config import ConfigurationError, Settings, load_settings

ENV_VARS = ["STRIPE_SECRET_KEY", "FRONTEND_URL", "HOST", "PORT", "PAYMENT_TIMEOUT_SECONDS", "LOG_LEVEL", "LOG_FILE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # no stray .env or shell variables
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_secret_key_fails():
    with pytest.raises(ConfigurationError, match="STRIPE_SECRET_KEY"):
        load_settings()


def test_empty_secret_key_fails(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_defaults(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_x")
    settings = load_settings()
    assert settings.port == 2222
    assert settings.frontend_url == "http://localhost:5173"
    assert settings.success_url == "http://localhost:5173/success"
    assert settings.cancel_url == "http://localhost:5173/payment/error"


def test_overrides(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_x")
    monkeypatch.setenv("FRONTEND_URL", "https://shop.example.com/")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("PAYMENT_TIMEOUT_SECONDS", "3.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.frontend_url == "https://shop.example.com"
    assert settings.port == 8080
    assert settings.payment_timeout_seconds == 3.5
    assert settings.log_level == "DEBUG"


def test_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("STRIPE_SECRET_KEY=sk_test_from_file\nPORT=9000\n")
    settings = load_settings()
    assert settings.stripe_secret_key == "sk_test_from_file"
    assert settings.port == 9000


def test_blank_frontend_url_uses_default():
    settings = Settings(stripe_secret_key="sk_test_x", frontend_url="")
    assert settings.frontend_url == "http://localhost:5173"


@pytest.mark.parametrize("port", ["abc", "0", "70000"])
def test_invalid_port_fails(monkeypatch, port):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_x")
    monkeypatch.setenv("PORT", port)
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_settings()
