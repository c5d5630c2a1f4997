import sys
import json
import logging
import pytest
from pydantic import ValidationError

from donation_checkout.api.main import run
from donation_checkout.core.config import Settings, get_settings
from donation_checkout.core.logging_config import JsonFormatter


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_env")
    for name in ("PORT", "ENVIRONMENT", "STATIC_DIR"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.STRIPE_SECRET_KEY == "sk_test_env"
    assert settings.PORT == 3000
    assert settings.ENVIRONMENT == "development"
    assert settings.is_production is False


def test_environment_variables_are_case_insensitive(monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.setenv("stripe_secret_key", "sk_test_lower")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENVIRONMENT", "Production")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.is_production is True


def test_secret_key_is_required(monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_blank_secret_key_is_rejected():
    with pytest.raises(ValidationError, match="STRIPE_SECRET_KEY"):
        Settings(STRIPE_SECRET_KEY="   ", _env_file=None)


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.PORT = 9999


def test_run_refuses_to_start_without_secret_key(monkeypatch, mocker):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.setattr(
        "donation_checkout.api.main.get_settings",
        lambda: Settings(_env_file=None)
    )
    mocker.patch("donation_checkout.api.main.configure_logging")
    mock_serve = mocker.patch("donation_checkout.api.main.uvicorn.run")

    with pytest.raises(SystemExit) as exc_info:
        run()

    assert exc_info.value.code == 1
    mock_serve.assert_not_called()


def test_run_serves_on_configured_port(monkeypatch, mocker, settings):
    monkeypatch.setattr("donation_checkout.api.main.get_settings", lambda: settings)
    mocker.patch("donation_checkout.api.main.configure_logging")
    mock_serve = mocker.patch("donation_checkout.api.main.uvicorn.run")

    run()

    assert mock_serve.call_args.kwargs["port"] == 3000
    assert mock_serve.call_args.kwargs["host"] == "0.0.0.0"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "donation_checkout.test", logging.ERROR, __file__, 1, "failed %s", ("checkout",), sys.exc_info()
        )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "ERROR"
    assert payload["message"] == "failed checkout"
    assert "RuntimeError: boom" in payload["exception"]


def test_json_formatter_adds_checkout_context():
    record = logging.LogRecord(
        "donation_checkout.test", logging.INFO, __file__, 7, "created", (), None
    )
    record.session_id = "cs_test_1"
    record.mode = "payment"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["session_id"] == "cs_test_1"
    assert payload["mode"] == "payment"
    assert payload["timestamp"].endswith("+00:00")
    assert "exception" not in payload
