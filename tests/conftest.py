import pytest
from fastapi.testclient import TestClient

from donation_checkout.api.main import create_app
from donation_checkout.core.config import Settings


def make_settings(**overrides) -> Settings:
    values = {
        "STRIPE_SECRET_KEY": "sk_test_123",
        "STATIC_DIR": "does-not-exist",
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def production_settings():
    return make_settings(ENVIRONMENT="production")


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def production_client(production_settings):
    with TestClient(create_app(production_settings)) as c:
        yield c
