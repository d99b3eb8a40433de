import pytest

from quizclient import config
from quizclient.config import Config, is_loopback_host, resolve_api_base_url


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.setattr(Config, "API_URL", "")
    monkeypatch.setattr(Config, "PRODUCTION_API_URL", config.PRODUCTION_API_URL)
    monkeypatch.setattr(Config, "DEV_API_URL", config.DEV_API_URL)


@pytest.mark.parametrize("host", [None, "", "localhost", "localhost:8501", "127.0.0.1", "127.0.0.1:8501", "[::1]:8501"])
def test_loopback_hosts(host):
    assert is_loopback_host(host)


@pytest.mark.parametrize("host", ["quiz.example.com", "quiz.example.com:443", "10.0.0.5"])
def test_non_loopback_hosts(host):
    assert not is_loopback_host(host)


def test_explicit_override_wins():
    assert resolve_api_base_url("https://staging.test/api/", "quiz.example.com") == "https://staging.test/api"


def test_env_override_used_when_no_argument(monkeypatch):
    monkeypatch.setattr(Config, "API_URL", "https://env.test/api")
    assert resolve_api_base_url(host="localhost") == "https://env.test/api"


def test_production_address_off_loopback():
    assert resolve_api_base_url(host="quiz.example.com") == config.PRODUCTION_API_URL


def test_development_address_on_loopback():
    assert resolve_api_base_url(host="localhost:8501") == config.DEV_API_URL
