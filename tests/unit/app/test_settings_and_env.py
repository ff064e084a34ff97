import warnings

import pytest

from pinstore.app import env as env_module
from pinstore.app.env import Env, get_env
from pinstore.app.settings import DEFAULT_WEBHASH_API_URL, Settings


@pytest.fixture(autouse=True)
def _reset_env_cache():
    get_env.cache_clear()
    yield
    get_env.cache_clear()


def test_settings_defaults(monkeypatch):
    for name in ("WEBHASH_API_URL", "WEBHASH_API_KEY", "MONGODB_URI", "LIST_CACHE_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.webhash_api_url == DEFAULT_WEBHASH_API_URL
    assert s.webhash_api_key is None
    assert s.mongodb_uri is None
    assert s.webhash_timeout_seconds == 50
    assert s.proxy_route_timeout_seconds == 60
    assert s.list_cache_ttl_seconds == 30


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("WEBHASH_API_KEY", "secret")
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    monkeypatch.setenv("LIST_CACHE_TTL_SECONDS", "5")
    s = Settings(_env_file=None)
    assert s.webhash_api_key == "secret"
    assert s.mongodb_uri == "mongodb://db:27017"
    assert s.list_cache_ttl_seconds == 5


@pytest.mark.parametrize(
    "raw, expected",
    [("prod", Env.PROD), ("production", Env.PROD), ("development", Env.DEV), ("test", Env.TEST)],
)
def test_env_aliases(monkeypatch, raw, expected):
    monkeypatch.setenv("APP_ENV", raw)
    assert get_env() is expected


def test_unknown_env_warns_and_defaults_to_local(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging-ish")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        assert get_env() is Env.LOCAL
    assert any("staging-ish" in str(w.message) for w in caught)


def test_is_prod_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    assert env_module.is_prod() is True
    get_env.cache_clear()
    monkeypatch.setenv("APP_ENV", "test")
    assert env_module.is_prod() is False
