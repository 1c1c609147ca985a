from pathlib import Path

from app.config import AppConfig, load_config
from app.fetch import RetryPolicy, SourceEndpoint


def test_defaults(monkeypatch):
    for name in ("OUTPUT_DIR", "FETCH_RETRIES", "FETCH_RETRY_DELAY_MS", "APP_ENV", "MAX_IDENTIFIER", "USERS_URL"):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.output_dir == Path("output")
    assert config.retry_policy() == RetryPolicy(retries=3, delay_seconds=1.0)
    assert config.max_identifier == 100_000
    assert not config.is_development
    assert config.endpoints()[0] == SourceEndpoint("users", "https://jsonplaceholder.typicode.com/users")
    assert [e.label for e in config.endpoints()] == ["users", "posts", "comments"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OUTPUT_DIR", "/tmp/csv-out")
    monkeypatch.setenv("FETCH_RETRIES", "5")
    monkeypatch.setenv("FETCH_RETRY_DELAY_MS", "250")
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("POSTS_URL", "http://localhost:9000/posts")
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("MAX_IDENTIFIER", "0")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_config()

    assert config.output_dir == Path("/tmp/csv-out")
    assert config.retry_policy() == RetryPolicy(retries=5, delay_seconds=0.25)
    assert config.fetch.timeout_seconds == 2.5
    assert config.sources.posts_url == "http://localhost:9000/posts"
    assert config.is_development
    assert config.max_identifier is None
    assert config.server.port == 8080
    assert config.log_level == "DEBUG"


def test_app_config_is_constructible_without_environment():
    assert AppConfig().fetch.retries == 3


def test_negative_retries_are_clamped(monkeypatch):
    monkeypatch.setenv("FETCH_RETRIES", "-4")

    assert load_config().retry_policy().retries == 0
