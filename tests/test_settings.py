import pytest
from pydantic import ValidationError

from errors import ConfigurationError
from settings import DEFAULT_API_VERSION, Settings

ENV_VARS = (
    "SANITY_PROJECT_ID",
    "SANITY_DATASET",
    "SANITY_API_VERSION",
    "SANITY_API_TOKEN",
    "SANITY_PREVIEW_SECRET",
    "SANITY_USE_CDN",
    "SANITY_REQUEST_TIMEOUT",
    "DRAFT_COOKIE_SECURE",
    "LOG_LEVEL",
)


@pytest.fixture
def env(monkeypatch):
    """Start from an environment without any of the service's variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SANITY_PROJECT_ID", "abc")
    monkeypatch.setenv("SANITY_DATASET", "production")
    return monkeypatch


def test_minimal_env(env):
    settings = Settings.from_env()
    assert settings.project_id == "abc"
    assert settings.api_version == DEFAULT_API_VERSION
    assert settings.api_token is None
    assert settings.preview_secret is None
    assert settings.use_cdn is True
    assert settings.preview_available is False


def test_full_env(env):
    env.setenv("SANITY_DATASET", "staging")
    env.setenv("SANITY_API_VERSION", "2025-02-19")
    env.setenv("SANITY_API_TOKEN", "tok")
    env.setenv("SANITY_PREVIEW_SECRET", "shh")
    env.setenv("SANITY_USE_CDN", "off")
    env.setenv("SANITY_REQUEST_TIMEOUT", "2.5")
    env.setenv("DRAFT_COOKIE_SECURE", "False")
    env.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.dataset == "staging"
    assert settings.api_version == "2025-02-19"
    assert settings.preview_available is True
    assert settings.use_cdn is False
    assert settings.request_timeout == 2.5
    assert settings.draft_cookie_secure is False
    assert settings.log_level == "DEBUG"


def test_missing_required_values_listed(env):
    env.delenv("SANITY_PROJECT_ID")
    env.setenv("SANITY_DATASET", "")
    with pytest.raises(ConfigurationError) as excinfo:
        Settings.from_env()
    message = str(excinfo.value)
    assert "SANITY_PROJECT_ID" in message
    assert "SANITY_DATASET" in message


def test_empty_optional_values_are_unset(env):
    env.setenv("SANITY_API_TOKEN", "")
    env.setenv("SANITY_API_VERSION", "")
    settings = Settings.from_env()
    assert settings.api_token is None
    assert settings.api_version == DEFAULT_API_VERSION


@pytest.mark.parametrize(
    "name,value",
    [("SANITY_USE_CDN", "maybe"), ("SANITY_REQUEST_TIMEOUT", "soon"), ("SANITY_REQUEST_TIMEOUT", "0")],
)
def test_invalid_values(env, name, value):
    env.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        Settings.from_env()


def test_construct_by_field_name(env):
    settings = Settings(project_id="p", dataset="d", use_cdn=False)
    assert (settings.project_id, settings.dataset, settings.use_cdn) == ("p", "d", False)


def test_settings_are_frozen(env):
    settings = Settings(project_id="abc", dataset="production")
    with pytest.raises(ValidationError):
        settings.dataset = "other"
