import pytest

from app.config import ConfigError, EmailConfig, JWTConfig, Settings, load_settings

_VARS = (
    "ENV", "PORT", "LOG_LEVEL", "DATABASE_URL", "ALLOWED_ORIGINS", "JWT_SECRET",
    "JWT_EXPIRATION_HOURS", "JWT_ISSUER", "RESEND_API_KEY", "EMAIL_FROM", "APP_BASE_URL",
    "S3_ENDPOINT", "S3_BUCKET", "S3_REGION", "S3_ACCESS_KEY", "S3_SECRET_KEY", "S3_USE_PATH_STYLE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return env_file


def test_load_settings_from_env_file(clean_env):
    clean_env.write_text(
        "JWT_SECRET=abc\n"
        "JWT_EXPIRATION_HOURS=2\n"
        "ALLOWED_ORIGINS=http://a.test, http://b.test\n"
        "APP_BASE_URL=http://app.test/\n"
        "S3_USE_PATH_STYLE=false\n"
    )
    settings = load_settings(clean_env)
    assert settings.jwt.secret == "abc"
    assert settings.jwt.expiration_hours == 2
    assert settings.allowed_origins == ("http://a.test", "http://b.test")
    assert settings.email.app_base_url == "http://app.test"
    assert settings.storage.use_path_style is False
    assert settings.is_development


def test_missing_jwt_secret(clean_env):
    with pytest.raises(ConfigError, match="JWT_SECRET"):
        load_settings(clean_env)


def test_invalid_integer(clean_env, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "abc")
    monkeypatch.setenv("PORT", "oito")
    with pytest.raises(ConfigError, match="PORT"):
        load_settings(clean_env)


def test_production_requires_resend_key():
    settings = Settings(jwt=JWTConfig(secret="abc"), env="production", email=EmailConfig())
    with pytest.raises(ConfigError, match="RESEND_API_KEY"):
        settings.validate()
