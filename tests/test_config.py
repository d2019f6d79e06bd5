"""Tests for loading configuration from the environment."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from institute.config import get_env_int, get_env_str, load_config_from_env

CONFIG_VARS = (
    "DATABASE_PATH",
    "LOGGING_LEVEL",
    "ROOT_PATH",
    "SECRET_KEY",
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "PASSWORD_MIN_LENGTH",
    "MAIL_API_KEY",
    "MAIL_API_URL",
    "MAIL_FROM",
    "INSTITUTE_NAME",
    "SEED_ADMIN_EMAIL",
    "SEED_ADMIN_PASSWORD",
    "SEED_ADMIN_NAME",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove every configuration variable for the duration of a test."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight to os.environ
    for name in CONFIG_VARS:
        os.environ.pop(name, None)


def test_defaults() -> None:
    config = load_config_from_env(None)

    assert config.database_path == "./institute.db"
    assert config.algorithm == "HS512"
    assert config.access_token_expire_minutes == 60 * 24
    assert config.password_min_length == 8
    assert config.mail_api_key is None
    assert not config.mail_enabled
    assert config.seed_admin_email is None
    assert config.security_manager.algorithm == "HS512"


def test_env_file_values(tmp_path: Path) -> None:
    """Test that values are read from a dotenv file."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "DATABASE_PATH=/var/lib/institute/site.db",
                "SECRET_KEY=a-secret-key-that-is-definitely-long-enough",
                "PASSWORD_MIN_LENGTH=12",
                "MAIL_API_KEY=re_123",
                "INSTITUTE_NAME=Hans Academy",
                "SEED_ADMIN_EMAIL=owner@hans.edu.np",
            ],
        ),
        encoding="utf-8",
    )

    config = load_config_from_env(env_file)

    assert config.database_path == "/var/lib/institute/site.db"
    assert config.secret_key == "a-secret-key-that-is-definitely-long-enough"  # noqa: S105
    assert config.security_manager.password_min_length == 12
    assert config.mail_enabled
    assert config.institute_name == "Hans Academy"
    assert config.seed_admin_email == "owner@hans.edu.np"


def test_blank_mail_key_disables_mail(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAIL_API_KEY", "   ")

    assert not load_config_from_env(None).mail_enabled


def test_invalid_algorithm(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALGORITHM", "ROT13")

    with pytest.raises(ValueError, match="ALGORITHM"):
        load_config_from_env(None)


def test_invalid_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "soon")

    with pytest.raises(ValueError, match="must be an integer"):
        load_config_from_env(None)


def test_get_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_NUMBER", "0")

    assert get_env_int("SOME_NUMBER", 5) == 0
    assert get_env_int("MISSING_NUMBER", 5) == 5
    with pytest.raises(ValueError, match="invalid value"):
        get_env_int("SOME_NUMBER", 5, lambda value: value > 0)
    with pytest.raises(ValueError, match="is required"):
        get_env_str("MISSING_STRING", None)
