"""Configuration management for the institute site backend.

This module provides utilities for loading and validating configuration
from environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from jwt.algorithms import get_default_algorithms

from institute.app.auth import SecurityManager

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

_MINUTES_IN_DAY = 60 * 24
_DEFAULT_PASSWORD_MIN_LENGTH = 8
_DEFAULT_MAIL_API_URL = "https://api.resend.com/emails"
_DEFAULT_MAIL_FROM = "Institute <onboarding@resend.dev>"
_DEFAULT_INSTITUTE_NAME = "Hans Educational Institute"


def configure_logging(app_config: AppConfig) -> None:
    """Configure logging based on the application configuration.

    :param app_config: The application configuration instance
    """
    if not app_config.logging_level:
        logging.basicConfig(level=logging.INFO, force=True)
        return

    numeric_level = getattr(logging, app_config.logging_level.upper(), None)
    if not isinstance(numeric_level, int):
        LOGGER.warning("Invalid log level: %s, using INFO", app_config.logging_level)
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, force=True)


@dataclass
class AppConfig:
    """Holds application configuration loaded from environment variables."""

    database_path: str
    logging_level: str | None
    root_path: str

    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    password_min_length: int

    mail_api_key: str | None
    mail_api_url: str
    mail_from: str
    institute_name: str

    seed_admin_email: str | None = None
    seed_admin_password: str | None = None
    seed_admin_name: str | None = None

    def __post_init__(self) -> None:
        """Initialize derived configuration attributes."""
        self.security_manager = SecurityManager(
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            expire_minutes=self.access_token_expire_minutes,
            password_min_length=self.password_min_length,
        )

    @property
    def mail_enabled(self) -> bool:
        """Whether inquiry alerts can be sent."""
        return bool(self.mail_api_key)


def get_env_str(
    var_name: str,
    default: str | None,
    value_checker: Callable[[str], bool] | None = None,
) -> str:
    """Get an environment variable as a string with optional constraints.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :param value_checker: Optional function to validate the value
    :return: The environment variable value
    :raises ValueError: If the value does not meet the constraints
    """
    value = os.getenv(var_name, default)
    if value is None:
        msg = f"Environment variable {var_name} is required"
        raise ValueError(msg)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_optional_str(var_name: str) -> str | None:
    """Get an environment variable as a string, treating blank as unset.

    :param var_name: Name of the environment variable
    :return: The value, or None if unset or empty
    """
    value = os.getenv(var_name)
    if value is None or value.strip() == "":
        return None
    return value


def get_env_int(
    var_name: str,
    default: int,
    value_checker: Callable[[int], bool] | None = None,
) -> int:
    """Get an environment variable as an integer with optional constraints.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :param value_checker: Optional function to validate the value
    :return: The environment variable value as an integer
    :raises ValueError: If the value does not meet the constraints or is not an integer
    """
    value_str = os.getenv(var_name)
    if value_str is None or value_str == "":
        return default

    if not value_str.isnumeric():
        msg = f"Environment variable {var_name} must be an integer, got: {value_str}"
        raise ValueError(msg)

    value = int(value_str)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def load_config_from_env(env_file: str | Path | None) -> AppConfig:
    """Load application configuration from environment variables.

    :param env_file: Optional .env file loaded before reading the environment
    :return: An AppConfig instance populated with environment variable values
    """
    if env_file:
        load_dotenv(dotenv_path=env_file)

    return AppConfig(
        database_path=get_env_str("DATABASE_PATH", "./institute.db"),
        logging_level=get_env_str("LOGGING_LEVEL", "INFO"),
        root_path=get_env_str("ROOT_PATH", ""),
        secret_key=get_env_str("SECRET_KEY", os.urandom(32).hex()),
        algorithm=get_env_str(
            "ALGORITHM",
            "HS512",
            lambda algorithm: algorithm in get_default_algorithms(),
        ),
        access_token_expire_minutes=get_env_int(
            "ACCESS_TOKEN_EXPIRE_MINUTES",
            _MINUTES_IN_DAY,
            lambda minutes: minutes > 0,
        ),
        password_min_length=get_env_int(
            "PASSWORD_MIN_LENGTH",
            _DEFAULT_PASSWORD_MIN_LENGTH,
            lambda length: length > 0,
        ),
        mail_api_key=get_env_optional_str("MAIL_API_KEY"),
        mail_api_url=get_env_str(
            "MAIL_API_URL",
            _DEFAULT_MAIL_API_URL,
            lambda url: url.startswith(("http://", "https://")),
        ),
        mail_from=get_env_str("MAIL_FROM", _DEFAULT_MAIL_FROM),
        institute_name=get_env_str("INSTITUTE_NAME", _DEFAULT_INSTITUTE_NAME),
        seed_admin_email=get_env_optional_str("SEED_ADMIN_EMAIL"),
        seed_admin_password=get_env_optional_str("SEED_ADMIN_PASSWORD"),
        seed_admin_name=get_env_optional_str("SEED_ADMIN_NAME"),
    )
